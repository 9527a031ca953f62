"""
Harmonizer - look up release metadata from multiple sources and merge it.
"""

from .core.config import PROJECT_VERSION as __version__
