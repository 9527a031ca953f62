"""
User interface components for Harmonizer.
"""

from .cli import HarmonizerCLI
from .formatters import DisplayFormatters

__all__ = [
    'HarmonizerCLI',
    'DisplayFormatters'
]
