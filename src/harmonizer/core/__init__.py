"""
Core module for Harmonizer.
Contains configuration, exceptions, logging setup, and validation.
"""

from .config import *
from .exceptions import *
from .logger import setup_logging, set_log_level, get_logger
from .validation import validate_configuration, validate_and_raise, check_dependencies

__all__ = [
    'setup_logging',
    'set_log_level',
    'get_logger',
    'validate_configuration',
    'validate_and_raise',
    'check_dependencies',
    'HarmonizerError',
    'ConfigurationError',
    'ProviderError',
    'SourceQueryFailure',
    'SelectionFailure',
    'AggregateLookupFailure',
    'EnrichmentFailure',
]
