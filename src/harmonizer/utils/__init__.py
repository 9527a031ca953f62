"""
Utility modules for Harmonizer.
"""

from .durations import format_duration, parse_clock_duration
from .metadata_merger import ReleaseMerger, merge_releases
from .string_utils import join_artist_names, normalize_string, normalize_url
from .url_pattern import UrlPattern

__all__ = [
    'format_duration',
    'parse_clock_duration',
    'ReleaseMerger',
    'merge_releases',
    'join_artist_names',
    'normalize_string',
    'normalize_url',
    'UrlPattern'
]
