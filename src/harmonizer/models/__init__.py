"""
Data models for Harmonizer.
"""

from .release import (
    DurationPrecision,
    PartialDate,
    ArtistCreditName,
    ExternalLink,
    Artwork,
    Label,
    Track,
    Medium,
    ProviderReleaseInfo,
    Release,
    durations_compatible,
)
from .query import InputKind, LookupInput, LookupOptions, ReleaseQuery, is_gtin

__all__ = [
    'DurationPrecision',
    'PartialDate',
    'ArtistCreditName',
    'ExternalLink',
    'Artwork',
    'Label',
    'Track',
    'Medium',
    'ProviderReleaseInfo',
    'Release',
    'durations_compatible',
    'InputKind',
    'LookupInput',
    'LookupOptions',
    'ReleaseQuery',
    'is_gtin',
]
