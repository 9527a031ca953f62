"""
Lookup services for Harmonizer.
"""

from .selector import ProviderSelection, ProviderSelector, canonical_regions
from .lookup import CombinedReleaseLookup, LookupResult
from .enrichment import MBIDResolver

__all__ = [
    'ProviderSelection',
    'ProviderSelector',
    'canonical_regions',
    'CombinedReleaseLookup',
    'LookupResult',
    'MBIDResolver'
]
