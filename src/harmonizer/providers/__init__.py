"""
Metadata providers and the process-wide provider registry.
"""

from typing import Iterable, Iterator, List, Optional

from ..core.config import DEFAULT_PROVIDER_PREFERENCES
from .base import MetadataProvider
from .deezer import DeezerProvider
from .discogs import DiscogsProvider
from .itunes import ITunesProvider
from .musicbrainz import MusicBrainzProvider
from .spotify import SpotifyProvider


class ProviderRegistry:
    """Read-only collection of provider instances."""

    def __init__(self, providers: Iterable[MetadataProvider]):
        self._providers = tuple(providers)
        names = [provider.internal_name for provider in self._providers]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate provider names: {names}")

    def __iter__(self) -> Iterator[MetadataProvider]:
        return iter(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    @property
    def names(self) -> List[str]:
        return [provider.name for provider in self._providers]

    def find_by_name(self, name: str) -> Optional[MetadataProvider]:
        """Find a provider by its internal or display name (case-insensitive)."""
        key = name.strip().lower()
        for provider in self._providers:
            if key in (provider.internal_name, provider.name.lower()):
                return provider
        return None

    def find_by_url(self, url: str) -> List[MetadataProvider]:
        return [provider for provider in self._providers if provider.supports_release_url(url)]

    def find_by_domain(self, url: str) -> List[MetadataProvider]:
        return [provider for provider in self._providers if provider.supports_domain(url)]

    def rank(self, provider: MetadataProvider, preferences: Optional[List[str]] = None) -> int:
        """Preference rank of a provider, unlisted providers rank after all listed ones."""
        order = [name.lower() for name in (preferences or DEFAULT_PROVIDER_PREFERENCES)]
        for key in (provider.name.lower(), provider.internal_name):
            if key in order:
                return order.index(key)
        return len(order)


# Built once at import time, never modified afterwards
provider_registry = ProviderRegistry([
    MusicBrainzProvider(),
    DeezerProvider(),
    ITunesProvider(),
    SpotifyProvider(),
    DiscogsProvider(),
])

default_provider_preferences = list(DEFAULT_PROVIDER_PREFERENCES)

__all__ = [
    'MetadataProvider',
    'ProviderRegistry',
    'provider_registry',
    'default_provider_preferences',
    'DeezerProvider',
    'DiscogsProvider',
    'ITunesProvider',
    'MusicBrainzProvider',
    'SpotifyProvider',
]
