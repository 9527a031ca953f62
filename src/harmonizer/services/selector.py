"""
Provider selection.
Determines which providers apply to a lookup query and what each of them
should look up.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.config import ERROR_MESSAGES, LOOKUP_CONFIG
from ..core.exceptions import SelectionFailure
from ..models.query import LookupInput, LookupOptions, ReleaseQuery
from ..providers import MetadataProvider, ProviderRegistry, provider_registry

logger = logging.getLogger(__name__)


@dataclass
class ProviderSelection:
    """Providers selected for a lookup, each with the input it should resolve."""
    inputs: Dict[MetadataProvider, LookupInput] = field(default_factory=dict)
    regions: List[str] = field(default_factory=list)
    diagnostics: List[SelectionFailure] = field(default_factory=list)

    @property
    def providers(self) -> List[MetadataProvider]:
        return list(self.inputs)

    def __len__(self) -> int:
        return len(self.inputs)


def canonical_regions(options: Optional[LookupOptions]) -> List[str]:
    """Upper-case, de-duplicated region preference list with the configured fallback."""
    regions = []
    for region in (options.regions if options else ()):
        region = region.strip().upper()
        if region and region not in regions:
            regions.append(region)
    return regions or [region.upper() for region in LOOKUP_CONFIG["DEFAULT_REGIONS"]]


class ProviderSelector:
    """Maps a release query onto the registered providers."""

    def __init__(self, registry: Optional[ProviderRegistry] = None):
        self.registry = registry if registry is not None else provider_registry

    def select(self, query: ReleaseQuery, options: Optional[LookupOptions] = None) -> ProviderSelection:
        options = options or LookupOptions()
        selection = ProviderSelection(regions=canonical_regions(options))

        self._select_explicit_ids(query, selection)
        self._select_urls(query, selection)
        if query.gtin:
            self._select_gtin(query.gtin, options, selection)

        if not selection.inputs and not selection.diagnostics:
            selection.diagnostics.append(SelectionFailure("No provider applies to the given query"))

        logger.debug(
            f"Selected providers: {[provider.name for provider in selection.providers]}, "
            f"{len(selection.diagnostics)} diagnostic(s)"
        )
        return selection

    def _add(self, selection: ProviderSelection, provider: MetadataProvider, lookup_input: LookupInput) -> None:
        # Each provider is queried at most once, the first path wins
        if provider in selection.inputs:
            logger.debug(f"{provider.name} already selected, ignoring {lookup_input.value}")
            return
        selection.inputs[provider] = lookup_input

    def _select_explicit_ids(self, query: ReleaseQuery, selection: ProviderSelection) -> None:
        for provider_id in query.provider_ids:
            parts = ReleaseQuery.split_provider_id(provider_id)
            provider = self.registry.find_by_name(parts[0]) if parts else None
            if provider is None:
                selection.diagnostics.append(SelectionFailure(
                    f"{ERROR_MESSAGES['UNKNOWN_PROVIDER']}: {provider_id}",
                    input_value=provider_id,
                ))
                continue
            self._add(selection, provider, LookupInput.id(parts[1]))

    def _select_urls(self, query: ReleaseQuery, selection: ProviderSelection) -> None:
        for url in query.urls:
            matching = self.registry.find_by_url(url)
            if matching:
                for provider in matching:
                    self._add(selection, provider, LookupInput.url(url))
                continue

            domain_matches = self.registry.find_by_domain(url)
            if domain_matches:
                for provider in domain_matches:
                    selection.diagnostics.append(SelectionFailure(
                        f"{ERROR_MESSAGES['PATTERN_MISMATCH']}: {url}",
                        provider_name=provider.name,
                        input_value=url,
                    ))
            else:
                selection.diagnostics.append(SelectionFailure(
                    f"{ERROR_MESSAGES['NO_PROVIDER']} {url}",
                    input_value=url,
                ))

    def _select_gtin(self, gtin: str, options: LookupOptions, selection: ProviderSelection) -> None:
        if options.providers is not None and not options.providers:
            return
        for provider in self.registry:
            if not provider.supports_gtin_lookup:
                continue
            if not options.is_provider_enabled(provider.internal_name, provider.name):
                continue
            self._add(selection, provider, LookupInput.gtin(gtin))
