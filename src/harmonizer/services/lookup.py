"""
Combined release lookup.
Queries every applicable provider in parallel and merges the results.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ..core.config import ERROR_MESSAGES, LOOKUP_CONFIG
from ..core.exceptions import (
    AggregateLookupFailure,
    HarmonizerError,
    ProviderError,
    SelectionFailure,
    SourceQueryFailure,
)
from ..models.query import LookupInput, LookupOptions, ReleaseQuery
from ..models.release import Release
from ..providers import MetadataProvider, ProviderRegistry, provider_registry
from ..utils.metadata_merger import merge_releases
from .selector import ProviderSelection, ProviderSelector

logger = logging.getLogger(__name__)


@dataclass
class LookupResult:
    """Outcome of a combined lookup with at least one successful provider."""
    successes: List[Tuple[MetadataProvider, Release]] = field(default_factory=list)
    failures: List[SourceQueryFailure] = field(default_factory=list)
    diagnostics: List[SelectionFailure] = field(default_factory=list)

    @property
    def errors(self) -> List[ProviderError]:
        """All advisory errors, provider failures first."""
        return [*self.failures, *self.diagnostics]


class CombinedReleaseLookup:
    """
    Looks up a release from every provider which applies to the query.

    Providers run concurrently on a thread pool. Results are classified in
    provider preference order, independent of completion order.
    """

    def __init__(
        self,
        query: ReleaseQuery,
        options: Optional[LookupOptions] = None,
        registry: Optional[ProviderRegistry] = None,
        selector: Optional[ProviderSelector] = None,
    ):
        self.query = query
        self.options = options or LookupOptions()
        self.registry = registry if registry is not None else provider_registry
        self.selector = selector or ProviderSelector(self.registry)
        self.selection: Optional[ProviderSelection] = None
        self.result: Optional[LookupResult] = None

    def lookup(
        self,
        preferences: Optional[List[str]] = None,
        timeout: Optional[float] = LOOKUP_CONFIG["TIMEOUT"],
    ) -> LookupResult:
        """
        Run all selected providers and wait for them to settle.

        Args:
            preferences: Provider names in order of preference
            timeout: Overall timeout in seconds, None waits indefinitely

        Raises:
            AggregateLookupFailure: If no provider returned a release
        """
        self.selection = self.selector.select(self.query, self.options)
        options = self._effective_options(self.selection)
        ranked = sorted(
            self.selection.inputs.items(),
            key=lambda item: self.registry.rank(item[0], preferences),
        )

        outcomes = self._run_providers(ranked, options, timeout)

        result = LookupResult(diagnostics=list(self.selection.diagnostics))
        for provider, _ in ranked:
            outcome = outcomes[provider]
            if isinstance(outcome, Release):
                result.successes.append((provider, outcome))
            else:
                result.failures.append(outcome)

        if not result.successes:
            logger.info(
                f"{ERROR_MESSAGES['ALL_FAILED']} ({len(result.failures)} failure(s), "
                f"{len(result.diagnostics)} diagnostic(s))"
            )
            raise AggregateLookupFailure(ERROR_MESSAGES["ALL_FAILED"], result.failures, result.diagnostics)

        logger.info(
            f"Lookup succeeded for {len(result.successes)} of {len(ranked)} provider(s)"
        )
        self.result = result
        return result

    def get_merged_release(
        self,
        preferences: Optional[List[str]] = None,
        merge_artist_links: bool = False,
        timeout: Optional[float] = LOOKUP_CONFIG["TIMEOUT"],
    ) -> Release:
        """Look up the release (unless already done) and merge all successful results."""
        if self.result is None:
            self.lookup(preferences, timeout)
        ranked = [
            (self.registry.rank(provider, preferences), release)
            for provider, release in self.result.successes
        ]
        return merge_releases(ranked, merge_artist_links=merge_artist_links)

    def _effective_options(self, selection: ProviderSelection) -> LookupOptions:
        return LookupOptions(
            regions=selection.regions,
            providers=self.options.providers,
            snapshot_max_timestamp=self.options.snapshot_max_timestamp,
            with_separate_media=self.options.with_separate_media,
            with_all_track_artists=self.options.with_all_track_artists,
        )

    def _run_providers(
        self,
        ranked: List[Tuple[MetadataProvider, LookupInput]],
        options: LookupOptions,
        timeout: Optional[float],
    ) -> Dict[MetadataProvider, object]:
        """Run providers concurrently, mapping each to its release or failure."""
        outcomes: Dict[MetadataProvider, object] = {}
        if not ranked:
            return outcomes

        max_workers = max(1, min(len(ranked), LOOKUP_CONFIG["MAX_WORKERS"]))
        executor = concurrent.futures.ThreadPoolExecutor(max_workers=max_workers)
        try:
            futures = {
                executor.submit(provider.resolve, lookup_input, options): provider
                for provider, lookup_input in ranked
            }
            done, pending = concurrent.futures.wait(futures, timeout=timeout)

            for future in pending:
                future.cancel()
                provider = futures[future]
                logger.warning(f"{provider.name}: {ERROR_MESSAGES['TIMEOUT']}")
                outcomes[provider] = SourceQueryFailure(provider.name, ERROR_MESSAGES["TIMEOUT"])

            for future in done:
                provider = futures[future]
                outcomes[provider] = self._outcome(provider, future)
        finally:
            # Late results of timed out providers are dropped
            executor.shutdown(wait=False, cancel_futures=True)

        return outcomes

    @staticmethod
    def _outcome(provider: MetadataProvider, future: concurrent.futures.Future) -> object:
        try:
            release = future.result()
        except SourceQueryFailure as e:
            logger.info(str(e))
            return e
        except HarmonizerError as e:
            reason = e.reason if isinstance(e, ProviderError) else str(e)
            logger.info(f"{provider.name}: {reason}")
            return SourceQueryFailure(provider.name, reason)
        except Exception as e:
            logger.exception(f"{provider.name}: unexpected error during lookup")
            return SourceQueryFailure(provider.name, f"Unexpected error: {e}")

        if not isinstance(release, Release):
            return SourceQueryFailure(provider.name, ERROR_MESSAGES["MALFORMED_RESPONSE"])
        logger.debug(f"{provider.name}: found '{release.title}'")
        return release
