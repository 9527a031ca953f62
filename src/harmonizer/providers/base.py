"""
Base class for metadata providers.
A provider looks up releases from one source and converts the source's raw
metadata into the common release representation.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

import requests

from ..core.config import ERROR_MESSAGES, LOOKUP_CONFIG, USER_AGENT
from ..core.exceptions import SourceQueryFailure
from ..models.query import InputKind, LookupInput, LookupOptions
from ..models.release import DurationPrecision, ProviderReleaseInfo, Release
from ..utils.url_pattern import UrlPattern

logger = logging.getLogger(__name__)

RawRelease = Dict[str, Any]


class MetadataProvider(ABC):
    """Abstract metadata provider which looks up releases from a specific source."""

    #: Display name of the metadata source.
    name: str = ""
    #: Lowercase key used for explicit provider IDs and the enabled-provider set.
    internal_name: str = ""
    #: Pathname has to contain a named group ``id``.
    supported_urls: UrlPattern
    duration_precision: DurationPrecision = DurationPrecision.MS
    supports_gtin_lookup: bool = True

    def __init__(self, config: Dict[str, Any]):
        self.api_url = config["API_URL"]
        self.base_url = config["BASE_URL"]
        self.timeout = config.get("TIMEOUT", 30)
        self.request_delay = config.get("REQUEST_DELAY", 0.0)

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': config.get("USER_AGENT", USER_AGENT),
            'Accept': 'application/json'
        })

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    @abstractmethod
    def construct_release_url(self, release_id: str) -> str:
        """Construct the canonical release URL for the given provider ID."""

    @abstractmethod
    def fetch_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> RawRelease:
        """Fetch the raw release metadata for a provider ID."""

    @abstractmethod
    def fetch_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> RawRelease:
        """Fetch the raw release metadata for a GTIN/barcode."""

    @abstractmethod
    def normalize(self, raw: RawRelease, options: Optional[LookupOptions] = None) -> Release:
        """Convert raw release metadata into the common representation, without side effects."""

    def resolve(
        self,
        url_or_gtin_or_id: Union[LookupInput, str],
        options: Optional[LookupOptions] = None
    ) -> Release:
        """Look up the release which is identified by the given URL, GTIN/barcode or provider ID."""
        options = options or LookupOptions()
        if isinstance(url_or_gtin_or_id, LookupInput):
            lookup_input = url_or_gtin_or_id
        else:
            lookup_input = LookupInput.classify(str(url_or_gtin_or_id))

        if options.snapshot_max_timestamp is not None:
            logger.debug(
                f"{self.name}: snapshots are not stored, "
                f"querying live data instead of data before {options.snapshot_max_timestamp}"
            )

        if lookup_input.kind is InputKind.URL:
            release_id = self.extract_release_id(lookup_input.value)
            if release_id is None:
                raise SourceQueryFailure(self.name, f"{ERROR_MESSAGES['INVALID_URL']} {lookup_input.value}")
            return self.get_release_by_id(release_id, options)
        if lookup_input.kind is InputKind.GTIN:
            return self.get_release_by_gtin(lookup_input.value, options)
        return self.get_release_by_id(lookup_input.value, options)

    def get_release_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> Release:
        """Look up the release which is identified by the given provider ID."""
        return self._finalize(self.normalize(self.fetch_by_id(release_id, options), options))

    def get_release_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> Release:
        """Look up the release which is identified by the given GTIN/barcode."""
        return self._finalize(self.normalize(self.fetch_by_gtin(gtin, options), options))

    def _finalize(self, release: Release) -> Release:
        """Tag the release with the provider's precision, a release without media is a failure."""
        if not release.media:
            url = release.providers[0].url if release.providers else None
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_TRACKLIST"], url or None)
        release.duration_precision = self.duration_precision
        return release

    def extract_release_id(self, url: str) -> Optional[str]:
        """Extract the ID from a release URL."""
        groups = self.supported_urls.exec(url)
        return groups.get("id") if groups else None

    def supports_domain(self, url: str) -> bool:
        """Check whether the provider supports the domain of the given URL."""
        return self.supported_urls.test_hostname(url)

    def supports_release_url(self, url: str) -> bool:
        """Check whether the provider supports the given URL for releases."""
        return self.supported_urls.test(url)

    def provider_info(self, release_id: Any) -> ProviderReleaseInfo:
        release_id = str(release_id) if release_id is not None else ""
        url = self.construct_release_url(release_id) if release_id else ""
        return ProviderReleaseInfo(name=self.name, id=release_id, url=url)

    def regions(self, options: Optional[LookupOptions]) -> List[str]:
        """Preferred regions of the lookup, falling back to the configured defaults."""
        if options and options.regions:
            return list(options.regions)
        return list(LOOKUP_CONFIG["DEFAULT_REGIONS"])

    def _make_request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Make a GET request and decode the JSON body.

        Raises:
            SourceQueryFailure: On network errors, non-2xx responses and undecodable bodies
        """
        try:
            logger.debug(f"Making request to {self.name}: {url} {params or ''}")
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise SourceQueryFailure(self.name, f"{ERROR_MESSAGES['NETWORK_ERROR']}: {e}", url) from e

        if self.request_delay:
            time.sleep(self.request_delay)

        if not response.ok:
            raise SourceQueryFailure(
                self.name,
                f"API returned HTTP status {response.status_code}",
                getattr(response, "url", url)
            )

        try:
            return response.json()
        except ValueError as e:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], url) from e
