"""
MusicBrainz identifier enrichment.
Fills in MBIDs of a merged release, its artists and labels using the
MusicBrainz web service. Enrichment is optional: failures are logged and
the release is left as it is.
"""

import concurrent.futures
import logging
import re
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from ..core.config import ENRICHMENT_CONFIG
from ..core.exceptions import EnrichmentFailure
from ..models.release import Release
from ..providers.musicbrainz import MBID_PATTERN
from ..utils.string_utils import normalize_string, normalize_url

logger = logging.getLogger(__name__)

URL_INCLUDES = "artist-rels+label-rels+release-rels"
MUSICBRAINZ_ENTITY_URL = re.compile(
    rf"^https?://(?:beta\.)?musicbrainz\.org/(artist|label|release)/({MBID_PATTERN})/?$"
)
SEARCH_LIMIT = 10


def _objects(items: Any) -> List[Dict[str, Any]]:
    """The JSON objects of a list, anything else in the response is skipped."""
    if not isinstance(items, list):
        return []
    return [item for item in items if isinstance(item, dict)]


class MBIDResolver:
    """Resolves external links and barcodes to MusicBrainz identifiers."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = config or ENRICHMENT_CONFIG
        self.api_url = config["API_URL"]
        self.request_delay = config.get("REQUEST_DELAY", 1.0)
        self.timeout = config.get("TIMEOUT", 20)
        self.max_concurrent = max(1, config.get("MAX_CONCURRENT", 1))

        self.session = requests.Session()
        self.session.headers.update({
            'User-Agent': config["USER_AGENT"],
            'Accept': 'application/json'
        })

        self._cache: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()
        self._last_request = 0.0

    def _throttle(self) -> None:
        # Requests are spaced by the delay across all worker threads
        with self._lock:
            wait = self._last_request + self.request_delay - time.monotonic()
            if wait > 0:
                time.sleep(wait)
            self._last_request = time.monotonic()

    def _get(self, path: str, params: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        GET a web service resource, returns None if it does not exist.

        Raises:
            EnrichmentFailure: On error responses and undecodable bodies
        """
        self._throttle()
        url = f"{self.api_url}/{path}"
        logger.debug(f"Enrichment request: {url} {params}")
        response = self.session.get(url, params={**params, 'fmt': 'json'}, timeout=self.timeout)
        if response.status_code == 404:
            return None
        if not response.ok:
            raise EnrichmentFailure(f"MusicBrainz returned HTTP status {response.status_code} for {url}")
        try:
            data = response.json()
        except ValueError as e:
            raise EnrichmentFailure(f"MusicBrainz returned a malformed response for {url}") from e
        if not isinstance(data, dict):
            raise EnrichmentFailure(f"MusicBrainz returned a malformed response for {url}")
        return data

    def lookup_url(self, url: str) -> Dict[str, str]:
        """
        Find the MusicBrainz entities which are linked to a URL.

        Returns:
            Mapping of entity type (artist, label, release) to MBID
        """
        match = MUSICBRAINZ_ENTITY_URL.match(url)
        if match:
            return {match.group(1): match.group(2)}

        key = normalize_url(url)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        data = self._get("url", {'resource': url, 'inc': URL_INCLUDES})
        entities: Dict[str, str] = {}
        for relation in _objects((data or {}).get("relations")):
            target_type = relation.get("target-type")
            target = relation.get(target_type) if isinstance(target_type, str) else None
            if isinstance(target, dict) and target.get("id") and target_type not in entities:
                entities[target_type] = target["id"]

        with self._lock:
            self._cache[key] = entities
        return entities

    def search_release(self, gtin: str, title: str) -> Optional[str]:
        """Find the MBID of the release with the given barcode and (normalized) title."""
        data = self._get("release", {'query': f'barcode:{gtin}', 'limit': SEARCH_LIMIT})
        wanted = normalize_string(title)
        for candidate in _objects((data or {}).get("releases")):
            if normalize_string(candidate.get("title") or "") == wanted:
                return candidate.get("id")
        return None

    def resolve_release_mbids(self, release: Release) -> Release:
        """
        Fill in missing MBIDs of the release, its artists and labels in place.

        Returns:
            The same release instance
        """
        credits = list(release.artists)
        for medium in release.media:
            for track in medium.tracklist:
                credits.extend(track.artists or [])

        urls: List[str] = []
        for entity in [*credits, *release.labels]:
            if not entity.mbid and entity.external_link:
                urls.append(entity.external_link)
        if not release.mbid:
            urls.extend(link.url for link in release.external_links)
        unique_urls = list(dict.fromkeys(urls))

        entities = self._lookup_urls(unique_urls)

        for credit in credits:
            if not credit.mbid and credit.external_link:
                credit.mbid = entities.get(credit.external_link, {}).get("artist")
        for label in release.labels:
            if not label.mbid and label.external_link:
                label.mbid = entities.get(label.external_link, {}).get("label")
        if not release.mbid:
            for link in release.external_links:
                release.mbid = entities.get(link.url, {}).get("release")
                if release.mbid:
                    break

        if not release.mbid and release.gtin and release.title:
            try:
                release.mbid = self.search_release(release.gtin, release.title)
            except (EnrichmentFailure, requests.exceptions.RequestException) as e:
                logger.warning(f"Release search for barcode {release.gtin} failed: {e}")

        logger.debug(f"Resolved {len(unique_urls)} URL(s), release MBID: {release.mbid}")
        return release

    def _lookup_urls(self, urls: List[str]) -> Dict[str, Dict[str, str]]:
        entities: Dict[str, Dict[str, str]] = {}
        if not urls:
            return entities

        with concurrent.futures.ThreadPoolExecutor(max_workers=min(self.max_concurrent, len(urls))) as executor:
            futures = {executor.submit(self.lookup_url, url): url for url in urls}
            for future in concurrent.futures.as_completed(futures):
                url = futures[future]
                try:
                    entities[url] = future.result()
                except (EnrichmentFailure, requests.exceptions.RequestException) as e:
                    logger.warning(f"URL lookup for {url} failed: {e}")
        return entities
