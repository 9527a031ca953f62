"""
iTunes Provider Module
Looks up releases from the iTunes Search API.
"""

import re
from typing import Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

from ..core.config import ERROR_MESSAGES, ITUNES_CONFIG
from ..core.exceptions import SourceQueryFailure
from ..models.query import LookupOptions
from ..models.release import (
    ArtistCreditName,
    Artwork,
    DurationPrecision,
    ExternalLink,
    Medium,
    PartialDate,
    Release,
    Track,
)
from ..utils.url_pattern import UrlPattern
from .base import MetadataProvider, RawRelease

BLURB_PATTERN = re.compile(r"/(artist|album)/[^/]+/(\d+)")


class ITunesProvider(MetadataProvider):
    """Apple Music / iTunes Store provider."""

    name = "iTunes"
    internal_name = "itunes"
    supported_urls = UrlPattern(
        hostname=r"(itunes|music)\.apple\.com",
        pathname=r"(?:/(?P<country>\w{2}))?/album(?:/[^/]+)?/(?P<id>\d+)",
    )
    duration_precision = DurationPrecision.MS
    launch_date = PartialDate(year=2003, month=4, day=28)

    def __init__(self, config: Optional[Dict] = None):
        super().__init__(config or ITUNES_CONFIG)

    def construct_release_url(self, release_id: str, region: str = "US") -> str:
        return f"{self.base_url}/{region.lower()}/album/{release_id}"

    def fetch_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> RawRelease:
        return self._query({"id": release_id, "entity": "song"}, self.regions(options))

    def fetch_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> RawRelease:
        raw = self._query({"upc": gtin, "entity": "song"}, self.regions(options))
        raw["gtin"] = gtin
        return raw

    def _query(self, params: Dict[str, str], regions: List[str]) -> RawRelease:
        """Query the lookup endpoint for each region in order until one has results."""
        api_url = None
        for region in regions:
            api_url = f"{self.api_url}/{region.lower()}/lookup"
            data = self._make_request(api_url, params)
            if not isinstance(data, dict):
                raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], api_url)
            if data.get("resultCount"):
                results = data.get("results") or []
                if not any(result.get("wrapperType") == "collection" for result in results):
                    raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], api_url)
                data["region"] = region.upper()
                return data

        raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_RESULTS"], api_url)

    def normalize(self, raw: RawRelease, options: Optional[LookupOptions] = None) -> Release:
        results = raw.get("results", [])
        collection = next(result for result in results if result.get("wrapperType") == "collection")
        tracks = [result for result in results if result.get("wrapperType") == "track"]
        region = raw.get("region")

        link_types = []
        # TODO: check whether the release is also available as a paid download
        if tracks and all(track.get("isStreamable") for track in tracks):
            link_types.append("paid streaming")

        release = Release(
            title=collection.get("collectionName", ""),
            artists=[self._convert_artist(collection.get("artistName", ""), collection.get("artistViewUrl"))],
            gtin=raw.get("gtin", ""),
            external_links=[],
            media=self._convert_tracklist(tracks, region),
            release_date=PartialDate.parse(collection.get("releaseDate")),
            packaging="None",
            images=[],
            providers=[self.provider_info(collection.get("collectionId"))],
        )
        if region and release.providers[0].id:
            release.providers[0].url = self.construct_release_url(release.providers[0].id, region)
        if collection.get("collectionViewUrl"):
            release.external_links.append(
                ExternalLink(url=self.clean_view_url(collection["collectionViewUrl"]), types=link_types)
            )
        if collection.get("artworkUrl100"):
            release.images.append(Artwork(url=collection["artworkUrl100"], types=["front"]))
        return release

    def _convert_tracklist(self, tracks: List[Dict], region: Optional[str]) -> List[Medium]:
        if not tracks:
            return []
        medium_count = max(
            max(track.get("discCount") or 1 for track in tracks),
            max(track.get("discNumber") or 1 for track in tracks),
        )
        media = [
            Medium(number=index + 1, format="Digital Media", tracklist=[])
            for index in range(medium_count)
        ]

        # split flat tracklist into media
        for track in tracks:
            medium = media[(track.get("discNumber") or 1) - 1]
            medium.tracklist.append(Track(
                number=track.get("trackNumber") or len(medium.tracklist) + 1,
                title=track.get("trackName", ""),
                duration=track.get("trackTimeMillis"),
                artists=[self._convert_artist(track.get("artistName", ""), track.get("artistViewUrl"))],
                available_in=[region] if region else None,
            ))

        for medium in media:
            medium.tracklist.sort(key=lambda t: t.number)
        return media

    def _convert_artist(self, name: str, url: Optional[str]) -> ArtistCreditName:
        return ArtistCreditName(name=name, external_link=self.clean_view_url(url) if url else None)

    @staticmethod
    def clean_view_url(view_url: str) -> str:
        """Remove tracking query parameters and the name blurb before the ID."""
        parts = urlsplit(view_url)
        path = BLURB_PATTERN.sub(r"/\1/\2", parts.path)
        return urlunsplit((parts.scheme, parts.netloc, path, "", ""))
