"""
Discogs Provider Module
Looks up releases from the Discogs database API.
"""

import re
from typing import Any, Dict, List, Optional

from ..core.config import DISCOGS_CONFIG, ERROR_MESSAGES
from ..core.exceptions import SourceQueryFailure
from ..models.query import LookupOptions, is_gtin
from ..models.release import (
    ArtistCreditName,
    Artwork,
    DurationPrecision,
    ExternalLink,
    Label,
    Medium,
    PartialDate,
    Release,
    Track,
)
from ..utils.durations import parse_clock_duration
from ..utils.url_pattern import UrlPattern
from .base import MetadataProvider, RawRelease

DISC_TRACK_POSITION = re.compile(r"^(?:[A-Za-z]*)(\d+)[-.](\d+)$")
NAME_DISAMBIGUATION = re.compile(r"\s\(\d+\)$")


class DiscogsProvider(MetadataProvider):
    """Discogs database provider."""

    name = "Discogs"
    internal_name = "discogs"
    supported_urls = UrlPattern(
        hostname=r"(www\.)?discogs\.com",
        pathname=r"(?:/[a-z]{2})?/release/(?P<id>\d+)(?:-[^/]*)?",
    )
    duration_precision = DurationPrecision.SECOND

    def __init__(self, config: Optional[Dict] = None):
        config = config or DISCOGS_CONFIG
        super().__init__(config)
        self.user_token = config.get("USER_TOKEN")
        if self.user_token:
            self.session.headers['Authorization'] = f'Discogs token={self.user_token}'

    def construct_release_url(self, release_id: str) -> str:
        return f"{self.base_url}/release/{release_id}"

    def fetch_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> RawRelease:
        url = f"{self.api_url}/releases/{release_id}"
        data = self._make_request(url)
        if not isinstance(data, dict) or "id" not in data:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], url)
        return data

    def fetch_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> RawRelease:
        # Database search requires authentication
        if not self.user_token:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MISSING_CREDENTIALS"])
        url = f"{self.api_url}/database/search"
        data = self._make_request(url, {'barcode': gtin, 'type': 'release', 'per_page': 1})
        results = data.get("results", []) if isinstance(data, dict) else []
        if not results:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_RESULTS"], url)
        return self.fetch_by_id(str(results[0]["id"]), options)

    def normalize(self, raw: RawRelease, options: Optional[LookupOptions] = None) -> Release:
        formats = raw.get("formats") or []
        release = Release(
            title=raw.get("title", ""),
            artists=self._convert_artists(raw.get("artists", [])),
            gtin=self._extract_gtin(raw.get("identifiers", [])),
            media=self._convert_tracklist(raw.get("tracklist", []), formats[0].get("name") if formats else None),
            release_date=PartialDate.parse(raw.get("released")),
            labels=self._convert_labels(raw.get("labels", [])),
            providers=[self.provider_info(raw.get("id"))],
        )
        if raw.get("uri"):
            release.external_links.append(ExternalLink(url=raw["uri"], types=["discography entry"]))
        for image in raw.get("images", []):
            if not image.get("uri"):
                continue
            release.images.append(Artwork(
                url=image["uri"],
                types=["front"] if image.get("type") == "primary" else [],
            ))
        return release

    @staticmethod
    def _extract_gtin(identifiers: List[Dict[str, Any]]) -> str:
        for identifier in identifiers:
            if identifier.get("type") != "Barcode":
                continue
            digits = re.sub(r"\D", "", identifier.get("value", ""))
            if is_gtin(digits):
                return digits
        return ""

    def _convert_artists(self, artists: List[Dict[str, Any]]) -> List[ArtistCreditName]:
        credits = []
        for artist in artists:
            join = (artist.get("join") or "").strip()
            if join == ",":
                join_phrase = ", "
            elif join:
                join_phrase = f" {join} "
            else:
                join_phrase = None
            credits.append(ArtistCreditName(
                name=NAME_DISAMBIGUATION.sub("", artist.get("anv") or artist.get("name", "")),
                external_link=f"{self.base_url}/artist/{artist['id']}" if artist.get("id") else None,
                join_phrase=join_phrase,
            ))
        if credits:
            credits[-1].join_phrase = None
        return credits

    def _convert_labels(self, labels: List[Dict[str, Any]]) -> List[Label]:
        return [
            Label(
                name=NAME_DISAMBIGUATION.sub("", label["name"]),
                catalog_number=label.get("catno") if label.get("catno") not in (None, "", "none") else None,
                external_link=f"{self.base_url}/label/{label['id']}" if label.get("id") else None,
            )
            for label in labels if label.get("name")
        ]

    def _convert_tracklist(self, tracklist: List[Dict[str, Any]], medium_format: Optional[str]) -> List[Medium]:
        tracks = [track for track in tracklist if track.get("type_", "track") == "track"]
        if not tracks:
            return []

        positions = [DISC_TRACK_POSITION.match(track.get("position", "")) for track in tracks]
        if all(positions) and all(int(match.group(1)) >= 1 for match in positions):
            numbered = [(int(match.group(1)), int(match.group(2)), track) for match, track in zip(positions, tracks)]
        else:
            # Vinyl sides (A1, B2) and plain numbering belong to one medium
            numbered = [(1, index, track) for index, track in enumerate(tracks, 1)]

        medium_count = max(disc for disc, _, _ in numbered)
        media = [Medium(number=index + 1, format=medium_format) for index in range(medium_count)]
        for disc, number, track in numbered:
            media[disc - 1].tracklist.append(Track(
                number=number,
                title=track.get("title", ""),
                duration=parse_clock_duration(track.get("duration")),
                artists=self._convert_artists(track["artists"]) if track.get("artists") else None,
            ))
        return media
