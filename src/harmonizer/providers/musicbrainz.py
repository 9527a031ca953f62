"""
MusicBrainz Provider Module
Looks up releases from the MusicBrainz web service.
"""

from typing import Any, Dict, List, Optional

from ..core.config import ERROR_MESSAGES, MUSICBRAINZ_CONFIG
from ..core.exceptions import SourceQueryFailure
from ..models.query import LookupOptions
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
from ..utils.url_pattern import UrlPattern
from .base import MetadataProvider, RawRelease

MBID_PATTERN = r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}"
RELEASE_INCLUDES = "artist-credits+labels+recordings+isrcs+url-rels"


class MusicBrainzProvider(MetadataProvider):
    """MusicBrainz database provider."""

    name = "MusicBrainz"
    internal_name = "musicbrainz"
    supported_urls = UrlPattern(
        hostname=r"(beta\.)?musicbrainz\.org",
        pathname=rf"/release/(?P<id>{MBID_PATTERN})",
    )
    duration_precision = DurationPrecision.MS

    def __init__(self, config: Optional[Dict] = None):
        config = config or MUSICBRAINZ_CONFIG
        super().__init__(config)
        self.cover_art_url = config["COVER_ART_URL"]

    def construct_release_url(self, release_id: str) -> str:
        return f"{self.base_url}/release/{release_id}"

    def fetch_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> RawRelease:
        url = f"{self.api_url}/release/{release_id}"
        data = self._make_request(url, {'inc': RELEASE_INCLUDES, 'fmt': 'json'})
        if not isinstance(data, dict) or "id" not in data:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], url)
        return data

    def fetch_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> RawRelease:
        url = f"{self.api_url}/release"
        data = self._make_request(url, {'query': f'barcode:{gtin}', 'fmt': 'json', 'limit': 1})
        releases = data.get("releases", []) if isinstance(data, dict) else []
        if not releases:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_RESULTS"], url)
        return self.fetch_by_id(releases[0]["id"], options)

    def normalize(self, raw: RawRelease, options: Optional[LookupOptions] = None) -> Release:
        release_id = raw.get("id", "")
        release = Release(
            title=raw.get("title", ""),
            artists=self._parse_artist_credit(raw.get("artist-credit", [])),
            gtin=raw.get("barcode") or "",
            external_links=self._parse_url_relations(raw.get("relations", [])),
            media=self._parse_media(raw.get("media", [])),
            release_date=PartialDate.parse(raw.get("date")),
            packaging=raw.get("packaging") or "",
            labels=self._parse_labels(raw.get("label-info", [])),
            mbid=release_id or None,
            providers=[self.provider_info(release_id)],
        )
        if raw.get("cover-art-archive", {}).get("front"):
            release.images.append(
                Artwork(url=f"{self.cover_art_url}/release/{release_id}/front", types=["front"])
            )
        return release

    def _parse_artist_credit(self, artist_credits: List[Dict[str, Any]]) -> List[ArtistCreditName]:
        """Parse a MusicBrainz artist-credit array, keeping join phrases."""
        credits = []
        for credit in artist_credits:
            artist = credit.get("artist") or {}
            artist_id = artist.get("id")
            credits.append(ArtistCreditName(
                name=credit.get("name") or artist.get("name", ""),
                external_link=f"{self.base_url}/artist/{artist_id}" if artist_id else None,
                join_phrase=credit.get("joinphrase") or None,
                mbid=artist_id,
            ))
        return credits

    def _parse_url_relations(self, relations: List[Dict[str, Any]]) -> List[ExternalLink]:
        links = []
        for relation in relations:
            resource = (relation.get("url") or {}).get("resource")
            if not resource:
                continue
            links.append(ExternalLink(url=resource, types=[relation["type"]] if relation.get("type") else []))
        return links

    def _parse_labels(self, label_info: List[Dict[str, Any]]) -> List[Label]:
        labels = []
        for info in label_info:
            label = info.get("label") or {}
            if not label.get("name"):
                continue
            labels.append(Label(
                name=label["name"],
                catalog_number=info.get("catalog-number") or None,
                external_link=f"{self.base_url}/label/{label['id']}" if label.get("id") else None,
                mbid=label.get("id"),
            ))
        return labels

    def _parse_media(self, media: List[Dict[str, Any]]) -> List[Medium]:
        result = []
        for index, medium in enumerate(media, 1):
            tracklist = []
            for track_index, track_data in enumerate(medium.get("tracks", []), 1):
                recording = track_data.get("recording") or {}
                isrcs = recording.get("isrcs") or []
                credit = track_data.get("artist-credit") or recording.get("artist-credit")
                tracklist.append(Track(
                    number=track_data.get("position") or track_index,
                    title=track_data.get("title") or recording.get("title", ""),
                    duration=track_data.get("length") or recording.get("length"),
                    artists=self._parse_artist_credit(credit) if credit else None,
                    isrc=isrcs[0] if isrcs else None,
                ))
            result.append(Medium(
                number=medium.get("position") or index,
                format=medium.get("format") or None,
                title=medium.get("title") or None,
                tracklist=tracklist,
            ))
        return result
