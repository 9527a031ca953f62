"""
Deezer Provider Module
Looks up releases from the public Deezer API.
"""

from typing import Any, Dict, List, Optional

from ..core.config import DEEZER_CONFIG, ERROR_MESSAGES
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

PAGE_SIZE = 100


class DeezerProvider(MetadataProvider):
    """Deezer streaming catalog provider."""

    name = "Deezer"
    internal_name = "deezer"
    supported_urls = UrlPattern(
        hostname=r"(www\.)?deezer\.com",
        pathname=r"(?:/[a-z]{2})?/album/(?P<id>\d+)",
    )
    duration_precision = DurationPrecision.SECOND

    def __init__(self, config: Optional[Dict] = None):
        super().__init__(config or DEEZER_CONFIG)

    def construct_release_url(self, release_id: str) -> str:
        return f"{self.base_url}/album/{release_id}"

    def fetch_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> RawRelease:
        return self._fetch_album(str(release_id), options)

    def fetch_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> RawRelease:
        return self._fetch_album(f"upc:{gtin}", options)

    def _query(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        api_url = f"{self.api_url}/{path}"
        data = self._make_request(api_url, params)
        if not isinstance(data, dict):
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], api_url)
        # Deezer reports errors with status 200
        error = data.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise SourceQueryFailure(self.name, message or ERROR_MESSAGES["NO_RESULTS"], api_url)
        return data

    def _fetch_album(self, album_key: str, options: Optional[LookupOptions]) -> RawRelease:
        album = self._query(f"album/{album_key}")
        if "id" not in album:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_RESULTS"], f"{self.api_url}/album/{album_key}")

        if options and options.with_all_track_artists:
            # Only the full track objects list contributors and availability
            album["track_details"] = [
                self._query(f"track/{track['id']}")
                for track in album.get("tracks", {}).get("data", [])
            ]
        elif options and options.with_separate_media:
            album["track_details"] = self._fetch_album_tracks(album["id"])
        return album

    def _fetch_album_tracks(self, album_id: Any) -> List[Dict[str, Any]]:
        """Fetch all pages of the album tracklist which includes disc numbers and ISRCs."""
        tracks = []
        index = 0
        while True:
            page = self._query(f"album/{album_id}/tracks", {"index": index, "limit": PAGE_SIZE})
            items = page.get("data", [])
            tracks.extend(items)
            if not items or not page.get("next"):
                break
            index += len(items)
        return tracks

    def normalize(self, raw: RawRelease, options: Optional[LookupOptions] = None) -> Release:
        details = raw.get("track_details")
        if details is not None:
            media = self._convert_detailed_tracklist(details)
        else:
            media = self._convert_simple_tracklist(raw.get("tracks", {}).get("data", []))

        release = Release(
            title=raw.get("title", ""),
            artists=self._convert_artists(raw),
            gtin=raw.get("upc") or "",
            media=media,
            release_date=PartialDate.parse(raw.get("release_date")),
            providers=[self.provider_info(raw.get("id"))],
        )
        if raw.get("link"):
            release.external_links.append(ExternalLink(url=raw["link"], types=["free streaming"]))
        if raw.get("cover_xl"):
            release.images.append(Artwork(url=raw["cover_xl"], types=["front"]))
        if raw.get("label"):
            release.labels.append(Label(name=raw["label"]))
        return release

    def _convert_simple_tracklist(self, tracks: List[Dict[str, Any]]) -> List[Medium]:
        if not tracks:
            return []
        return [Medium(
            number=1,
            format="Digital Media",
            tracklist=[
                Track(
                    number=index,
                    title=track.get("title", ""),
                    duration=self._convert_duration(track.get("duration")),
                    artists=[self._convert_artist(track["artist"])] if track.get("artist") else None,
                    isrc=track.get("isrc") or None,
                )
                for index, track in enumerate(tracks, 1)
            ],
        )]

    def _convert_detailed_tracklist(self, tracks: List[Dict[str, Any]]) -> List[Medium]:
        if not tracks:
            return []
        medium_count = max(track.get("disk_number") or 1 for track in tracks)
        media = [Medium(number=index + 1, format="Digital Media") for index in range(medium_count)]
        for track in tracks:
            medium = media[(track.get("disk_number") or 1) - 1]
            artists = self._convert_artists(track)
            medium.tracklist.append(Track(
                number=track.get("track_position") or len(medium.tracklist) + 1,
                title=track.get("title", ""),
                duration=self._convert_duration(track.get("duration")),
                artists=artists or None,
                isrc=track.get("isrc") or None,
                available_in=track.get("available_countries"),
            ))
        for medium in media:
            medium.tracklist.sort(key=lambda t: t.number)
        return media

    def _convert_artists(self, entity: Dict[str, Any]) -> List[ArtistCreditName]:
        contributors = [
            contributor for contributor in entity.get("contributors", [])
            if contributor.get("role", "Main") == "Main"
        ]
        if contributors:
            return [self._convert_artist(contributor) for contributor in contributors]
        if entity.get("artist"):
            return [self._convert_artist(entity["artist"])]
        return []

    def _convert_artist(self, artist: Dict[str, Any]) -> ArtistCreditName:
        link = artist.get("link")
        if not link and artist.get("id"):
            link = f"{self.base_url}/artist/{artist['id']}"
        return ArtistCreditName(name=artist.get("name", ""), external_link=link)

    @staticmethod
    def _convert_duration(seconds: Optional[int]) -> Optional[int]:
        if seconds is None:
            return None
        return int(seconds) * 1000
