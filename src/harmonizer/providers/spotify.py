"""
Spotify Provider Module
Looks up releases from the Spotify Web API (client credentials flow).
"""

import base64
import logging
import threading
import time
from typing import Any, Dict, List, Optional

import requests

from ..core.config import ERROR_MESSAGES, SPOTIFY_CONFIG
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

logger = logging.getLogger(__name__)

# Refresh tokens a bit before they actually expire
TOKEN_EXPIRY_MARGIN = 60


class SpotifyProvider(MetadataProvider):
    """Spotify streaming catalog provider."""

    name = "Spotify"
    internal_name = "spotify"
    supported_urls = UrlPattern(
        hostname=r"open\.spotify\.com",
        pathname=r"(?:/intl-[a-z]{2}(?:-[A-Za-z]{2})?)?/album/(?P<id>[A-Za-z0-9]+)",
    )
    duration_precision = DurationPrecision.MS

    def __init__(self, config: Optional[Dict] = None):
        config = config or SPOTIFY_CONFIG
        super().__init__(config)
        self.auth_url = config["AUTH_URL"]
        self.client_id = config.get("CLIENT_ID")
        self.client_secret = config.get("CLIENT_SECRET")
        self.track_batch_size = config.get("TRACK_BATCH_SIZE", 50)
        self.page_size = config.get("PAGE_SIZE", 50)
        self._access_token = None
        self._token_expires_at = 0.0
        self._token_lock = threading.Lock()

    def construct_release_url(self, release_id: str) -> str:
        return f"{self.base_url}/album/{release_id}"

    def _authenticate(self) -> str:
        """Get an access token using the client credentials flow, cached until it expires."""
        if not self.client_id or not self.client_secret:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MISSING_CREDENTIALS"])

        with self._token_lock:
            if self._access_token and time.time() < self._token_expires_at:
                return self._access_token

            credentials = f"{self.client_id}:{self.client_secret}"
            encoded_credentials = base64.b64encode(credentials.encode()).decode()
            headers = {
                "Authorization": f"Basic {encoded_credentials}",
                "Content-Type": "application/x-www-form-urlencoded"
            }
            try:
                response = self.session.post(
                    self.auth_url,
                    headers=headers,
                    data={"grant_type": "client_credentials"},
                    timeout=self.timeout
                )
            except requests.exceptions.RequestException as e:
                raise SourceQueryFailure(self.name, f"Authentication failed: {e}", self.auth_url) from e

            if response.status_code != 200:
                raise SourceQueryFailure(
                    self.name, f"Authentication failed with HTTP status {response.status_code}", self.auth_url
                )
            try:
                token_data = response.json()
            except ValueError as e:
                raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], self.auth_url) from e
            if not isinstance(token_data, dict) or not token_data.get("access_token"):
                raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], self.auth_url)
            self._access_token = token_data["access_token"]
            self._token_expires_at = time.time() + token_data.get("expires_in", 3600) - TOKEN_EXPIRY_MARGIN
            logger.debug("Authenticated with Spotify")
            return self._access_token

    def _api_get(self, url: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._authenticate()}"}
        data = self._make_request(url, params, headers=headers)
        if not isinstance(data, dict):
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["MALFORMED_RESPONSE"], url)
        return data

    def fetch_by_id(self, release_id: str, options: Optional[LookupOptions] = None) -> RawRelease:
        market = self.regions(options)[0]
        album = self._api_get(f"{self.api_url}/albums/{release_id}", {"market": market})
        if "id" not in album:
            raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_RESULTS"], f"{self.api_url}/albums/{release_id}")

        tracks = album.get("tracks", {})
        items = list(tracks.get("items", []))
        next_url = tracks.get("next")
        while next_url:
            page = self._api_get(next_url)
            items.extend(page.get("items", []))
            next_url = page.get("next")
        album["tracks"] = {"items": items}

        # Simplified track objects lack ISRCs and available markets
        details = []
        track_ids = [item["id"] for item in items if item.get("id")]
        for start in range(0, len(track_ids), self.track_batch_size):
            batch = track_ids[start:start + self.track_batch_size]
            data = self._api_get(f"{self.api_url}/tracks", {"ids": ",".join(batch)})
            details.extend(track for track in data.get("tracks", []) if track)
        album["track_details"] = details
        return album

    def fetch_by_gtin(self, gtin: str, options: Optional[LookupOptions] = None) -> RawRelease:
        api_url = f"{self.api_url}/search"
        for market in self.regions(options):
            data = self._api_get(api_url, {"q": f"upc:{gtin}", "type": "album", "market": market, "limit": 1})
            items = data.get("albums", {}).get("items", [])
            if items:
                return self.fetch_by_id(items[0]["id"], options)
        raise SourceQueryFailure(self.name, ERROR_MESSAGES["NO_RESULTS"], api_url)

    def normalize(self, raw: RawRelease, options: Optional[LookupOptions] = None) -> Release:
        details = {track["id"]: track for track in raw.get("track_details", []) if track.get("id")}

        release = Release(
            title=raw.get("name", ""),
            artists=[self._convert_artist(artist) for artist in raw.get("artists", [])],
            gtin=raw.get("external_ids", {}).get("upc") or "",
            media=self._convert_tracklist(raw.get("tracks", {}).get("items", []), details),
            release_date=PartialDate.parse(raw.get("release_date")),
            providers=[self.provider_info(raw.get("id"))],
        )
        spotify_url = raw.get("external_urls", {}).get("spotify")
        if spotify_url:
            release.external_links.append(ExternalLink(url=spotify_url, types=["free streaming"]))
        images = sorted(raw.get("images", []), key=lambda image: image.get("width") or 0, reverse=True)
        if images and images[0].get("url"):
            release.images.append(Artwork(url=images[0]["url"], types=["front"]))
        if raw.get("label"):
            release.labels.append(Label(name=raw["label"]))
        return release

    def _convert_tracklist(self, items: List[Dict[str, Any]], details: Dict[str, Dict[str, Any]]) -> List[Medium]:
        if not items:
            return []
        medium_count = max(item.get("disc_number") or 1 for item in items)
        media = [Medium(number=index + 1, format="Digital Media") for index in range(medium_count)]
        for item in items:
            detail = details.get(item.get("id"), {})
            medium = media[(item.get("disc_number") or 1) - 1]
            medium.tracklist.append(Track(
                number=item.get("track_number") or len(medium.tracklist) + 1,
                title=item.get("name", ""),
                duration=item.get("duration_ms"),
                artists=[self._convert_artist(artist) for artist in item.get("artists", [])] or None,
                isrc=detail.get("external_ids", {}).get("isrc"),
                available_in=detail.get("available_markets"),
            ))
        for medium in media:
            medium.tracklist.sort(key=lambda t: t.number)
        return media

    @staticmethod
    def _convert_artist(artist: Dict[str, Any]) -> ArtistCreditName:
        return ArtistCreditName(
            name=artist.get("name", ""),
            external_link=artist.get("external_urls", {}).get("spotify"),
        )
