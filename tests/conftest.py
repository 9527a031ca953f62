"""
Pytest configuration and shared fixtures.
"""

import copy
import re
import sys
import time
from pathlib import Path
from typing import Optional

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harmonizer.models.release import (
    ArtistCreditName,
    DurationPrecision,
    ExternalLink,
    Medium,
    PartialDate,
    Release,
    Track,
)
from harmonizer.providers.base import MetadataProvider
from harmonizer.utils.url_pattern import UrlPattern


class StubProvider(MetadataProvider):
    """Provider which serves a prepared release (or error) without network access."""

    def __init__(
        self,
        name: str,
        hostname: str = "example.com",
        release: Optional[Release] = None,
        error: Optional[Exception] = None,
        delay: float = 0.0,
        supports_gtin_lookup: bool = True,
        duration_precision: DurationPrecision = DurationPrecision.MS,
    ):
        self.name = name
        self.internal_name = name.lower()
        self.supported_urls = UrlPattern(hostname=re.escape(hostname), pathname=r"/release/(?P<id>\d+)")
        self.supports_gtin_lookup = supports_gtin_lookup
        self.duration_precision = duration_precision
        super().__init__({"API_URL": f"https://api.{hostname}", "BASE_URL": f"https://{hostname}"})
        self.release = release or Release(
            title=f"{name} release",
            media=[Medium(number=1, tracklist=[Track(number=1, title="Track 1")])],
        )
        self.error = error
        self.delay = delay
        self.calls = []

    def construct_release_url(self, release_id: str) -> str:
        return f"{self.base_url}/release/{release_id}"

    def _fetch(self, kind: str, value: str):
        self.calls.append((kind, value))
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return {"id": value}

    def fetch_by_id(self, release_id, options=None):
        return self._fetch("id", release_id)

    def fetch_by_gtin(self, gtin, options=None):
        return self._fetch("gtin", gtin)

    def normalize(self, raw, options=None):
        release = copy.deepcopy(self.release)
        release.providers = [self.provider_info(raw["id"])]
        return release


@pytest.fixture
def stub_provider():
    """Factory for providers which need no network access."""
    return StubProvider


@pytest.fixture
def sample_release() -> Release:
    """Two-track release with second precision durations."""
    return Release(
        title="Test Album",
        artists=[ArtistCreditName(name="Test Artist", external_link="https://www.deezer.com/artist/1")],
        gtin="602445790005",
        external_links=[ExternalLink(url="https://www.deezer.com/album/100", types=["free streaming"])],
        media=[Medium(number=1, format="Digital Media", tracklist=[
            Track(number=1, title="First", duration=180000),
            Track(number=2, title="Second", duration=240000),
        ])],
        release_date=PartialDate(2020, 1, 31),
        duration_precision=DurationPrecision.SECOND,
    )


@pytest.fixture
def itunes_lookup_response():
    """iTunes lookup API response with a collection and two tracks on two discs."""
    return {
        "resultCount": 3,
        "results": [
            {
                "wrapperType": "collection",
                "collectionId": 1439478587,
                "collectionName": "Test Album",
                "artistName": "Test Artist",
                "artistViewUrl": "https://music.apple.com/gb/artist/test-artist/123?uo=4",
                "collectionViewUrl": "https://music.apple.com/gb/album/test-album/1439478587?uo=4",
                "artworkUrl100": "https://is1-ssl.mzstatic.com/image/thumb/100x100bb.jpg",
                "releaseDate": "2020-01-31T08:00:00Z",
            },
            {
                "wrapperType": "track",
                "trackName": "First",
                "artistName": "Test Artist",
                "artistViewUrl": "https://music.apple.com/gb/artist/test-artist/123?uo=4",
                "discCount": 2,
                "discNumber": 1,
                "trackNumber": 1,
                "trackTimeMillis": 180500,
                "isStreamable": True,
            },
            {
                "wrapperType": "track",
                "trackName": "Second",
                "artistName": "Guest",
                "discCount": 2,
                "discNumber": 2,
                "trackNumber": 1,
                "trackTimeMillis": 240250,
                "isStreamable": True,
            },
        ],
    }


@pytest.fixture
def deezer_album_response():
    """Deezer album API response with the simple tracklist."""
    return {
        "id": 100,
        "title": "Test Album",
        "upc": "602445790005",
        "link": "https://www.deezer.com/album/100",
        "cover_xl": "https://e-cdns-images.dzcdn.net/images/cover/1000x1000.jpg",
        "label": "Test Label",
        "release_date": "2020-01-31",
        "contributors": [
            {"id": 1, "name": "Test Artist", "link": "https://www.deezer.com/artist/1", "role": "Main"},
            {"id": 2, "name": "Producer", "link": "https://www.deezer.com/artist/2", "role": "Featured"},
        ],
        "artist": {"id": 1, "name": "Test Artist", "link": "https://www.deezer.com/artist/1"},
        "tracks": {"data": [
            {"id": 11, "title": "First", "duration": 180, "isrc": "GBAAA2000001",
             "artist": {"id": 1, "name": "Test Artist"}},
            {"id": 12, "title": "Second", "duration": 240,
             "artist": {"id": 1, "name": "Test Artist"}},
        ]},
    }


@pytest.fixture
def musicbrainz_release_response():
    """MusicBrainz release lookup response."""
    return {
        "id": "9bd8e1d5-1a9e-4a9b-9f7c-2d6e4b6a7c01",
        "title": "Test Album",
        "barcode": "602445790005",
        "date": "2020-01-31",
        "packaging": "Jewel Case",
        "artist-credit": [
            {"name": "Test Artist", "joinphrase": " & ",
             "artist": {"id": "0a1b2c3d-0000-4000-8000-000000000001", "name": "Test Artist"}},
            {"name": "Other", "joinphrase": "",
             "artist": {"id": "0a1b2c3d-0000-4000-8000-000000000002", "name": "Other"}},
        ],
        "label-info": [
            {"catalog-number": "TEST001",
             "label": {"id": "1b2c3d4e-0000-4000-8000-000000000003", "name": "Test Label"}},
        ],
        "relations": [
            {"type": "purchase for download", "url": {"resource": "https://example.bandcamp.com/album/test"}},
        ],
        "cover-art-archive": {"front": True},
        "media": [{
            "position": 1,
            "format": "CD",
            "tracks": [
                {"position": 1, "title": "First", "length": 180123,
                 "recording": {"title": "First", "isrcs": ["GBAAA2000001"]}},
                {"position": 2, "title": "Second", "length": 240456,
                 "recording": {"title": "Second", "isrcs": []}},
            ],
        }],
    }


@pytest.fixture
def discogs_release_response():
    """Discogs release API response with a two-disc tracklist."""
    return {
        "id": 249504,
        "title": "Test Album",
        "uri": "https://www.discogs.com/release/249504-Test-Artist-Test-Album",
        "released": "2020-01-00",
        "artists": [
            {"id": 7, "name": "Test Artist (2)", "anv": "", "join": "&"},
            {"id": 8, "name": "Other", "anv": "", "join": ""},
        ],
        "labels": [{"id": 5, "name": "Test Label", "catno": "TEST001"}],
        "formats": [{"name": "CD", "qty": "2"}],
        "identifiers": [
            {"type": "Matrix / Runout", "value": "TEST001-A"},
            {"type": "Barcode", "value": "6 02445 79000 5"},
        ],
        "images": [
            {"type": "secondary", "uri": "https://i.discogs.com/back.jpg"},
            {"type": "primary", "uri": "https://i.discogs.com/front.jpg"},
        ],
        "tracklist": [
            {"position": "", "type_": "heading", "title": "Disc One"},
            {"position": "1-1", "type_": "track", "title": "First", "duration": "3:00"},
            {"position": "2-1", "type_": "track", "title": "Second", "duration": "4:00"},
        ],
    }


@pytest.fixture
def spotify_album_response():
    """Spotify album API response (simplified tracks)."""
    return {
        "id": "6dtEnqNtLpqGq8ZiIcqgiy",
        "name": "Test Album",
        "release_date": "2020-01-31",
        "label": "Test Label",
        "external_ids": {"upc": "602445790005"},
        "external_urls": {"spotify": "https://open.spotify.com/album/6dtEnqNtLpqGq8ZiIcqgiy"},
        "artists": [{"name": "Test Artist", "external_urls": {"spotify": "https://open.spotify.com/artist/a1"}}],
        "images": [
            {"url": "https://i.scdn.co/image/small", "width": 64},
            {"url": "https://i.scdn.co/image/large", "width": 640},
        ],
        "tracks": {
            "items": [
                {"id": "t1", "name": "First", "disc_number": 1, "track_number": 1, "duration_ms": 180321,
                 "artists": [{"name": "Test Artist", "external_urls": {"spotify": "https://open.spotify.com/artist/a1"}}]},
            ],
            "next": "https://api.spotify.com/v1/albums/6dtEnqNtLpqGq8ZiIcqgiy/tracks?offset=1",
        },
    }
