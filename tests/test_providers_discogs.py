"""
Tests for the Discogs provider.
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import patch

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harmonizer.core.config import DISCOGS_CONFIG
from harmonizer.core.exceptions import SourceQueryFailure
from harmonizer.models.release import DurationPrecision, PartialDate
from harmonizer.providers.discogs import DiscogsProvider


class TestDiscogsProvider:
    """Tests for DiscogsProvider class."""

    def test_discogs_provider_with_token(self):
        """Test that the user token is sent with every request."""
        provider = DiscogsProvider(dict(DISCOGS_CONFIG, USER_TOKEN="test-token"))

        assert provider.session.headers["Authorization"] == "Discogs token=test-token"

    def test_gtin_lookup_requires_token(self):
        """Test that barcode search fails without a token."""
        provider = DiscogsProvider(dict(DISCOGS_CONFIG, USER_TOKEN=None))

        with pytest.raises(SourceQueryFailure):
            provider.fetch_by_gtin("602445790005")

    @patch('harmonizer.providers.discogs.DiscogsProvider._make_request')
    def test_lookup_by_gtin(self, mock_make_request, discogs_release_response):
        """Test barcode search followed by the release lookup."""
        mock_make_request.side_effect = [{"results": [{"id": 249504}]}, discogs_release_response]
        provider = DiscogsProvider(dict(DISCOGS_CONFIG, USER_TOKEN="test-token"))

        release = provider.get_release_by_gtin("602445790005")

        assert mock_make_request.call_args_list[0].args[1]["barcode"] == "602445790005"
        assert mock_make_request.call_args_list[1].args[0] == "https://api.discogs.com/releases/249504"
        assert release.duration_precision is DurationPrecision.SECOND

    @patch('harmonizer.providers.discogs.DiscogsProvider._make_request')
    def test_lookup_by_url_with_slug(self, mock_make_request, discogs_release_response):
        """Test that URLs with a name slug are resolved by their ID."""
        mock_make_request.return_value = discogs_release_response

        DiscogsProvider().resolve("https://www.discogs.com/release/249504-Test-Artist-Test-Album")

        assert mock_make_request.call_args.args[0] == "https://api.discogs.com/releases/249504"


class TestDiscogsNormalize:
    """Tests for Discogs normalization."""

    def test_normalize(self, discogs_release_response):
        """Test conversion of a release response."""
        release = DiscogsProvider().normalize(discogs_release_response)

        assert release.gtin == "602445790005"
        assert release.release_date == PartialDate(2020, 1)
        assert [artist.name for artist in release.artists] == ["Test Artist", "Other"]
        assert [artist.join_phrase for artist in release.artists] == [" & ", None]
        assert release.labels[0].catalog_number == "TEST001"
        assert release.external_links[0].types == ["discography entry"]
        assert [image.types for image in release.images] == [[], ["front"]]

    def test_normalize_disc_positions(self, discogs_release_response):
        """Test that disc-track positions are split into media."""
        release = DiscogsProvider().normalize(discogs_release_response)

        assert len(release.media) == 2
        assert release.media[0].format == "CD"
        assert release.find_track(1, 1).title == "First"
        assert release.find_track(1, 1).duration == 180000
        assert release.find_track(2, 1).title == "Second"

    def test_normalize_vinyl_sides(self, discogs_release_response):
        """Test that vinyl side positions form one sequentially numbered medium."""
        discogs_release_response["formats"] = [{"name": "Vinyl"}]
        discogs_release_response["tracklist"] = [
            {"position": "A1", "title": "One", "duration": "3:00"},
            {"position": "A2", "title": "Two", "duration": ""},
            {"position": "B1", "title": "Three", "duration": "4:10"},
        ]

        release = DiscogsProvider().normalize(discogs_release_response)

        assert len(release.media) == 1
        assert [track.number for track in release.media[0].tracklist] == [1, 2, 3]
        assert release.find_track(1, 2).duration is None
        assert release.find_track(1, 3).duration == 250000

    def test_normalize_catalog_number_none(self, discogs_release_response):
        """Test that the placeholder catalog number is dropped."""
        discogs_release_response["labels"] = [{"id": 5, "name": "Test Label", "catno": "none"}]

        release = DiscogsProvider().normalize(discogs_release_response)

        assert release.labels[0].catalog_number is None
