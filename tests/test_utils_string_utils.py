"""
Tests for string and duration utilities.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harmonizer.utils.string_utils import normalize_string, normalize_url, join_artist_names
from harmonizer.utils.durations import parse_clock_duration, format_duration


class TestNormalizeString:
    """Tests for normalize_string function."""

    def test_normalize_string_basic(self):
        """Test basic string normalization."""
        assert normalize_string("  Test Artist  ") == "test artist"

    def test_normalize_string_empty(self):
        """Test normalization of empty values."""
        assert normalize_string("") == ""
        assert normalize_string(None) == ""

    def test_normalize_string_ampersand(self):
        """Test that & and 'and' are equivalent."""
        assert normalize_string("Simon & Garfunkel") == normalize_string("Simon and Garfunkel")

    def test_normalize_string_apostrophes(self):
        """Test that typographic apostrophes are unified."""
        assert normalize_string("Don’t Stop") == normalize_string("Don't Stop")

    def test_normalize_string_whitespace(self):
        """Test that inner whitespace is collapsed."""
        assert normalize_string("A   B\tC") == "a b c"


class TestNormalizeUrl:
    """Tests for normalize_url function."""

    def test_scheme_and_host(self):
        """Test that scheme and host case do not matter."""
        assert normalize_url("http://WWW.Deezer.com/album/1") == "https://www.deezer.com/album/1"

    def test_trailing_slash_and_fragment(self):
        """Test that trailing slashes and fragments are dropped."""
        assert normalize_url("https://www.deezer.com/album/1/#top") == "https://www.deezer.com/album/1"

    def test_default_port(self):
        """Test that default ports are dropped."""
        assert normalize_url("https://example.com:443/a") == "https://example.com/a"
        assert normalize_url("https://example.com:8443/a") == "https://example.com:8443/a"

    def test_query_is_kept(self):
        """Test that query strings stay part of the URL."""
        assert normalize_url("https://example.com/a?id=1") == "https://example.com/a?id=1"


class TestJoinArtistNames:
    """Tests for join_artist_names function."""

    def test_join_with_phrases(self):
        """Test that join phrases are used between names."""
        assert join_artist_names(["A", "B", "C"], [", ", " feat. ", None]) == "A, B feat. C"

    def test_join_default_phrase(self):
        """Test the default join phrase."""
        assert join_artist_names(["A", "B"]) == "A & B"

    def test_single_name(self):
        """Test a single artist."""
        assert join_artist_names(["A"], [" & "]) == "A"


class TestDurations:
    """Tests for duration parsing and formatting."""

    @pytest.mark.parametrize("value,expected", [
        ("3:45", 225000),
        ("03:05", 185000),
        ("1:02:03", 3723000),
        ("105:20", 6320000),
        ("3:4", None),
        ("", None),
        (None, None),
        ("3.45", None),
    ])
    def test_parse_clock_duration(self, value, expected):
        """Test parsing of clock durations."""
        assert parse_clock_duration(value) == expected

    def test_format_duration(self):
        """Test formatting of millisecond durations."""
        assert format_duration(225000) == "3:45"
        assert format_duration(3723000) == "1:02:03"
        assert format_duration(None) == ""
