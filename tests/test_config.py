"""
Tests for configuration module.
"""

import importlib
import pytest
from pathlib import Path
import sys

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harmonizer.core import config
from harmonizer.core.config import (
    PROJECT_NAME,
    PROJECT_VERSION,
    USER_AGENT,
    LOOKUP_CONFIG,
    MUSICBRAINZ_CONFIG,
    DISCOGS_CONFIG,
    ENRICHMENT_CONFIG,
    DEFAULT_PROVIDER_PREFERENCES,
    ERROR_MESSAGES,
)


def test_project_info():
    """Test project information constants."""
    assert PROJECT_NAME == "Harmonizer"
    assert PROJECT_VERSION == "1.0.0"
    assert PROJECT_NAME in USER_AGENT
    assert PROJECT_VERSION in USER_AGENT


def test_lookup_config():
    """Test lookup configuration."""
    assert LOOKUP_CONFIG["DEFAULT_REGIONS"]
    assert LOOKUP_CONFIG["MAX_WORKERS"] >= 1
    assert LOOKUP_CONFIG["TIMEOUT"] > 0


def test_musicbrainz_config():
    """Test MusicBrainz configuration."""
    assert "API_URL" in MUSICBRAINZ_CONFIG
    assert "USER_AGENT" in MUSICBRAINZ_CONFIG
    assert MUSICBRAINZ_CONFIG["REQUEST_DELAY"] >= 1.0


def test_enrichment_uses_musicbrainz():
    """Test that enrichment talks to the MusicBrainz web service."""
    assert ENRICHMENT_CONFIG["API_URL"] == MUSICBRAINZ_CONFIG["API_URL"]
    assert ENRICHMENT_CONFIG["MAX_CONCURRENT"] >= 1


def test_default_provider_preferences():
    """Test that every provider appears once in the default preferences."""
    assert len(DEFAULT_PROVIDER_PREFERENCES) == len(set(DEFAULT_PROVIDER_PREFERENCES))
    assert DEFAULT_PROVIDER_PREFERENCES[0] == "MusicBrainz"


def test_error_messages():
    """Test that the error messages used by the lookup exist."""
    for key in ("NO_RESULTS", "NO_PROVIDER", "PATTERN_MISMATCH", "ALL_FAILED", "TIMEOUT"):
        assert ERROR_MESSAGES[key]


def test_environment_variable_override(monkeypatch):
    """Test that environment variables can override config."""
    monkeypatch.setenv("HARMONIZER_REGIONS", "gb, de")
    monkeypatch.setenv("DISCOGS_TOKEN", "secret")
    monkeypatch.setenv("HARMONIZER_LOG_LEVEL", "debug")
    try:
        reloaded = importlib.reload(config)
        assert reloaded.LOOKUP_CONFIG["DEFAULT_REGIONS"] == ["gb", "de"]
        assert reloaded.DISCOGS_CONFIG["USER_TOKEN"] == "secret"
        assert reloaded.LOGGING_CONFIG["LEVEL"] == "DEBUG"
    finally:
        monkeypatch.undo()
        importlib.reload(config)


def test_discogs_token_optional():
    """Test that Discogs works without a token (barcode search is unavailable)."""
    assert "USER_TOKEN" in DISCOGS_CONFIG
