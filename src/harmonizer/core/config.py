"""
Configuration for Harmonizer.
Contains all constants, settings, and global parameters.
"""

import os

# Project Information
PROJECT_NAME = "Harmonizer"
PROJECT_VERSION = "1.0.0"
PROJECT_DESCRIPTION = "Release Harmonizer - Look up release metadata from multiple sources and merge it"
CONTACT = "contact@example.com"

USER_AGENT = f"{PROJECT_NAME}/{PROJECT_VERSION} ({CONTACT})"


def _env_list(name: str, default: list) -> list:
    """Read a comma separated list from the environment."""
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


# Lookup Configuration
LOOKUP_CONFIG = {
    "DEFAULT_REGIONS": _env_list("HARMONIZER_REGIONS", ["US"]),
    "MAX_WORKERS": 8,
    "TIMEOUT": 60,  # seconds for the whole lookup, None disables
}

# Provider display names in descending order of preference
DEFAULT_PROVIDER_PREFERENCES = [
    "MusicBrainz",
    "Deezer",
    "iTunes",
    "Spotify",
    "Discogs",
]

# iTunes Configuration
ITUNES_CONFIG = {
    "API_URL": "https://itunes.apple.com",
    "BASE_URL": "https://music.apple.com",
    "REQUEST_DELAY": 0.0,
    "TIMEOUT": 30,
}

# Deezer Configuration
DEEZER_CONFIG = {
    "API_URL": "https://api.deezer.com",
    "BASE_URL": "https://www.deezer.com",
    "REQUEST_DELAY": 0.0,
    "TIMEOUT": 30,
}

# Spotify Configuration
SPOTIFY_CONFIG = {
    "API_URL": "https://api.spotify.com/v1",
    "AUTH_URL": "https://accounts.spotify.com/api/token",
    "BASE_URL": "https://open.spotify.com",
    "CLIENT_ID": os.getenv("SPOTIFY_CLIENT_ID"),
    "CLIENT_SECRET": os.getenv("SPOTIFY_CLIENT_SECRET"),
    "TRACK_BATCH_SIZE": 50,  # maximum ids per /tracks request
    "PAGE_SIZE": 50,
    "REQUEST_DELAY": 0.0,
    "TIMEOUT": 30,
}

# MusicBrainz Configuration
MUSICBRAINZ_CONFIG = {
    "API_URL": "https://musicbrainz.org/ws/2",
    "BASE_URL": "https://musicbrainz.org",
    "COVER_ART_URL": "https://coverartarchive.org",
    "USER_AGENT": USER_AGENT,
    "REQUEST_DELAY": 1.0,  # Rate limiting - MusicBrainz allows 1 request per second
    "TIMEOUT": 30,
}

# Discogs Configuration
DISCOGS_CONFIG = {
    "API_URL": "https://api.discogs.com",
    "BASE_URL": "https://www.discogs.com",
    "USER_AGENT": USER_AGENT,
    "USER_TOKEN": os.getenv("DISCOGS_TOKEN"),  # Required for barcode search
    "REQUEST_DELAY": 1.0,
    "TIMEOUT": 30,
}

# Identifier Enrichment Configuration
ENRICHMENT_CONFIG = {
    "API_URL": MUSICBRAINZ_CONFIG["API_URL"],
    "USER_AGENT": USER_AGENT,
    "MAX_CONCURRENT": 2,
    "REQUEST_DELAY": 1.0,
    "TIMEOUT": 20,
}

# Logging Configuration
LOGGING_CONFIG = {
    "LEVEL": os.getenv("HARMONIZER_LOG_LEVEL", "INFO").upper(),
    "FORMAT": "%(levelname)s - %(name)s - %(message)s",
}

# Error Messages
ERROR_MESSAGES = {
    "NO_RESULTS": "API returned no results",
    "NO_TRACKLIST": "Release has no tracklist",
    "NETWORK_ERROR": "Network error occurred",
    "MALFORMED_RESPONSE": "API returned a malformed response",
    "INVALID_URL": "Could not extract ID from",
    "NO_PROVIDER": "No provider supports",
    "PATTERN_MISMATCH": "Domain is supported, but the URL is not a release URL",
    "UNKNOWN_PROVIDER": "Unknown provider",
    "ALL_FAILED": "Release lookup failed for every provider",
    "TIMEOUT": "Lookup timed out",
    "MISSING_CREDENTIALS": "API credentials are not configured",
}
