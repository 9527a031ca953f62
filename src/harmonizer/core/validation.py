"""
Configuration validation utilities.
"""

import importlib
from typing import Dict, List, Tuple
from urllib.parse import urlparse

from .config import (
    LOOKUP_CONFIG,
    ITUNES_CONFIG,
    DEEZER_CONFIG,
    SPOTIFY_CONFIG,
    MUSICBRAINZ_CONFIG,
    DISCOGS_CONFIG,
    ENRICHMENT_CONFIG,
    LOGGING_CONFIG,
    DEFAULT_PROVIDER_PREFERENCES,
)
from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

# import name -> distribution name
REQUIRED_PACKAGES = {
    "requests": "requests",
    "rich": "rich",
}

SERVICE_CONFIGS = {
    "iTunes": ITUNES_CONFIG,
    "Deezer": DEEZER_CONFIG,
    "Spotify": SPOTIFY_CONFIG,
    "MusicBrainz": MUSICBRAINZ_CONFIG,
    "Discogs": DISCOGS_CONFIG,
    "Enrichment": ENRICHMENT_CONFIG,
}


def check_dependencies() -> Tuple[bool, List[str]]:
    """
    Check if all required dependencies are installed.

    Returns:
        Tuple of (all_installed, list_of_missing_dependencies)
    """
    missing = []
    for module_name, package_name in REQUIRED_PACKAGES.items():
        try:
            importlib.import_module(module_name)
        except ImportError:
            missing.append(package_name)
    return not missing, missing


def _check_lookup(config: Dict) -> List[str]:
    errors = []
    regions = config["DEFAULT_REGIONS"]
    if not regions:
        errors.append("DEFAULT_REGIONS must contain at least one region")
    errors.extend(
        f"Invalid region code: {region}"
        for region in regions
        if len(region) != 2 or not region.isalpha()
    )
    if config["MAX_WORKERS"] < 1:
        errors.append("Lookup MAX_WORKERS must be >= 1")
    if config["TIMEOUT"] is not None and config["TIMEOUT"] <= 0:
        errors.append("Lookup TIMEOUT must be > 0 or None")
    return errors


def _check_service(name: str, config: Dict) -> List[str]:
    """Checks shared by every web service section."""
    errors = []
    api_url = urlparse(config.get("API_URL") or "")
    if api_url.scheme not in ("http", "https") or not api_url.netloc:
        errors.append(f"{name} API_URL must be an absolute http(s) URL")
    if config.get("REQUEST_DELAY", 0) < 0:
        errors.append(f"{name} REQUEST_DELAY must be >= 0")
    if config.get("TIMEOUT", 1) <= 0:
        errors.append(f"{name} TIMEOUT must be > 0")
    return errors


def _check_preferences(preferences: List[str]) -> List[str]:
    lowered = [name.lower() for name in preferences]
    if len(set(lowered)) != len(lowered):
        return ["DEFAULT_PROVIDER_PREFERENCES must not contain duplicates"]
    return []


def validate_configuration() -> Tuple[bool, List[str]]:
    """
    Validate application configuration.

    Missing Spotify or Discogs credentials are not errors, those providers
    report them when they are queried.

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    deps_ok, missing_deps = check_dependencies()
    if not deps_ok:
        errors.append(
            f"Missing required dependencies: {', '.join(missing_deps)}. "
            f"Please install them with: pip install -e ."
        )

    errors.extend(_check_lookup(LOOKUP_CONFIG))
    for name, config in SERVICE_CONFIGS.items():
        errors.extend(_check_service(name, config))
    if ENRICHMENT_CONFIG["MAX_CONCURRENT"] < 1:
        errors.append("Enrichment MAX_CONCURRENT must be >= 1")
    errors.extend(_check_preferences(DEFAULT_PROVIDER_PREFERENCES))

    if LOGGING_CONFIG["LEVEL"] not in VALID_LOG_LEVELS:
        errors.append(f"LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}")

    return not errors, errors


def validate_and_raise():
    """Raise ConfigurationError listing every problem if the configuration is invalid."""
    is_valid, errors = validate_configuration()
    if not is_valid:
        raise ConfigurationError(
            "Configuration validation failed:\n" + "\n".join(f"  - {e}" for e in errors)
        )
