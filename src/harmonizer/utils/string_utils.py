"""
String utility functions for normalization and comparison.
"""

import unicodedata
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

APOSTROPHE_CHARS = ["ʼ", "ʻ", "ʽ", "ʾ", "ʿ", "ˊ", "ˋ", "‘", "’", "‚", "‛", "′", "‵"]


def normalize_string(s: Optional[str]) -> str:
    """
    Normalize a string for comparison (lowercase, strip whitespace, normalize special characters).

    Args:
        s: String to normalize

    Returns:
        Normalized string
    """
    if not s:
        return ""
    normalized = unicodedata.normalize('NFKC', s)
    normalized = normalized.casefold().strip()
    # "&" and "and" are interchangeable in artist names
    normalized = normalized.replace(" & ", " and ")
    normalized = normalized.replace("&", " and ")
    for char in APOSTROPHE_CHARS:
        normalized = normalized.replace(char, "'")
    normalized = normalized.replace("“", '"').replace("”", '"')
    normalized = normalized.replace("–", "-").replace("—", "-")
    normalized = " ".join(normalized.split())
    return normalized


def normalize_url(url: Optional[str]) -> str:
    """
    Normalize a URL for de-duplication.

    The scheme is unified to https, the host is lowercased, default ports,
    fragments and trailing slashes are dropped. Query strings are kept since
    some sources identify releases by query parameters.
    """
    if not url:
        return ""
    parts = urlsplit(url.strip())
    scheme = "https" if parts.scheme in ("http", "https") else parts.scheme.lower()
    host = (parts.hostname or "").lower()
    if parts.port and parts.port not in (80, 443):
        host = f"{host}:{parts.port}"
    path = parts.path.rstrip("/")
    return urlunsplit((scheme, host, path, parts.query, ""))


def join_artist_names(names, join_phrases=None) -> str:
    """Join artist names with their join phrases ("A & B feat. C")."""
    names = list(names)
    join_phrases = list(join_phrases or [])
    parts = []
    for index, name in enumerate(names):
        parts.append(name)
        if index < len(names) - 1:
            phrase = join_phrases[index] if index < len(join_phrases) and join_phrases[index] else None
            parts.append(phrase if phrase else " & ")
    return "".join(parts)
