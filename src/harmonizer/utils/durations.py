"""
Duration parsing and formatting.
"""

import re
from typing import Optional

CLOCK_PATTERN = re.compile(r"^(?:(\d+):)?(\d+):(\d{2})$")


def parse_clock_duration(value: Optional[str]) -> Optional[int]:
    """
    Parse a "M:SS" or "H:MM:SS" duration into milliseconds.

    Returns None for empty or unparsable values.
    """
    if not value:
        return None
    match = CLOCK_PATTERN.match(value.strip())
    if not match:
        return None
    hours, minutes, seconds = (int(part) if part else 0 for part in match.groups())
    return ((hours * 60 + minutes) * 60 + seconds) * 1000


def format_duration(duration_ms: Optional[int]) -> str:
    """Format a duration in milliseconds as M:SS (or H:MM:SS)."""
    if duration_ms is None:
        return ""
    seconds = round(duration_ms / 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"
