"""
Common release model.
Every metadata provider converts its source-specific data into these types.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

ISO_DATE_PATTERN = re.compile(r"^(\d{4})(?:-(\d{1,2}))?(?:-(\d{1,2}))?")


class DurationPrecision(Enum):
    """Finest time unit in which a source reports track durations."""
    MINUTE = "minute"
    SECOND = "second"
    MS = "millisecond"

    @property
    def unit_ms(self) -> int:
        """Length of one unit of this precision in milliseconds."""
        return _PRECISION_UNITS[self]

    def is_coarser_than(self, other: "DurationPrecision") -> bool:
        return self.unit_ms > other.unit_ms


_PRECISION_UNITS = {
    DurationPrecision.MINUTE: 60000,
    DurationPrecision.SECOND: 1000,
    DurationPrecision.MS: 1,
}


@dataclass
class PartialDate:
    """A date which may lack its day or month."""
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None

    @property
    def is_empty(self) -> bool:
        return self.year is None

    @classmethod
    def parse(cls, value: Optional[str]) -> "PartialDate":
        """
        Parse an ISO 8601 date or datetime string.

        Zero month or day parts (as used by some databases for unknown values)
        are treated as missing. Invalid input yields an empty date.
        """
        if not value:
            return cls()
        match = ISO_DATE_PATTERN.match(value.strip())
        if not match:
            return cls()
        year, month, day = (int(part) if part else None for part in match.groups())
        if not year:
            return cls()
        if not month or month > 12:
            return cls(year=year)
        if not day or day > 31:
            return cls(year=year, month=month)
        return cls(year=year, month=month, day=day)

    def __str__(self) -> str:
        if self.year is None:
            return ""
        parts = [f"{self.year:04d}"]
        if self.month:
            parts.append(f"{self.month:02d}")
            if self.day:
                parts.append(f"{self.day:02d}")
        return "-".join(parts)


@dataclass
class ArtistCreditName:
    """One credited artist, optionally joined to the next credit."""
    name: str
    external_link: Optional[str] = None
    join_phrase: Optional[str] = None
    mbid: Optional[str] = None


@dataclass
class ExternalLink:
    """Link to the release on an external site, tagged with link types."""
    url: str
    types: List[str] = field(default_factory=list)


@dataclass
class Artwork:
    """Cover or media image, tagged with image types (front, back, ...)."""
    url: str
    types: List[str] = field(default_factory=list)
    comment: Optional[str] = None


@dataclass
class Label:
    """Record label and catalog number."""
    name: str
    catalog_number: Optional[str] = None
    external_link: Optional[str] = None
    mbid: Optional[str] = None


@dataclass
class Track:
    """
    Track on a medium.

    Durations are stored in milliseconds; the precision of the source that
    reported them tells how many of those digits are significant.
    """
    number: int
    title: str
    duration: Optional[int] = None
    artists: Optional[List[ArtistCreditName]] = None
    isrc: Optional[str] = None
    available_in: Optional[List[str]] = None


@dataclass
class Medium:
    """Physical or logical disc of a release."""
    number: int
    tracklist: List[Track] = field(default_factory=list)
    format: Optional[str] = None
    title: Optional[str] = None


@dataclass
class ProviderReleaseInfo:
    """Which provider (and which source release) contributed to a release."""
    name: str
    id: str = ""
    url: str = ""


@dataclass
class Release:
    """Release in the common representation shared by all providers."""
    title: str = ""
    artists: List[ArtistCreditName] = field(default_factory=list)
    gtin: str = ""
    external_links: List[ExternalLink] = field(default_factory=list)
    media: List[Medium] = field(default_factory=list)
    release_date: PartialDate = field(default_factory=PartialDate)
    packaging: str = ""
    images: List[Artwork] = field(default_factory=list)
    labels: List[Label] = field(default_factory=list)
    mbid: Optional[str] = None
    duration_precision: Optional[DurationPrecision] = None
    providers: List[ProviderReleaseInfo] = field(default_factory=list)

    @property
    def track_count(self) -> int:
        return sum(len(medium.tracklist) for medium in self.media)

    def find_track(self, medium_number: int, track_number: int) -> Optional[Track]:
        """Find a track by its medium and track sequence numbers."""
        for medium in self.media:
            if medium.number != medium_number:
                continue
            for track in medium.tracklist:
                if track.number == track_number:
                    return track
        return None


def durations_compatible(
    first: int,
    first_precision: DurationPrecision,
    second: int,
    second_precision: DurationPrecision,
) -> bool:
    """
    Check whether two durations (in ms) agree within the coarser precision.

    A second-precision 180000 is compatible with every millisecond value in
    [180000, 180999].
    """
    unit = max(first_precision.unit_ms, second_precision.unit_ms)
    return first // unit == second // unit
