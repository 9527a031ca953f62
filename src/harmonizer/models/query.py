"""
Lookup query models.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

GTIN_PATTERN = re.compile(r"^\d{12,14}$")


def is_gtin(value: str) -> bool:
    """Check whether the value looks like a GTIN/barcode (12 to 14 digits)."""
    return bool(GTIN_PATTERN.match(value or ""))


class InputKind(Enum):
    """Shape of the value a provider is asked to resolve."""
    URL = "url"
    GTIN = "gtin"
    ID = "id"


@dataclass(frozen=True)
class LookupInput:
    """A value tagged with the kind of lookup it requires."""
    kind: InputKind
    value: str

    @classmethod
    def classify(cls, value: str) -> "LookupInput":
        """Decide once whether a raw string is a URL, a GTIN or a source ID."""
        value = value.strip()
        if value.startswith(("http://", "https://")):
            return cls(InputKind.URL, value)
        if is_gtin(value):
            return cls(InputKind.GTIN, value)
        return cls(InputKind.ID, value)

    @classmethod
    def url(cls, value: str) -> "LookupInput":
        return cls(InputKind.URL, value)

    @classmethod
    def gtin(cls, value: str) -> "LookupInput":
        return cls(InputKind.GTIN, value)

    @classmethod
    def id(cls, value: str) -> "LookupInput":
        return cls(InputKind.ID, value)


@dataclass(frozen=True)
class LookupOptions:
    """Read-only options which apply to every provider of a lookup."""
    regions: Tuple[str, ...] = ()
    providers: Optional[FrozenSet[str]] = None
    snapshot_max_timestamp: Optional[int] = None
    with_separate_media: bool = False
    with_all_track_artists: bool = False

    def __post_init__(self):
        # Accept any iterable from callers, store immutable values
        object.__setattr__(self, "regions", tuple(self.regions or ()))
        if self.providers is not None:
            object.__setattr__(self, "providers", frozenset(name.lower() for name in self.providers))

    def is_provider_enabled(self, *names: str) -> bool:
        """Check whether any of the given provider names is enabled (all are if no set was given)."""
        if self.providers is None:
            return True
        return any(name.lower() in self.providers for name in names)


@dataclass
class ReleaseQuery:
    """What to look up: a barcode, source URLs and/or explicit provider IDs."""
    gtin: Optional[str] = None
    urls: List[str] = field(default_factory=list)
    provider_ids: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.gtin is not None:
            self.gtin = self.gtin.strip() or None

    @property
    def is_empty(self) -> bool:
        return not (self.gtin or self.urls or self.provider_ids)

    @staticmethod
    def split_provider_id(provider_id: str) -> Optional[Tuple[str, str]]:
        """Split a "provider:id" string, returns None if it is malformed."""
        name, sep, source_id = provider_id.partition(":")
        if not sep or not name.strip() or not source_id.strip():
            return None
        return name.strip().lower(), source_id.strip()
