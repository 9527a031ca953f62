"""
Tests for the common release model.
"""

import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from harmonizer.models.release import (
    DurationPrecision,
    PartialDate,
    Medium,
    Release,
    Track,
    durations_compatible,
)


class TestDurationPrecision:
    """Tests for DurationPrecision."""

    def test_units(self):
        """Test the unit lengths in milliseconds."""
        assert DurationPrecision.MINUTE.unit_ms == 60000
        assert DurationPrecision.SECOND.unit_ms == 1000
        assert DurationPrecision.MS.unit_ms == 1

    def test_is_coarser_than(self):
        """Test ordering of precisions."""
        assert DurationPrecision.SECOND.is_coarser_than(DurationPrecision.MS)
        assert DurationPrecision.MINUTE.is_coarser_than(DurationPrecision.SECOND)
        assert not DurationPrecision.MS.is_coarser_than(DurationPrecision.SECOND)
        assert not DurationPrecision.SECOND.is_coarser_than(DurationPrecision.SECOND)


class TestDurationsCompatible:
    """Tests for durations_compatible."""

    def test_millisecond_values_within_second(self):
        """Test that ms values fall into the same second as a second-precision value."""
        assert durations_compatible(180000, DurationPrecision.SECOND, 180999, DurationPrecision.MS)
        assert durations_compatible(180500, DurationPrecision.MS, 180000, DurationPrecision.SECOND)

    def test_different_seconds(self):
        """Test that values in different seconds are incompatible."""
        assert not durations_compatible(180000, DurationPrecision.SECOND, 181000, DurationPrecision.MS)
        assert not durations_compatible(180000, DurationPrecision.SECOND, 179999, DurationPrecision.MS)

    def test_both_milliseconds(self):
        """Test that exact values have to be equal."""
        assert durations_compatible(180123, DurationPrecision.MS, 180123, DurationPrecision.MS)
        assert not durations_compatible(180123, DurationPrecision.MS, 180124, DurationPrecision.MS)

    def test_minute_precision(self):
        """Test minute precision tolerance."""
        assert durations_compatible(180000, DurationPrecision.MINUTE, 239999, DurationPrecision.SECOND)


class TestPartialDate:
    """Tests for PartialDate."""

    @pytest.mark.parametrize("value,expected", [
        ("2020-01-31", PartialDate(2020, 1, 31)),
        ("2020-01-31T08:00:00Z", PartialDate(2020, 1, 31)),
        ("2020-01", PartialDate(2020, 1)),
        ("2020", PartialDate(2020)),
        ("2020-01-00", PartialDate(2020, 1)),
        ("2020-00-00", PartialDate(2020)),
        ("", PartialDate()),
        (None, PartialDate()),
        ("unknown", PartialDate()),
    ])
    def test_parse(self, value, expected):
        """Test parsing of full and partial dates."""
        assert PartialDate.parse(value) == expected

    def test_str(self):
        """Test string representation."""
        assert str(PartialDate(2020, 1, 5)) == "2020-01-05"
        assert str(PartialDate(2020, 1)) == "2020-01"
        assert str(PartialDate()) == ""

    def test_is_empty(self):
        """Test empty detection."""
        assert PartialDate().is_empty
        assert not PartialDate(1999).is_empty


class TestRelease:
    """Tests for Release helpers."""

    def test_defaults_are_independent(self):
        """Test that list defaults are not shared between instances."""
        first = Release()
        second = Release()
        first.media.append(Medium(number=1))

        assert second.media == []

    def test_track_count_and_find_track(self):
        """Test track counting and lookup by sequence numbers."""
        release = Release(media=[
            Medium(number=1, tracklist=[Track(1, "A"), Track(2, "B")]),
            Medium(number=2, tracklist=[Track(1, "C")]),
        ])

        assert release.track_count == 3
        assert release.find_track(2, 1).title == "C"
        assert release.find_track(3, 1) is None
