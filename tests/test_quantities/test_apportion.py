"""
Tests for prior-volume apportionment.
"""

import datetime as dt

import pytest

from tunnelpour.core.quantities.apportion import prior_volume
from tunnelpour.models.batch import BatchEntry
from tunnelpour.models.tunnel import StepKind


def make_entry(entry_id, start, end, step, actual):
    """Create a logged entry."""
    return BatchEntry(
        id=entry_id,
        date=dt.date(2025, 3, 1),
        from_chainage=start,
        to_chainage=end,
        step=step,
        actual_qty=actual,
    )


@pytest.fixture
def invert_entries():
    """Two adjacent invert pours with different densities."""
    return [
        make_entry("inv-1", 0.0, 20.0, StepKind.INVERT, 40.0),
        make_entry("inv-2", 20.0, 30.0, StepKind.INVERT, 30.0),
    ]


class TestPriorVolume:
    """Test density-based apportionment."""

    def test_uniform_density(self):
        """Test a 5 m target inside a 2 m³/m pour."""
        entries = [make_entry("inv-1", 0.0, 20.0, StepKind.INVERT, 40.0)]
        assert prior_volume(10, 15, StepKind.INVERT, entries) == pytest.approx(10.0)

    def test_across_entries(self, invert_entries):
        """Test a target spanning two pours uses each pour's density."""
        assert prior_volume(15, 25, StepKind.INVERT, invert_entries) == pytest.approx(25.0)

    def test_full_coverage_returns_actual(self, invert_entries):
        """Test covering every pour returns the full logged quantity."""
        assert prior_volume(0, 30, StepKind.INVERT, invert_entries) == pytest.approx(70.0)

    def test_other_steps_ignored(self, invert_entries):
        """Test only entries of the requested step count."""
        assert prior_volume(0, 30, StepKind.KICKER, invert_entries) == 0.0

    def test_reversed_ranges(self):
        """Test reversed target and entry ranges."""
        entries = [make_entry("inv-1", 20.0, 0.0, StepKind.INVERT, 40.0)]
        assert prior_volume(15, 10, StepKind.INVERT, entries) == pytest.approx(10.0)

    def test_zero_length_target(self, invert_entries):
        """Test a zero-length target apportions nothing."""
        assert prior_volume(10, 10, StepKind.INVERT, invert_entries) == 0.0

    def test_zero_length_entry_skipped(self):
        """Test a zero-length entry has no density and is skipped."""
        entries = [
            make_entry("inv-0", 10.0, 10.0, StepKind.INVERT, 99.0),
            make_entry("inv-1", 0.0, 20.0, StepKind.INVERT, 40.0),
        ]
        assert prior_volume(0, 20, StepKind.INVERT, entries) == pytest.approx(40.0)

    def test_no_overlap(self, invert_entries):
        """Test a target beyond every pour apportions nothing."""
        assert prior_volume(100, 120, StepKind.INVERT, invert_entries) == 0.0
