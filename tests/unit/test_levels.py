"""
Unit tests for the leveling table.

Run: pytest tests/unit/test_levels.py -v
"""

import pytest

from src.core.levels import (
    LEVEL_THRESHOLDS,
    Level,
    all_levels,
    level_for,
    level_progress,
    next_level,
    xp_to_next_level,
)


class TestLevelFor:
    """Test level_for threshold mapping."""

    @pytest.mark.parametrize(
        "xp,expected",
        [
            (0, Level.APPRENTICE),
            (799, Level.APPRENTICE),
            (800, Level.JOURNEYMAN),
            (1999, Level.JOURNEYMAN),
            (2000, Level.MASTER),
            (3999, Level.MASTER),
            (4000, Level.GRADUATE),
        ],
    )
    def test_thresholds_are_inclusive_lower_bounds(self, xp, expected):
        """Each threshold belongs to the tier it opens."""
        assert level_for(xp) == expected

    def test_saturates_at_graduate(self):
        """XP far beyond the last threshold stays graduate."""
        assert level_for(1_000_000) == Level.GRADUATE

    def test_negative_xp_is_apprentice(self):
        """Negative input is treated as 0."""
        assert level_for(-50) == Level.APPRENTICE

    def test_monotonic(self):
        """More XP never means a lower tier."""
        previous = level_for(0)
        for xp in range(0, 6000, 25):
            current = level_for(xp)
            assert current >= previous
            previous = current


class TestLevelOrdering:
    """Test tier comparisons."""

    def test_ascending_order(self):
        """Tiers compare by rank, not alphabetically."""
        assert Level.APPRENTICE < Level.JOURNEYMAN < Level.MASTER < Level.GRADUATE
        assert sorted([Level.GRADUATE, Level.APPRENTICE, Level.MASTER]) == [
            Level.APPRENTICE,
            Level.MASTER,
            Level.GRADUATE,
        ]

    def test_all_levels_matches_thresholds(self):
        """Every tier has a threshold, ascending."""
        thresholds = [LEVEL_THRESHOLDS[level] for level in all_levels()]
        assert thresholds == sorted(thresholds)
        assert thresholds[0] == 0

    def test_display_name(self):
        assert Level.JOURNEYMAN.display_name == "Journeyman"


class TestProgressHelpers:
    """Test next-level helpers."""

    def test_next_level(self):
        assert next_level(Level.APPRENTICE) == Level.JOURNEYMAN
        assert next_level(Level.GRADUATE) is None

    def test_xp_to_next_level(self):
        """Remaining XP to the next threshold."""
        assert xp_to_next_level(750) == 50
        assert xp_to_next_level(800) == 1200
        assert xp_to_next_level(4000) == 0

    def test_level_progress(self):
        """Fraction of the current tier span."""
        assert level_progress(0) == 0.0
        assert level_progress(1400) == pytest.approx(0.5)
        assert level_progress(5000) == 1.0
