"""
Leveling Table.

Maps cumulative XP to a progression tier using fixed ascending thresholds.

Tiers (inclusive lower bounds):
- apprentice: 0 XP
- journeyman: 800 XP
- master: 2000 XP
- graduate: 4000 XP

Everything here is pure: no state, no clock, no failure modes.
"""

from __future__ import annotations

from enum import Enum


class Level(str, Enum):
    """
    Progression tier.

    Ordered apprentice < journeyman < master < graduate. Comparisons use
    the tier rank, not the string value.
    """

    APPRENTICE = "apprentice"
    JOURNEYMAN = "journeyman"
    MASTER = "master"
    GRADUATE = "graduate"

    @property
    def rank(self) -> int:
        """Position in the tier ordering (0 = apprentice)."""
        return _ORDER.index(self)

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.title()

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            Level.APPRENTICE: "green",
            Level.JOURNEYMAN: "blue",
            Level.MASTER: "magenta",
            Level.GRADUATE: "yellow",
        }[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Level):
            return NotImplemented
        return self.rank >= other.rank


_ORDER: tuple[Level, ...] = (
    Level.APPRENTICE,
    Level.JOURNEYMAN,
    Level.MASTER,
    Level.GRADUATE,
)

# Inclusive lower bounds, ascending
LEVEL_THRESHOLDS: dict[Level, int] = {
    Level.APPRENTICE: 0,
    Level.JOURNEYMAN: 800,
    Level.MASTER: 2000,
    Level.GRADUATE: 4000,
}


def level_for(xp: int) -> Level:
    """
    Return the tier for a cumulative XP total.

    Args:
        xp: Cumulative experience points. Negative values are treated as 0.

    Returns:
        The highest tier whose threshold is <= xp (saturates at graduate)
    """
    xp = max(0, int(xp))
    current = Level.APPRENTICE
    for level in _ORDER:
        if xp >= LEVEL_THRESHOLDS[level]:
            current = level
        else:
            break
    return current


def next_level(level: Level) -> Level | None:
    """Tier after `level`, or None at the top tier."""
    index = level.rank + 1
    if index >= len(_ORDER):
        return None
    return _ORDER[index]


def xp_to_next_level(xp: int) -> int:
    """XP still needed to reach the next tier (0 at the top tier)."""
    upcoming = next_level(level_for(xp))
    if upcoming is None:
        return 0
    return LEVEL_THRESHOLDS[upcoming] - max(0, int(xp))


def level_progress(xp: int) -> float:
    """
    Fraction of the way through the current tier.

    Returns:
        Value in [0, 1); 1.0 once the top tier is reached
    """
    xp = max(0, int(xp))
    current = level_for(xp)
    upcoming = next_level(current)
    if upcoming is None:
        return 1.0
    floor = LEVEL_THRESHOLDS[current]
    span = LEVEL_THRESHOLDS[upcoming] - floor
    return (xp - floor) / span


def all_levels() -> tuple[Level, ...]:
    """All tiers in ascending order."""
    return _ORDER
