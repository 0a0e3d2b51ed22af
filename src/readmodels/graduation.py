"""
Graduation Eligibility Evaluator.

Turns a learner snapshot and an ordered list of criteria into a checklist:

    checklist = evaluate(state, criteria)
    [GraduationCriterion(id="level", label="Reach Graduate level", is_complete=False), ...]

The checklist keeps the input order so it can be displayed as-is. The
learner is eligible iff every criterion is complete. Nothing is cached:
every call recomputes from the snapshot it is given.

Gate checklists (the requirements for leaving each tier) use the same
criteria types.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from src.core.levels import LEVEL_THRESHOLDS, Level, next_level
from src.core.state import LearnerState

# =============================================================================
# Criteria
# =============================================================================


class Criterion(Protocol):
    """A named condition resolvable against a learner snapshot."""

    id: str
    label: str

    def measure(self, state: LearnerState) -> tuple[int, int]:
        """Return (current, target); the criterion is met when current >= target."""
        ...


@dataclass(frozen=True)
class ReachedLevel:
    """Learner tier is at least `level`."""

    level: Level
    id: str = "level"
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", f"Reach {self.level.display_name} level")

    def measure(self, state: LearnerState) -> tuple[int, int]:
        return state.level.rank, self.level.rank


@dataclass(frozen=True)
class MinimumXp:
    """Learner has at least `xp` experience points."""

    xp: int
    id: str = "xp"
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", f"Earn {self.xp} XP")

    def measure(self, state: LearnerState) -> tuple[int, int]:
        return state.xp, self.xp


@dataclass(frozen=True)
class CompletedTasks:
    """Every listed task is completed."""

    task_ids: tuple[str, ...]
    id: str = "required_tasks"
    label: str = ""

    def __post_init__(self):
        object.__setattr__(self, "task_ids", tuple(self.task_ids))
        if not self.label:
            object.__setattr__(self, "label", f"Complete {len(self.task_ids)} required task(s)")

    def measure(self, state: LearnerState) -> tuple[int, int]:
        done = sum(1 for task_id in self.task_ids if state.has_completed_task(task_id))
        return done, len(self.task_ids)


@dataclass(frozen=True)
class CompletedTaskCount:
    """At least `count` tasks completed, any tasks."""

    count: int
    id: str = "tasks"
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", f"Complete {self.count} tasks")

    def measure(self, state: LearnerState) -> tuple[int, int]:
        return len(state.completed_tasks), self.count


@dataclass(frozen=True)
class CompletedLessonCount:
    """At least `count` micro-lessons completed."""

    count: int
    id: str = "lessons"
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", f"Complete {self.count} micro-lessons")

    def measure(self, state: LearnerState) -> tuple[int, int]:
        return len(state.completed_lessons), self.count


@dataclass(frozen=True)
class CompletedSimulation:
    """Scenario `scenario_id` completed at least once."""

    scenario_id: str
    id: str = "simulation"
    label: str = ""

    def __post_init__(self):
        if not self.label:
            object.__setattr__(self, "label", f"Complete the {self.scenario_id} simulation")

    def measure(self, state: LearnerState) -> tuple[int, int]:
        return int(state.has_completed_simulation(self.scenario_id)), 1


# =============================================================================
# Checklist
# =============================================================================


@dataclass(frozen=True)
class GraduationCriterion:
    """One resolved checklist line. Derived, never persisted."""

    id: str
    label: str
    is_complete: bool
    current: int = 0
    target: int = 0


@dataclass(frozen=True)
class GraduationReport:
    """A resolved checklist with its aggregate."""

    checklist: tuple[GraduationCriterion, ...] = field(default_factory=tuple)

    @property
    def eligible(self) -> bool:
        """Logical AND over the checklist."""
        return all(item.is_complete for item in self.checklist)

    @property
    def completed_count(self) -> int:
        return sum(1 for item in self.checklist if item.is_complete)

    @property
    def progress(self) -> float:
        """Fraction of criteria complete (1.0 for an empty checklist)."""
        if not self.checklist:
            return 1.0
        return self.completed_count / len(self.checklist)


def evaluate(state: LearnerState, criteria: Sequence[Criterion]) -> list[GraduationCriterion]:
    """
    Resolve criteria against a snapshot.

    Args:
        state: Learner snapshot (read only)
        criteria: Exhaustive, ordered criteria

    Returns:
        One GraduationCriterion per input criterion, in input order
    """
    checklist = []
    for criterion in criteria:
        current, target = criterion.measure(state)
        checklist.append(
            GraduationCriterion(
                id=criterion.id,
                label=criterion.label,
                is_complete=current >= target,
                current=current,
                target=target,
            )
        )
    return checklist


def is_eligible(state: LearnerState, criteria: Sequence[Criterion]) -> bool:
    """True iff every criterion is complete."""
    return all(item.is_complete for item in evaluate(state, criteria))


def report(state: LearnerState, criteria: Sequence[Criterion]) -> GraduationReport:
    return GraduationReport(checklist=tuple(evaluate(state, criteria)))


# =============================================================================
# Standard Criteria Sets
# =============================================================================


def default_graduation_criteria(
    required_task_ids: Iterable[str],
    capstone_task_id: str | None = None,
    capstone_simulation_id: str | None = None,
) -> list[Criterion]:
    """
    Graduation checklist: graduate tier, required tasks, optional capstones.
    """
    criteria: list[Criterion] = [
        ReachedLevel(Level.GRADUATE),
        CompletedTasks(tuple(required_task_ids)),
    ]
    if capstone_task_id is not None:
        criteria.append(
            CompletedTasks((capstone_task_id,), id="capstone_task", label="Complete the capstone project")
        )
    if capstone_simulation_id is not None:
        criteria.append(
            CompletedSimulation(
                capstone_simulation_id,
                id="capstone_simulation",
                label="Complete the capstone simulation",
            )
        )
    return criteria


# Requirements for leaving each tier: (task count, lesson count)
GATE_REQUIREMENTS: dict[Level, tuple[int, int]] = {
    Level.APPRENTICE: (10, 5),
    Level.JOURNEYMAN: (25, 8),
    Level.MASTER: (40, 10),
}


def gate_criteria(level: Level, capstone_task_id: str | None = None) -> list[Criterion]:
    """
    Gate checklist for advancing out of `level`.

    Returns:
        Criteria for the next tier's XP threshold plus task and lesson counts;
        an empty list for the top tier
    """
    upcoming = next_level(level)
    if upcoming is None:
        return []
    tasks, lessons = GATE_REQUIREMENTS[level]
    criteria: list[Criterion] = [
        MinimumXp(LEVEL_THRESHOLDS[upcoming]),
        CompletedTaskCount(tasks),
        CompletedLessonCount(lessons),
    ]
    if upcoming == Level.GRADUATE and capstone_task_id is not None:
        criteria.append(
            CompletedTasks((capstone_task_id,), id="capstone_task", label="Complete the capstone project")
        )
    return criteria
