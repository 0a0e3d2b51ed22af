"""
Learner State Model.

Immutable snapshots of one learner's progression:
- LearnerIdentity: opaque id + display name
- SimulationRun: the transient sub-state of an active simulation
- ProgressionEvent: one entry of the append-only notifications seed
- LearnerState: the complete snapshot

Snapshots are frozen pydantic models. Transitions never mutate a snapshot;
the reducer builds a new one with `model_copy(update=...)`.

`LearnerState.level` is a computed field derived from `xp`, so no code path
can set the level independently of the XP total.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

from src.core.levels import Level, level_for

SCORE_MIN = 0
SCORE_MAX = 100
SCORE_NEUTRAL = 50  # Simulations grade deviation from a baseline, not accumulation

PERFORMANCE_MIN = 0
PERFORMANCE_MAX = 100


def clamp_score(value: int) -> int:
    """Clamp a simulation or performance score into [0, 100]."""
    return max(SCORE_MIN, min(SCORE_MAX, int(value)))


def _unique(values: tuple[str, ...]) -> tuple[str, ...]:
    """Drop duplicates, keeping first-insertion order."""
    return tuple(dict.fromkeys(values))


# =============================================================================
# Simulation Sub-State
# =============================================================================


class SimulationStatus(str, Enum):
    """Lifecycle of a simulation run."""

    IDLE = "idle"  # No run exists
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SimulationRun(BaseModel):
    """One in-progress (or just-finished) play-through of a scenario."""

    model_config = ConfigDict(frozen=True)

    scenario_id: str = Field(min_length=1)
    total_steps: int = Field(ge=1)
    current_step_index: int = Field(default=0, ge=0)
    score: int = Field(default=SCORE_NEUTRAL, ge=SCORE_MIN, le=SCORE_MAX)
    history: tuple[str, ...] = ()
    status: SimulationStatus = SimulationStatus.IN_PROGRESS

    @model_validator(mode="after")
    def _step_within_bounds(self) -> SimulationRun:
        if self.current_step_index >= self.total_steps:
            raise ValueError(
                f"current_step_index {self.current_step_index} out of range "
                f"for {self.total_steps} steps"
            )
        return self

    @property
    def is_last_step(self) -> bool:
        """Whether the run is positioned on its final step."""
        return self.current_step_index == self.total_steps - 1

    @property
    def is_in_progress(self) -> bool:
        return self.status == SimulationStatus.IN_PROGRESS

    @property
    def steps_remaining(self) -> int:
        """Steps after the current one."""
        return self.total_steps - 1 - self.current_step_index


# =============================================================================
# Progression Events
# =============================================================================


class EventKind(str, Enum):
    """Raw progression event kinds recorded in the notifications seed."""

    TASK_APPROVED = "task_approved"
    LESSON_COMPLETED = "lesson_completed"
    SIMULATION_STARTED = "simulation_started"
    SIMULATION_COMPLETED = "simulation_completed"
    SIMULATION_DISCARDED = "simulation_discarded"
    LEVEL_CHANGED = "level_changed"
    STREAK_MILESTONE = "streak_milestone"
    CHECKPOINT_LOADED = "checkpoint_loaded"


class ProgressionEvent(BaseModel):
    """
    A single raw progression event.

    `sequence` is the event's position in the log and defines chronology.
    `occurred_at` is only set when the caller supplied a timestamp.
    """

    model_config = ConfigDict(frozen=True)

    sequence: int = Field(ge=0)
    kind: EventKind
    subject_id: str | None = None
    xp: int = Field(default=0, ge=0)
    previous_level: Level | None = None
    new_level: Level | None = None
    streak: int | None = None
    score: int | None = None
    occurred_at: datetime | None = None


# =============================================================================
# Learner State
# =============================================================================


class LearnerIdentity(BaseModel):
    """Stable learner reference."""

    model_config = ConfigDict(frozen=True)

    learner_id: str = Field(min_length=1)
    display_name: str = ""


class LearnerState(BaseModel):
    """The complete progression snapshot for one learner."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    identity: LearnerIdentity
    xp: int = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    streak_day: date | None = None

    completed_tasks: tuple[str, ...] = ()
    completed_lessons: tuple[str, ...] = ()
    completed_simulations: tuple[str, ...] = ()

    performance_score: int = Field(default=0, ge=PERFORMANCE_MIN, le=PERFORMANCE_MAX)
    simulation: SimulationRun | None = None
    events: tuple[ProgressionEvent, ...] = ()

    @field_validator("completed_tasks", "completed_lessons", "completed_simulations")
    @classmethod
    def _dedupe(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _unique(value)

    @model_validator(mode="after")
    def _events_in_sequence(self) -> LearnerState:
        for index, event in enumerate(self.events):
            if event.sequence != index:
                raise ValueError(
                    f"event at position {index} has sequence {event.sequence}"
                )
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def level(self) -> Level:
        """Tier derived from xp via the leveling table."""
        return level_for(self.xp)

    @property
    def learner_id(self) -> str:
        return self.identity.learner_id

    @property
    def simulation_status(self) -> SimulationStatus:
        """Status of the active run, IDLE when none exists."""
        if self.simulation is None:
            return SimulationStatus.IDLE
        return self.simulation.status

    def has_completed_task(self, task_id: str) -> bool:
        return task_id in self.completed_tasks

    def has_completed_lesson(self, lesson_id: str) -> bool:
        return lesson_id in self.completed_lessons

    def has_completed_simulation(self, scenario_id: str) -> bool:
        return scenario_id in self.completed_simulations


def new_learner(learner_id: str, display_name: str = "") -> LearnerState:
    """
    Create a fresh learner at 0 XP.

    Args:
        learner_id: Opaque, stable learner id
        display_name: Name shown in read models

    Returns:
        LearnerState at apprentice level with empty progress
    """
    return LearnerState(identity=LearnerIdentity(learner_id=learner_id, display_name=display_name))
