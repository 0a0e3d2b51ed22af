"""
Progression Commands.

The closed set of state transitions a caller can request. Each command
carries only the ids and numbers its transition needs; reward values and
simulation step data are resolved against the content catalog before a
command is built (see src.content.resolver).

Commands are frozen pydantic models tagged by a `kind` literal, so a
serialized command (JSON from a queue, a replay log, the CLI) round-trips
through `parse_command`.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BaseCommand(BaseModel):
    """Fields shared by every command."""

    model_config = ConfigDict(frozen=True)

    # Caller-supplied timestamp, copied onto any events the command produces
    at: datetime | None = None


class SubmitTask(BaseCommand):
    """Credit a task once; resubmissions are ignored."""

    kind: Literal["submit_task"] = "submit_task"
    task_id: str = Field(min_length=1)
    xp_reward: int = 0


class CompleteLesson(BaseCommand):
    """Credit a micro-lesson once; resubmissions are ignored."""

    kind: Literal["complete_lesson"] = "complete_lesson"
    lesson_id: str = Field(min_length=1)
    xp_reward: int = 0


class StartSimulation(BaseCommand):
    """Begin a simulation run at step 0 with a neutral score."""

    kind: Literal["start_simulation"] = "start_simulation"
    scenario_id: str = Field(min_length=1)
    total_steps: int = Field(ge=1)


class RecordSimulationChoice(BaseCommand):
    """Apply a chosen option's score impact to the active run."""

    kind: Literal["record_simulation_choice"] = "record_simulation_choice"
    option_id: str = Field(min_length=1)
    score_impact: int = 0


class AdvanceSimulationStep(BaseCommand):
    """Move the active run to its next step."""

    kind: Literal["advance_simulation_step"] = "advance_simulation_step"


class CompleteSimulation(BaseCommand):
    """Finish the active run and pay out XP proportional to its score."""

    kind: Literal["complete_simulation"] = "complete_simulation"
    xp_cap: int = 0


class AdvanceStreak(BaseCommand):
    """
    Evaluate the daily streak.

    Day-boundary detection belongs to the caller's clock. `day` is optional;
    when given, the same calendar day is never counted twice.
    """

    kind: Literal["advance_streak"] = "advance_streak"
    is_active_today: bool
    day_boundary_crossed: bool
    day: date | None = None


class JumpToCheckpoint(BaseCommand):
    """Replace progression wholesale with a registered snapshot (demo/admin only)."""

    kind: Literal["jump_to_checkpoint"] = "jump_to_checkpoint"
    checkpoint_id: str = Field(min_length=1)


Command = Annotated[
    Union[
        SubmitTask,
        CompleteLesson,
        StartSimulation,
        RecordSimulationChoice,
        AdvanceSimulationStep,
        CompleteSimulation,
        AdvanceStreak,
        JumpToCheckpoint,
    ],
    Field(discriminator="kind"),
]

COMMAND_TYPES: tuple[type[BaseCommand], ...] = (
    SubmitTask,
    CompleteLesson,
    StartSimulation,
    RecordSimulationChoice,
    AdvanceSimulationStep,
    CompleteSimulation,
    AdvanceStreak,
    JumpToCheckpoint,
)

_command_adapter: TypeAdapter[Any] = TypeAdapter(Command)


def parse_command(data: dict[str, Any] | str | bytes) -> BaseCommand:
    """
    Build a command from a dict or a JSON document.

    Raises:
        pydantic.ValidationError: if `kind` is missing/unknown or fields are invalid
    """
    if isinstance(data, (str, bytes)):
        return _command_adapter.validate_json(data)
    return _command_adapter.validate_python(data)
