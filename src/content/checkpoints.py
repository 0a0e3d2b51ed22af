"""
Checkpoint Snapshots.

Predefined, self-consistent progression snapshots for the JumpToCheckpoint
command. They back the presentation walkthrough: each scene of the demo
jumps the learner to a known state instead of replaying every command.

A checkpoint carries XP, never a level; the level of the resulting state is
derived from XP like any other state.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field

from src.core.levels import Level, level_for
from src.core.state import SimulationRun


class Checkpoint(BaseModel):
    """A complete progression snapshot keyed by checkpoint id."""

    model_config = ConfigDict(frozen=True)

    checkpoint_id: str = Field(min_length=1)
    label: str
    xp: int = Field(ge=0)
    completed_tasks: tuple[str, ...] = ()
    completed_lessons: tuple[str, ...] = ()
    completed_simulations: tuple[str, ...] = ()
    performance_score: int = Field(default=0, ge=0, le=100)
    simulation: SimulationRun | None = None

    @property
    def level(self) -> Level:
        return level_for(self.xp)


_FIRST_TASKS = ("t-digital-footprint", "t-spreadsheet-budget")
_BUILD_TASKS = _FIRST_TASKS + ("t-data-cleaning", "t-survey-design", "t-dashboard")
_ALL_TASKS = _BUILD_TASKS + ("t-sdg-research", "t-team-prototype", "t-capstone")


CHECKPOINTS: dict[str, Checkpoint] = {
    checkpoint.checkpoint_id: checkpoint
    for checkpoint in (
        Checkpoint(
            checkpoint_id="onboarding",
            label="Scene 1 - Onboarding",
            xp=0,
        ),
        Checkpoint(
            checkpoint_id="discovery",
            label="Scene 2 - Dashboard (discovery)",
            xp=150,
            completed_lessons=("l-what-is-data",),
        ),
        Checkpoint(
            checkpoint_id="learning",
            label="Scene 3 - Micro-lesson",
            xp=350,
            completed_tasks=_FIRST_TASKS[:1],
            completed_lessons=("l-what-is-data", "l-charts"),
        ),
        Checkpoint(
            checkpoint_id="simulation",
            label="Scene 4 - Simulation (build)",
            xp=1200,
            completed_tasks=_FIRST_TASKS,
            completed_lessons=("l-what-is-data", "l-charts", "l-python-intro"),
            performance_score=40,
            simulation=SimulationRun(scenario_id="climate-crisis", total_steps=3),
        ),
        Checkpoint(
            checkpoint_id="center",
            label="Scene 5 - Physical center",
            xp=1500,
            completed_tasks=_BUILD_TASKS[:3],
            completed_lessons=("l-what-is-data", "l-charts", "l-python-intro"),
            completed_simulations=("climate-crisis",),
            performance_score=45,
        ),
        Checkpoint(
            checkpoint_id="impact",
            label="Scene 6 - Mentorship (impact)",
            xp=3800,
            completed_tasks=_BUILD_TASKS + ("t-sdg-research",),
            completed_lessons=("l-what-is-data", "l-charts", "l-python-intro", "l-ethics"),
            completed_simulations=("climate-crisis", "water-management"),
            performance_score=85,
        ),
        Checkpoint(
            checkpoint_id="graduation",
            label="Scene 7 - Graduation",
            xp=5500,
            completed_tasks=_ALL_TASKS,
            completed_lessons=(
                "l-what-is-data",
                "l-charts",
                "l-python-intro",
                "l-ethics",
                "l-presenting",
            ),
            completed_simulations=("climate-crisis", "water-management"),
            performance_score=96,
        ),
    )
}


def get_checkpoint(checkpoint_id: str, registry: Mapping[str, Checkpoint] | None = None) -> Checkpoint | None:
    """Look up a checkpoint; None when unregistered."""
    return (CHECKPOINTS if registry is None else registry).get(checkpoint_id)
