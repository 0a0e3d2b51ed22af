"""
Core Module - Shared domain models.

This module contains the canonical definitions used by the engine, the
read models and the CLI.

Components:
- levels: Leveling table (Level, level_for)
- state: Learner snapshots (LearnerState, SimulationRun, ProgressionEvent)
- commands: The closed command set (SubmitTask, StartSimulation, ...)
- errors: ProgressionError hierarchy

Design Principle:
Models here are immutable values. Anything that changes state lives in
src/engine/; anything derived for display lives in src/readmodels/.
"""

from src.core.commands import (
    AdvanceSimulationStep,
    AdvanceStreak,
    BaseCommand,
    Command,
    CompleteLesson,
    CompleteSimulation,
    JumpToCheckpoint,
    RecordSimulationChoice,
    StartSimulation,
    SubmitTask,
    parse_command,
)
from src.core.errors import (
    ContentNotFoundError,
    InvalidCommandError,
    ProgressionError,
    SnapshotError,
    UnknownCommandError,
)
from src.core.levels import LEVEL_THRESHOLDS, Level, level_for
from src.core.state import (
    EventKind,
    LearnerIdentity,
    LearnerState,
    ProgressionEvent,
    SimulationRun,
    SimulationStatus,
    new_learner,
)

__all__ = [
    # Levels
    "LEVEL_THRESHOLDS",
    "Level",
    "level_for",
    # State
    "EventKind",
    "LearnerIdentity",
    "LearnerState",
    "ProgressionEvent",
    "SimulationRun",
    "SimulationStatus",
    "new_learner",
    # Commands
    "AdvanceSimulationStep",
    "AdvanceStreak",
    "BaseCommand",
    "Command",
    "CompleteLesson",
    "CompleteSimulation",
    "JumpToCheckpoint",
    "RecordSimulationChoice",
    "StartSimulation",
    "SubmitTask",
    "parse_command",
    # Errors
    "ContentNotFoundError",
    "InvalidCommandError",
    "ProgressionError",
    "SnapshotError",
    "UnknownCommandError",
]
