"""
Engine Module - State transitions over learner snapshots.

Components:
- reducer: ProgressionReducer, reduce, replay
- simulation: nested state machine for simulation runs
- store: LearnerStore, the caller-owned holder of the current snapshot
"""

from src.engine.reducer import (
    DEFAULT_STREAK_MILESTONES,
    ProgressionReducer,
    reduce,
    replay,
)
from src.engine.store import LearnerStore

__all__ = [
    "DEFAULT_STREAK_MILESTONES",
    "LearnerStore",
    "ProgressionReducer",
    "reduce",
    "replay",
]
