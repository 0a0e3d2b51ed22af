"""
Content: the read-only curriculum the engine is driven by.

Core modules:
- catalog: Task, lesson and simulation definitions + ContentCatalog lookups
- checkpoints: Predefined snapshots for JumpToCheckpoint
- resolver: Catalog ids -> engine commands
- sample: Built-in sample catalog
"""

from .catalog import (
    CatalogSummary,
    ContentCatalog,
    Difficulty,
    LessonDefinition,
    SimulationDefinition,
    SimulationOption,
    SimulationStep,
    SpecialBonus,
    SubmissionQuality,
    TaskDefinition,
)
from .checkpoints import CHECKPOINTS, Checkpoint, get_checkpoint
from .sample import sample_catalog

__all__ = [
    "CatalogSummary",
    "ContentCatalog",
    "Difficulty",
    "LessonDefinition",
    "SimulationDefinition",
    "SimulationOption",
    "SimulationStep",
    "SpecialBonus",
    "SubmissionQuality",
    "TaskDefinition",
    "CHECKPOINTS",
    "Checkpoint",
    "get_checkpoint",
    "sample_catalog",
]
