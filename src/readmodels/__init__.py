"""
Read Models - Pure views derived from learner snapshots on demand.

Components:
- graduation: ordered eligibility checklists and level gates
- feed: lazy, restartable notification feed
"""

from src.readmodels.feed import FeedItem, FeedKind, FeedView, synthesize
from src.readmodels.graduation import (
    CompletedLessonCount,
    CompletedSimulation,
    CompletedTaskCount,
    CompletedTasks,
    Criterion,
    GraduationCriterion,
    GraduationReport,
    MinimumXp,
    ReachedLevel,
    default_graduation_criteria,
    evaluate,
    gate_criteria,
    is_eligible,
    report,
)

__all__ = [
    "FeedItem",
    "FeedKind",
    "FeedView",
    "synthesize",
    "CompletedLessonCount",
    "CompletedSimulation",
    "CompletedTaskCount",
    "CompletedTasks",
    "Criterion",
    "GraduationCriterion",
    "GraduationReport",
    "MinimumXp",
    "ReachedLevel",
    "default_graduation_criteria",
    "evaluate",
    "gate_criteria",
    "is_eligible",
    "report",
]
