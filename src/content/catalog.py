"""
Content Catalog.

Read-only registry of tasks, micro-lessons and simulation scenarios. The
engine never mutates it; callers look up definitions here to build commands
(reward values, step counts, option score impacts).

Catalogs can be built in code or loaded from a JSON document:

    {
      "tasks": [{"id": "t1", "title": "...", "difficulty": "easy"}],
      "lessons": [{"id": "l1", "title": "...", "xp_reward": 50}],
      "simulations": [{"id": "s1", "title": "...", "xp_cap": 300, "steps": [...]}]
    }
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from src.core.errors import ContentNotFoundError

# =============================================================================
# Definitions
# =============================================================================


class Difficulty(str, Enum):
    """Task difficulty; drives the default XP reward."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


# Default task rewards by difficulty
TASK_XP: dict[Difficulty, int] = {
    Difficulty.EASY: 50,
    Difficulty.MEDIUM: 100,
    Difficulty.HARD: 150,
}

DEFAULT_LESSON_XP = 50


class SubmissionQuality(str, Enum):
    """Review band of a submission's 0-100 quality score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    AVERAGE = "average"
    POOR = "poor"

    @classmethod
    def for_score(cls, score: int) -> SubmissionQuality:
        if score >= 90:
            return cls.EXCELLENT
        if score >= 75:
            return cls.GOOD
        if score >= 60:
            return cls.AVERAGE
        return cls.POOR

    @property
    def multiplier_percent(self) -> int:
        """Reward multiplier applied to the base XP, in percent."""
        return {
            SubmissionQuality.EXCELLENT: 150,
            SubmissionQuality.GOOD: 120,
            SubmissionQuality.AVERAGE: 100,
            SubmissionQuality.POOR: 80,
        }[self]


class SpecialBonus(str, Enum):
    """One-off reward bonuses granted by the reviewer."""

    FIRST_TIME = "first_time"
    PERFECT = "perfect"
    EARLY = "early"

    @property
    def xp(self) -> int:
        return {
            SpecialBonus.FIRST_TIME: 25,
            SpecialBonus.PERFECT: 50,
            SpecialBonus.EARLY: 20,
        }[self]


# Flat bonus while the learner holds an active streak
STREAK_BONUS_XP = 15


class TaskDefinition(BaseModel):
    """A curriculum task. `xp_reward` overrides the difficulty default."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str
    difficulty: Difficulty = Difficulty.MEDIUM
    xp_reward: int | None = None

    @property
    def reward(self) -> int:
        """XP credited on first submission."""
        if self.xp_reward is not None:
            return self.xp_reward
        return TASK_XP[self.difficulty]


class LessonDefinition(BaseModel):
    """A micro-lesson."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str
    xp_reward: int = DEFAULT_LESSON_XP

    @property
    def reward(self) -> int:
        return self.xp_reward


class SimulationOption(BaseModel):
    """One answer to a simulation step."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    text: str
    score_impact: int = 0  # Signed delta applied to the run score
    feedback: str = ""


class SimulationStep(BaseModel):
    """A decision point with ordered options."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str
    description: str = ""
    options: tuple[SimulationOption, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _unique_option_ids(self) -> SimulationStep:
        ids = [option.id for option in self.options]
        if len(ids) != len(set(ids)):
            raise ValueError(f"step {self.id!r} has duplicate option ids")
        return self

    def option(self, option_id: str) -> SimulationOption | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


class SimulationDefinition(BaseModel):
    """A branching decision scenario."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    title: str
    description: str = ""
    xp_cap: int = Field(ge=0)
    steps: tuple[SimulationStep, ...] = Field(min_length=1)

    @property
    def total_steps(self) -> int:
        return len(self.steps)

    def step(self, index: int) -> SimulationStep:
        """Step at a zero-based index."""
        return self.steps[index]


class CatalogSummary(BaseModel):
    """Counts and XP totals for display and graduation planning."""

    task_count: int
    lesson_count: int
    simulation_count: int
    total_task_xp: int
    total_lesson_xp: int
    total_simulation_xp: int

    @property
    def total_xp(self) -> int:
        return self.total_task_xp + self.total_lesson_xp + self.total_simulation_xp


class _CatalogDocument(BaseModel):
    """On-disk shape of a catalog."""

    tasks: list[TaskDefinition] = Field(default_factory=list)
    lessons: list[LessonDefinition] = Field(default_factory=list)
    simulations: list[SimulationDefinition] = Field(default_factory=list)


# =============================================================================
# Catalog
# =============================================================================


def _index(items: Iterable, content_type: str) -> dict:
    indexed: dict = {}
    for item in items:
        if item.id in indexed:
            raise ValueError(f"Duplicate {content_type} id: {item.id!r}")
        indexed[item.id] = item
    return indexed


class ContentCatalog:
    """
    Immutable lookup over content definitions.

    Lookups of unknown ids raise ContentNotFoundError.
    """

    def __init__(
        self,
        tasks: Iterable[TaskDefinition] = (),
        lessons: Iterable[LessonDefinition] = (),
        simulations: Iterable[SimulationDefinition] = (),
    ):
        self._tasks: dict[str, TaskDefinition] = _index(tasks, "task")
        self._lessons: dict[str, LessonDefinition] = _index(lessons, "lesson")
        self._simulations: dict[str, SimulationDefinition] = _index(simulations, "simulation")

    # ----- lookups -----------------------------------------------------
    def task(self, task_id: str) -> TaskDefinition:
        try:
            return self._tasks[task_id]
        except KeyError:
            raise ContentNotFoundError("task", task_id) from None

    def lesson(self, lesson_id: str) -> LessonDefinition:
        try:
            return self._lessons[lesson_id]
        except KeyError:
            raise ContentNotFoundError("lesson", lesson_id) from None

    def simulation(self, scenario_id: str) -> SimulationDefinition:
        try:
            return self._simulations[scenario_id]
        except KeyError:
            raise ContentNotFoundError("simulation", scenario_id) from None

    @property
    def tasks(self) -> tuple[TaskDefinition, ...]:
        return tuple(self._tasks.values())

    @property
    def lessons(self) -> tuple[LessonDefinition, ...]:
        return tuple(self._lessons.values())

    @property
    def simulations(self) -> tuple[SimulationDefinition, ...]:
        return tuple(self._simulations.values())

    # ----- collaborator views ------------------------------------------
    def task_rewards(self) -> dict[str, int]:
        """Task id -> XP reward."""
        return {task.id: task.reward for task in self._tasks.values()}

    def lesson_rewards(self) -> dict[str, int]:
        """Lesson id -> XP reward."""
        return {lesson.id: lesson.reward for lesson in self._lessons.values()}

    def scenario_steps(self) -> dict[str, tuple[SimulationStep, ...]]:
        """Scenario id -> ordered steps."""
        return {sim.id: sim.steps for sim in self._simulations.values()}

    def summary(self) -> CatalogSummary:
        return CatalogSummary(
            task_count=len(self._tasks),
            lesson_count=len(self._lessons),
            simulation_count=len(self._simulations),
            total_task_xp=sum(self.task_rewards().values()),
            total_lesson_xp=sum(self.lesson_rewards().values()),
            total_simulation_xp=sum(sim.xp_cap for sim in self._simulations.values()),
        )

    # ----- serialization -----------------------------------------------
    def to_dict(self) -> dict:
        return _CatalogDocument(
            tasks=list(self.tasks),
            lessons=list(self.lessons),
            simulations=list(self.simulations),
        ).model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: dict) -> ContentCatalog:
        document = _CatalogDocument.model_validate(data)
        return cls(document.tasks, document.lessons, document.simulations)

    @classmethod
    def from_json(cls, path: Path) -> ContentCatalog:
        """
        Load a catalog from a JSON file.

        Raises:
            FileNotFoundError: if the file does not exist
            pydantic.ValidationError: if the document is malformed
        """
        raw = Path(path).read_text(encoding="utf-8")
        try:
            document = _CatalogDocument.model_validate_json(raw)
        except ValidationError:
            logger.error(f"Invalid catalog document: {path}")
            raise
        catalog = cls(document.tasks, document.lessons, document.simulations)
        logger.info(
            f"Loaded catalog from {path}: {len(document.tasks)} tasks, "
            f"{len(document.lessons)} lessons, {len(document.simulations)} simulations"
        )
        return catalog
