"""
Command Resolver.

Builds engine commands from catalog ids. Content text never reaches the
engine: the resolver looks up rewards, step counts and option impacts and
packs only those numbers into the command.

Task rewards:
    base (difficulty table or explicit reward)
    + quality bonus (base x band multiplier - base, rounded half up)
    + streak bonus (+15 while a streak is active)
    + special bonuses (first time +25, perfect +50, early +20)
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from src.content.catalog import (
    STREAK_BONUS_XP,
    ContentCatalog,
    SimulationOption,
    SimulationStep,
    SpecialBonus,
    SubmissionQuality,
    TaskDefinition,
)
from src.core.commands import (
    AdvanceStreak,
    CompleteLesson,
    CompleteSimulation,
    RecordSimulationChoice,
    StartSimulation,
    SubmitTask,
)
from src.core.errors import InvalidCommandError
from src.core.state import SimulationRun

# =============================================================================
# Rewards
# =============================================================================


@dataclass(frozen=True)
class RewardBreakdown:
    """Parts of a task reward; `total` is what the engine is credited."""

    base: int
    quality_bonus: int = 0
    streak_bonus: int = 0
    special_bonus: int = 0

    @property
    def total(self) -> int:
        return max(0, self.base + self.quality_bonus + self.streak_bonus + self.special_bonus)

    def lines(self) -> list[str]:
        """Human-readable breakdown, base first; zero parts are left out."""
        result = [f"Base XP: {self.base}"]
        if self.quality_bonus:
            result.append(f"Quality bonus: {self.quality_bonus:+d}")
        if self.streak_bonus:
            result.append(f"Active streak bonus: {self.streak_bonus:+d}")
        if self.special_bonus:
            result.append(f"Special bonuses: {self.special_bonus:+d}")
        return result


def task_reward(
    task: TaskDefinition,
    quality: int | None = None,
    streak: int = 0,
    bonuses: Iterable[SpecialBonus] = (),
) -> RewardBreakdown:
    """
    Reward for an approved task.

    Args:
        task: The task definition; its `reward` is the base XP
        quality: Review score 0-100, or None when the task was not graded
        streak: The learner's current streak; any active streak adds a flat bonus
        bonuses: Special bonuses granted by the reviewer (each counted once)

    Returns:
        RewardBreakdown whose `total` goes into SubmitTask.xp_reward
    """
    base = max(0, task.reward)
    quality_bonus = 0
    if quality is not None:
        band = SubmissionQuality.for_score(quality)
        quality_bonus = (base * (band.multiplier_percent - 100) + 50) // 100
    return RewardBreakdown(
        base=base,
        quality_bonus=quality_bonus,
        streak_bonus=STREAK_BONUS_XP if streak > 0 else 0,
        special_bonus=sum(bonus.xp for bonus in set(bonuses)),
    )


# =============================================================================
# Content
# =============================================================================


def resolve_submission(
    catalog: ContentCatalog,
    task_id: str,
    at: datetime | None = None,
    quality: int | None = None,
    streak: int = 0,
    bonuses: Iterable[SpecialBonus] = (),
) -> tuple[RewardBreakdown, SubmitTask]:
    """
    Price an approved task once.

    Returns:
        Tuple of (reward breakdown, submit command carrying its total)
    """
    task = catalog.task(task_id)
    reward = task_reward(task, quality=quality, streak=streak, bonuses=bonuses)
    return reward, SubmitTask(task_id=task.id, xp_reward=reward.total, at=at)


def submit_task(
    catalog: ContentCatalog,
    task_id: str,
    at: datetime | None = None,
    quality: int | None = None,
    streak: int = 0,
    bonuses: Iterable[SpecialBonus] = (),
) -> SubmitTask:
    _, command = resolve_submission(catalog, task_id, at, quality, streak, bonuses)
    return command


def complete_lesson(catalog: ContentCatalog, lesson_id: str, at: datetime | None = None) -> CompleteLesson:
    lesson = catalog.lesson(lesson_id)
    return CompleteLesson(lesson_id=lesson.id, xp_reward=lesson.reward, at=at)


# =============================================================================
# Simulations
# =============================================================================


def start_simulation(
    catalog: ContentCatalog, scenario_id: str, at: datetime | None = None
) -> StartSimulation:
    definition = catalog.simulation(scenario_id)
    return StartSimulation(scenario_id=definition.id, total_steps=definition.total_steps, at=at)


def current_step(catalog: ContentCatalog, run: SimulationRun) -> SimulationStep:
    """The catalog step the run is positioned on."""
    return catalog.simulation(run.scenario_id).step(run.current_step_index)


def find_option(catalog: ContentCatalog, run: SimulationRun, option_id: str) -> SimulationOption:
    """
    Option `option_id` on the run's current step.

    Raises:
        InvalidCommandError: if the current step has no such option
    """
    step = current_step(catalog, run)
    option = step.option(option_id)
    if option is None:
        valid = ", ".join(o.id for o in step.options)
        raise InvalidCommandError(
            "record_simulation_choice",
            f"step {step.id!r} has no option {option_id!r} (valid: {valid})",
        )
    return option


def resolve_choice(
    catalog: ContentCatalog,
    run: SimulationRun | None,
    option_id: str,
    at: datetime | None = None,
) -> tuple[SimulationOption, RecordSimulationChoice]:
    """
    Look up an option on the current step once.

    Returns:
        Tuple of (option definition, choice command)
    """
    if run is None:
        raise InvalidCommandError("record_simulation_choice", "no simulation is active")
    option = find_option(catalog, run, option_id)
    command = RecordSimulationChoice(option_id=option.id, score_impact=option.score_impact, at=at)
    return option, command


def choose_option(
    catalog: ContentCatalog,
    run: SimulationRun | None,
    option_id: str,
    at: datetime | None = None,
) -> RecordSimulationChoice:
    """Build the choice command for an option on the current step."""
    _, command = resolve_choice(catalog, run, option_id, at=at)
    return command


def complete_simulation(
    catalog: ContentCatalog,
    run: SimulationRun | None,
    at: datetime | None = None,
) -> CompleteSimulation:
    """Build the completion command using the scenario's XP cap."""
    if run is None:
        raise InvalidCommandError("complete_simulation", "no simulation is active")
    definition = catalog.simulation(run.scenario_id)
    return CompleteSimulation(xp_cap=definition.xp_cap, at=at)


# =============================================================================
# Streaks
# =============================================================================


def advance_streak(
    last_day: date | None,
    today: date,
    active: bool = True,
    at: datetime | None = None,
) -> list[AdvanceStreak]:
    """
    Streak commands for `today`, given the last day the streak was counted.

    Missing one or more calendar days resets the streak before today counts.

    Raises:
        InvalidCommandError: if `today` is before `last_day`
    """
    if last_day is not None and today < last_day:
        raise InvalidCommandError(
            "advance_streak",
            f"{today.isoformat()} is before the last counted day {last_day.isoformat()}",
        )

    commands = []
    if last_day is not None and (today - last_day).days > 1:
        commands.append(AdvanceStreak(is_active_today=False, day_boundary_crossed=True, at=at))
    commands.append(
        AdvanceStreak(
            is_active_today=active,
            day_boundary_crossed=last_day != today,
            day=today,
            at=at,
        )
    )
    return commands
