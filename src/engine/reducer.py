"""
Command Processor.

Pure state transitions: `reduce(state, command) -> new state`.

Design:
- One handler per command type, registered in a dispatch table. A command
  type without a handler is a programming error (UnknownCommandError).
- Handlers never mutate their input and never perform I/O or read a clock;
  timestamps arrive on the command (`at`) and are copied onto events.
- Every XP change goes through `_credit`, which appends a level_changed
  event whenever the derived tier moves. The level itself is never stored.
- Duplicate task/lesson submissions return the input state unchanged.

The simulation commands delegate to the nested state machine in
src.engine.simulation.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import datetime
from typing import Any

from loguru import logger

from src.content.checkpoints import CHECKPOINTS, Checkpoint, get_checkpoint
from src.core.commands import (
    AdvanceSimulationStep,
    AdvanceStreak,
    BaseCommand,
    CompleteLesson,
    CompleteSimulation,
    JumpToCheckpoint,
    RecordSimulationChoice,
    StartSimulation,
    SubmitTask,
)
from src.core.errors import InvalidCommandError, UnknownCommandError
from src.core.levels import level_for
from src.core.state import (
    EventKind,
    LearnerState,
    ProgressionEvent,
    SimulationRun,
    clamp_score,
)
from src.engine import simulation as sim

DEFAULT_STREAK_MILESTONES: tuple[int, ...] = (3, 7, 14, 30, 60, 100)
PERFORMANCE_PER_SIMULATION = 5  # Composite score boost per completed simulation


def _evolve(
    state: LearnerState,
    drafts: Sequence[dict[str, Any]],
    at: datetime | None,
    **updates: Any,
) -> LearnerState:
    """Copy `state` with field updates and new events appended in order."""
    start = len(state.events)
    new_events = tuple(
        ProgressionEvent(sequence=start + offset, occurred_at=at, **draft)
        for offset, draft in enumerate(drafts)
    )
    if new_events:
        updates["events"] = state.events + new_events
    return state.model_copy(update=updates)


class ProgressionReducer:
    """
    The progression state machine.

    Parameters
    ----------
    checkpoints:
        Snapshots addressable by JumpToCheckpoint. Defaults to the
        presentation checkpoints in src.content.checkpoints.
    streak_milestones:
        Streak lengths that produce a streak_milestone event.
    """

    def __init__(
        self,
        checkpoints: Mapping[str, Checkpoint] | None = None,
        streak_milestones: Iterable[int] = DEFAULT_STREAK_MILESTONES,
    ) -> None:
        self.checkpoints: Mapping[str, Checkpoint] = (
            CHECKPOINTS if checkpoints is None else dict(checkpoints)
        )
        self.streak_milestones: frozenset[int] = frozenset(
            int(m) for m in streak_milestones if int(m) > 0
        )
        self._handlers: dict[type[BaseCommand], Callable[[LearnerState, Any], LearnerState]] = {
            SubmitTask: self._submit_task,
            CompleteLesson: self._complete_lesson,
            StartSimulation: self._start_simulation,
            RecordSimulationChoice: self._record_choice,
            AdvanceSimulationStep: self._advance_step,
            CompleteSimulation: self._complete_simulation,
            AdvanceStreak: self._advance_streak,
            JumpToCheckpoint: self._jump_to_checkpoint,
        }

    # ----- public API --------------------------------------------------
    def reduce(self, state: LearnerState, command: BaseCommand) -> LearnerState:
        """
        Apply one command.

        Args:
            state: Current snapshot (never modified)
            command: Any command from src.core.commands

        Returns:
            The next snapshot; the same object when the command is a no-op

        Raises:
            UnknownCommandError: if no handler exists for the command type
            InvalidCommandError: if the transition is impossible from `state`
        """
        handler = self._handlers.get(type(command))
        if handler is None:
            raise UnknownCommandError(command)
        return handler(state, command)

    __call__ = reduce

    # ----- helpers -----------------------------------------------------
    def _credit(
        self,
        state: LearnerState,
        amount: int,
        drafts: list[dict[str, Any]],
        at: datetime | None,
        **updates: Any,
    ) -> LearnerState:
        """Add XP and record a level change when the derived tier moves."""
        new_xp = state.xp + amount
        previous_level = state.level
        new_level = level_for(new_xp)
        if new_level != previous_level:
            logger.info(
                f"Learner {state.learner_id} moved {previous_level.value} -> {new_level.value} "
                f"at {new_xp} XP"
            )
            drafts.append(
                {
                    "kind": EventKind.LEVEL_CHANGED,
                    "previous_level": previous_level,
                    "new_level": new_level,
                }
            )
        return _evolve(state, drafts, at, xp=new_xp, **updates)

    @staticmethod
    def _active_run(state: LearnerState, command_kind: str) -> SimulationRun:
        if state.simulation is None:
            raise InvalidCommandError(command_kind, "no simulation is active")
        return state.simulation

    # ----- content completion ------------------------------------------
    def _submit_task(self, state: LearnerState, command: SubmitTask) -> LearnerState:
        if state.has_completed_task(command.task_id):
            logger.debug(f"Task {command.task_id!r} already completed; submission ignored")
            return state

        reward = max(0, command.xp_reward)
        drafts = [{"kind": EventKind.TASK_APPROVED, "subject_id": command.task_id, "xp": reward}]
        return self._credit(
            state,
            reward,
            drafts,
            command.at,
            completed_tasks=state.completed_tasks + (command.task_id,),
        )

    def _complete_lesson(self, state: LearnerState, command: CompleteLesson) -> LearnerState:
        if state.has_completed_lesson(command.lesson_id):
            logger.debug(f"Lesson {command.lesson_id!r} already completed; submission ignored")
            return state

        reward = max(0, command.xp_reward)
        drafts = [{"kind": EventKind.LESSON_COMPLETED, "subject_id": command.lesson_id, "xp": reward}]
        return self._credit(
            state,
            reward,
            drafts,
            command.at,
            completed_lessons=state.completed_lessons + (command.lesson_id,),
        )

    # ----- simulations -------------------------------------------------
    def _start_simulation(self, state: LearnerState, command: StartSimulation) -> LearnerState:
        active = state.simulation
        if active is not None and active.is_in_progress and active.scenario_id == command.scenario_id:
            logger.debug(f"Simulation {command.scenario_id!r} already in progress")
            return state

        drafts: list[dict[str, Any]] = []
        if active is not None and active.is_in_progress:
            logger.warning(
                f"Discarding simulation {active.scenario_id!r} at step "
                f"{active.current_step_index + 1}/{active.total_steps} to start {command.scenario_id!r}"
            )
            drafts.append(
                {
                    "kind": EventKind.SIMULATION_DISCARDED,
                    "subject_id": active.scenario_id,
                    "score": active.score,
                }
            )
        drafts.append({"kind": EventKind.SIMULATION_STARTED, "subject_id": command.scenario_id})

        return _evolve(
            state,
            drafts,
            command.at,
            simulation=sim.start_run(command.scenario_id, command.total_steps),
        )

    def _record_choice(self, state: LearnerState, command: RecordSimulationChoice) -> LearnerState:
        run = self._active_run(state, command.kind)
        updated = sim.record_choice(run, command.option_id, command.score_impact)
        return state.model_copy(update={"simulation": updated})

    def _advance_step(self, state: LearnerState, command: AdvanceSimulationStep) -> LearnerState:
        run = self._active_run(state, command.kind)
        updated = sim.advance_step(run)
        if updated is run:
            return state
        return state.model_copy(update={"simulation": updated})

    def _complete_simulation(self, state: LearnerState, command: CompleteSimulation) -> LearnerState:
        run = self._active_run(state, command.kind)
        completed, payout = sim.complete_run(run, command.xp_cap)

        logger.info(
            f"Simulation {completed.scenario_id!r} completed with score {completed.score}: +{payout} XP"
        )
        drafts = [
            {
                "kind": EventKind.SIMULATION_COMPLETED,
                "subject_id": completed.scenario_id,
                "xp": payout,
                "score": completed.score,
            }
        ]
        completed_simulations = state.completed_simulations
        if completed.scenario_id not in completed_simulations:
            completed_simulations = completed_simulations + (completed.scenario_id,)

        # The completed run is cleared in the same transition that pays it out
        return self._credit(
            state,
            payout,
            drafts,
            command.at,
            simulation=None,
            completed_simulations=completed_simulations,
            performance_score=clamp_score(state.performance_score + PERFORMANCE_PER_SIMULATION),
        )

    # ----- streak ------------------------------------------------------
    def _advance_streak(self, state: LearnerState, command: AdvanceStreak) -> LearnerState:
        if not command.day_boundary_crossed:
            return state
        if command.day is not None and state.streak_day == command.day:
            logger.debug(f"Streak already evaluated for {command.day.isoformat()}")
            return state

        streak = state.streak + 1 if command.is_active_today else 0
        drafts: list[dict[str, Any]] = []
        if command.is_active_today and streak in self.streak_milestones:
            drafts.append({"kind": EventKind.STREAK_MILESTONE, "streak": streak})

        return _evolve(
            state,
            drafts,
            command.at,
            streak=streak,
            streak_day=command.day if command.day is not None else state.streak_day,
        )

    # ----- administrative ----------------------------------------------
    def _jump_to_checkpoint(self, state: LearnerState, command: JumpToCheckpoint) -> LearnerState:
        checkpoint = get_checkpoint(command.checkpoint_id, self.checkpoints)
        if checkpoint is None:
            raise InvalidCommandError(command.kind, f"unknown checkpoint {command.checkpoint_id!r}")

        logger.info(f"Learner {state.learner_id} jumped to checkpoint {checkpoint.checkpoint_id!r}")
        drafts = [
            {
                "kind": EventKind.CHECKPOINT_LOADED,
                "subject_id": checkpoint.checkpoint_id,
                "previous_level": state.level,
                "new_level": checkpoint.level,
            }
        ]
        return _evolve(
            state,
            drafts,
            command.at,
            xp=checkpoint.xp,
            completed_tasks=checkpoint.completed_tasks,
            completed_lessons=checkpoint.completed_lessons,
            completed_simulations=checkpoint.completed_simulations,
            performance_score=checkpoint.performance_score,
            simulation=checkpoint.simulation,
        )


_default_reducer = ProgressionReducer()


def reduce(state: LearnerState, command: BaseCommand) -> LearnerState:
    """Apply one command with the default reducer configuration."""
    return _default_reducer.reduce(state, command)


def replay(
    initial: LearnerState,
    commands: Iterable[BaseCommand],
    reducer: ProgressionReducer | None = None,
) -> LearnerState:
    """
    Fold a command log over an initial state.

    Used for recovery and tests: replaying the same log always yields the
    same state.
    """
    apply = reducer or _default_reducer
    state = initial
    for command in commands:
        state = apply.reduce(state, command)
    return state
