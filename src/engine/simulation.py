"""
Simulation State Machine.

Governs one run through a branching decision scenario:

    idle --start--> in_progress --choice/advance--> in_progress --complete--> completed

- The score starts neutral at 50 and each choice applies a signed delta,
  clamped to [0, 100] after every application.
- One choice per step. Choosing does not advance; the caller advances
  separately once feedback has been shown.
- Completion is only legal on the final step. The payout is the XP cap
  scaled by score / 100, rounded half up.

These functions are the nested reducer used by src.engine.reducer; they
take and return SimulationRun values and never touch LearnerState.
"""

from __future__ import annotations

from loguru import logger

from src.core.errors import InvalidCommandError
from src.core.state import SCORE_NEUTRAL, SimulationRun, SimulationStatus, clamp_score


def start_run(scenario_id: str, total_steps: int) -> SimulationRun:
    """Create a fresh in-progress run at step 0 with a neutral score."""
    return SimulationRun(
        scenario_id=scenario_id,
        total_steps=total_steps,
        current_step_index=0,
        score=SCORE_NEUTRAL,
        history=(),
        status=SimulationStatus.IN_PROGRESS,
    )


def _require_in_progress(run: SimulationRun, command_kind: str) -> None:
    if run.status != SimulationStatus.IN_PROGRESS:
        raise InvalidCommandError(
            command_kind, f"simulation {run.scenario_id!r} is {run.status.value}, not in progress"
        )


def record_choice(run: SimulationRun, option_id: str, score_impact: int) -> SimulationRun:
    """
    Append a chosen option and apply its score impact.

    Args:
        run: The active run
        option_id: Id of the chosen option
        score_impact: Signed score delta authored on the option

    Returns:
        New run with the option appended and the score clamped to [0, 100]

    Raises:
        InvalidCommandError: if the run is not in progress or the current
            step already has a recorded choice
    """
    _require_in_progress(run, "record_simulation_choice")
    if len(run.history) > run.current_step_index:
        raise InvalidCommandError(
            "record_simulation_choice",
            f"step {run.current_step_index + 1} of simulation {run.scenario_id!r} already answered",
        )
    return run.model_copy(
        update={
            "history": run.history + (option_id,),
            "score": clamp_score(run.score + score_impact),
        }
    )


def advance_step(run: SimulationRun) -> SimulationRun:
    """Move to the next step; a no-op when already on the last step."""
    _require_in_progress(run, "advance_simulation_step")
    if run.is_last_step:
        logger.warning(
            f"Simulation {run.scenario_id!r} already on its last step "
            f"({run.total_steps}); advance ignored"
        )
        return run
    return run.model_copy(update={"current_step_index": run.current_step_index + 1})


def payout_for(score: int, xp_cap: int) -> int:
    """
    XP earned for a final score.

    Formula: round_half_up(xp_cap * score / 100)

    Negative caps count as 0 and the score is clamped to [0, 100] first.
    Integer arithmetic keeps the rounding exact.
    """
    cap = max(0, int(xp_cap))
    return (cap * clamp_score(score) + 50) // 100


def complete_run(run: SimulationRun, xp_cap: int) -> tuple[SimulationRun, int]:
    """
    Finish a run that sits on its final step.

    Returns:
        Tuple of (completed run, XP payout)

    Raises:
        InvalidCommandError: if the run is not in progress or not on the last step
    """
    _require_in_progress(run, "complete_simulation")
    if not run.is_last_step:
        raise InvalidCommandError(
            "complete_simulation",
            f"simulation {run.scenario_id!r} is on step {run.current_step_index + 1} "
            f"of {run.total_steps}; completion is only allowed on the last step",
        )
    completed = run.model_copy(update={"status": SimulationStatus.COMPLETED})
    return completed, payout_for(run.score, xp_cap)
