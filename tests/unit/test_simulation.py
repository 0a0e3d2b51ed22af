"""
Unit tests for the simulation state machine.

Run: pytest tests/unit/test_simulation.py -v
"""

import pytest
from pydantic import ValidationError

from src.core.errors import InvalidCommandError
from src.core.state import SimulationRun, SimulationStatus
from src.engine.simulation import advance_step, complete_run, payout_for, record_choice, start_run


class TestRunLifecycle:
    """Test start/choose/advance/complete on SimulationRun values."""

    def test_start_run(self):
        run = start_run("climate-crisis", 3)
        assert run.current_step_index == 0
        assert run.score == 50
        assert run.history == ()
        assert run.steps_remaining == 2

    def test_record_choice_appends_history(self):
        run = record_choice(start_run("s", 2), "opt-1-a", 15)
        assert run.history == ("opt-1-a",)
        assert run.score == 65

    def test_record_choice_clamps(self):
        run = record_choice(start_run("s", 2), "a", 500)
        assert run.score == 100
        run = record_choice(advance_step(run), "b", -500)
        assert run.score == 0

    def test_one_choice_per_step(self):
        """The same step cannot be answered twice."""
        run = record_choice(start_run("s", 3), "opt-1-a", 20)
        with pytest.raises(InvalidCommandError, match="step 1 .* already answered"):
            record_choice(run, "opt-1-a", 20)
        assert run.history == ("opt-1-a",)
        assert run.score == 70

    def test_last_step_answered_once(self):
        run = record_choice(advance_step(record_choice(start_run("s", 2), "a", 0)), "b", 0)
        with pytest.raises(InvalidCommandError):
            record_choice(run, "c", 0)

    def test_advance_step(self):
        run = advance_step(start_run("s", 2))
        assert run.current_step_index == 1
        assert run.is_last_step

    def test_advance_on_last_step_returns_same_run(self):
        run = start_run("s", 1)
        assert advance_step(run) is run

    def test_complete_on_last_step(self):
        run = record_choice(start_run("s", 1), "a", 25)
        completed, payout = complete_run(run, 500)

        assert completed.status == SimulationStatus.COMPLETED
        assert payout == 375

    def test_complete_before_last_step_rejected(self):
        with pytest.raises(InvalidCommandError, match="only allowed on the last step"):
            complete_run(start_run("s", 2), 100)

    def test_completed_run_rejects_further_choices(self):
        completed, _ = complete_run(start_run("s", 1), 100)
        with pytest.raises(InvalidCommandError):
            record_choice(completed, "a", 5)

    def test_step_index_must_be_in_range(self):
        """A run cannot point past its last step."""
        with pytest.raises(ValidationError):
            SimulationRun(scenario_id="s", total_steps=2, current_step_index=2)


class TestPayout:
    """Test payout_for rounding."""

    @pytest.mark.parametrize(
        "score,cap,expected",
        [
            (100, 300, 300),
            (0, 300, 0),
            (50, 300, 150),
            (50, 3, 2),  # 1.5 rounds half up
            (49, 1, 0),
        ],
    )
    def test_payout(self, score, cap, expected):
        assert payout_for(score, cap) == expected

    def test_negative_cap_pays_nothing(self):
        assert payout_for(100, -10) == 0

    def test_payout_never_exceeds_cap(self):
        assert all(payout_for(score, 300) <= 300 for score in range(0, 101))
