"""
Integration tests: LearnerStore + SnapshotStore + resolver.

Exercises the path a front end takes: resolve ids against the catalog,
dispatch through the store, persist snapshots.

Run: pytest tests/integration/test_progression_flow.py -v
"""

import json

import pytest

from src.content import resolver
from src.core.commands import AdvanceSimulationStep, CompleteSimulation, JumpToCheckpoint, SubmitTask
from src.core.errors import InvalidCommandError, SnapshotError
from src.core.levels import Level
from src.core.state import EventKind, SimulationStatus, new_learner
from src.engine import LearnerStore, replay
from src.persistence import SnapshotStore
from src.readmodels import FeedKind, synthesize


def play(store, catalog, scenario_id, option_ids):
    """Play a scenario through the store, one option per step."""
    store.dispatch(resolver.start_simulation(catalog, scenario_id))
    for index, option_id in enumerate(option_ids):
        store.dispatch(resolver.choose_option(catalog, store.snapshot().simulation, option_id))
        if index < len(option_ids) - 1:
            store.dispatch(AdvanceSimulationStep())
    return store.dispatch(resolver.complete_simulation(catalog, store.snapshot().simulation))


# =============================================================================
# Store
# =============================================================================


class TestLearnerStore:
    """Test dispatch, journal and listeners."""

    def test_dispatch_updates_snapshot(self, learner, catalog):
        store = LearnerStore(learner)
        store.dispatch(resolver.submit_task(catalog, "t-dashboard"))

        assert store.snapshot().xp == 100
        assert store.learner_id == "ayse"
        assert len(store.journal) == 1

    def test_failed_command_leaves_snapshot(self, learner, catalog):
        """An invalid command is rejected atomically."""
        store = LearnerStore(learner)
        store.dispatch(resolver.start_simulation(catalog, "climate-crisis"))
        before = store.snapshot()

        with pytest.raises(InvalidCommandError):
            store.dispatch(CompleteSimulation(xp_cap=300))

        assert store.snapshot() is before
        assert len(store.journal) == 1

    def test_no_op_not_journaled(self, learner):
        store = LearnerStore(learner)
        store.dispatch(SubmitTask(task_id="t1", xp_reward=10))
        store.dispatch(SubmitTask(task_id="t1", xp_reward=10))

        assert len(store.journal) == 1

    def test_listeners_notified_on_change_only(self, learner):
        seen = []
        store = LearnerStore(learner)
        unsubscribe = store.subscribe(seen.append)

        store.dispatch(SubmitTask(task_id="t1", xp_reward=10))
        store.dispatch(SubmitTask(task_id="t1", xp_reward=10))
        unsubscribe()
        store.dispatch(SubmitTask(task_id="t2", xp_reward=10))

        assert len(seen) == 1
        assert seen[0].xp == 10

    def test_journal_replays_to_snapshot(self, learner, catalog):
        """Replaying the journal from the initial state reproduces the store."""
        store = LearnerStore(learner)
        store.dispatch(resolver.submit_task(catalog, "t-sdg-research"))
        play(store, catalog, "climate-crisis", ["opt-1-b", "opt-2-b", "opt-3-b"])

        assert replay(learner, store.journal) == store.snapshot()


class TestEndToEnd:
    """Test a learner climbing from the first task to journeyman."""

    def test_first_task_then_threshold(self, learner):
        store = LearnerStore(learner)
        assert store.snapshot().simulation_status == SimulationStatus.IDLE

        state = store.dispatch(SubmitTask(task_id="t1", xp_reward=50))
        assert state.xp == 50
        assert state.level == Level.APPRENTICE

        state = store.dispatch(SubmitTask(task_id="t2", xp_reward=750))
        assert state.xp == 800
        assert state.level == Level.JOURNEYMAN

        feed = list(synthesize(state.events))
        assert feed[0].kind == FeedKind.LEVEL_UP

    def test_catalog_content_reaches_master(self, learner, catalog):
        """Every task and lesson plus both perfect simulations is 2155 XP."""
        store = LearnerStore(learner)
        for task in catalog.tasks:
            store.dispatch(resolver.submit_task(catalog, task.id))
        for lesson in catalog.lessons:
            store.dispatch(resolver.complete_lesson(catalog, lesson.id))
        play(store, catalog, "climate-crisis", ["opt-1-a", "opt-2-a", "opt-3-a"])
        state = play(store, catalog, "water-management", ["opt-1-a", "opt-2-a"])

        assert state.xp == catalog.summary().total_xp
        assert state.level == Level.MASTER
        levels = [event.new_level for event in state.events if event.kind == EventKind.LEVEL_CHANGED]
        assert levels == [Level.JOURNEYMAN, Level.MASTER]


# =============================================================================
# Simulation Play-Through
# =============================================================================


class TestSimulationPlayThrough:
    """Test catalog-driven simulation runs."""

    def test_best_path_pays_cap(self, learner, catalog):
        """+20, +25, +15 from 50 clamps at 100 and pays the full 300."""
        store = LearnerStore(learner)
        state = play(store, catalog, "climate-crisis", ["opt-1-a", "opt-2-a", "opt-3-a"])

        assert state.xp == 300
        assert state.simulation is None
        assert state.has_completed_simulation("climate-crisis")

    def test_worst_path_pays_nothing(self, learner, catalog):
        """-10, -25, -20 from 50 clamps at 0."""
        store = LearnerStore(learner)
        state = play(store, catalog, "climate-crisis", ["opt-1-c", "opt-2-c", "opt-3-c"])

        assert state.xp == 0
        assert state.events[-1].kind == EventKind.SIMULATION_COMPLETED
        assert state.events[-1].score == 0

    def test_resume_from_checkpoint(self, learner, catalog):
        """The simulation checkpoint leaves climate-crisis at step 1."""
        store = LearnerStore(learner)
        store.dispatch(JumpToCheckpoint(checkpoint_id="simulation"))
        state = store.dispatch(resolver.choose_option(catalog, store.snapshot().simulation, "opt-1-a"))

        assert state.simulation.score == 70
        assert state.xp == 1200
        assert state.level == Level.JOURNEYMAN


# =============================================================================
# Persistence
# =============================================================================


class TestSnapshotStore:
    """Test snapshot files."""

    def test_round_trip(self, tmp_path, learner, catalog):
        snapshots = SnapshotStore(tmp_path)
        store = LearnerStore(learner)
        store.dispatch(resolver.submit_task(catalog, "t-dashboard"))
        store.dispatch(JumpToCheckpoint(checkpoint_id="simulation"))

        snapshots.save(store.snapshot())
        assert snapshots.load("ayse") == store.snapshot()

    def test_missing_learner(self, tmp_path):
        snapshots = SnapshotStore(tmp_path)
        assert snapshots.load("nobody") is None
        assert not snapshots.exists("nobody")

    def test_corrupt_file(self, tmp_path):
        (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotError):
            SnapshotStore(tmp_path).load("broken")

    def test_stored_level_is_ignored(self, tmp_path, learner):
        """The level is always re-derived from xp on load."""
        snapshots = SnapshotStore(tmp_path)
        path = snapshots.save(learner)

        data = json.loads(path.read_text(encoding="utf-8"))
        data["level"] = "graduate"
        path.write_text(json.dumps(data), encoding="utf-8")

        assert snapshots.load("ayse").level == Level.APPRENTICE

    def test_list_and_delete(self, tmp_path, learner):
        snapshots = SnapshotStore(tmp_path)
        snapshots.save(learner)
        ben = new_learner("ben")
        snapshots.save(ben)

        assert snapshots.list_learners() == ["ayse", "ben"]
        assert snapshots.delete("ben")
        assert not snapshots.delete("ben")
        assert snapshots.list_learners() == ["ayse"]

    def test_path_like_ids_rejected(self, tmp_path):
        with pytest.raises(SnapshotError):
            SnapshotStore(tmp_path).load("../outside")

    def test_listener_persists_changes(self, tmp_path, learner, catalog):
        """Subscribing save() keeps the file in step with the store."""
        snapshots = SnapshotStore(tmp_path)
        store = LearnerStore(learner)
        store.subscribe(snapshots.save)

        store.dispatch(resolver.complete_lesson(catalog, "l-python-intro"))

        loaded = snapshots.load("ayse")
        assert loaded.xp == 75
        feed = list(synthesize(loaded.events))
        assert feed[0].kind == FeedKind.LESSON_COMPLETED
