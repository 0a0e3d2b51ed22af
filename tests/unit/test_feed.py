"""
Unit tests for the notification feed synthesizer.
"""

from src.core.commands import AdvanceStreak, CompleteLesson, SubmitTask
from src.readmodels.feed import FeedKind, synthesize


def at_xp(state, xp):
    return state.model_copy(update={"xp": xp})


class TestSynthesize:
    """Test feed item derivation and ordering."""

    def test_empty_log(self, learner):
        assert list(synthesize(learner.events)) == []

    def test_task_yields_activity_then_xp(self, reducer, learner):
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        items = list(synthesize(state.events))

        assert [item.kind for item in items] == [FeedKind.TASK_APPROVED, FeedKind.XP_GAINED]
        assert items[1].xp == 50
        assert items[1].message == "+50 XP"

    def test_newest_first(self, reducer, learner):
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        state = reducer.reduce(state, CompleteLesson(lesson_id="l1", xp_reward=30))

        first = next(iter(synthesize(state.events)))
        assert first.kind == FeedKind.LESSON_COMPLETED

    def test_oldest_first(self, reducer, learner):
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        state = reducer.reduce(state, CompleteLesson(lesson_id="l1", xp_reward=30))

        sequences = [item.sequence for item in synthesize(state.events, newest_first=False)]
        assert sequences == sorted(sequences)

    def test_level_up_item(self, reducer, learner):
        """Crossing a threshold shows a level-up above the task."""
        state = reducer.reduce(at_xp(learner, 750), SubmitTask(task_id="t1", xp_reward=100))
        items = list(synthesize(state.events))

        assert [item.kind for item in items] == [
            FeedKind.LEVEL_UP,
            FeedKind.TASK_APPROVED,
            FeedKind.XP_GAINED,
        ]
        assert "Journeyman" in items[0].message

    def test_streak_milestone_item(self, reducer, learner):
        state = learner
        for _ in range(3):
            state = reducer.reduce(state, AdvanceStreak(is_active_today=True, day_boundary_crossed=True))

        items = list(synthesize(state.events))
        assert items[0].kind == FeedKind.STREAK_MILESTONE
        assert "3 days" in items[0].message

    def test_item_ids_unique(self, reducer, learner):
        state = reducer.reduce(at_xp(learner, 750), SubmitTask(task_id="t1", xp_reward=100))
        ids = [item.item_id for item in synthesize(state.events)]
        assert len(ids) == len(set(ids))


class TestFeedView:
    """Test FeedView iteration semantics."""

    def test_restartable(self, reducer, learner):
        """Two passes yield the same items."""
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        view = synthesize(state.events)
        assert list(view) == list(view)

    def test_limit(self, reducer, learner):
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        state = reducer.reduce(state, CompleteLesson(lesson_id="l1", xp_reward=30))

        assert len(list(synthesize(state.events, limit=3))) == 3
        assert len(list(synthesize(state.events).latest(1))) == 1

    def test_iteration_leaves_events_untouched(self, reducer, learner):
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        events = state.events
        list(synthesize(events))
        assert state.events == events

    def test_of_kind(self, reducer, learner):
        state = reducer.reduce(learner, SubmitTask(task_id="t1", xp_reward=50))
        state = reducer.reduce(state, SubmitTask(task_id="t2", xp_reward=50))

        xp_items = list(synthesize(state.events).of_kind(FeedKind.XP_GAINED))
        assert len(xp_items) == 2
