"""
Notification Feed Synthesizer.

Derives user-facing feed items from the append-only progression event log.
The feed is a read model: it is never stored and never marks anything read
(read status belongs to the UI layer).

    view = synthesize(state.events)
    for item in view:         # newest first
        print(item.title, item.message)

A FeedView is lazy, finite and restartable: every iteration walks the
event tuple again from the start and yields the same items.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from src.core.state import EventKind, ProgressionEvent


class FeedKind(str, Enum):
    """Kinds of feed items."""

    TASK_APPROVED = "task_approved"
    LESSON_COMPLETED = "lesson_completed"
    SIMULATION_STARTED = "simulation_started"
    SIMULATION_COMPLETED = "simulation_completed"
    SIMULATION_DISCARDED = "simulation_discarded"
    XP_GAINED = "xp_gained"
    LEVEL_UP = "level_up"
    STREAK_MILESTONE = "streak_milestone"
    CHECKPOINT = "checkpoint"

    @property
    def icon(self) -> str:
        """Status glyph for CLI display."""
        return {
            FeedKind.TASK_APPROVED: "✓",
            FeedKind.LESSON_COMPLETED: "◆",
            FeedKind.SIMULATION_STARTED: "▶",
            FeedKind.SIMULATION_COMPLETED: "★",
            FeedKind.SIMULATION_DISCARDED: "✗",
            FeedKind.XP_GAINED: "+",
            FeedKind.LEVEL_UP: "▲",
            FeedKind.STREAK_MILESTONE: "🔥",
            FeedKind.CHECKPOINT: "⚑",
        }[self]


@dataclass(frozen=True)
class FeedItem:
    """A single human-readable feed entry."""

    item_id: str
    kind: FeedKind
    title: str
    message: str
    sequence: int  # Sequence of the source event
    xp: int = 0
    occurred_at: datetime | None = None


def _item(event: ProgressionEvent, suffix: str, kind: FeedKind, title: str, message: str, xp: int = 0) -> FeedItem:
    return FeedItem(
        item_id=f"{event.sequence}-{suffix}",
        kind=kind,
        title=title,
        message=message,
        sequence=event.sequence,
        xp=xp,
        occurred_at=event.occurred_at,
    )


def _xp_item(event: ProgressionEvent) -> FeedItem:
    return _item(event, "xp", FeedKind.XP_GAINED, "XP gained", f"+{event.xp} XP", xp=event.xp)


def render_event(event: ProgressionEvent) -> list[FeedItem]:
    """
    Feed items for one event, in display order.

    Events that credit XP produce their activity item followed by an
    xp_gained item.
    """
    kind = event.kind
    items: list[FeedItem] = []

    if kind == EventKind.TASK_APPROVED:
        items.append(
            _item(event, "task", FeedKind.TASK_APPROVED, "Task approved", f"Task {event.subject_id} was approved.")
        )
    elif kind == EventKind.LESSON_COMPLETED:
        items.append(
            _item(
                event,
                "lesson",
                FeedKind.LESSON_COMPLETED,
                "Micro-lesson completed",
                f"You finished lesson {event.subject_id}.",
            )
        )
    elif kind == EventKind.SIMULATION_STARTED:
        items.append(
            _item(
                event,
                "sim",
                FeedKind.SIMULATION_STARTED,
                "Simulation started",
                f"Scenario {event.subject_id} is under way.",
            )
        )
    elif kind == EventKind.SIMULATION_COMPLETED:
        items.append(
            _item(
                event,
                "sim",
                FeedKind.SIMULATION_COMPLETED,
                "Simulation completed",
                f"Scenario {event.subject_id} finished with a score of {event.score}/100.",
            )
        )
    elif kind == EventKind.SIMULATION_DISCARDED:
        items.append(
            _item(
                event,
                "sim",
                FeedKind.SIMULATION_DISCARDED,
                "Simulation abandoned",
                f"Scenario {event.subject_id} was left unfinished.",
            )
        )
    elif kind == EventKind.LEVEL_CHANGED:
        new_level = event.new_level.display_name if event.new_level else "?"
        items.append(_item(event, "level", FeedKind.LEVEL_UP, "Level up", f"You are now a {new_level}."))
    elif kind == EventKind.STREAK_MILESTONE:
        items.append(
            _item(
                event,
                "streak",
                FeedKind.STREAK_MILESTONE,
                "Streak milestone",
                f"{event.streak} days in a row. Keep going!",
            )
        )
    elif kind == EventKind.CHECKPOINT_LOADED:
        items.append(
            _item(event, "checkpoint", FeedKind.CHECKPOINT, "Checkpoint loaded", f"Jumped to {event.subject_id}.")
        )

    if event.xp > 0:
        items.append(_xp_item(event))
    return items


class FeedView:
    """
    Lazy, restartable view over an event log.

    The log is captured as a tuple at construction; iterating never mutates it.
    """

    def __init__(
        self,
        events: Sequence[ProgressionEvent],
        newest_first: bool = True,
        limit: int | None = None,
    ):
        self._events = tuple(events)
        self.newest_first = newest_first
        self.limit = limit

    def __iter__(self) -> Iterator[FeedItem]:
        ordered = reversed(self._events) if self.newest_first else iter(self._events)
        emitted = 0
        for event in ordered:
            for item in render_event(event):
                if self.limit is not None and emitted >= self.limit:
                    return
                yield item
                emitted += 1

    def latest(self, count: int) -> FeedView:
        """The first `count` items of this view."""
        return FeedView(self._events, newest_first=self.newest_first, limit=count)

    def of_kind(self, kind: FeedKind) -> Iterator[FeedItem]:
        return (item for item in self if item.kind == kind)


def synthesize(
    events: Sequence[ProgressionEvent],
    newest_first: bool = True,
    limit: int | None = None,
) -> FeedView:
    """
    Build the feed for an event log.

    Args:
        events: The learner's notifications seed (LearnerState.events)
        newest_first: Reverse-chronological order (default) or oldest first
        limit: Maximum number of items to yield

    Returns:
        A restartable FeedView
    """
    return FeedView(events, newest_first=newest_first, limit=limit)
