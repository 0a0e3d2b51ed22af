"""
Learner State Store.

A caller-owned holder for one learner's current snapshot. It wraps the pure
reducer and is the single entry point for state transitions:

    store = LearnerStore(new_learner("ayse", "Ayse Yilmaz"))
    store.dispatch(SubmitTask(task_id="t1", xp_reward=50))
    store.snapshot().xp  # 50

Atomicity comes from the reducer being pure: the next state is computed in
full before the store swaps its reference, so a failing command leaves the
previous snapshot in place and no partial update is observable.

The store does no locking. When several callers can issue commands for the
same learner, they must serialize through a single owner of the store.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable

from loguru import logger

from src.core.commands import BaseCommand
from src.core.state import LearnerState
from src.engine.reducer import ProgressionReducer

Listener = Callable[[LearnerState], None]


class LearnerStore:
    """
    Single source of truth for one learner's progression.

    Handles:
    - Snapshot reads
    - Command dispatch through the reducer
    - A journal of applied commands (for replay)
    - Change listeners (persistence, UI refresh)
    """

    def __init__(
        self,
        initial: LearnerState,
        reducer: ProgressionReducer | None = None,
    ):
        """
        Initialize the store.

        Args:
            initial: Starting snapshot (fresh learner or a loaded snapshot)
            reducer: Reducer configuration (defaults to ProgressionReducer())
        """
        self._state = initial
        self._reducer = reducer or ProgressionReducer()
        self._journal: list[BaseCommand] = []
        self._listeners: list[Listener] = []

    @property
    def learner_id(self) -> str:
        return self._state.learner_id

    @property
    def journal(self) -> tuple[BaseCommand, ...]:
        """Commands that changed state, in the order they were applied."""
        return tuple(self._journal)

    def snapshot(self) -> LearnerState:
        """Current immutable snapshot."""
        return self._state

    def dispatch(self, command: BaseCommand) -> LearnerState:
        """
        Apply a command and return the resulting snapshot.

        Raises:
            InvalidCommandError: the command is not legal for the current state
                (the stored snapshot is untouched)
        """
        new_state = self._reducer.reduce(self._state, command)
        if new_state is self._state:
            logger.debug(f"{type(command).__name__} left learner {self.learner_id} unchanged")
            return new_state

        self._state = new_state
        self._journal.append(command)
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def dispatch_many(self, commands: Iterable[BaseCommand]) -> LearnerState:
        """Apply commands in order; stops at the first invalid one."""
        for command in commands:
            self.dispatch(command)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with every new snapshot.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
