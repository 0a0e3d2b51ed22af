"""
Progression engine errors.

Invalid commands are integration errors: they are raised immediately,
never retried, and the learner state is left unchanged. Duplicate task or
lesson submissions and out-of-range numbers are not errors; the reducer
absorbs them through idempotency and clamping.
"""


class ProgressionError(Exception):
    """Base class for all progression engine errors."""
    pass


class InvalidCommandError(ProgressionError):
    """Raised when a command asks for a transition the current state cannot make."""

    def __init__(self, command_kind: str, reason: str):
        self.command_kind = command_kind
        self.reason = reason
        super().__init__(f"{command_kind}: {reason}")


class UnknownCommandError(InvalidCommandError):
    """Raised when the reducer has no handler for a command type."""

    def __init__(self, command: object):
        super().__init__(type(command).__name__, "no handler registered for this command kind")


class ContentNotFoundError(ProgressionError, KeyError):
    """Raised when a catalog lookup references an unknown id."""

    def __init__(self, content_type: str, content_id: str):
        self.content_type = content_type
        self.content_id = content_id
        super().__init__(f"Unknown {content_type}: {content_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class SnapshotError(ProgressionError):
    """Raised when a persisted learner snapshot cannot be read."""
    pass
