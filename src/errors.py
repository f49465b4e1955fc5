"""Error taxonomy for the to-do application.

Every error is recoverable at the interaction boundary except
InitializationFailure, which only aborts startup.
"""


class TodoError(Exception):
    """Base class for all application errors."""


class InvalidInput(TodoError):
    """Task text rejected: empty, too long, or a duplicate.

    The message is user-facing and shown as a warning notification.
    """


class LoadFailure(TodoError):
    """Persisted tasks could not be read; the app continues with an empty store."""


class SaveFailure(TodoError):
    """The storage slot rejected a write; in-memory state is kept."""


class InitializationFailure(TodoError):
    """A required UI element is missing; the app stays inert."""

    def __init__(self, missing):
        self.missing = tuple(missing)
        super().__init__(f"Required UI elements not found: {', '.join(self.missing)}")


class MissingData(LoadFailure):
    """The storage slot has never been written; a first run, not corruption."""
