class NimqError(Exception):
    """Base class for every error raised by nimq."""


class InvalidActionError(NimqError, ValueError):
    """An action is not legal for the state it was applied to."""

    def __init__(self, state, action, reason: str):
        self.state = state
        self.action = action
        self.reason = reason
        super().__init__(f"Invalid action {tuple(action)} for state {list(state)}: {reason}")


class IllegalStateError(NimqError, RuntimeError):
    """A move was requested for a position that has no legal moves."""


class QTableFormatError(NimqError, ValueError):
    """A persisted Q-table could not be decoded."""


class SessionAbortedError(NimqError, RuntimeError):
    """A game session hit an unrecoverable failure and cannot continue."""
