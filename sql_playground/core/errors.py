"""Exception types raised by the playground session engine."""

from __future__ import annotations


class PlaygroundError(Exception):
    """Base class for every error the session engine raises."""


class BootstrapError(PlaygroundError):
    """The embedded engine could not be initialised; the session is unusable."""


class SessionNotReadyError(PlaygroundError):
    """An action was attempted before bootstrap completed."""


class SeedError(PlaygroundError):
    """Seeding a fresh database failed part way through."""


class DecodeError(PlaygroundError):
    """A shared locator could not be decoded back into query text."""


class QueryError(PlaygroundError):
    """A user-submitted statement failed inside the engine."""

    def __init__(self, message: str, *, statement: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.statement = statement
        self.index = index
