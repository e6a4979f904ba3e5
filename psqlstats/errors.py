"""Uniform error taxonomy shown to the operator.

Driver exceptions never leave :mod:`psqlstats.session`; they are translated
into one of the errors below and chained as ``__cause__``.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Tag identifying which failure an error represents."""

    CONNECTION = "connection"
    NOT_CONNECTED = "not_connected"
    NO_PROFILE = "no_profile"
    QUERY = "query"
    STORE = "store"
    NOT_FOUND = "not_found"
    INVALID_SELECTION = "invalid_selection"


class PsqlStatsError(RuntimeError):
    """Base class for every failure the dispatcher reports."""

    kind: ErrorKind


class DatabaseConnectionError(PsqlStatsError):
    """Raised when a connection could not be opened."""

    kind = ErrorKind.CONNECTION


class NotConnectedError(PsqlStatsError):
    """Raised when an operation needs a live connection and there is none."""

    kind = ErrorKind.NOT_CONNECTED

    def __init__(self, message: str = "Not connected to a database.") -> None:
        super().__init__(message)


class NoProfileError(PsqlStatsError):
    """Raised when reconnecting (or saving) without any connection profile."""

    kind = ErrorKind.NO_PROFILE

    def __init__(self, message: str = "No connection profile has been set.") -> None:
        super().__init__(message)


class QueryError(PsqlStatsError):
    """Raised when the database rejects a query or the session drops mid-query."""

    kind = ErrorKind.QUERY


class StoreError(PsqlStatsError):
    """Raised when the profile store cannot be read or written."""

    kind = ErrorKind.STORE


class ProfileNotFoundError(PsqlStatsError):
    """Raised when a named profile is absent from the store."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Profile '{name}' not found.")
        self.name = name


class InvalidSelectionError(PsqlStatsError):
    """Raised for menu input that maps to no operation."""

    kind = ErrorKind.INVALID_SELECTION

    def __init__(self, selection: str) -> None:
        super().__init__(f"Invalid selection '{selection}'.")
        self.selection = selection


__all__ = [
    "DatabaseConnectionError",
    "ErrorKind",
    "InvalidSelectionError",
    "NoProfileError",
    "NotConnectedError",
    "ProfileNotFoundError",
    "PsqlStatsError",
    "QueryError",
    "StoreError",
]
