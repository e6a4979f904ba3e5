"""Shared dataclasses used across the session, store and dispatcher modules."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

DEFAULT_PORT = 5432
DEFAULT_USER = "postgres"


class SessionStatus(str, Enum):
    """Last known state of the single database session."""

    CONNECTED = "Connected"
    DISCONNECTED = "Disconnected"


@dataclass(frozen=True, slots=True)
class ConnectionProfile:
    """Parameters needed to open a PostgreSQL connection."""

    host: str
    dbname: str
    port: int = DEFAULT_PORT
    user: str = DEFAULT_USER
    password: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.port, bool) or not isinstance(self.port, int):
            raise ValueError(f"Port must be an integer, got {self.port!r}.")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"Port {self.port} is outside the range 1-65535.")

    def describe(self) -> str:
        """Short `user@host:port/dbname` label (no password)."""

        return f"{self.user}@{self.host}:{self.port}/{self.dbname}"


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Normalized query output returned to the dispatcher."""

    columns: tuple[str, ...]
    rows: tuple[tuple[object, ...], ...]
    status: str
    elapsed_ms: int
    row_count: int | None = None

    def first_value(self) -> object | None:
        """Value of the first column of the first row, if any."""

        if not self.rows or not self.rows[0]:
            return None
        return self.rows[0][0]


__all__ = [
    "ConnectionProfile",
    "DEFAULT_PORT",
    "DEFAULT_USER",
    "QueryResult",
    "SessionStatus",
]
