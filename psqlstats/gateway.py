"""Database gateways wrapping the PostgreSQL driver."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Coroutine, Protocol, TypeVar, runtime_checkable

import asyncpg

from .models import ConnectionProfile, QueryResult

LOG = logging.getLogger(__name__)

T = TypeVar("T")


@runtime_checkable
class DatabaseGateway(Protocol):
    """Capability implemented by database gateways.

    Implementations may raise any exception; the session manager translates
    them into :mod:`psqlstats.errors`.
    """

    def open(self, profile: ConnectionProfile) -> object:
        """Open a connection for the profile and return its handle."""

    def query(self, handle: object, sql: str) -> QueryResult:
        """Run SQL on an open handle."""

    def close(self, handle: object) -> None:
        """Release a handle returned by :meth:`open`."""


class AsyncpgGateway:
    """Gateway that talks to PostgreSQL via asyncpg.

    asyncpg is coroutine based; the gateway owns a private event loop and
    drives it with ``run_until_complete`` on the calling thread, so every call
    blocks until the driver returns.
    """

    def __init__(self, *, connect_timeout: float = 60.0) -> None:
        self._connect_timeout = connect_timeout
        self._loop = asyncio.new_event_loop()

    def open(self, profile: ConnectionProfile) -> asyncpg.Connection:
        LOG.debug("Opening connection", extra={"target": profile.describe()})
        return self._run(asyncpg.connect(**self._connect_kwargs(profile)))

    def query(self, handle: object, sql: str) -> QueryResult:
        return self._run(self._execute(handle, sql))

    def close(self, handle: object) -> None:
        self._run(handle.close())  # type: ignore[attr-defined]

    def shutdown(self) -> None:
        """Close the private event loop."""

        if self._loop.is_closed():
            return
        self._loop.close()

    def _run(self, coro: Coroutine[Any, Any, T]) -> T:
        return self._loop.run_until_complete(coro)

    async def _execute(self, conn: Any, sql: str) -> QueryResult:
        statement = sql.strip()
        started = time.perf_counter()
        if _returns_rows(statement):
            prepared = await conn.prepare(statement)
            records = await prepared.fetch()
            # Column names come from the statement so empty results keep their headers.
            columns = tuple(str(attribute.name) for attribute in prepared.get_attributes())
            rows = tuple(tuple(record) for record in records)
            row_count: int | None = len(rows)
            status = f"{row_count} row(s)"
        else:
            status = await conn.execute(statement)
            columns, rows, row_count = (), (), None
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        return QueryResult(
            columns=columns,
            rows=rows,
            status=status,
            elapsed_ms=elapsed_ms,
            row_count=row_count,
        )

    def _connect_kwargs(self, profile: ConnectionProfile) -> dict[str, object]:
        kwargs: dict[str, object] = {
            "host": profile.host,
            "port": profile.port,
            "user": profile.user,
            "database": profile.dbname,
            "timeout": self._connect_timeout,
        }
        if profile.password:
            kwargs["password"] = profile.password
        return kwargs


def _returns_rows(statement: str) -> bool:
    token = statement.lstrip().split(None, 1)
    if not token:
        return False
    head = token[0].lower()
    return head in {"select", "with", "show", "values", "table", "explain"}


__all__ = ["AsyncpgGateway", "DatabaseGateway"]
