"""Session manager owning the single database connection."""

from __future__ import annotations

import logging
from types import TracebackType

from .errors import DatabaseConnectionError, NoProfileError, NotConnectedError, QueryError
from .gateway import DatabaseGateway
from .models import ConnectionProfile, QueryResult, SessionStatus

LOG = logging.getLogger(__name__)


class SessionManager:
    """Holds at most one live connection handle and mediates gateway access.

    This is the only place that sees driver exceptions: every failure from the
    gateway is re-raised as a :class:`~psqlstats.errors.PsqlStatsError`.
    """

    def __init__(self, gateway: DatabaseGateway) -> None:
        self._gateway = gateway
        self._profile: ConnectionProfile | None = None
        self._handle: object | None = None
        self._status = SessionStatus.DISCONNECTED

    def __enter__(self) -> SessionManager:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @property
    def profile(self) -> ConnectionProfile | None:
        """Profile of the last connection attempt, if any."""

        return self._profile

    @property
    def status(self) -> SessionStatus:
        """Last known connection status."""

        return self._status

    @property
    def is_connected(self) -> bool:
        return self._status is SessionStatus.CONNECTED

    def connect(self, profile: ConnectionProfile) -> SessionStatus:
        """Open a connection for ``profile``, replacing any existing one."""

        self.disconnect()
        self._profile = profile
        try:
            handle = self._gateway.open(profile)
        except Exception as exc:
            self._status = SessionStatus.DISCONNECTED
            LOG.debug("Connection failed", exc_info=True, extra={"target": profile.describe()})
            raise DatabaseConnectionError(
                f"Could not connect to {profile.describe()}: {_describe(exc)}"
            ) from exc
        self._handle = handle
        self._status = SessionStatus.CONNECTED
        LOG.info("Connected", extra={"target": profile.describe()})
        return self._status

    def reconnect(self) -> SessionStatus:
        """Reconnect using the current profile."""

        if self._profile is None:
            raise NoProfileError("Nothing to reconnect to: no connection profile has been set.")
        return self.connect(self._profile)

    def disconnect(self) -> None:
        """Release the connection handle; calling it again is a no-op."""

        handle, self._handle = self._handle, None
        self._status = SessionStatus.DISCONNECTED
        if handle is None:
            return
        try:
            self._gateway.close(handle)
        except Exception:
            LOG.warning("Failed to close connection cleanly", exc_info=True)

    def close(self) -> None:
        """Release every resource held by the session."""

        self.disconnect()

    def run_query(self, sql: str) -> QueryResult:
        """Run ``sql`` on the live connection.

        Driver failures become :class:`QueryError`; the status is left as it
        was so the caller can decide whether to reconnect.
        """

        if self._handle is None or not self.is_connected:
            raise NotConnectedError()
        if not sql.strip():
            raise QueryError("Provide SQL to execute.")
        try:
            return self._gateway.query(self._handle, sql)
        except Exception as exc:
            LOG.debug("Query failed", exc_info=True)
            raise QueryError(f"Query failed: {_describe(exc)}") from exc


def _describe(exc: BaseException) -> str:
    message = str(exc).strip()
    if not message:
        return type(exc).__name__
    return message.splitlines()[0]


__all__ = ["SessionManager"]
