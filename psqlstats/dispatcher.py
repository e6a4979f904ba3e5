"""Interactive menu loop mapping selections to session and store operations."""

from __future__ import annotations

import logging
from typing import Callable

from rich.console import Console

from . import queries
from .errors import InvalidSelectionError, NoProfileError, PsqlStatsError
from .models import QueryResult
from .render import (
    render_error,
    render_menu,
    render_message,
    render_result,
    render_status,
    render_welcome,
)
from .session import SessionManager
from .store import ProfileStore

LOG = logging.getLogger(__name__)

InputReader = Callable[[str], str]

EXIT_SELECTION = "0"


class CommandDispatcher:
    """Blocking read-dispatch-render loop driven by a single operator."""

    def __init__(
        self,
        session: SessionManager,
        store: ProfileStore,
        *,
        console: Console | None = None,
        reader: InputReader = input,
    ) -> None:
        self._session = session
        self._store = store
        self._console = console or Console()
        self._reader = reader
        self._operations: dict[str, Callable[[], None]] = {
            "1": self.save_profile,
            "2": self.show_uptime,
            "3": self.show_version,
            "4": self.list_public_tables,
            "5": self.list_extensions,
            "6": self.run_custom_query,
            "7": self.reconnect,
            "8": self.load_profile,
        }

    def run(self) -> int:
        """Loop until Exit is selected or input ends; return the operation count."""

        render_welcome(self._console)
        render_menu(self._console)
        render_status(self._console, self._session.status)
        executed = 0
        while True:
            try:
                selection = self._prompt("Please enter an option: ")
                if selection == EXIT_SELECTION:
                    break
                executed += 1
                self.dispatch(selection)
            except (EOFError, KeyboardInterrupt):
                # Closed terminal input ends the session like Exit.
                LOG.debug("Input closed; leaving menu loop")
                self._console.print()
                break
        self._console.print("Exiting...")
        return executed

    def dispatch(self, selection: str) -> None:
        """Execute one selection, reporting its outcome and the connection status."""

        try:
            operation = self._operations.get(selection.strip())
            if operation is None:
                raise InvalidSelectionError(selection.strip())
            operation()
        except InvalidSelectionError as exc:
            render_error(self._console, exc)
            render_menu(self._console)
        except PsqlStatsError as exc:
            LOG.debug("Operation failed", exc_info=True, extra={"kind": exc.kind.value})
            render_error(self._console, exc)
        render_status(self._console, self._session.status)

    def save_profile(self) -> None:
        profile = self._session.profile
        if profile is None:
            raise NoProfileError("Nothing to save: no connection profile has been set.")
        name = self._prompt("Please enter the name for this connection: ")
        self._store.save(name, profile)
        render_message(self._console, f"Saved connection '{name.strip()}' to {self._store.path}.")

    def show_uptime(self) -> None:
        result = self._session.run_query(queries.UPTIME_SQL)
        render_result(self._console, result, title="Uptime")

    def show_version(self) -> None:
        result = self._session.run_query(queries.VERSION_SQL)
        self._console.print(f"Current running version: {_first_value(result)}", markup=False)

    def list_public_tables(self) -> None:
        result = self._session.run_query(queries.PUBLIC_TABLES_SQL)
        render_result(self._console, result, title="Public Tables")

    def list_extensions(self) -> None:
        result = self._session.run_query(queries.EXTENSIONS_SQL)
        render_result(self._console, result, title="Installed Extensions")

    def run_custom_query(self) -> None:
        sql = self._prompt("SQL> ")
        result = self._session.run_query(sql)
        render_result(self._console, result)

    def reconnect(self) -> None:
        self._session.reconnect()
        render_message(self._console, "Reconnected.")

    def load_profile(self) -> None:
        known = self._store.names()
        if known:
            self._console.print(f"Saved connections: {', '.join(known)}", markup=False)
        name = self._prompt("Connection name: ")
        profile = self._store.load(name)
        self._console.print(f"Connection found, connecting to {profile.describe()}.", markup=False)
        self._session.connect(profile)
        render_message(self._console, f"Connected using '{name.strip()}'.")

    def _prompt(self, message: str) -> str:
        return self._reader(message).strip()


def _first_value(result: QueryResult) -> object:
    value = result.first_value()
    return "unknown" if value is None else value


__all__ = ["CommandDispatcher", "EXIT_SELECTION", "InputReader"]
