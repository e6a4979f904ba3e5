"""Terminal rendering helpers built on rich."""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .errors import PsqlStatsError
from .models import QueryResult, SessionStatus

WELCOME = """
    ==================================================
    =  PSQL Stats - A command line Postgres toolkit  =
    ==================================================
"""

HELP_MENU = """
    Help Menu:
    =   0 - Exit the program
    =   1 - Save your connection information to a file
    =   2 - Get the Uptime of your database
    =   3 - Get the Version of your database
    =   4 - List all public tables in your database
    =   5 - List all installed extensions
    =   6 - Run a custom query
    =   7 - Attempt to reestablish connection to database
    =   8 - Attempt to load a connection from a file
"""


def render_welcome(console: Console) -> None:
    console.print(WELCOME, highlight=False, markup=False)


def render_menu(console: Console) -> None:
    console.print(HELP_MENU, highlight=False, markup=False)


def render_status(console: Console, status: SessionStatus) -> None:
    """Print the connection status line shown after every command."""

    if status is SessionStatus.CONNECTED:
        label = "[bold green]Connected[/bold green]"
    else:
        label = "[bold red]Not Connected[/bold red]"
    console.print(f"Connection status: {label}")


def render_error(console: Console, error: PsqlStatsError) -> None:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")


def render_message(console: Console, message: str) -> None:
    console.print(f"[bold green]✓[/bold green] {escape(message)}")


def render_result(console: Console, result: QueryResult, *, title: str | None = None) -> None:
    """Render a query result as a table, or its command status when it has no columns."""

    if not result.columns:
        console.print(f"{escape(result.status)} ({result.elapsed_ms} ms)")
        return
    table = Table(title=title, box=box.SIMPLE_HEAVY)
    for column in result.columns:
        table.add_column(escape(column), style="cyan")
    for row in result.rows:
        table.add_row(*(escape(_format_cell(value)) for value in row))
    console.print(table)
    console.print(f"[dim]{escape(result.status)} ({result.elapsed_ms} ms)[/dim]")


def _format_cell(value: object) -> str:
    if value is None:
        return "NULL"
    return str(value)


__all__ = [
    "HELP_MENU",
    "WELCOME",
    "render_error",
    "render_menu",
    "render_message",
    "render_result",
    "render_status",
    "render_welcome",
]
