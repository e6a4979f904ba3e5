"""Command line entry point: parse flags, open the session, run the menu."""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from dataclasses import replace
from pathlib import Path
from types import FrameType

from rich.console import Console

from .config import AppConfig, load_config
from .dispatcher import CommandDispatcher, InputReader
from .errors import DatabaseConnectionError, PsqlStatsError
from .gateway import AsyncpgGateway, DatabaseGateway
from .models import ConnectionProfile
from .render import render_error
from .session import SessionManager
from .store import ProfileStore

LOG = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STARTUP_FAILURE = 1

DEFAULT_HOST = "localhost"


def _port(value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port {value!r}") from None
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port {port} is outside the range 1-65535")
    return port


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="psqlstats",
        description="View basic statistics for a PostgreSQL database.",
    )
    parser.add_argument("-H", "--host", help="Database hostname (default: localhost)")
    parser.add_argument("-U", "--user", help="Database user (default: postgres)")
    parser.add_argument("-d", "--dbname", help="Database name (default: the user name)")
    parser.add_argument("-p", "--port", type=_port, help="Database port (default: 5432)")
    parser.add_argument("-W", "--password", help="Database password")
    parser.add_argument("-l", "--load", metavar="NAME", help="Name of a previously saved connection")
    parser.add_argument("--store", type=Path, help="Path of the saved connections file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level for diagnostics on stderr",
    )
    return parser.parse_args(argv)


def profile_from_args(args: argparse.Namespace, config: AppConfig) -> ConnectionProfile | None:
    """Build a profile from the connection flags, or None when none were given."""

    flags = (args.host, args.user, args.dbname, args.port, args.password)
    if all(flag is None for flag in flags):
        return None
    user = args.user or config.default_user
    return ConnectionProfile(
        host=args.host or DEFAULT_HOST,
        port=args.port if args.port is not None else config.default_port,
        user=user,
        password=args.password or "",
        dbname=args.dbname or user,
    )


def _raise_system_exit(signum: int, frame: FrameType | None) -> None:
    raise SystemExit(128 + signum)


def main(
    argv: list[str] | None = None,
    *,
    gateway: DatabaseGateway | None = None,
    console: Console | None = None,
    error_console: Console | None = None,
    reader: InputReader = input,
) -> int:
    """Run psqlstats; returns the process exit code."""

    args = parse_args(sys.argv[1:] if argv is None else argv)
    config = load_config().with_overrides(profile_store=args.store, log_level=args.log_level)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console = console or Console()
    store = ProfileStore(config.profile_store)
    LOG.debug("Using profile store", extra={"path": str(store.path)})

    profile: ConnectionProfile | None
    if args.load:
        try:
            profile = store.load(args.load)
        except PsqlStatsError as exc:
            LOG.debug("Startup profile load failed", exc_info=True, extra={"profile": args.load})
            render_error(error_console or Console(stderr=True), exc)
            return EXIT_STARTUP_FAILURE
        console.print(f"Connection '{args.load}' found, loading information.", markup=False)
        if args.password:
            profile = replace(profile, password=args.password)
    else:
        profile = profile_from_args(args, config)

    owned_gateway = None if gateway is not None else AsyncpgGateway(connect_timeout=config.connect_timeout)
    active_gateway = gateway or owned_gateway
    previous_handler = signal.signal(signal.SIGTERM, _raise_system_exit)
    try:
        with SessionManager(active_gateway) as session:
            if profile is not None:
                try:
                    session.connect(profile)
                except DatabaseConnectionError as exc:
                    render_error(console, exc)
            CommandDispatcher(session, store, console=console, reader=reader).run()
    finally:
        if previous_handler is not None:
            signal.signal(signal.SIGTERM, previous_handler)
        if owned_gateway is not None:
            owned_gateway.shutdown()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
