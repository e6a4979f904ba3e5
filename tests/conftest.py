"""Shared fixtures: a stub gateway standing in for the PostgreSQL driver."""

from __future__ import annotations

from pathlib import Path

import pytest

from psqlstats import config as config_module
from psqlstats.models import ConnectionProfile, QueryResult


class DriverFailure(Exception):
    """Native error raised by the stub driver."""


class StubGateway:
    """Records calls and hands out numbered handles."""

    def __init__(self, *, fail_open: bool = False, fail_query: bool = False) -> None:
        self.fail_open = fail_open
        self.fail_query = fail_query
        self.opened: list[ConnectionProfile] = []
        self.closed: list[object] = []
        self.queries: list[str] = []
        self.result = QueryResult(columns=("value",), rows=(("ok",),), status="1 row(s)", elapsed_ms=1, row_count=1)
        self._next = 0

    def open(self, profile: ConnectionProfile) -> object:
        self.opened.append(profile)
        if self.fail_open:
            raise DriverFailure("password authentication failed for user \"postgres\"")
        self._next += 1
        return f"handle-{self._next}"

    def query(self, handle: object, sql: str) -> QueryResult:
        self.queries.append(sql)
        if self.fail_query:
            raise DriverFailure("syntax error at or near \"SELEC\"")
        return self.result

    def close(self, handle: object) -> None:
        self.closed.append(handle)


@pytest.fixture
def gateway() -> StubGateway:
    return StubGateway()


@pytest.fixture
def profile() -> ConnectionProfile:
    return ConnectionProfile(host="db.local", port=5432, user="postgres", password="x", dbname="app")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config file at a temp dir so tests never read the real home."""

    config_path = tmp_path / "config" / "config.toml"
    monkeypatch.setattr(config_module, "CONFIG_FILE", config_path)
    monkeypatch.setattr(config_module, "CONFIG_DIR", config_path.parent)
    return config_path
