"""Tests for the file-backed profile store."""

from __future__ import annotations

from pathlib import Path

import pytest

from psqlstats.errors import ErrorKind, ProfileNotFoundError, StoreError
from psqlstats.models import ConnectionProfile
from psqlstats.store import ProfileStore


def test_save_then_load_round_trips(tmp_path: Path, profile: ConnectionProfile) -> None:
    store = ProfileStore(tmp_path / "profiles.toml")

    store.save("prod", profile)

    assert store.load("prod") == profile


def test_round_trip_preserves_awkward_strings(tmp_path: Path) -> None:
    store = ProfileStore(tmp_path / "profiles.toml")
    profile = ConnectionProfile(
        host="db.example.com",
        port=6543,
        user="ops \"admin\"",
        password="p@ss\\word\n\tzé\x7f\x01",
        dbname="app-ünïcode",
    )

    store.save("weird name = [x]", profile)

    assert ProfileStore(tmp_path / "profiles.toml").load("weird name = [x]") == profile


def test_save_overwrites_existing_name(tmp_path: Path, profile: ConnectionProfile) -> None:
    store = ProfileStore(tmp_path / "profiles.toml")
    store.save("prod", profile)
    updated = ConnectionProfile(host="db2.local", dbname="app", password="y")

    store.save("prod", updated)

    assert store.load("prod") == updated
    assert store.names() == ("prod",)


def test_names_keep_file_order(tmp_path: Path, profile: ConnectionProfile) -> None:
    store = ProfileStore(tmp_path / "profiles.toml")
    store.save("prod", profile)
    store.save("staging", profile)

    assert store.names() == ("prod", "staging")


def test_load_unknown_name_raises_not_found(tmp_path: Path, profile: ConnectionProfile) -> None:
    store = ProfileStore(tmp_path / "profiles.toml")
    store.save("prod", profile)

    with pytest.raises(ProfileNotFoundError) as excinfo:
        store.load("missing")

    assert excinfo.value.kind is ErrorKind.NOT_FOUND


def test_load_from_missing_file_raises_not_found(tmp_path: Path) -> None:
    store = ProfileStore(tmp_path / "nope.toml")

    with pytest.raises(ProfileNotFoundError):
        store.load("prod")


def test_save_creates_parent_directories(tmp_path: Path, profile: ConnectionProfile) -> None:
    path = tmp_path / "nested" / "dir" / "profiles.toml"

    ProfileStore(path).save("prod", profile)

    assert path.exists()
    assert "[[profiles]]" in path.read_text(encoding="utf-8")


def test_corrupt_file_raises_store_error(tmp_path: Path, profile: ConnectionProfile) -> None:
    path = tmp_path / "profiles.toml"
    path.write_text("profiles = [unterminated")
    store = ProfileStore(path)

    with pytest.raises(StoreError):
        store.load("prod")
    with pytest.raises(StoreError):
        store.save("prod", profile)
    assert path.read_text() == "profiles = [unterminated"


def test_invalid_record_raises_store_error(tmp_path: Path) -> None:
    path = tmp_path / "profiles.toml"
    path.write_text('[[profiles]]\nname = "prod"\nhost = "db.local"\nport = 99999\ndbname = "app"\n')

    with pytest.raises(StoreError) as excinfo:
        ProfileStore(path).load("prod")

    assert excinfo.value.kind is ErrorKind.STORE


def test_unwritable_path_raises_store_error(tmp_path: Path, profile: ConnectionProfile) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    store = ProfileStore(blocker / "profiles.toml")

    with pytest.raises(StoreError):
        store.save("prod", profile)


def test_blank_name_is_rejected(tmp_path: Path, profile: ConnectionProfile) -> None:
    with pytest.raises(StoreError):
        ProfileStore(tmp_path / "profiles.toml").save("   ", profile)
