"""File-backed storage for named connection profiles."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError

from .errors import ProfileNotFoundError, StoreError
from .models import DEFAULT_PORT, DEFAULT_USER, ConnectionProfile

LOG = logging.getLogger(__name__)


class ProfileRecord(BaseModel):
    """Persisted form of a connection profile."""

    name: str = Field(min_length=1)
    host: str
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    user: str = DEFAULT_USER
    password: str = ""
    dbname: str

    @classmethod
    def from_profile(cls, name: str, profile: ConnectionProfile) -> ProfileRecord:
        return cls(
            name=name,
            host=profile.host,
            port=profile.port,
            user=profile.user,
            password=profile.password,
            dbname=profile.dbname,
        )

    def to_profile(self) -> ConnectionProfile:
        return ConnectionProfile(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            dbname=self.dbname,
        )


class ProfileStore:
    """Named profiles kept as ``[[profiles]]`` tables in a TOML file."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def save(self, name: str, profile: ConnectionProfile) -> None:
        """Insert or overwrite the profile stored under ``name``."""

        name = name.strip()
        if not name:
            raise StoreError("Profile name must not be empty.")
        try:
            record = ProfileRecord.from_profile(name, profile)
        except ValidationError as exc:
            raise StoreError(f"Cannot serialize profile '{name}': {exc}") from exc
        records = [existing for existing in self._read() if existing.name != name]
        records.append(record)
        self._write(records)
        LOG.info("Saved profile", extra={"profile": name, "path": str(self._path)})

    def load(self, name: str) -> ConnectionProfile:
        """Return the profile stored under ``name``."""

        name = name.strip()
        for record in reversed(self._read()):
            if record.name == name:
                return record.to_profile()
        raise ProfileNotFoundError(name)

    def names(self) -> tuple[str, ...]:
        """Names of the stored profiles in file order."""

        return tuple(record.name for record in self._read())

    def _read(self) -> list[ProfileRecord]:
        try:
            with self._path.open("rb") as handle:
                raw = tomllib.load(handle)
        except FileNotFoundError:
            return []
        except tomllib.TOMLDecodeError as exc:
            raise StoreError(f"Profile store {self._path} is corrupt: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Cannot read profile store {self._path}: {exc}") from exc
        profiles = raw.get("profiles", [])
        if not isinstance(profiles, list):
            raise StoreError(f"Profile store {self._path} is corrupt: 'profiles' must be an array of tables.")
        try:
            return [ProfileRecord.model_validate(entry) for entry in profiles]
        except ValidationError as exc:
            raise StoreError(f"Profile store {self._path} is corrupt: {exc}") from exc

    def _write(self, records: list[ProfileRecord]) -> None:
        lines: list[str] = []
        for record in records:
            lines.append("[[profiles]]")
            lines.append(f"name = {_toml_string(record.name)}")
            lines.append(f"host = {_toml_string(record.host)}")
            lines.append(f"port = {record.port}")
            lines.append(f"user = {_toml_string(record.user)}")
            lines.append(f"password = {_toml_string(record.password)}")
            lines.append(f"dbname = {_toml_string(record.dbname)}")
            lines.append("")
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text("\n".join(lines), encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise StoreError(f"Cannot write profile store {self._path}: {exc}") from exc


def _toml_string(value: str) -> str:
    # JSON string escapes are a subset of TOML basic-string escapes; DEL is the
    # one control character JSON leaves raw but TOML rejects.
    return json.dumps(value, ensure_ascii=False).replace("\x7f", "\\u007f")


__all__ = ["ProfileRecord", "ProfileStore"]
