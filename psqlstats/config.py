"""App configuration loading helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError

from .models import DEFAULT_PORT, DEFAULT_USER

LOG = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "psqlstats"
CONFIG_FILE = CONFIG_DIR / "config.toml"


class AppConfig(BaseModel):
    """Shape of the application configuration file."""

    profile_store: Path = Field(default_factory=lambda: CONFIG_DIR / "profiles.toml")
    default_user: str = DEFAULT_USER
    default_port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    log_level: str = "WARNING"
    connect_timeout: float = Field(default=60.0, gt=0)

    def with_overrides(self, **updates: object) -> AppConfig:
        """Return a copy with the non-None values in ``updates`` applied."""

        changes = {key: value for key, value in updates.items() if value is not None}
        if not changes:
            return self
        return self.model_copy(update=changes)


def load_config() -> AppConfig:
    """Load configuration from disk; fall back to defaults if missing or invalid."""

    try:
        with CONFIG_FILE.open("rb") as handle:
            raw = tomllib.load(handle)
    except FileNotFoundError:
        return AppConfig()
    except (tomllib.TOMLDecodeError, OSError) as exc:
        LOG.warning("Ignoring unreadable config file %s: %s", CONFIG_FILE, exc)
        return AppConfig()

    data: dict[str, object] = {}
    for key in ("default_user", "log_level"):
        value = raw.get(key)
        if isinstance(value, str):
            data[key] = value
    store = raw.get("profile_store")
    if isinstance(store, str):
        data["profile_store"] = Path(store).expanduser()
    port = raw.get("default_port")
    if isinstance(port, int) and not isinstance(port, bool):
        data["default_port"] = port
    timeout = raw.get("connect_timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        data["connect_timeout"] = float(timeout)

    try:
        return AppConfig(**data)
    except ValidationError as exc:
        LOG.warning("Ignoring invalid config file %s: %s", CONFIG_FILE, exc)
        return AppConfig()


__all__ = ["AppConfig", "CONFIG_FILE", "load_config"]
