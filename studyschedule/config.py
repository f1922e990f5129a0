"""
Application configuration.

Loaded from a YAML file, for example:

    storage_path: ~/.studyschedule/store.json
    timezone: Europe/Zurich
    refresh_interval_seconds: 60
    logging:
      level: INFO
      json: false

Every key is optional; a missing file means all defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from studyschedule.errors import ConfigError
from studyschedule.storage import default_store_path


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    json: bool = False


@dataclass
class AppConfig:
    storage_path: Path = field(default_factory=default_store_path)
    timezone: str = "UTC"
    refresh_interval_seconds: int = 60
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


def _default_config_path() -> Path:
    return Path.home() / ".studyschedule" / "config.yaml"


def load_config(path: str | Path | None = None) -> AppConfig:
    """
    Load configuration. With no path, the default location is used when it
    exists; otherwise defaults are returned.
    """
    p = Path(path) if path is not None else _default_config_path()
    if not p.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {p}")
        return AppConfig()

    try:
        data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {p}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config {p} must be a mapping")

    return config_from_dict(data)


def config_from_dict(data: Dict[str, Any]) -> AppConfig:
    log = data.get("logging") or {}
    if not isinstance(log, dict):
        raise ConfigError("logging must be a mapping")
    defaults = AppConfig()

    storage_raw = data.get("storage_path")
    storage_path = Path(str(storage_raw)).expanduser() if storage_raw else defaults.storage_path

    try:
        interval = int(data.get("refresh_interval_seconds", defaults.refresh_interval_seconds))
    except (TypeError, ValueError) as e:
        raise ConfigError("refresh_interval_seconds must be an integer") from e
    if interval <= 0:
        raise ConfigError("refresh_interval_seconds must be positive")

    cfg = AppConfig(
        storage_path=storage_path,
        timezone=str(data.get("timezone", defaults.timezone)),
        refresh_interval_seconds=interval,
        logging=LoggingConfig(
            level=str(log.get("level", defaults.logging.level)).upper(),
            json=bool(log.get("json", defaults.logging.json)),
        ),
    )

    try:
        cfg.tz
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise ConfigError(f"Unknown timezone: {cfg.timezone}") from e

    return cfg
