"""Configuration management for applications embedding the hzcloud client."""

from __future__ import annotations

import configparser
import os
from contextlib import suppress
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from hzcloud.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


class ConfigurationError(ValueError):
    """Raised when configuration values are missing or malformed."""


class _ConfigSchema(BaseModel):
    """Validation schema coercing raw string values to their field types."""

    hetzner_api_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    poll_interval: float = 1.0


@dataclass(slots=True, frozen=True)
class AppConfig:
    """Client configuration resolved at startup."""

    hetzner_api_token: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    verify_ssl: bool = True
    poll_interval: float = 1.0

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Load configuration from environment variables."""

        return cls._validated(_env_values())

    @classmethod
    def from_sources(cls, *, ini_path: Path | None = None) -> "AppConfig":
        """Load configuration from an ini file, overridden by environment variables."""

        merged: dict[str, Optional[str]] = {}
        if ini_path and ini_path.exists():
            merged.update(_load_ini_values(ini_path))
        merged.update(_env_values())
        return cls._validated(merged)

    @classmethod
    def _validated(cls, raw: dict[str, Optional[str]]) -> "AppConfig":
        values = {key: value for key, value in raw.items() if value is not None}
        try:
            data = _ConfigSchema(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid hzcloud configuration: {exc}") from exc
        return cls(**data.model_dump())


def resolve_default_config_path() -> Path:
    """Return path to default configuration file location."""

    return Path("~/.config/hzcloud/config.ini").expanduser()


def resolve_config_path() -> Path:
    """Resolve configuration file path, honoring environment overrides."""

    override = os.getenv("HZCLOUD_CONFIG_PATH")
    if override:
        return Path(override).expanduser()
    return resolve_default_config_path()


def resolve_config(*, config_path: Path | None = None) -> AppConfig:
    """Build configuration from the ini file at ``config_path`` and the environment."""

    path = config_path or resolve_config_path()
    return AppConfig.from_sources(ini_path=path)


def save_config_to_ini(config: AppConfig, path: Path) -> None:
    """Persist configuration values to an ini file, separating secrets."""

    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str  # Preserve field case

    general: dict[str, str] = {}
    secrets: dict[str, str] = {}

    for field in _CONFIG_FIELDS:
        value = getattr(config, field)
        if value is None or value == "":
            continue
        target = secrets if field in _SENSITIVE_FIELDS else general
        target[field] = _format_ini_value(value)

    parser[CONFIG_SECTION] = general
    if secrets:
        parser[SECRETS_SECTION] = secrets

    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        parser.write(handle)

    with suppress(PermissionError, NotImplementedError):
        os.chmod(path, 0o600)


def _get_env(key: str) -> Optional[str]:
    """Return environment variable value with blank strings normalized to None."""
    value = os.getenv(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _env_values() -> dict[str, Optional[str]]:
    values = {
        "hetzner_api_token": _get_env("HCLOUD_TOKEN") or _get_env("HETZNER_API_TOKEN"),
        "base_url": _get_env("HCLOUD_ENDPOINT"),
        "timeout": _get_env("HCLOUD_TIMEOUT"),
        "verify_ssl": _get_env("HCLOUD_VERIFY_SSL"),
        "poll_interval": _get_env("HCLOUD_POLL_INTERVAL"),
    }
    return {key: value for key, value in values.items() if value is not None}


def _format_ini_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


CONFIG_SECTION = "hzcloud"
SECRETS_SECTION = "hzcloud.secrets"
_CONFIG_FIELDS = tuple(item.name for item in fields(AppConfig))
_SENSITIVE_FIELDS = {"hetzner_api_token"}


def _load_ini_values(path: Path) -> dict[str, Optional[str]]:
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    if not parser.read(path, encoding="utf-8"):
        return {}

    values: dict[str, Optional[str]] = {}
    for field in _CONFIG_FIELDS:
        section = SECRETS_SECTION if field in _SENSITIVE_FIELDS else CONFIG_SECTION
        if parser.has_option(section, field):
            raw = parser.get(section, field)
            values[field] = raw.strip() or None
    return values
