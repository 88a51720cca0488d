"""Configuration helpers for applications using the hzcloud client."""

from .config import (
    AppConfig,
    ConfigurationError,
    resolve_config,
    resolve_config_path,
    resolve_default_config_path,
    save_config_to_ini,
)
from .factory import build_client

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "build_client",
    "resolve_config",
    "resolve_config_path",
    "resolve_default_config_path",
    "save_config_to_ini",
]
