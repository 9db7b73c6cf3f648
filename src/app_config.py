from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older runtimes
    import tomli as tomllib  # type: ignore

from app_config_parser import parse_app_config
from app_config_schema import (
    DEFAULT_CONFIG_FILE,
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    TimerSettings,
    UIServerSettings,
)

CONFIG_ENV_VAR = "APP_CONFIG_FILE"

__all__ = [
    "CONFIG_ENV_VAR",
    "DEFAULT_CONFIG_FILE",
    "AppConfig",
    "AppConfigurationError",
    "LoggingSettings",
    "NotificationSettings",
    "TimerSettings",
    "UIServerSettings",
    "default_app_config",
    "load_app_config",
    "resolve_config_path",
]


def resolve_config_path(config_path: str | None = None) -> Path:
    env_path = os.getenv(CONFIG_ENV_VAR)
    raw = config_path or env_path or DEFAULT_CONFIG_FILE
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (Path.cwd() / path).resolve()
    if path.exists():
        return path

    # Frozen builds ship config.toml next to the executable.
    if config_path is None and env_path is None and getattr(sys, "frozen", False):
        executable_dir_path = Path(sys.executable).resolve().parent / DEFAULT_CONFIG_FILE
        if executable_dir_path.exists():
            return executable_dir_path

    return path


def default_app_config() -> AppConfig:
    """Settings used when no config file exists at the default location."""
    return AppConfig(
        timer=TimerSettings(),
        notifications=NotificationSettings(),
        ui_server=UIServerSettings(),
        logging=LoggingSettings(),
        source_file="",
    )


def load_app_config(config_path: str | None = None) -> AppConfig:
    path = resolve_config_path(config_path)
    if not path.exists():
        raise AppConfigurationError(f"Config file not found: {path}")
    if not path.is_file():
        raise AppConfigurationError(f"Config path is not a file: {path}")

    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except Exception as error:
        raise AppConfigurationError(f"Failed to parse config TOML: {error}") from error

    if not isinstance(raw, Mapping):
        raise AppConfigurationError("Root config TOML object must be a table.")

    return parse_app_config(raw, base_dir=path.parent, source_file=str(path))
