"""Typed parser for config.toml sections into immutable app settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from app_config_schema import (
    AppConfig,
    AppConfigurationError,
    LoggingSettings,
    NotificationSettings,
    TimerSettings,
    UIServerSettings,
)

_ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def parse_app_config(
    raw: Mapping[str, Any],
    *,
    base_dir: Path,
    source_file: str,
) -> AppConfig:
    """Parse raw TOML mappings into strongly typed application settings."""
    timer = _parse_timer_settings(_section(raw, "timer"))
    notifications = _parse_notification_settings(_section(raw, "notifications"))
    ui_server = _parse_ui_server_settings(_section(raw, "ui_server"), base_dir=base_dir)
    logging_settings = _parse_logging_settings(_section(raw, "logging"))

    return AppConfig(
        timer=timer,
        notifications=notifications,
        ui_server=ui_server,
        logging=logging_settings,
        source_file=source_file,
    )


def _parse_timer_settings(section: Mapping[str, Any]) -> TimerSettings:
    defaults = TimerSettings()
    return TimerSettings(
        focus_seconds=_as_positive_int(
            section.get("focus_seconds", defaults.focus_seconds),
            "timer.focus_seconds",
        ),
        short_break_seconds=_as_positive_int(
            section.get("short_break_seconds", defaults.short_break_seconds),
            "timer.short_break_seconds",
        ),
        long_break_seconds=_as_positive_int(
            section.get("long_break_seconds", defaults.long_break_seconds),
            "timer.long_break_seconds",
        ),
        sessions_per_long_break=_as_positive_int(
            section.get("sessions_per_long_break", defaults.sessions_per_long_break),
            "timer.sessions_per_long_break",
        ),
        tick_interval_seconds=_as_positive_float(
            section.get("tick_interval_seconds", defaults.tick_interval_seconds),
            "timer.tick_interval_seconds",
        ),
        auto_start=_as_bool(section.get("auto_start", False), "timer.auto_start"),
    )


def _parse_notification_settings(section: Mapping[str, Any]) -> NotificationSettings:
    return NotificationSettings(
        log_enabled=_as_bool(
            section.get("log_enabled", True),
            "notifications.log_enabled",
        ),
        ui_enabled=_as_bool(
            section.get("ui_enabled", True),
            "notifications.ui_enabled",
        ),
    )


def _parse_ui_server_settings(
    section: Mapping[str, Any],
    *,
    base_dir: Path,
) -> UIServerSettings:
    index_file = _as_str(section.get("index_file", ""), "ui_server.index_file")
    return UIServerSettings(
        enabled=_as_bool(section.get("enabled", True), "ui_server.enabled"),
        host=_as_str(section.get("host", "127.0.0.1"), "ui_server.host"),
        port=_as_int(section.get("port", 8765), "ui_server.port"),
        index_file=_resolve_path(base_dir, index_file) if index_file else "",
    )


def _parse_logging_settings(section: Mapping[str, Any]) -> LoggingSettings:
    level = _as_str(section.get("level", "INFO"), "logging.level").upper()
    if level not in _ALLOWED_LOG_LEVELS:
        allowed = ", ".join(sorted(_ALLOWED_LOG_LEVELS))
        raise AppConfigurationError(f"logging.level must be one of: {allowed}.")
    return LoggingSettings(level=level)


def _section(root: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    raw = root.get(name, {})
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise AppConfigurationError(f"[{name}] must be a table.")
    return raw


def _as_str(value: Any, field: str) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    raise AppConfigurationError(f"{field} must be a string.")


def _as_bool(value: Any, field: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes", "on"):
            return True
        if lowered in ("false", "0", "no", "off"):
            return False
    raise AppConfigurationError(f"{field} must be a boolean.")


def _as_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be an integer.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be an integer.") from error
    raise AppConfigurationError(f"{field} must be an integer.")


def _as_positive_int(value: Any, field: str) -> int:
    number = _as_int(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero.")
    return number


def _as_float(value: Any, field: str) -> float:
    if isinstance(value, bool):
        raise AppConfigurationError(f"{field} must be a float.")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as error:
            raise AppConfigurationError(f"{field} must be a float.") from error
    raise AppConfigurationError(f"{field} must be a float.")


def _as_positive_float(value: Any, field: str) -> float:
    number = _as_float(value, field)
    if number <= 0:
        raise AppConfigurationError(f"{field} must be greater than zero.")
    return number


def _resolve_path(base_dir: Path, raw: str) -> str:
    if not raw:
        return ""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (base_dir / path).resolve()
    return str(path)
