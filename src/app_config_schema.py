"""Dataclass schema objects used by runtime configuration loading."""

from __future__ import annotations

from dataclasses import dataclass

from phase_timer import ClockConfig
from phase_timer.constants import (
    DEFAULT_FOCUS_SECONDS,
    DEFAULT_LONG_BREAK_SECONDS,
    DEFAULT_SESSIONS_PER_LONG_BREAK,
    DEFAULT_SHORT_BREAK_SECONDS,
    DEFAULT_TICK_INTERVAL_SECONDS,
)

DEFAULT_CONFIG_FILE = "config.toml"


class AppConfigurationError(Exception):
    """Raised when application configuration fails."""


@dataclass(frozen=True)
class TimerSettings:
    """Phase durations and tick cadence from `[timer]`."""
    focus_seconds: int = DEFAULT_FOCUS_SECONDS
    short_break_seconds: int = DEFAULT_SHORT_BREAK_SECONDS
    long_break_seconds: int = DEFAULT_LONG_BREAK_SECONDS
    sessions_per_long_break: int = DEFAULT_SESSIONS_PER_LONG_BREAK
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS
    auto_start: bool = False

    def to_clock_config(self) -> ClockConfig:
        return ClockConfig(
            focus_seconds=self.focus_seconds,
            short_break_seconds=self.short_break_seconds,
            long_break_seconds=self.long_break_seconds,
            sessions_per_long_break=self.sessions_per_long_break,
        )


@dataclass(frozen=True)
class NotificationSettings:
    """Phase-completion notification targets from `[notifications]`."""
    log_enabled: bool = True
    ui_enabled: bool = True


@dataclass(frozen=True)
class UIServerSettings:
    """Built-in UI server settings from `[ui_server]`."""
    enabled: bool = True
    host: str = "127.0.0.1"
    port: int = 8765
    index_file: str = ""


@dataclass(frozen=True)
class LoggingSettings:
    """Root log level from `[logging]`."""
    level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Complete typed runtime configuration loaded from `config.toml`."""
    timer: TimerSettings
    notifications: NotificationSettings
    ui_server: UIServerSettings
    logging: LoggingSettings
    source_file: str
