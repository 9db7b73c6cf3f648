"""Runtime orchestration loop that owns the phase clock and its tick source."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from app_config import AppConfig
from phase_timer import (
    ActivityGuard,
    ClockActionResult,
    ClockSnapshot,
    NotificationSink,
    PhaseClock,
    TimerDriver,
    TimerDriverError,
)
from phase_timer.constants import (
    ACTION_START,
    ACTION_SYNC,
    REASON_STARTUP,
    REASON_TICK_SCHEDULING_FAILED,
)
from server import UIServer

from .messages import describe_config
from .notifications import (
    CompositeNotificationSink,
    LoggingNotificationSink,
    UINotificationSink,
)
from .ui import RuntimeUIPublisher


@dataclass(frozen=True)
class RuntimeHooks:
    """Injectable lifecycle hooks used by runtime startup flow."""
    setup_signal_handlers: Callable[["RuntimeEngine"], None]


@dataclass(frozen=True)
class RuntimeBootstrap:
    """Dependency bundle required to construct the runtime engine."""
    logger: logging.Logger
    app_config: AppConfig
    ui_server: Optional[UIServer]
    hooks: RuntimeHooks
    activity_guard: Optional[ActivityGuard] = None


class RuntimeEngine:
    """Runs the asyncio loop that every clock mutation happens on."""
    def __init__(
        self,
        bootstrap: RuntimeBootstrap,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self._bootstrap = bootstrap
        self._logger = bootstrap.logger
        self._loop = loop or asyncio.new_event_loop()
        self._ui = RuntimeUIPublisher(bootstrap.ui_server)

        timer_settings = bootstrap.app_config.timer
        self._clock = PhaseClock(
            timer_settings.to_clock_config(),
            logger=logging.getLogger("phase_clock"),
        )
        self._clock.subscribe(self._publish_clock_update)
        self._driver = TimerDriver(
            self._clock,
            loop=self._loop,
            notification_sink=self._build_notification_sink(),
            activity_guard=bootstrap.activity_guard,
            tick_interval_seconds=timer_settings.tick_interval_seconds,
            logger=logging.getLogger("timer_driver"),
        )

    @property
    def driver(self) -> TimerDriver:
        return self._driver

    def run(self) -> int:
        asyncio.set_event_loop(self._loop)
        ui_server = self._bootstrap.ui_server
        try:
            self._bootstrap.hooks.setup_signal_handlers(self)
            self._publish_startup_sync()
            if ui_server is not None:
                ui_server.set_command_handler(self.submit_command)

            if self._bootstrap.app_config.timer.auto_start:
                self.handle_command(ACTION_START)

            config = self._clock.config
            self._logger.info(
                "Phase timer ready (focus=%ss short=%ss long=%ss every %d sessions)",
                config.focus_seconds,
                config.short_break_seconds,
                config.long_break_seconds,
                config.sessions_per_long_break,
            )
            self._loop.run_forever()
            return 0

        except KeyboardInterrupt:
            self._logger.info("Shutdown requested by keyboard interrupt.")
            return 0
        except Exception as error:
            self._logger.error("Unexpected error: %s", error, exc_info=True)
            return 1
        finally:
            self._shutdown()

    def handle_command(self, action: str) -> Optional[ClockActionResult]:
        """Apply a control action; must run on the loop thread."""
        try:
            result = self._driver.apply(action)
        except TimerDriverError as error:
            self._logger.error("Command %s failed: %s", action, error)
            self._ui.publish_error(
                f"Command {action} failed: {error}",
                action=action,
                reason=REASON_TICK_SCHEDULING_FAILED,
            )
            return None

        if not result.accepted:
            self._logger.info("Command %s ignored: %s", action, result.reason)
            self._ui.publish_clock_update(
                result.snapshot,
                action=action,
                accepted=False,
                reason=result.reason,
            )
        return result

    def submit_command(self, action: str) -> None:
        """Thread-safe: schedule ``action`` on the loop thread."""
        try:
            self._loop.call_soon_threadsafe(self.handle_command, action)
        except RuntimeError:
            self._logger.warning("Dropping command %s; runtime loop is closed.", action)

    def request_shutdown(self) -> None:
        try:
            self._loop.call_soon_threadsafe(self._loop.stop)
        except RuntimeError:
            # Loop already closed.
            return

    def _build_notification_sink(self) -> NotificationSink:
        settings = self._bootstrap.app_config.notifications
        sinks: list[NotificationSink] = []
        if settings.log_enabled:
            sinks.append(LoggingNotificationSink(logging.getLogger("notifications")))
        if settings.ui_enabled:
            sinks.append(UINotificationSink(self._ui, logging.getLogger("notifications")))
        return CompositeNotificationSink(sinks, logging.getLogger("notifications"))

    def _publish_clock_update(self, snapshot: ClockSnapshot, action: str) -> None:
        self._ui.publish_clock_update(snapshot, action=action)

    def _publish_startup_sync(self) -> None:
        self._ui.publish_clock_update(
            self._clock.snapshot(),
            action=ACTION_SYNC,
            accepted=True,
            reason=REASON_STARTUP,
            config=describe_config(self._clock.config),
        )

    def _shutdown(self) -> None:
        try:
            self._driver.stop()
        except Exception as error:
            self._logger.error("Error stopping timer driver: %s", error, exc_info=True)

        ui_server = self._bootstrap.ui_server
        if ui_server is not None:
            ui_server.set_command_handler(None)
            self._logger.info("Stopping UI server...")
            try:
                ui_server.stop(timeout_seconds=5.0)
            except Exception as error:
                self._logger.error("Error stopping UI server: %s", error, exc_info=True)

        if not self._loop.is_closed():
            self._loop.close()
