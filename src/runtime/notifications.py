"""Notification sinks that surface phase completions to the user."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from phase_timer import NotificationSink

from .messages import notification_content
from .ui import RuntimeUIPublisher


class LoggingNotificationSink:
    """Writes the completion notification text to the log."""
    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or logging.getLogger("notifications")

    def on_phase_completed(self, phase: str, session: int) -> None:
        content = notification_content(phase, session)
        self._logger.info("%s %s", content.title, content.body)


class UINotificationSink:
    """Publishes a `phase_completed` event to connected UI clients."""
    def __init__(
        self,
        ui: RuntimeUIPublisher,
        logger: Optional[logging.Logger] = None,
    ):
        self._ui = ui
        self._logger = logger or logging.getLogger("notifications")

    def on_phase_completed(self, phase: str, session: int) -> None:
        try:
            self._ui.publish_phase_completed(
                phase,
                session,
                notification_content(phase, session),
            )
        except Exception as error:
            self._logger.error("UI completion notification failed: %s", error)


class CompositeNotificationSink:
    """Fans a completion out to several sinks; one failure does not stop the rest."""
    def __init__(
        self,
        sinks: Iterable[NotificationSink],
        logger: Optional[logging.Logger] = None,
    ):
        self._sinks = tuple(sinks)
        self._logger = logger or logging.getLogger("notifications")

    def on_phase_completed(self, phase: str, session: int) -> None:
        for sink in self._sinks:
            try:
                sink.on_phase_completed(phase, session)
            except Exception as error:
                self._logger.error(
                    "Notification sink %s failed: %s",
                    type(sink).__name__,
                    error,
                    exc_info=True,
                )
