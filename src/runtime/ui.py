from __future__ import annotations

from typing import Any, Optional, Protocol

from contracts.ui_protocol import EVENT_CLOCK, EVENT_ERROR, EVENT_PHASE_COMPLETED
from phase_timer import ClockSnapshot

from .messages import (
    NotificationContent,
    available_actions,
    format_duration,
    phase_label,
    session_text,
    status_text,
    title_text,
)


class UIServerLike(Protocol):
    def publish(self, event_type: str, **payload: Any) -> None:
        ...


class RuntimeUIPublisher:
    """Turns clock snapshots and completions into websocket events."""
    def __init__(self, ui_server: Optional[UIServerLike]):
        self._ui_server = ui_server

    def publish(self, event_type: str, **payload: Any) -> None:
        if self._ui_server:
            self._ui_server.publish(event_type, **payload)

    def publish_clock_update(
        self,
        snapshot: ClockSnapshot,
        *,
        action: str,
        accepted: Optional[bool] = None,
        reason: str = "",
        config: Optional[dict[str, str]] = None,
    ) -> None:
        payload: dict[str, Any] = {
            "action": action,
            "mode": snapshot.mode,
            "phase": snapshot.phase,
            "phase_label": phase_label(snapshot.phase),
            "duration_seconds": snapshot.duration_seconds,
            "remaining_seconds": snapshot.remaining_seconds,
            "remaining_text": format_duration(snapshot.remaining_seconds),
            "current_session": snapshot.current_session,
            "completed_sessions": snapshot.completed_sessions,
            "status": status_text(snapshot),
            "title": title_text(snapshot),
            "session_text": session_text(snapshot),
            "available_actions": available_actions(snapshot),
        }
        if accepted is not None:
            payload["accepted"] = accepted
        if reason:
            payload["reason"] = reason
        if config:
            payload["config"] = config
        self.publish(EVENT_CLOCK, **payload)

    def publish_phase_completed(
        self,
        phase: str,
        session: int,
        content: NotificationContent,
    ) -> None:
        self.publish(
            EVENT_PHASE_COMPLETED,
            phase=phase,
            session=session,
            title=content.title,
            body=content.body,
            category=content.category,
        )

    def publish_error(self, message: str, **details: Any) -> None:
        self.publish(EVENT_ERROR, message=message, **details)
