"""Utilities for serializing UI events, parsing commands, and sticky state."""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from contracts.ui_protocol import MESSAGE_COMMAND, STICKY_EVENT_ORDER, STICKY_EVENT_TYPES
from phase_timer.constants import CONTROL_ACTIONS


def make_event(
    event_type: str,
    *,
    now_fn: Callable[[], datetime] | None = None,
    **payload: Any,
) -> str:
    """Serialize an event payload with type and timestamp for websocket delivery."""
    now = now_fn() if now_fn is not None else datetime.now(timezone.utc)
    return json.dumps(
        {
            "type": event_type,
            "timestamp": now.isoformat(),
            **payload,
        }
    )


def parse_command(message: str | bytes) -> Optional[str]:
    """Return the control action named by a client message, if it is one."""
    try:
        decoded = json.loads(message)
    except (TypeError, ValueError):
        return None

    if not isinstance(decoded, dict) or decoded.get("type") != MESSAGE_COMMAND:
        return None

    action = decoded.get("action")
    if not isinstance(action, str):
        return None

    action = action.strip().lower()
    if action not in CONTROL_ACTIONS:
        return None
    return action


class StickyEventStore:
    """Thread-safe cache of sticky events replayed to new websocket clients."""
    def __init__(self):
        self._events: dict[str, str] = {}
        self._lock = threading.Lock()

    def remember(self, event_type: str, message: str) -> None:
        if event_type not in STICKY_EVENT_TYPES:
            return
        with self._lock:
            self._events[event_type] = message

    def snapshot(self) -> list[str]:
        with self._lock:
            return [self._events[key] for key in STICKY_EVENT_ORDER if key in self._events]
