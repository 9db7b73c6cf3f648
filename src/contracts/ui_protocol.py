"""Web UI websocket event, command, and state constants."""

from __future__ import annotations

# Websocket event types (server -> client)
EVENT_HELLO = "hello"
EVENT_CLOCK = "clock"
EVENT_PHASE_COMPLETED = "phase_completed"
EVENT_ERROR = "error"

# Websocket message types (client -> server)
MESSAGE_COMMAND = "command"

# Only current state is replayed to late clients; completions and errors
# are one-off notices.
STICKY_EVENT_TYPES: frozenset[str] = frozenset({EVENT_CLOCK})

STICKY_EVENT_ORDER: tuple[str, ...] = (EVENT_CLOCK,)
