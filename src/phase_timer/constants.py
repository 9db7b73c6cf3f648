"""Phase, mode, action, and reason constants used by the phase clock."""

from __future__ import annotations

DEFAULT_FOCUS_SECONDS = 25 * 60
DEFAULT_SHORT_BREAK_SECONDS = 5 * 60
DEFAULT_LONG_BREAK_SECONDS = 15 * 60
DEFAULT_SESSIONS_PER_LONG_BREAK = 4
DEFAULT_TICK_INTERVAL_SECONDS = 1.0

PHASE_FOCUS = "focus"
PHASE_SHORT_BREAK = "short_break"
PHASE_LONG_BREAK = "long_break"

BREAK_PHASES: frozenset[str] = frozenset({PHASE_SHORT_BREAK, PHASE_LONG_BREAK})

MODE_IDLE = "idle"
MODE_RUNNING = "running"
MODE_PAUSED = "paused"

ACTIVE_MODES: frozenset[str] = frozenset({MODE_RUNNING, MODE_PAUSED})

ACTION_START = "start"
ACTION_PAUSE = "pause"
ACTION_RESUME = "resume"
ACTION_STOP = "stop"
ACTION_SKIP = "skip"

CONTROL_ACTIONS: tuple[str, ...] = (
    ACTION_START,
    ACTION_PAUSE,
    ACTION_RESUME,
    ACTION_STOP,
    ACTION_SKIP,
)

ACTION_SYNC = "sync"
ACTION_TICK = "tick"
ACTION_COMPLETED = "completed"

REASON_STARTED = "started"
REASON_PAUSED = "paused"
REASON_RESUMED = "resumed"
REASON_STOPPED = "stopped"
REASON_SKIPPED = "skipped"
REASON_ALREADY_ACTIVE = "already_active"
REASON_NOT_RUNNING = "not_running"
REASON_NOT_PAUSED = "not_paused"
REASON_NOT_ACTIVE = "not_active"
REASON_UNSUPPORTED_ACTION = "unsupported_action"
REASON_TICK_SCHEDULING_FAILED = "tick_scheduling_failed"
REASON_STARTUP = "startup"
