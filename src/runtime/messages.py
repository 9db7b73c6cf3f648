"""Status, title, and notification text builders for the phase clock."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from phase_timer import ClockConfig, ClockSnapshot
from phase_timer.constants import (
    ACTION_PAUSE,
    ACTION_RESUME,
    ACTION_SKIP,
    ACTION_START,
    ACTION_STOP,
    BREAK_PHASES,
    MODE_PAUSED,
    PHASE_FOCUS,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
)

CATEGORY_FOCUS_END = "focus_end"
CATEGORY_BREAK_END = "break_end"

_PHASE_LABELS: dict[str, str] = {
    PHASE_FOCUS: "Focus",
    PHASE_SHORT_BREAK: "Short break",
    PHASE_LONG_BREAK: "Long break",
}


@dataclass(frozen=True)
class NotificationContent:
    """Title/body pair shown when a phase runs out."""
    title: str
    body: str
    category: str


def format_duration(seconds: int) -> str:
    """Format a duration in seconds as `MM:SS`."""
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{remainder:02d}"


def format_minutes(seconds: int) -> str:
    minutes, remainder = divmod(max(0, int(seconds)), 60)
    if remainder:
        return f"{minutes} min {remainder} s" if minutes else f"{remainder} s"
    return f"{minutes} min"


def phase_label(phase: Optional[str]) -> str:
    if phase is None:
        return ""
    return _PHASE_LABELS.get(phase, phase)


def status_text(snapshot: ClockSnapshot) -> str:
    """Build the long status line, e.g. `Focus - running`."""
    if snapshot.is_running:
        return f"{phase_label(snapshot.phase)} - running"
    if snapshot.mode == MODE_PAUSED:
        return f"{phase_label(snapshot.phase)} - paused"
    return "Ready"


def title_text(snapshot: ClockSnapshot) -> str:
    """Build the compact title shown next to the remaining time."""
    if not snapshot.is_active:
        return "Ready"

    label = "Break" if snapshot.phase in BREAK_PHASES else "Focus"
    if snapshot.mode == MODE_PAUSED:
        label = f"{label} (paused)"
    return f"{format_duration(snapshot.remaining_seconds)} {label}"


def session_text(snapshot: ClockSnapshot) -> str:
    if snapshot.current_session <= 0:
        return ""
    return (
        f"Session {snapshot.current_session} - "
        f"{snapshot.completed_sessions} completed"
    )


def available_actions(snapshot: ClockSnapshot) -> list[str]:
    """Controls offered to the user for the current mode."""
    if snapshot.is_running:
        return [ACTION_PAUSE, ACTION_SKIP]
    if snapshot.mode == MODE_PAUSED:
        return [ACTION_RESUME, ACTION_STOP]
    return [ACTION_START]


def describe_config(config: ClockConfig) -> dict[str, str]:
    return {
        "focus": format_minutes(config.focus_seconds),
        "short_break": format_minutes(config.short_break_seconds),
        "long_break": (
            f"{format_minutes(config.long_break_seconds)} "
            f"(every {config.sessions_per_long_break} sessions)"
        ),
    }


def notification_content(phase: str, session: int) -> NotificationContent:
    if phase == PHASE_FOCUS:
        return NotificationContent(
            title="Focus time is over!",
            body=f"Focus session {session} completed, time for a break.",
            category=CATEGORY_FOCUS_END,
        )
    if phase == PHASE_SHORT_BREAK:
        return NotificationContent(
            title="Short break is over!",
            body="Well rested, get ready for the next focus session.",
            category=CATEGORY_BREAK_END,
        )
    return NotificationContent(
        title="Long break is over!",
        body="Well rested, get ready for a new work cycle.",
        category=CATEGORY_BREAK_END,
    )
