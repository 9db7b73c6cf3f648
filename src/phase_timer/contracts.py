"""Protocols describing the collaborators the timer driver calls into."""

from __future__ import annotations

from typing import Any, Callable, Protocol


class NotificationSink(Protocol):
    """Receives natural phase completions; must swallow its own errors."""
    def on_phase_completed(self, phase: str, session: int) -> None:
        ...


class ActivityGuard(Protocol):
    """Keeps the host awake while a cycle is active."""
    def begin(self) -> None:
        ...

    def end(self) -> None:
        ...


class TickHandleLike(Protocol):
    def cancel(self) -> None:
        ...


class TickLoopLike(Protocol):
    """Subset of ``asyncio.AbstractEventLoop`` used as the tick source."""
    def time(self) -> float:
        ...

    def call_at(self, when: float, callback: Callable[..., Any], *args: Any) -> TickHandleLike:
        ...

    def call_soon_threadsafe(self, callback: Callable[..., Any], *args: Any) -> Any:
        ...


class NullNotificationSink:
    def on_phase_completed(self, phase: str, session: int) -> None:
        del phase, session


class NullActivityGuard:
    def begin(self) -> None:
        return None

    def end(self) -> None:
        return None
