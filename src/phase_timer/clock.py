"""Deterministic focus/break phase state machine advanced by explicit ticks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from .constants import (
    ACTION_COMPLETED,
    ACTION_PAUSE,
    ACTION_RESUME,
    ACTION_SKIP,
    ACTION_START,
    ACTION_STOP,
    ACTION_TICK,
    ACTIVE_MODES,
    DEFAULT_FOCUS_SECONDS,
    DEFAULT_LONG_BREAK_SECONDS,
    DEFAULT_SESSIONS_PER_LONG_BREAK,
    DEFAULT_SHORT_BREAK_SECONDS,
    MODE_IDLE,
    MODE_PAUSED,
    MODE_RUNNING,
    PHASE_FOCUS,
    PHASE_LONG_BREAK,
    PHASE_SHORT_BREAK,
)
from .errors import ClockConfigurationError

ClockPhase = Literal["focus", "short_break", "long_break"]
ClockMode = Literal["idle", "running", "paused"]


@dataclass(frozen=True)
class ClockConfig:
    """Immutable phase durations (seconds) and long-break cadence.

    Negative durations and a cadence below one are rejected, but a duration
    of exactly zero is deliberately accepted: such a phase completes on the
    first tick after it is entered, one phase per tick. The `[timer]` TOML
    loader is stricter and rejects zero, so only programmatic callers can
    build a zero-length phase.
    """
    focus_seconds: int = DEFAULT_FOCUS_SECONDS
    short_break_seconds: int = DEFAULT_SHORT_BREAK_SECONDS
    long_break_seconds: int = DEFAULT_LONG_BREAK_SECONDS
    sessions_per_long_break: int = DEFAULT_SESSIONS_PER_LONG_BREAK

    def __post_init__(self) -> None:
        for name in ("focus_seconds", "short_break_seconds", "long_break_seconds"):
            value = getattr(self, name)
            if not _is_int(value):
                raise ClockConfigurationError(f"{name} must be an integer, got: {value!r}")
            if value < 0:
                raise ClockConfigurationError(f"{name} cannot be negative, got: {value}")

        if not _is_int(self.sessions_per_long_break):
            raise ClockConfigurationError(
                "sessions_per_long_break must be an integer, "
                f"got: {self.sessions_per_long_break!r}"
            )
        if self.sessions_per_long_break < 1:
            raise ClockConfigurationError(
                "sessions_per_long_break must be at least 1, "
                f"got: {self.sessions_per_long_break}"
            )

    def duration_for(self, phase: ClockPhase) -> int:
        if phase == PHASE_FOCUS:
            return self.focus_seconds
        if phase == PHASE_SHORT_BREAK:
            return self.short_break_seconds
        if phase == PHASE_LONG_BREAK:
            return self.long_break_seconds
        raise ValueError(f"Unknown phase: {phase!r}")


@dataclass(frozen=True)
class ClockSnapshot:
    """Read-only view of the clock state handed to observers and publishers."""
    mode: ClockMode
    phase: Optional[ClockPhase]
    duration_seconds: int
    remaining_seconds: int
    current_session: int
    completed_sessions: int

    @property
    def is_active(self) -> bool:
        return self.mode in ACTIVE_MODES

    @property
    def is_running(self) -> bool:
        return self.mode == MODE_RUNNING


@dataclass(frozen=True)
class PhaseCompletion:
    """Report of a phase that ran down to zero, with the session it belonged to."""
    phase: ClockPhase
    session: int


ClockObserver = Callable[[ClockSnapshot, str], None]


class PhaseClock:
    """Focus/break cycle bookkeeping with no notion of wall-clock time.

    Control operations never raise for illegal calls; they return ``False``
    and leave the state untouched. Observers run after each completed
    transition and must not call back into the clock.
    """

    def __init__(
        self,
        config: Optional[ClockConfig] = None,
        *,
        logger: Optional[logging.Logger] = None,
    ):
        self._config = config or ClockConfig()
        self._logger = logger or logging.getLogger("phase_clock")
        self._observers: list[ClockObserver] = []

        self._mode: ClockMode = MODE_IDLE
        self._phase: Optional[ClockPhase] = None
        self._remaining_seconds = 0
        self._current_session = 0
        self._completed_sessions = 0

    @property
    def config(self) -> ClockConfig:
        return self._config

    @property
    def mode(self) -> ClockMode:
        return self._mode

    @property
    def phase(self) -> Optional[ClockPhase]:
        return self._phase

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def current_session(self) -> int:
        return self._current_session

    @property
    def completed_sessions(self) -> int:
        return self._completed_sessions

    def snapshot(self) -> ClockSnapshot:
        duration = self._config.duration_for(self._phase) if self._phase else 0
        return ClockSnapshot(
            mode=self._mode,
            phase=self._phase,
            duration_seconds=duration,
            remaining_seconds=self._remaining_seconds,
            current_session=self._current_session,
            completed_sessions=self._completed_sessions,
        )

    def subscribe(self, observer: ClockObserver) -> Callable[[], None]:
        """Register an observer and return a callable that removes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def start(self) -> bool:
        if self._mode != MODE_IDLE:
            return False

        self._current_session = 1
        self._enter_phase(PHASE_FOCUS)
        self._logger.info(
            "Cycle started: session=%d focus=%ss",
            self._current_session,
            self._remaining_seconds,
        )
        self._notify(ACTION_START)
        return True

    def pause(self) -> bool:
        if self._mode != MODE_RUNNING:
            return False

        self._mode = MODE_PAUSED
        self._logger.info(
            "Paused: phase=%s remaining=%ss",
            self._phase,
            self._remaining_seconds,
        )
        self._notify(ACTION_PAUSE)
        return True

    def resume(self) -> bool:
        if self._mode != MODE_PAUSED:
            return False

        self._mode = MODE_RUNNING
        self._logger.info(
            "Resumed: phase=%s remaining=%ss",
            self._phase,
            self._remaining_seconds,
        )
        self._notify(ACTION_RESUME)
        return True

    def stop(self) -> bool:
        if self._mode == MODE_IDLE:
            return False

        self._mode = MODE_IDLE
        self._phase = None
        self._remaining_seconds = 0
        self._current_session = 0
        self._logger.info("Stopped: completed_sessions=%d", self._completed_sessions)
        self._notify(ACTION_STOP)
        return True

    def skip(self) -> bool:
        """Advance to the next phase right away; no completion is reported."""
        if self._mode not in ACTIVE_MODES or self._phase is None:
            return False

        skipped = self._phase
        self._advance_from(skipped)
        self._logger.info("Skipped %s, now %s", skipped, self._phase)
        self._notify(ACTION_SKIP)
        return True

    def decrement_one_unit(self) -> Optional[PhaseCompletion]:
        """Consume one unit of time; report the phase if it just ran out."""
        if self._mode != MODE_RUNNING or self._phase is None:
            return None

        remaining = self._remaining_seconds - 1
        if remaining > 0:
            self._remaining_seconds = remaining
            self._notify(ACTION_TICK)
            return None

        completed = PhaseCompletion(phase=self._phase, session=self._current_session)
        self._remaining_seconds = 0
        # Exactly one advance per tick, even if the next phase is zero-length.
        self._advance_from(completed.phase)
        self._logger.info(
            "Phase completed: phase=%s session=%d next=%s",
            completed.phase,
            completed.session,
            self._phase,
        )
        self._notify(ACTION_COMPLETED)
        return completed

    def _advance_from(self, phase: ClockPhase) -> None:
        if phase == PHASE_FOCUS:
            self._completed_sessions += 1
            if self._current_session % self._config.sessions_per_long_break == 0:
                self._enter_phase(PHASE_LONG_BREAK)
            else:
                self._enter_phase(PHASE_SHORT_BREAK)
            return

        self._current_session += 1
        self._enter_phase(PHASE_FOCUS)

    def _enter_phase(self, phase: ClockPhase) -> None:
        self._phase = phase
        self._remaining_seconds = self._config.duration_for(phase)
        self._mode = MODE_RUNNING

    def _notify(self, action: str) -> None:
        if not self._observers:
            return

        snapshot = self.snapshot()
        for observer in tuple(self._observers):
            try:
                observer(snapshot, action)
            except Exception as error:
                self._logger.error(
                    "Clock observer failed on %s: %s",
                    action,
                    error,
                    exc_info=True,
                )


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
