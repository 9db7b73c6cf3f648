"""Event-loop driver that feeds real time into the phase clock."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .clock import ClockSnapshot, PhaseClock, PhaseCompletion
from .constants import (
    ACTION_PAUSE,
    ACTION_RESUME,
    ACTION_SKIP,
    ACTION_START,
    ACTION_STOP,
    ACTIVE_MODES,
    DEFAULT_TICK_INTERVAL_SECONDS,
    MODE_IDLE,
    MODE_PAUSED,
    MODE_RUNNING,
    REASON_ALREADY_ACTIVE,
    REASON_NOT_ACTIVE,
    REASON_NOT_PAUSED,
    REASON_NOT_RUNNING,
    REASON_PAUSED,
    REASON_RESUMED,
    REASON_SKIPPED,
    REASON_STARTED,
    REASON_STOPPED,
    REASON_UNSUPPORTED_ACTION,
)
from .contracts import (
    ActivityGuard,
    NotificationSink,
    NullActivityGuard,
    NullNotificationSink,
    TickHandleLike,
    TickLoopLike,
)
from .errors import TickSchedulingError


@dataclass(frozen=True)
class ClockActionResult:
    """Result envelope returned after applying a control action."""
    action: str
    accepted: bool
    reason: str
    snapshot: ClockSnapshot


class TimerDriver:
    """Arms one repeating tick on an event loop and forwards completions.

    All methods except :meth:`submit` must be called on the loop's thread.
    """

    def __init__(
        self,
        clock: PhaseClock,
        *,
        loop: TickLoopLike,
        notification_sink: Optional[NotificationSink] = None,
        activity_guard: Optional[ActivityGuard] = None,
        tick_interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        if tick_interval_seconds <= 0:
            raise ValueError("tick_interval_seconds must be greater than zero")

        self._clock = clock
        self._loop = loop
        self._notification_sink = notification_sink or NullNotificationSink()
        self._activity_guard = activity_guard or NullActivityGuard()
        self._tick_interval_seconds = float(tick_interval_seconds)
        self._logger = logger or logging.getLogger("timer_driver")

        self._handle: Optional[TickHandleLike] = None
        self._generation = 0
        self._deadline = 0.0

    @property
    def clock(self) -> PhaseClock:
        return self._clock

    @property
    def is_armed(self) -> bool:
        return self._handle is not None

    def snapshot(self) -> ClockSnapshot:
        return self._clock.snapshot()

    def start(self) -> bool:
        if self._clock.mode != MODE_IDLE:
            return False

        # Arm first so a scheduling failure leaves the clock untouched.
        self._arm()
        self._clock.start()
        self._begin_activity()
        return True

    def pause(self) -> bool:
        if self._clock.mode != MODE_RUNNING:
            return False

        self._disarm()
        self._clock.pause()
        return True

    def resume(self) -> bool:
        if self._clock.mode != MODE_PAUSED:
            return False

        self._arm()
        self._clock.resume()
        return True

    def stop(self) -> bool:
        was_active = self._clock.mode in ACTIVE_MODES
        self._disarm()
        stopped = self._clock.stop()
        if was_active:
            self._end_activity()
        return stopped

    def skip(self) -> bool:
        """Jump to the next phase with a fresh tick; never notifies the sink."""
        if self._clock.mode not in ACTIVE_MODES:
            return False

        self._arm()
        self._clock.skip()
        return True

    def apply(self, action: str) -> ClockActionResult:
        if action == ACTION_START:
            if self.start():
                return self._result(action, True, REASON_STARTED)
            return self._result(action, False, REASON_ALREADY_ACTIVE)

        if action == ACTION_PAUSE:
            if self.pause():
                return self._result(action, True, REASON_PAUSED)
            return self._result(action, False, REASON_NOT_RUNNING)

        if action == ACTION_RESUME:
            if self.resume():
                return self._result(action, True, REASON_RESUMED)
            return self._result(action, False, REASON_NOT_PAUSED)

        if action == ACTION_STOP:
            if self.stop():
                return self._result(action, True, REASON_STOPPED)
            return self._result(action, False, REASON_NOT_ACTIVE)

        if action == ACTION_SKIP:
            if self.skip():
                return self._result(action, True, REASON_SKIPPED)
            return self._result(action, False, REASON_NOT_ACTIVE)

        return self._result(action, False, REASON_UNSUPPORTED_ACTION)

    def submit(self, action: str) -> None:
        """Thread-safe: queue ``action`` to be applied on the loop thread."""
        self._loop.call_soon_threadsafe(self.apply, action)

    def _result(self, action: str, accepted: bool, reason: str) -> ClockActionResult:
        return ClockActionResult(
            action=action,
            accepted=accepted,
            reason=reason,
            snapshot=self._clock.snapshot(),
        )

    def _arm(self) -> None:
        self._schedule(self._loop.time() + self._tick_interval_seconds)

    def _schedule(self, deadline: float) -> None:
        generation = self._generation + 1
        try:
            handle = self._loop.call_at(deadline, self._on_tick, generation)
        except RuntimeError as error:
            raise TickSchedulingError(f"Failed to arm tick source: {error}") from error

        if self._handle is not None:
            self._handle.cancel()
        self._handle = handle
        self._generation = generation
        self._deadline = deadline

    def _disarm(self) -> None:
        # Bumping the generation invalidates a callback that escaped cancel().
        self._generation += 1
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _on_tick(self, generation: int) -> None:
        if generation != self._generation or self._clock.mode != MODE_RUNNING:
            self._logger.debug(
                "Discarding stale tick (generation=%d current=%d mode=%s)",
                generation,
                self._generation,
                self._clock.mode,
            )
            return

        self._handle = None
        completion = self._clock.decrement_one_unit()
        self._rearm()
        if completion is not None:
            self._notify(completion)

    def _rearm(self) -> None:
        now = self._loop.time()
        deadline = self._deadline + self._tick_interval_seconds
        if deadline <= now:
            # Loop stalled past the next tick; drop the missed ones.
            deadline = now + self._tick_interval_seconds
        try:
            self._schedule(deadline)
        except TickSchedulingError as error:
            self._logger.error("Tick source stopped while running: %s", error)

    def _notify(self, completion: PhaseCompletion) -> None:
        try:
            self._notification_sink.on_phase_completed(completion.phase, completion.session)
        except Exception as error:
            self._logger.error(
                "Notification sink failed for %s (session %d): %s",
                completion.phase,
                completion.session,
                error,
                exc_info=True,
            )

    def _begin_activity(self) -> None:
        try:
            self._activity_guard.begin()
        except Exception as error:
            self._logger.warning("Activity guard failed to begin: %s", error)

    def _end_activity(self) -> None:
        try:
            self._activity_guard.end()
        except Exception as error:
            self._logger.warning("Activity guard failed to end: %s", error)
