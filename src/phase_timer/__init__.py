from .clock import (
    ClockConfig,
    ClockMode,
    ClockObserver,
    ClockPhase,
    ClockSnapshot,
    PhaseClock,
    PhaseCompletion,
)
from .contracts import (
    ActivityGuard,
    NotificationSink,
    NullActivityGuard,
    NullNotificationSink,
)
from .driver import ClockActionResult, TimerDriver
from .errors import (
    ClockConfigurationError,
    PhaseTimerError,
    TickSchedulingError,
    TimerDriverError,
)

__all__ = [
    "ActivityGuard",
    "ClockActionResult",
    "ClockConfig",
    "ClockConfigurationError",
    "ClockMode",
    "ClockObserver",
    "ClockPhase",
    "ClockSnapshot",
    "NotificationSink",
    "NullActivityGuard",
    "NullNotificationSink",
    "PhaseClock",
    "PhaseCompletion",
    "PhaseTimerError",
    "TickSchedulingError",
    "TimerDriver",
    "TimerDriverError",
]
