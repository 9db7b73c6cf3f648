class PhaseTimerError(Exception):
    """Base exception for phase timer components."""


class ClockConfigurationError(PhaseTimerError, ValueError):
    """Raised when a clock configuration is rejected at construction."""


class TimerDriverError(PhaseTimerError):
    """Raised when the timer driver cannot carry out a control operation."""


class TickSchedulingError(TimerDriverError):
    """Raised when the tick source cannot be armed."""
