"""Error types raised by the indicator engines and the range validator.

Engines raise these instead of returning NaN or infinity. The tools layer
catches them and reports the message back to the caller.
"""

from typing import Optional


class IndicatorError(ValueError):
    """Base class for indicator computation failures."""


class InsufficientDataError(IndicatorError):
    """Raised when a series is shorter than an indicator's window needs."""

    def __init__(self, indicator: str, required: int, available: int):
        self.indicator = indicator
        self.required = required
        self.available = available
        super().__init__(
            f"Insufficient data for {indicator}: need {required} values, got {available}"
        )


class DegenerateInputError(IndicatorError):
    """Raised when a computation would divide by zero."""

    def __init__(self, indicator: str, reason: str):
        self.indicator = indicator
        self.reason = reason
        super().__init__(f"Degenerate input for {indicator}: {reason}")


class RangeValidationError(ValueError):
    """Base class for rejected historical-data requests."""


class UnsupportedIntervalError(RangeValidationError):
    """Raised for a sampling interval outside the constraint table."""

    def __init__(self, interval: int, supported: Optional[list[int]] = None):
        self.interval = interval
        self.supported = supported or []
        message = f"Unsupported interval: {interval} minutes"
        if self.supported:
            message += f". Must be one of {self.supported}"
        super().__init__(message)


class ConstraintViolationError(RangeValidationError):
    """Raised when a request exceeds an interval's duration or history limit."""

    def __init__(self, constraint: str, limit: float, requested: float, message: str):
        self.constraint = constraint
        self.limit = limit
        self.requested = requested
        super().__init__(message)
