"""
Detection Errors - Failure kinds raised by the decomposer and the scorer.

All errors are terminal for the current call; nothing is retried internally.
"""


class DetectionError(ValueError):
    """Base class for input problems that stop a detection run."""


class InsufficientDataError(DetectionError):
    """Series is shorter than two full seasonal cycles."""

    def __init__(self, length: int, period: int):
        self.length = length
        self.period = period
        super().__init__(
            f"Need at least {2 * period} points for period={period}, got {length}"
        )


class IrregularSeriesError(DetectionError):
    """Timestamps are unordered, duplicated or not evenly spaced."""


class EmptyInputError(DetectionError):
    """No residuals were supplied to the scorer."""
