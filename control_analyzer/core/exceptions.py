"""
Exception hierarchy for the analysis engine.

All failures are local and recoverable: the engine reports them to the caller
and never retries. Each class also derives from the closest built-in exception
so callers that only know about ``ValueError`` / ``ZeroDivisionError`` still
catch them.
"""


class ControlAnalysisError(Exception):
    """Base class for all analysis engine errors."""


class InvalidParameterError(ControlAnalysisError, ValueError):
    """A model parameter violates a model invariant (e.g. tau = 0, wn <= 0)."""

    def __init__(self, parameter: str, value: float, reason: str):
        self.parameter = parameter
        self.value = value
        self.reason = reason
        super().__init__(f"{parameter}={value!r}: {reason}")


class DivisionByZeroError(ControlAnalysisError, ZeroDivisionError):
    """A tuning rule denominator evaluates to zero."""


class EmptyTrajectoryError(ControlAnalysisError, ValueError):
    """Performance analysis requested on a trajectory with no samples."""
