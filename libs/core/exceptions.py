"""Custom exceptions for the page-metrics matcher."""

from typing import Any, Optional


class PerfMetricsError(Exception):
    """Base exception for the page-metrics matcher."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}


class InvalidParameters(PerfMetricsError):
    """
    Malformed matcher argument or bounds.

    Raised before any trial runs. This is caller misuse, so it is raised
    rather than reported as a failed comparison.
    """

    def __init__(
        self,
        message: str,
        argument: Any = None,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message, context)
        self.argument = argument


class ExternalCallFailure(PerfMetricsError):
    """
    An external call failed during a trial.

    ``stage`` is one of "sample", "action", "record" (the sampled values
    could not be diffed) or "reset".

    Never raised out of the driver loop; it is attached to the failed
    ComparisonResult instead.
    """

    def __init__(
        self,
        stage: str,
        trial: int,
        cause: BaseException,
        context: Optional[dict[str, Any]] = None,
    ):
        message = f"{type(cause).__name__}: {cause}"
        super().__init__(message, context)
        self.stage = stage
        self.trial = trial
        self.cause = cause


class SamplingError(PerfMetricsError):
    """Snapshot data is missing counters or is not numeric."""

    pass
