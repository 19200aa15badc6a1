"""
Average Metrics Matcher - Run an action repeatedly and check average page metrics.

Usage:
    from libs.perf_metrics import PageMetricsSampler, to_match_average_metrics

    async with PageMetricsSampler(page) as sampler:
        result = await to_match_average_metrics(
            sampler,
            (open_menu, close_menu, {"repeats": 5}),
            {"Nodes": 200, "LayoutDuration": 0.02},
        )
    assert result.passed, result.message()
"""

import inspect
import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, Mapping, Optional

from libs.core.config import PerfMetricsSettings, get_settings
from libs.core.exceptions import ExternalCallFailure
from libs.perf_metrics.accumulator import MetricAccumulator
from libs.perf_metrics.comparator import ComparisonResult, compare, normalize_bounds
from libs.perf_metrics.metrics import Snapshot
from libs.perf_metrics.params import (
    MatcherAction,
    MatcherOptions,
    normalize_matcher_argument,
)

logger = logging.getLogger(__name__)

Sampler = Callable[[], Awaitable[Snapshot]]


async def _run(action: MatcherAction) -> None:
    """Call an action and await it if it returned an awaitable."""
    result = action()
    if inspect.isawaitable(result):
        await result


def _failed(error: ExternalCallFailure) -> ComparisonResult:
    @lru_cache(maxsize=None)
    def message() -> str:
        return error.message

    return ComparisonResult(passed=False, message=message, error=error)


async def to_match_average_metrics(
    sample: Sampler,
    matcher_argument: Any,
    expected: Mapping[Any, Any],
    settings: Optional[PerfMetricsSettings] = None,
) -> ComparisonResult:
    """
    Run the trials and compare average metric deltas with ``expected``.

    Each trial samples the page, runs the action, samples again, records
    the delta, then runs the reset action if there is one. Trials run one
    after another so each start sample sees the previous reset.

    The first exception from sampling, the action or the reset stops the
    run: the result fails with that error as message and no comparison is
    made.

    Args:
        sample: Zero-argument coroutine function returning a Snapshot
        matcher_argument: Action or (action, reset?, options?) tuple
        expected: Partial mapping of metric -> upper bound
        settings: Matcher settings (default: cached settings)

    Returns:
        ComparisonResult

    Raises:
        InvalidParameters: malformed matcher argument or bounds (before any trial)
    """
    settings = settings or get_settings()
    defaults = MatcherOptions(repeats=settings.default_repeats)

    params = normalize_matcher_argument(matcher_argument, defaults)
    # Validate bounds up front so misuse is raised, not reported as a failure
    normalize_bounds(expected)

    repeats = params.options.repeats
    if repeats == 0:
        logger.warning("[matcher] repeats=0: no trials will run, averages are NaN")

    accumulator = MetricAccumulator()
    for trial in range(repeats):
        stage = "sample"
        try:
            start = await sample()
            stage = "action"
            await _run(params.action)
            stage = "sample"
            end = await sample()
            stage = "record"
            accumulator.record_trial(start, end)
            if params.reset_action is not None:
                stage = "reset"
                await _run(params.reset_action)
        except Exception as e:
            error = ExternalCallFailure(stage=stage, trial=trial, cause=e)
            logger.warning(
                f"[matcher] Trial {trial + 1}/{repeats} aborted during {stage}: {error.message}"
            )
            return _failed(error)
        logger.debug(f"[matcher] Trial {trial + 1}/{repeats} complete")

    return compare(accumulator, expected, settings)
