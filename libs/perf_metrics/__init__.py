"""
Average Page Metrics Matcher - Assert that an action keeps page counters within bounds.

Samples Chrome performance counters before and after an action, repeats the
action, averages the per-trial deltas and compares them to upper bounds.

Usage:
    from libs.perf_metrics import PageMetricsSampler, to_match_average_metrics

    async with PageMetricsSampler(page) as sample:
        result = await to_match_average_metrics(
            sample, (action, {"repeats": 3}), {"Nodes": 100}
        )
"""

from libs.perf_metrics.metrics import (
    METRIC_NAMES,
    MetricName,
    Snapshot,
)

from libs.perf_metrics.params import (
    DEFAULT_OPTIONS,
    MatcherOptions,
    MatcherParams,
    normalize_matcher_argument,
)

from libs.perf_metrics.accumulator import (
    MetricAccumulator,
)

from libs.perf_metrics.comparator import (
    ComparisonResult,
    MetricViolation,
    compare,
)

from libs.perf_metrics.matcher import (
    to_match_average_metrics,
)

from libs.perf_metrics.sampler import (
    PageMetricsSampler,
)

__all__ = [
    # Metrics
    "METRIC_NAMES",
    "MetricName",
    "Snapshot",
    # Params
    "DEFAULT_OPTIONS",
    "MatcherOptions",
    "MatcherParams",
    "normalize_matcher_argument",
    # Accumulator
    "MetricAccumulator",
    # Comparator
    "ComparisonResult",
    "MetricViolation",
    "compare",
    # Matcher
    "to_match_average_metrics",
    # Sampler
    "PageMetricsSampler",
]
