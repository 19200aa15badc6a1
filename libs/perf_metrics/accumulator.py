"""
Metric Accumulator - Collect per-trial deltas and average them.

One accumulator lives for exactly one matcher invocation.
"""

import logging
import math
from typing import Dict, List, Sequence, Tuple

from libs.perf_metrics.metrics import METRIC_NAMES, MetricName, Snapshot

logger = logging.getLogger(__name__)


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; NaN for an empty sequence."""
    if not values:
        return math.nan
    return sum(values) / len(values)


class MetricAccumulator:
    """
    Per-metric delta lists across repeated trials.

    Every metric list always has the same length as the trial count: a
    trial is recorded for all metrics or not at all.
    """

    def __init__(self):
        self._deltas: Dict[MetricName, List[float]] = {}
        self._trial_count = 0
        self.initialize()

    def initialize(self) -> None:
        """Reset to one empty list per metric and zero trials."""
        self._deltas = {name: [] for name in METRIC_NAMES}
        self._trial_count = 0

    def record_trial(self, start: Snapshot, end: Snapshot) -> None:
        """
        Append ``end - start`` for every metric.

        Args:
            start: Snapshot taken before the action
            end: Snapshot taken after the action
        """
        # Compute everything before touching state
        deltas = {name: end[name] - start[name] for name in METRIC_NAMES}
        for name, delta in deltas.items():
            self._deltas[name].append(delta)
        self._trial_count += 1
        logger.debug(f"[MetricAccumulator] Recorded trial {self._trial_count}")

    @property
    def trial_count(self) -> int:
        return self._trial_count

    def average_of(self, name: MetricName) -> float:
        return mean(self._deltas[MetricName.parse(name)])

    def averages_all(self) -> Dict[MetricName, float]:
        """Averages for every metric, in canonical order."""
        return {name: mean(self._deltas[name]) for name in METRIC_NAMES}

    def raw_values(self, name: MetricName) -> Tuple[float, ...]:
        """Per-trial deltas for one metric, oldest first."""
        return tuple(self._deltas[MetricName.parse(name)])

    def raw_values_all(self) -> Dict[MetricName, Tuple[float, ...]]:
        return {name: tuple(values) for name, values in self._deltas.items()}
