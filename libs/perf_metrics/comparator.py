"""
Comparator / Reporter - Decide pass/fail and build the diagnostic message.

A metric is violated when its average delta is above the expected bound.
The bound itself passes. Every bounded metric is checked and every
violation is reported, in canonical metric order.
"""

import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from numbers import Real
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from rich.console import Console
from rich.text import Text
from rich.theme import Theme

from libs.core.config import PerfMetricsSettings, get_settings
from libs.core.exceptions import ExternalCallFailure, InvalidParameters
from libs.perf_metrics.accumulator import MetricAccumulator
from libs.perf_metrics.metrics import METRIC_NAMES, MetricName

logger = logging.getLogger(__name__)

MATCHER_HINT = "expect(action).to_match_average_metrics(expected)"

_THEME = Theme(
    {
        "hint": "dim",
        "expected": "green",
        "received": "red",
    }
)

# Appended to over-bound trial values when colors are off
OVER_MARKER = "!"


@dataclass(frozen=True)
class MetricViolation:
    """A metric whose average delta is above its bound."""

    name: MetricName
    expected: float
    received: float
    trials: Tuple[float, ...]

    @property
    def over_trials(self) -> Tuple[float, ...]:
        """Individual trials above the bound (may be empty even on violation)."""
        return tuple(v for v in self.trials if self.expected < v)


@dataclass
class ComparisonResult:
    """
    Outcome of one matcher invocation.

    ``message`` is a zero-argument callable so formatting only happens when
    the harness actually renders it.
    """

    passed: bool
    message: Callable[[], str]
    violations: Tuple[MetricViolation, ...] = ()
    trial_count: int = 0
    error: Optional[ExternalCallFailure] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "trial_count": self.trial_count,
            "error": self.error.message if self.error else None,
            "violations": [
                {
                    "metric": v.name.value,
                    "expected": v.expected,
                    "received": v.received,
                    "trials": list(v.trials),
                }
                for v in self.violations
            ],
        }


def normalize_bounds(expected: Mapping[Any, Any]) -> Dict[MetricName, float]:
    """
    Coerce caller bounds to MetricName -> float.

    Keys that name no tracked metric are ignored with a warning.

    Raises:
        InvalidParameters: if bounds is not a mapping or a bound is not a number
    """
    if not isinstance(expected, Mapping):
        raise InvalidParameters(
            f"Expected bounds must be a mapping of metric name to number, got {expected!r}",
            argument=expected,
        )

    bounds: Dict[MetricName, float] = {}
    for key, value in expected.items():
        try:
            name = MetricName.parse(key)
        except ValueError:
            logger.warning(f"[comparator] Ignoring bound for unknown metric {key!r}")
            continue
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidParameters(
                f"Bound for {name.value} must be a number, got {value!r}",
                argument=expected,
            )
        bounds[name] = float(value)
    return bounds


def format_bound(value: float) -> str:
    """Render a bound like the caller wrote it: 100, not 100.0."""
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def find_violations(
    accumulator: MetricAccumulator,
    bounds: Mapping[MetricName, float],
) -> List[MetricViolation]:
    averages = accumulator.averages_all()
    violations = []
    for name in METRIC_NAMES:
        if name not in bounds:
            continue
        expected = bounds[name]
        # NaN averages (no trials) never compare greater
        if expected < averages[name]:
            violations.append(
                MetricViolation(
                    name=name,
                    expected=expected,
                    received=averages[name],
                    trials=accumulator.raw_values(name),
                )
            )
    return violations


def build_message(
    violations: List[MetricViolation],
    trial_count: int,
    settings: Optional[PerfMetricsSettings] = None,
) -> str:
    """
    Render the diagnostic text.

    Layout per violation:

        Expected Nodes < 100:
        Received 150.00000
        All Metrics: 120.000 180.000

    The ``All Metrics`` line only appears when more than one trial ran; each
    value is colored by comparing that single trial with the bound.
    """
    settings = settings or get_settings()

    text = Text()
    text.append(MATCHER_HINT, style="hint")
    text.append("\n\n")

    for v in violations:
        text.append("   Expected ")
        text.append(f"{v.name.value} < {format_bound(v.expected)}", style="expected")
        text.append(":\n")
        text.append("   Received ")
        text.append(f"{v.received:.{settings.average_precision}f}", style="received")
        text.append("\n")

        if trial_count > 1:
            text.append("   All Metrics: ")
            for i, value in enumerate(v.trials):
                if i:
                    text.append(" ")
                rendered = f"{value:.{settings.trial_precision}f}"
                if v.expected < value:
                    if not settings.color:
                        rendered += OVER_MARKER
                    text.append(rendered, style="received")
                else:
                    text.append(rendered, style="expected")
            text.append("\n\n")
        else:
            text.append("\n")

    return _render(text, settings.color)


def _render(text: Text, color: bool) -> str:
    console = Console(
        theme=_THEME,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        highlight=False,
        soft_wrap=True,
    )
    with console.capture() as capture:
        console.print(text, end="")
    return capture.get()


def compare(
    accumulator: MetricAccumulator,
    expected: Mapping[Any, Any],
    settings: Optional[PerfMetricsSettings] = None,
) -> ComparisonResult:
    """
    Compare accumulated averages with expected upper bounds.

    Args:
        accumulator: Accumulator holding every completed trial
        expected: Partial mapping of metric -> upper bound
        settings: Formatting settings (default: cached settings)

    Returns:
        ComparisonResult with every violation and a lazy message
    """
    bounds = normalize_bounds(expected)
    violations = find_violations(accumulator, bounds)
    trial_count = accumulator.trial_count

    if violations:
        logger.info(
            f"[comparator] {len(violations)} metric(s) over bound after "
            f"{trial_count} trial(s): {', '.join(v.name.value for v in violations)}"
        )
    else:
        logger.debug(f"[comparator] {len(bounds)} metric(s) within bounds")

    @lru_cache(maxsize=None)
    def message() -> str:
        return build_message(violations, trial_count, settings)

    return ComparisonResult(
        passed=not violations,
        message=message,
        violations=tuple(violations),
        trial_count=trial_count,
    )
