"""
pytest integration for the average metrics matcher.

Registered through the ``pytest11`` entry point, so installing the package
makes the ``metric_bounds`` fixture available everywhere.

    @pytest.mark.asyncio
    async def test_menu_is_cheap(page, metric_bounds):
        async with PageMetricsSampler(page) as sample:
            await assert_average_metrics(sample, (open_menu, close_menu), metric_bounds)
"""

import logging
from typing import Any, Dict, Mapping, Optional

import pytest

from libs.core.config import PerfMetricsSettings, get_settings, load_bounds_file
from libs.core.logging_config import setup_logging
from libs.perf_metrics.comparator import ComparisonResult
from libs.perf_metrics.matcher import Sampler, to_match_average_metrics
from libs.perf_metrics.metrics import MetricName

logger = logging.getLogger(__name__)


def pytest_configure(config) -> None:
    """Apply PERF_METRICS_LOG_LEVEL / PERF_METRICS_LOG_TO_FILE for the session."""
    # pytest already shows captured records, so no extra console handler
    setup_logging(log_to_console=False, log_to_file=get_settings().log_to_file)


async def assert_average_metrics(
    sample: Sampler,
    matcher_argument: Any,
    expected: Mapping[Any, Any],
    settings: Optional[PerfMetricsSettings] = None,
) -> ComparisonResult:
    """
    Run the matcher and fail the current test if it did not pass.

    Returns:
        The passing ComparisonResult
    """
    result = await to_match_average_metrics(sample, matcher_argument, expected, settings)
    if not result.passed:
        pytest.fail(result.message(), pytrace=False)
    return result


def load_metric_bounds(settings: Optional[PerfMetricsSettings] = None) -> Dict[MetricName, float]:
    """Bounds from the PERF_METRICS_BOUNDS_FILE YAML file, or {} when unset."""
    settings = settings or get_settings()
    if settings.bounds_file is None:
        return {}
    logger.debug(f"[pytest_plugin] Loading metric bounds from {settings.bounds_file}")
    return load_bounds_file(settings.bounds_file)


@pytest.fixture
def metric_bounds() -> Dict[MetricName, float]:
    return load_metric_bounds()
