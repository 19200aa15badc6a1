# conftest.py
# Ensure the repository root is on sys.path so pytest can import the
# libs.* packages without an install, and provide shared snapshot helpers.

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
ROOT_STR = str(ROOT)

if ROOT_STR not in sys.path:
    sys.path.insert(0, ROOT_STR)

from libs.core.config import PerfMetricsSettings  # noqa: E402
from libs.perf_metrics.metrics import METRIC_NAMES, Snapshot  # noqa: E402


def make_snapshot(**values) -> Snapshot:
    """Snapshot with every metric at 0 unless given by counter name."""
    data = {name.value: 0.0 for name in METRIC_NAMES}
    data.update(values)
    return Snapshot.from_mapping(data)


class ScriptedSampler:
    """
    Fake sampler returning snapshots from a list, in order.

    Records how many times it was called; raises if a list entry is an
    exception instance.
    """

    def __init__(self, snapshots):
        self.snapshots = list(snapshots)
        self.calls = 0

    async def __call__(self) -> Snapshot:
        item = self.snapshots[self.calls]
        self.calls += 1
        if isinstance(item, BaseException):
            raise item
        return item


def trial_snapshots(metric: str, deltas):
    """Start/end snapshot pairs giving ``metric`` the listed deltas."""
    snapshots = []
    for delta in deltas:
        snapshots.append(make_snapshot())
        snapshots.append(make_snapshot(**{metric: delta}))
    return snapshots


@pytest.fixture
def plain_settings():
    """Settings with colors off so message text is easy to assert on."""
    return PerfMetricsSettings(color=False)
