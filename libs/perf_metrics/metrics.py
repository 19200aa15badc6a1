"""
Metric names and snapshots.

The tracked counters are the ones Chrome reports through the DevTools
``Performance.getMetrics`` command (the same set Puppeteer exposes as
``page.metrics()``).
"""

from dataclasses import dataclass
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

from libs.core.exceptions import SamplingError


class MetricName(str, Enum):
    """Tracked page counters, in canonical report order."""

    TIMESTAMP = "Timestamp"  # When the sample was taken
    DOCUMENTS = "Documents"  # Number of documents in the page
    FRAMES = "Frames"  # Number of frames in the page
    JS_EVENT_LISTENERS = "JSEventListeners"  # Number of events in the page
    NODES = "Nodes"  # Number of DOM nodes in the page
    LAYOUT_COUNT = "LayoutCount"  # Full or partial page layouts
    RECALC_STYLE_COUNT = "RecalcStyleCount"  # Page style recalculations
    LAYOUT_DURATION = "LayoutDuration"  # Combined duration of all layouts
    RECALC_STYLE_DURATION = "RecalcStyleDuration"  # Combined duration of style recalcs
    SCRIPT_DURATION = "ScriptDuration"  # Combined duration of JavaScript execution
    TASK_DURATION = "TaskDuration"  # Combined duration of all browser tasks
    JS_HEAP_USED_SIZE = "JSHeapUsedSize"  # Used JavaScript heap size
    JS_HEAP_TOTAL_SIZE = "JSHeapTotalSize"  # Total JavaScript heap size

    @classmethod
    def parse(cls, value: Union["MetricName", str]) -> "MetricName":
        """Accept a member or its counter name. Raises ValueError otherwise."""
        if isinstance(value, cls):
            return value
        return cls(value)


METRIC_NAMES = tuple(MetricName)


@dataclass(frozen=True)
class Snapshot:
    """One atomic reading of every tracked counter."""

    values: Mapping[MetricName, float]

    def __post_init__(self) -> None:
        missing = [name.value for name in METRIC_NAMES if name not in self.values]
        if missing:
            raise SamplingError(
                f"Snapshot is missing metrics: {', '.join(missing)}",
                context={"missing": missing},
            )
        # Freeze a private copy so callers can't mutate it afterwards
        object.__setattr__(
            self,
            "values",
            MappingProxyType({name: self.values[name] for name in METRIC_NAMES}),
        )

    def __getitem__(self, name: MetricName) -> float:
        return self.values[MetricName.parse(name)]

    @classmethod
    def from_mapping(cls, data: Mapping[Any, Any]) -> "Snapshot":
        """
        Build a snapshot from a mapping keyed by MetricName or counter name.

        Keys outside the tracked set are ignored.

        Raises:
            SamplingError: if a tracked counter is missing or not numeric
        """
        values: Dict[MetricName, float] = {}
        for key, value in data.items():
            try:
                name = MetricName.parse(key)
            except ValueError:
                continue
            if isinstance(value, bool) or not isinstance(value, Real):
                raise SamplingError(
                    f"Metric {name.value} is not numeric: {value!r}",
                    context={"metric": name.value},
                )
            values[name] = float(value)
        return cls(values)

    @classmethod
    def from_cdp(cls, response: Mapping[str, Any]) -> "Snapshot":
        """
        Build a snapshot from a ``Performance.getMetrics`` response.

        The response looks like ``{"metrics": [{"name": ..., "value": ...}]}``
        and carries more counters than we track; extra ones are dropped.
        """
        try:
            entries = {entry["name"]: entry["value"] for entry in response["metrics"]}
        except (KeyError, TypeError) as e:
            raise SamplingError(f"Malformed Performance.getMetrics response: {e}")
        return cls.from_mapping(entries)
