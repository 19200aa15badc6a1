"""Configuration management for the page-metrics matcher."""

from functools import lru_cache
from numbers import Real
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.core.exceptions import InvalidParameters


class PerfMetricsSettings(BaseSettings):
    """Matcher settings (environment variables use the PERF_METRICS_ prefix)."""

    model_config = SettingsConfigDict(
        env_prefix="PERF_METRICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Repeats used when the matcher argument does not specify any
    default_repeats: int = Field(default=1, ge=0)

    # Fractional digits in the diagnostic message
    average_precision: int = Field(default=5, ge=0)
    trial_precision: int = Field(default=3, ge=0)

    color: bool = True
    log_level: str = "INFO"
    log_to_file: bool = False

    # Optional YAML file with metric bounds, see load_bounds_file()
    bounds_file: Optional[Path] = None


@lru_cache()
def get_settings() -> PerfMetricsSettings:
    """Get cached settings instance."""
    return PerfMetricsSettings()


def load_bounds_file(path: Path) -> dict[Any, float]:
    """
    Load expected metric bounds from YAML.

    The file is a flat mapping of metric name to upper bound:

        Nodes: 100
        LayoutDuration: 0.015

    Args:
        path: YAML file to read

    Returns:
        Dict of MetricName -> bound

    Raises:
        InvalidParameters: if the file is not a mapping, names an unknown
            metric, or holds a non-numeric bound
    """
    # Imported here to keep libs.core free of engine imports at module load
    from libs.perf_metrics.metrics import MetricName

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise InvalidParameters(
            f"Bounds file {path} must contain a mapping, got {type(data).__name__}",
            argument=data,
        )

    bounds = {}
    for key, value in data.items():
        try:
            name = MetricName.parse(key)
        except ValueError:
            raise InvalidParameters(f"Unknown metric {key!r} in {path}", argument=key)
        if isinstance(value, bool) or not isinstance(value, Real):
            raise InvalidParameters(
                f"Bound for {name.value} in {path} must be a number, got {value!r}",
                argument=value,
            )
        bounds[name] = float(value)
    return bounds
