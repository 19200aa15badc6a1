"""
Centralized Logging Configuration for the page-metrics matcher.

Usage in any module:
    from libs.core.logging_config import setup_logging, get_logger

    # Call once, e.g. from a conftest.py or a pytest_configure hook
    setup_logging()

    # Get a logger for your module
    logger = get_logger(__name__)
    logger.info("My message")

Debugging:
    # The pytest plugin calls setup_logging() at startup. Keep a file
    # log of every trial while tests run:
    PERF_METRICS_LOG_LEVEL=DEBUG PERF_METRICS_LOG_TO_FILE=true pytest ...
    tail -f logs/perf_metrics/system.log
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from libs.core.config import get_settings

# =============================================================================
# Configuration
# =============================================================================

LOG_DIR = Path("logs/perf_metrics")
SYSTEM_LOG_FILE = LOG_DIR / "system.log"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB per file
BACKUP_COUNT = 5

LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-30s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

CONSOLE_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)-20s | %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"

# =============================================================================
# Global State
# =============================================================================

_logging_configured = False
_file_handler: Optional[RotatingFileHandler] = None


def setup_logging(
    level: Optional[str] = None,
    log_to_console: bool = True,
    log_to_file: bool = False,
) -> None:
    """
    Configure logging for the matcher.

    Only the first call has an effect.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR). Defaults to the
            PERF_METRICS_LOG_LEVEL setting.
        log_to_console: Whether to log to stdout (default True)
        log_to_file: Whether to log to logs/perf_metrics/system.log (default False)
    """
    global _logging_configured, _file_handler

    if _logging_configured:
        return

    if level is None:
        level = get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers (prevents duplicates)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if log_to_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        _file_handler = RotatingFileHandler(
            SYSTEM_LOG_FILE,
            maxBytes=MAX_LOG_SIZE,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
        _file_handler.setLevel(log_level)
        _file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root_logger.addHandler(_file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, CONSOLE_DATE_FORMAT))
        root_logger.addHandler(console_handler)

    # Playwright's driver and asyncio are chatty at DEBUG
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("playwright").setLevel(logging.WARNING)

    _logging_configured = True

    logger = logging.getLogger("perf_metrics")
    logger.info(f"Logging initialized (level={level.upper()}, file={log_to_file})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Usually __name__ to get the module's dotted path

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
