# fuel_prices/config/logging_config.py

"""Logging for scheduled and interactive runs.

Each run appends to its own ``logs/run_YYYYMMDD_HHMMSS.log`` at DEBUG.
The console only carries warnings (INFO with ``verbose``) in a compact
one-line format, so a cron job mails nothing on a quiet no-op run.
Scheduled runs accumulate log files, so only the newest
``Settings.LOG_RETENTION`` are kept.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from fuel_prices.config.settings import Settings

_LOGGER_NAME = "fuel_prices"
_LOG_GLOB = "run_*.log"

_FILE_FORMAT = (
    "%(asctime)s.%(msecs)03d %(levelname)-7s [%(name)s] "
    "%(funcName)s:%(lineno)d %(message)s"
)
_CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _existing_log_file(logger: logging.Logger) -> Path | None:
    for handler in logger.handlers:
        if isinstance(handler, logging.FileHandler):
            return Path(handler.baseFilename)
    return None


def prune_old_logs(logs_dir: Path, keep: int) -> list[Path]:
    """Delete all but the newest *keep* run logs; return the removed paths.

    File names embed the start time, so name order is age order.
    """
    if not logs_dir.exists():
        return []
    logs = sorted(logs_dir.glob(_LOG_GLOB))
    old = logs[: max(len(logs) - keep, 0)]
    removed: list[Path] = []
    for path in old:
        path.unlink(missing_ok=True)
        removed.append(path)
    return removed


def setup_logging(
    verbose: bool = False,
    logs_dir: Path | None = None,
) -> Path:
    """Attach the run-log and console handlers to the ``fuel_prices`` logger.

    Calling it again is a no-op that returns the log file already in use.

    Args:
        verbose: Show INFO records on the console, not only warnings.
        logs_dir: Directory for run logs (defaults to ``Settings.LOGS_DIR``).

    Returns:
        Path of the log file this run writes to.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    current = _existing_log_file(logger)
    if current is not None:
        return current

    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    # Keep room for the file about to be created
    removed = prune_old_logs(target_dir, Settings.LOG_RETENTION - 1)

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = target_dir / f"run_{stamp}.log"

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))
    logger.addHandler(file_handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console_handler)

    logger.debug(
        "Run log %s (removed %d old logs)", log_file, len(removed)
    )
    return log_file
