# tests/test_logging_config.py

"""Tests for the per-run logging configuration."""

import logging
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from fuel_prices.config.logging_config import prune_old_logs, setup_logging


class TestLoggingConfig(unittest.TestCase):
    """Verify logging setup behaviour."""

    def setUp(self) -> None:
        """Clean up the fuel_prices logger before each test."""
        self.tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self.tmp.name) / "logs"
        self._clear_handlers()

    def tearDown(self) -> None:
        self._clear_handlers()
        self.tmp.cleanup()

    def _clear_handlers(self) -> None:
        root_logger = logging.getLogger("fuel_prices")
        for handler in list(root_logger.handlers):
            handler.close()
            root_logger.removeHandler(handler)

    def _console_handlers(self) -> list[logging.Handler]:
        return [
            h
            for h in logging.getLogger("fuel_prices").handlers
            if isinstance(h, logging.StreamHandler)
            and not isinstance(h, logging.FileHandler)
        ]

    def test_setup_creates_log_file(self) -> None:
        """setup_logging returns a path that exists on disk."""
        log_path = setup_logging(logs_dir=self.logs_dir)
        self.assertTrue(log_path.exists())

    def test_log_file_naming_convention(self) -> None:
        """Log file name matches run_YYYYMMDD_HHMMSS.log format."""
        log_path = setup_logging(logs_dir=self.logs_dir)
        self.assertRegex(log_path.name, r"^run_\d{8}_\d{6}\.log$")
        self.assertEqual(log_path.parent, self.logs_dir)

    def test_file_handler_level_debug(self) -> None:
        """File handler should be set to DEBUG level."""
        setup_logging(logs_dir=self.logs_dir)
        file_handlers = [
            h
            for h in logging.getLogger("fuel_prices").handlers
            if isinstance(h, logging.FileHandler)
        ]
        self.assertEqual(len(file_handlers), 1)
        self.assertEqual(file_handlers[0].level, logging.DEBUG)

    def test_console_handler_level_warning(self) -> None:
        """Console handler stays at WARNING by default."""
        setup_logging(logs_dir=self.logs_dir)
        handlers = self._console_handlers()
        self.assertEqual(len(handlers), 1)
        self.assertEqual(handlers[0].level, logging.WARNING)

    def test_verbose_console_is_info(self) -> None:
        setup_logging(verbose=True, logs_dir=self.logs_dir)
        self.assertEqual(self._console_handlers()[0].level, logging.INFO)

    def test_repeated_calls_no_duplicate_handlers(self) -> None:
        """Calling setup_logging twice does not duplicate handlers."""
        setup_logging(logs_dir=self.logs_dir)
        count_before = len(logging.getLogger("fuel_prices").handlers)
        setup_logging(logs_dir=self.logs_dir)
        count_after = len(logging.getLogger("fuel_prices").handlers)
        self.assertEqual(count_before, count_after)

    def test_repeated_call_returns_active_file(self) -> None:
        first = setup_logging(logs_dir=self.logs_dir)
        second = setup_logging(logs_dir=self.logs_dir)
        self.assertEqual(first, second)

    def test_old_logs_pruned_on_setup(self) -> None:
        """Only the newest LOG_RETENTION run logs survive a new run."""
        self.logs_dir.mkdir(parents=True)
        for day in range(1, 6):
            (self.logs_dir / f"run_2026010{day}_060000.log").touch()
        with patch(
            "fuel_prices.config.logging_config.Settings.LOG_RETENTION", 3
        ):
            log_path = setup_logging(logs_dir=self.logs_dir)
        names = sorted(p.name for p in self.logs_dir.glob("run_*.log"))
        self.assertEqual(len(names), 3)
        self.assertIn(log_path.name, names)
        self.assertNotIn("run_20260101_060000.log", names)

    def test_child_records_reach_file(self) -> None:
        """Records from fuel_prices.* loggers land in the run log."""
        log_path = setup_logging(logs_dir=self.logs_dir)
        logging.getLogger("fuel_prices.updater").info("hello from updater")
        for handler in logging.getLogger("fuel_prices").handlers:
            handler.flush()
        self.assertIn(
            "hello from updater", log_path.read_text(encoding="utf-8")
        )


class TestPruneOldLogs(unittest.TestCase):
    """Retention of run logs."""

    def setUp(self) -> None:
        self.tmp = tempfile.TemporaryDirectory()
        self.logs_dir = Path(self.tmp.name)
        for stamp in ("20260101", "20260102", "20260103"):
            (self.logs_dir / f"run_{stamp}_060000.log").touch()
        (self.logs_dir / "notes.txt").touch()

    def tearDown(self) -> None:
        self.tmp.cleanup()

    def test_keeps_newest(self) -> None:
        removed = prune_old_logs(self.logs_dir, keep=2)
        self.assertEqual([p.name for p in removed], ["run_20260101_060000.log"])
        self.assertTrue((self.logs_dir / "notes.txt").exists())

    def test_keep_more_than_present(self) -> None:
        self.assertEqual(prune_old_logs(self.logs_dir, keep=10), [])

    def test_missing_dir(self) -> None:
        self.assertEqual(prune_old_logs(self.logs_dir / "nope", keep=1), [])


if __name__ == "__main__":
    unittest.main()
