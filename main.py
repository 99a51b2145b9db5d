# main.py

"""Entry point for the fuel_prices tracker (update run, dashboard or TUI)."""

import argparse
import logging
import sys
from pathlib import Path

from fuel_prices.config.logging_config import setup_logging
from fuel_prices.config.settings import Settings

logger = logging.getLogger("fuel_prices.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="fuel_prices",
        description="Wholesale fuel price tracker.",
        epilog=f"Source: {Settings.SOURCE_URL}",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--show",
        action="store_true",
        default=False,
        help="Print the stored prices with margins applied.",
    )
    mode.add_argument(
        "--dashboard",
        action="store_true",
        default=False,
        help="Render the static HTML dashboard from stored files.",
    )
    mode.add_argument(
        "--chart",
        action="store_true",
        default=False,
        help="Export an interactive Plotly chart of the history.",
    )
    mode.add_argument(
        "--tui",
        action="store_true",
        default=False,
        help="Launch the interactive terminal dashboard.",
    )
    mode.add_argument(
        "--set-margin",
        default=None,
        metavar="NAME=GROSZE",
        dest="set_margin",
        help="Store a margin override (in grosze) for one fuel.",
    )
    mode.add_argument(
        "--reset-margin",
        default=None,
        metavar="NAME",
        dest="reset_margin",
        help="Reset the margin override of one fuel to 0.",
    )
    parser.add_argument(
        "-d",
        "--data-dir",
        default=None,
        dest="data_dir",
        help="Directory for prices.json/history.json (default: data/).",
    )
    parser.add_argument(
        "--key-mode",
        choices=["canonical", "verbatim"],
        default=None,
        dest="key_mode",
        help="Canonical fuel keys or scraped names (update run only).",
    )
    parser.add_argument(
        "-k",
        "--keys",
        default=None,
        help="Comma-separated fuel keys to chart.",
    )
    parser.add_argument(
        "-n",
        "--limit",
        type=int,
        default=None,
        help="Chart only the newest N snapshots.",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Dashboard output path (default: <data-dir>/dashboard.html).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Do not print the price table after an update.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Show INFO log messages on the console.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual dashboard."""
    from fuel_prices.ui.app import FuelPricesApp

    try:
        app = FuelPricesApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("fuel_prices TUI shutting down")


def main() -> None:
    """Route to the requested command; default is one update run."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(verbose=args.verbose)
    logger.info("fuel_prices starting, log file: %s", log_file)

    if args.data_dir is not None:
        Settings.DATA_DIR = Path(args.data_dir)

    from fuel_prices.cli import runner

    if args.tui:
        _run_tui()
        return
    if args.show:
        exit_code = runner.run_show()
    elif args.dashboard:
        exit_code = runner.run_dashboard(args.output, args.keys, args.limit)
    elif args.chart:
        exit_code = runner.run_chart(args.keys, args.limit)
    elif args.set_margin is not None:
        exit_code = runner.run_set_margin(args.set_margin)
    elif args.reset_margin is not None:
        exit_code = runner.run_reset_margin(args.reset_margin)
    else:
        exit_code = runner.run_update(args.key_mode, quiet=args.quiet)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
