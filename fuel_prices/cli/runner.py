# fuel_prices/cli/runner.py

"""Headless commands: update run, price table, dashboard, margins, chart."""

import logging
from pathlib import Path

from rich.console import Console
from rich.table import Table

from fuel_prices.config.settings import Settings
from fuel_prices.dashboard.renderer import (
    DashboardRenderer,
    PriceRow,
    format_zl,
)
from fuel_prices.errors import PriceScrapeError
from fuel_prices.models.snapshot import Snapshot
from fuel_prices.services.price_updater import PriceUpdater
from fuel_prices.storage.margin_store import JsonMarginStore
from fuel_prices.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("fuel_prices.cli")

# Stderr console for status messages so stdout stays clean
_err = Console(stderr=True)


def parse_keys(keys_csv: str | None) -> list[str] | None:
    """Split a comma-separated key list; ``None`` means the default."""
    if not keys_csv:
        return None
    keys = [k.strip() for k in keys_csv.split(",") if k.strip()]
    return keys or None


def parse_margin_arg(arg: str) -> tuple[str, int]:
    """Parse ``NAME=GROSZE`` (e.g. ``pb95=15``).

    Raises ``SystemExit`` on malformed input.
    """
    name, sep, value = arg.rpartition("=")
    name = name.strip()
    try:
        grosze = int(value.strip())
    except ValueError:
        grosze = None
    if not sep or not name or grosze is None:
        _err.print(
            f"[red]Invalid margin '{arg}', expected NAME=GROSZE[/red]"
        )
        raise SystemExit(1)
    return name, grosze


def _print_prices(rows: list[PriceRow], snapshot: Snapshot) -> None:
    """Render a Rich table of gross prices and margins to stdout."""
    table = Table(
        title=f"Hurtowe ceny paliw ({snapshot.fetched_at})",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("Paliwo", style="bold")
    table.add_column("Brutto / L", justify="right", style="green")
    table.add_column("Marża [gr]", justify="right")
    table.add_column("Z marżą", justify="right", style="magenta")

    for row in rows:
        table.add_row(
            row.name,
            format_zl(row.gross),
            str(row.margin),
            format_zl(row.adjusted),
        )

    Console().print(table)


def run_update(key_mode: str | None = None, quiet: bool = False) -> int:
    """Fetch, compare and persist; return 0 on success or no-op, 1 on failure."""
    try:
        updater = PriceUpdater(key_mode=key_mode)
    except ValueError as exc:
        logger.error("Invalid configuration: %s", exc)
        _err.print(f"[red]Błędna konfiguracja: {exc}[/red]")
        return 1

    _err.print(f"[bold]Pobieram[/bold] {updater.scraper.url}")
    try:
        result = updater.run()
    except (PriceScrapeError, OSError) as exc:
        logger.error("Update failed: %s", exc, exc_info=True)
        _err.print(f"[red]Błąd: {exc}[/red]")
        return 1

    if result.changed:
        _err.print(
            f"[green]✓ Zapisano {updater.store.prices_path}[/green] "
            f"[dim](backup {result.backup_path}, "
            f"historia: {result.history_length})[/dim]"
        )
    else:
        _err.print("[yellow]Ceny nie zmieniły się — brak zapisu.[/yellow]")

    if not quiet:
        renderer = DashboardRenderer(JsonMarginStore())
        _print_prices(renderer.price_rows(result.snapshot), result.snapshot)
    return 0


def run_show() -> int:
    """Print the stored snapshot with margins applied."""
    snapshot = SnapshotStore().load_current()
    if snapshot is None:
        _err.print("[yellow]Brak prices.json.[/yellow]")
        return 1
    renderer = DashboardRenderer(JsonMarginStore())
    _print_prices(renderer.price_rows(snapshot), snapshot)
    return 0


def run_dashboard(
    output: str | None = None,
    keys_csv: str | None = None,
    limit: int | None = None,
) -> int:
    """Write the static HTML dashboard from the stored files."""
    store = SnapshotStore()
    renderer = DashboardRenderer(JsonMarginStore())
    path = (
        Path(output)
        if output
        else store.data_dir / Settings.DASHBOARD_FILE
    )
    try:
        renderer.write_html(
            path,
            store.load_current(),
            store.load_history(),
            keys=parse_keys(keys_csv),
            limit=limit or Settings.CHART_POINT_LIMIT,
        )
    except OSError as exc:
        logger.error("Dashboard write failed: %s", exc, exc_info=True)
        _err.print(f"[red]Nie udało się zapisać {path}: {exc}[/red]")
        return 1
    _err.print(f"[green]✓ Dashboard → {path}[/green]")
    return 0


def run_set_margin(arg: str) -> int:
    name, grosze = parse_margin_arg(arg)
    JsonMarginStore().set(name, grosze)
    _err.print(f"[green]✓ Marża {name}: {grosze} gr[/green]")
    return 0


def run_reset_margin(name: str) -> int:
    JsonMarginStore().reset(name)
    _err.print(f"[green]✓ Marża {name} wyzerowana[/green]")
    return 0


def run_chart(
    keys_csv: str | None = None,
    limit: int | None = None,
    open_browser: bool = True,
) -> int:
    """Export the interactive Plotly history chart."""
    from fuel_prices.storage.chart_exporter import export_history_chart

    history = SnapshotStore().load_history()
    path = export_history_chart(
        history,
        keys=parse_keys(keys_csv),
        limit=limit,
        open_browser=open_browser,
    )
    if path is None:
        _err.print("[yellow]Za mało danych historycznych.[/yellow]")
        return 1
    _err.print(f"[green]✓ Wykres → {path}[/green]")
    return 0
