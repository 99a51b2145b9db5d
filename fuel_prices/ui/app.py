# fuel_prices/ui/app.py

"""Terminal dashboard: current prices with editable per-fuel margins."""

import logging
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Sparkline,
    Static,
)

from fuel_prices.config.settings import Settings
from fuel_prices.dashboard.renderer import (
    DashboardRenderer,
    PriceRow,
    build_series,
    format_zl,
)
from fuel_prices.models.snapshot import Snapshot
from fuel_prices.storage.margin_store import (
    JsonMarginStore,
    MarginStore,
    parse_margin,
)
from fuel_prices.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("fuel_prices.ui")


class FuelPricesApp(App[object]):
    """Terminal dashboard for the stored wholesale prices."""

    CSS_PATH = "styles.css"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("r", "reload", "Reload"),
        Binding("d", "write_dashboard", "Write HTML"),
    ]

    def __init__(
        self,
        store: SnapshotStore | None = None,
        margin_store: MarginStore | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.store = store or SnapshotStore()
        self.margin_store = margin_store or JsonMarginStore()
        self.renderer = DashboardRenderer(self.margin_store)
        self.snapshot: Snapshot | None = None
        self.history: list[Snapshot] = []
        self.rows: list[PriceRow] = []
        self.selected: str | None = None

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Static("⛽ Hurtowe ceny paliw", id="title"),
            Static("", id="meta"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="prices_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Horizontal(
                Input(
                    placeholder="Marża w groszach",
                    id="margin_input",
                    type="integer",
                ),
                Button("Zapisz", variant="primary", id="save_btn"),
                Button("Reset", id="reset_btn"),
                id="margin_bar",
            ),
            Static("", id="preview"),
            Sparkline([], id="history_chart"),
            id="main_container",
        )
        yield Footer()

    def on_mount(self) -> None:
        """Configure table columns and load the stored files."""
        table = self._table()
        table.add_columns("Paliwo", "Brutto / L", "Marża [gr]", "Z marżą")
        self.action_reload()

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#prices_table", DataTable),
        )

    # ── Data ─────────────────────────────────────────────

    def action_reload(self) -> None:
        """Re-read prices.json and history.json."""
        self.snapshot = self.store.load_current()
        self.history = self.store.load_history()
        meta = self.query_one("#meta", Static)
        if self.snapshot is None:
            meta.update("Brak prices.json, uruchom aktualizację.")
            self.rows = []
        else:
            meta.update(
                f"Źródło: {self.snapshot.source} · "
                f"pobrano: {self.snapshot.fetched_at}"
            )
            self.rows = self.renderer.price_rows(self.snapshot)
        if self.selected is None and self.rows:
            self.selected = self.rows[0].name
        self.populate_table()
        self._select(self.selected)

    def populate_table(self) -> None:
        """Fill the DataTable with the current rows."""
        table = self._table()
        table.clear()
        for row in self.rows:
            gross_style = "" if row.gross is not None else "dim"
            table.add_row(
                row.name,
                Text(format_zl(row.gross), style=gross_style),
                str(row.margin),
                Text(format_zl(row.adjusted), style="bold green"),
                key=row.name,
            )
        # clear() puts the cursor back on row 0
        for index, row in enumerate(self.rows):
            if row.name == self.selected:
                table.move_cursor(row=index)
                break

    def _select(self, name: str | None) -> None:
        """Point the margin editor and sparkline at *name*."""
        self.selected = name
        margin_input = self.query_one("#margin_input", Input)
        chart = self.query_one("#history_chart", Sparkline)
        if name is None:
            margin_input.value = ""
            chart.data = []
            return
        margin_input.value = str(self.margin_store.get(name))
        series = build_series(
            self.history,
            [name],
            self.settings.CHART_POINT_LIMIT,
        )
        chart.data = [v for v in series[0].values if v is not None]
        self._update_preview(self.margin_store.get(name))

    def _selected_row(self) -> PriceRow | None:
        for row in self.rows:
            if row.name == self.selected:
                return row
        return None

    def _update_preview(self, grosze: int) -> None:
        """Show the adjusted price for an unsaved margin value."""
        preview = self.query_one("#preview", Static)
        row = self._selected_row()
        if row is None:
            preview.update("")
            return
        adjusted = PriceRow(row.name, row.gross, grosze).adjusted
        preview.update(
            f"{row.name}: brutto / L {format_zl(row.gross)} · "
            f"z marżą {format_zl(adjusted)}"
        )

    # ── Events ───────────────────────────────────────────

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted
    ) -> None:
        """Follow the table cursor with the margin editor."""
        if 0 <= event.cursor_row < len(self.rows):
            self._select(self.rows[event.cursor_row].name)

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "margin_input":
            self._update_preview(parse_margin(event.value))

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle save and reset."""
        if self.selected is None:
            self.notify("Brak wybranego paliwa", severity="warning")
            return
        margin_input = self.query_one("#margin_input", Input)
        if event.button.id == "save_btn":
            self.margin_store.set(
                self.selected, parse_margin(margin_input.value)
            )
        elif event.button.id == "reset_btn":
            self.margin_store.reset(self.selected)
            margin_input.value = "0"
        else:
            return
        self._refresh_rows()

    def _refresh_rows(self) -> None:
        if self.snapshot is not None:
            self.rows = self.renderer.price_rows(self.snapshot)
        self.populate_table()
        self._update_preview(self.margin_store.get(self.selected or ""))

    def action_write_dashboard(self) -> None:
        """Write the static HTML dashboard next to the data files."""
        path = self.store.data_dir / self.settings.DASHBOARD_FILE
        try:
            self.renderer.write_html(
                path,
                self.snapshot,
                self.history,
                limit=self.settings.CHART_POINT_LIMIT,
            )
            self.notify(f"Zapisano {path}")
        except OSError as e:
            logger.error("Dashboard write failed", exc_info=True)
            self.notify(f"Błąd zapisu: {e}", severity="error")
