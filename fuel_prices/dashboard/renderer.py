# fuel_prices/dashboard/renderer.py

"""Static HTML dashboard with a hand-drawn SVG history chart.

The renderer is pure: it receives snapshots and an injected
:class:`~fuel_prices.storage.margin_store.MarginStore` and returns markup,
so it can be tested without files or a browser.
"""

import html
import logging
from dataclasses import dataclass, field
from pathlib import Path

from fuel_prices.config.settings import Settings
from fuel_prices.models.price_entry import PriceEntry
from fuel_prices.models.snapshot import Snapshot
from fuel_prices.storage.margin_store import MarginStore

logger = logging.getLogger("fuel_prices.dashboard")

MISSING = "brak"
NO_SNAPSHOT_MESSAGE = "Brak prices.json — poczekaj na aktualizację lub sprawdź logi."
NO_PRICES_MESSAGE = "Brak pozycji w prices.json"
NO_HISTORY_MESSAGE = "Brak historii."
NO_VALUES_MESSAGE = "Brak wartości do wykresu."

_SERIES_COLORS = (
    "#0b69ff",
    "#e8590c",
    "#2b8a3e",
    "#862e9c",
    "#c92a2a",
)


def format_zl(value: float | None) -> str:
    """Three decimals with a decimal comma, or ``brak`` for unknown."""
    if value is None:
        return MISSING
    return f"{value:.3f}".replace(".", ",")


def effective_gross(
    entry: PriceEntry | None,
    vat_rate: float = Settings.VAT_RATE,
    unit_liters: int = Settings.RAW_UNIT_LITERS,
) -> float | None:
    """Gross per-litre price, derived from ``per_liter`` or ``raw`` if needed."""
    if entry is None:
        return None
    if entry.gross is not None:
        return entry.gross
    if entry.per_liter is not None:
        return entry.per_liter * vat_rate
    if entry.raw is not None:
        return entry.raw / unit_liters * vat_rate
    return None


@dataclass
class PriceRow:
    """One line of the price list."""

    name: str
    gross: float | None
    margin: int = 0

    @property
    def adjusted(self) -> float | None:
        """Gross price plus the margin (grosze -> zloty)."""
        if self.gross is None:
            return None
        return self.gross + self.margin / 100.0


@dataclass
class ChartSeries:
    """Gross price of one fuel over the charted snapshots."""

    key: str
    timestamps: list[str] = field(default_factory=lambda: list[str]())
    values: list[float | None] = field(
        default_factory=lambda: list[float | None]()
    )


def chart_keys(history: list[Snapshot]) -> list[str]:
    """Fuel keys in order of first appearance across the history."""
    keys: list[str] = []
    for snapshot in history:
        for name in snapshot.prices:
            if name not in keys:
                keys.append(name)
    return keys


def build_series(
    history: list[Snapshot],
    keys: list[str] | None = None,
    limit: int | None = None,
    vat_rate: float = Settings.VAT_RATE,
) -> list[ChartSeries]:
    """Gross-price series for *keys* over the newest *limit* snapshots.

    Without *keys* only the first known fuel is charted.
    """
    window = history[-limit:] if limit else history
    if keys is None:
        keys = chart_keys(window)[:1]
    series: list[ChartSeries] = []
    for key in keys:
        s = ChartSeries(key=key)
        for snapshot in window:
            s.timestamps.append(snapshot.fetched_at)
            s.values.append(
                effective_gross(snapshot.prices.get(key), vat_rate)
            )
        series.append(s)
    return series


def scale_points(
    series: list[ChartSeries],
    width: int = Settings.CHART_WIDTH,
    height: int = Settings.CHART_HEIGHT,
    pad: int = Settings.CHART_PADDING,
) -> dict[str, list[tuple[float, float] | None]]:
    """Map every series onto the canvas with a shared linear min/max scale.

    ``x`` spreads points evenly between the paddings, ``y`` puts the
    maximum at the top.  Unknown values map to ``None``.
    """
    known = [v for s in series for v in s.values if v is not None]
    if not known:
        return {s.key: [None] * len(s.values) for s in series}
    low, high = min(known), max(known)
    span = (high - low) or 1
    result: dict[str, list[tuple[float, float] | None]] = {}
    for s in series:
        step_x = (width - pad * 2) / ((len(s.values) - 1) or 1)
        coords: list[tuple[float, float] | None] = []
        for i, value in enumerate(s.values):
            if value is None:
                coords.append(None)
                continue
            x = pad + i * step_x
            y = pad + ((high - value) / span) * (height - pad * 2)
            coords.append((x, y))
        result[s.key] = coords
    return result


def svg_path(coords: list[tuple[float, float] | None]) -> str:
    """``M x y L x y ...`` through the known points, skipping gaps."""
    parts: list[str] = []
    for point in coords:
        if point is None:
            continue
        command = "M" if not parts else "L"
        parts.append(f"{command} {point[0]:.2f} {point[1]:.2f}")
    return " ".join(parts)


class DashboardRenderer:
    """Builds the dashboard page from the current snapshot and history."""

    def __init__(
        self,
        margin_store: MarginStore,
        vat_rate: float = Settings.VAT_RATE,
        width: int = Settings.CHART_WIDTH,
        height: int = Settings.CHART_HEIGHT,
        padding: int = Settings.CHART_PADDING,
    ) -> None:
        self.margin_store = margin_store
        self.vat_rate = vat_rate
        self.width = width
        self.height = height
        self.padding = padding

    # ── Price list ───────────────────────────────────────

    def price_rows(self, snapshot: Snapshot) -> list[PriceRow]:
        """One row per fuel, in snapshot order, with its stored margin."""
        return [
            PriceRow(
                name=name,
                gross=effective_gross(entry, self.vat_rate),
                margin=self.margin_store.get(name),
            )
            for name, entry in snapshot.prices.items()
        ]

    # ── Chart ────────────────────────────────────────────

    def build_series(
        self,
        history: list[Snapshot],
        keys: list[str] | None = None,
        limit: int | None = None,
    ) -> list[ChartSeries]:
        return build_series(history, keys, limit, self.vat_rate)

    def render_svg(self, series: list[ChartSeries]) -> str:
        """SVG line chart; every point carries a ``<title>`` tooltip."""
        scaled = scale_points(
            series, self.width, self.height, self.padding
        )
        lines = [
            f'<svg viewBox="0 0 {self.width} {self.height}" '
            'xmlns="http://www.w3.org/2000/svg">',
            '<rect width="100%" height="100%" fill="transparent"/>',
        ]
        for index, s in enumerate(series):
            color = _SERIES_COLORS[index % len(_SERIES_COLORS)]
            coords = scaled[s.key]
            lines.append(
                f'<path d="{svg_path(coords)}" fill="none" '
                f'stroke="{color}" stroke-width="2"/>'
            )
            for point, stamp, value in zip(coords, s.timestamps, s.values):
                if point is None:
                    continue
                tooltip = html.escape(
                    f"{s.key} · {stamp}: {format_zl(value)} zł"
                )
                lines.append(
                    f'<circle cx="{point[0]:.2f}" cy="{point[1]:.2f}" '
                    f'r="3" fill="{color}"><title>{tooltip}</title></circle>'
                )
        lines.append("</svg>")
        return "\n".join(lines)

    def render_chart(
        self,
        history: list[Snapshot],
        keys: list[str] | None = None,
        limit: int | None = None,
    ) -> str:
        """Chart markup, or a placeholder message when there is nothing to draw."""
        if not history:
            return f"<p>{NO_HISTORY_MESSAGE}</p>"
        series = self.build_series(history, keys, limit)
        if not any(v is not None for s in series for v in s.values):
            return f"<p>{NO_VALUES_MESSAGE}</p>"
        legend = " ".join(
            f'<span style="color:{_SERIES_COLORS[i % len(_SERIES_COLORS)]}">'
            f"{html.escape(s.key)}</span>"
            for i, s in enumerate(series)
        )
        return f'<div class="legend">{legend}</div>\n{self.render_svg(series)}'

    # ── Page ─────────────────────────────────────────────

    def _render_list(self, snapshot: Snapshot | None) -> tuple[str, str]:
        """Meta line and price list markup."""
        if snapshot is None:
            return html.escape(NO_SNAPSHOT_MESSAGE), ""
        meta = html.escape(
            f"Źródło: {snapshot.source or '—'} · pobrano: {snapshot.fetched_at}"
        )
        rows = self.price_rows(snapshot)
        if not rows:
            return meta, f"<p>{NO_PRICES_MESSAGE}</p>"
        items: list[str] = []
        for row in rows:
            gross = MISSING if row.gross is None else f"{format_zl(row.gross)} zł"
            adjusted = (
                MISSING if row.adjusted is None
                else f"{format_zl(row.adjusted)} zł"
            )
            items.append(
                '<div class="item">'
                f'<div class="label">{html.escape(row.name)}</div>'
                f'<div class="price">Brutto / L: {gross}</div>'
                f'<div class="margin">Marża: {row.margin} gr · '
                f"z marżą: {adjusted}</div>"
                "</div>"
            )
        return meta, "\n".join(items)

    def render_html(
        self,
        snapshot: Snapshot | None,
        history: list[Snapshot],
        keys: list[str] | None = None,
        limit: int | None = None,
    ) -> str:
        """Complete standalone dashboard page."""
        meta, price_list = self._render_list(snapshot)
        chart = self.render_chart(history, keys, limit)
        return _PAGE_TEMPLATE.format(
            meta=meta, price_list=price_list, chart=chart
        )

    def write_html(
        self,
        path: Path,
        snapshot: Snapshot | None,
        history: list[Snapshot],
        keys: list[str] | None = None,
        limit: int | None = None,
    ) -> Path:
        """Render the dashboard to *path* and return it."""
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(
            self.render_html(snapshot, history, keys, limit),
            encoding="utf-8",
        )
        logger.info("Dashboard written to %s", path)
        return path


_PAGE_TEMPLATE = """\
<!doctype html>
<html lang="pl">
<head>
<meta charset="utf-8">
<title>Hurtowe ceny paliw</title>
<style>
body {{ font-family: system-ui, sans-serif; margin: 2rem; color: #222; }}
.item {{ display: flex; gap: 1.5rem; padding: .4rem 0; border-bottom: 1px solid #eee; }}
.label {{ font-weight: 600; min-width: 8rem; }}
.legend span {{ margin-right: 1rem; font-size: .9rem; }}
#chart svg {{ width: 100%; max-width: 720px; }}
</style>
</head>
<body>
<h1>Hurtowe ceny paliw</h1>
<div id="meta">{meta}</div>
<div id="list">
{price_list}
</div>
<h2>Historia</h2>
<div id="chart">
{chart}
</div>
</body>
</html>
"""
