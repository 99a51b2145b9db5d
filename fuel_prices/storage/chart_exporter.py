# fuel_prices/storage/chart_exporter.py

"""Generate interactive Plotly HTML charts from the price history."""

import importlib
import logging
import webbrowser
from datetime import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

from fuel_prices.config.settings import Settings
from fuel_prices.dashboard.renderer import ChartSeries, build_series, chart_keys
from fuel_prices.models.snapshot import Snapshot

logger = logging.getLogger("fuel_prices.chart")

# Overrides <DATA_DIR>/charts when set
_CHARTS_DIR: Path | None = None

CHART_TITLE = "Hurtowe ceny paliw: brutto za litr"


def _get_plotly_go() -> ModuleType:
    """Import plotly.graph_objects lazily."""
    return importlib.import_module("plotly.graph_objects")


def _ensure_charts_dir() -> Path:
    """Create charts directory if it doesn't exist."""
    charts_dir = _CHARTS_DIR or Settings.DATA_DIR / Settings.CHARTS_DIR
    charts_dir.mkdir(parents=True, exist_ok=True)
    return charts_dir


def _build_figure(series: list[ChartSeries]) -> Any:
    """One line per fuel; gaps where the price was unknown."""
    go = _get_plotly_go()
    fig: Any = go.Figure()
    for s in series:
        fig.add_trace(go.Scatter(
            x=s.timestamps,
            y=s.values,
            mode="lines+markers",
            name=s.key,
            connectgaps=False,
            hovertemplate=(
                "%{x}<br>"
                "Brutto / L: %{y:.3f} zł"
                "<extra></extra>"
            ),
        ))
    fig.update_layout(
        title=CHART_TITLE,
        xaxis_title="Pobrano",
        yaxis_title="zł / L",
        hovermode="x unified",
        template="plotly_white",
        legend={"orientation": "h", "y": -0.15},
    )
    return fig


def export_history_chart(
    history: list[Snapshot],
    keys: list[str] | None = None,
    limit: int | None = None,
    open_browser: bool = False,
) -> Path | None:
    """Export the gross-price history of *keys* (default: all) as HTML."""
    if len(history) < 2:
        logger.warning(
            "Not enough history for a chart (%d snapshots)", len(history)
        )
        return None

    series = build_series(
        history,
        keys if keys is not None else chart_keys(history),
        limit,
    )
    series = [
        s for s in series if any(v is not None for v in s.values)
    ]
    if not series:
        logger.warning("No known prices to chart")
        return None

    fig = _build_figure(series)
    charts_dir = _ensure_charts_dir()
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    filepath = charts_dir / f"history_{stamp}.html"
    fig.write_html(str(filepath))
    logger.info("Chart saved to %s", filepath)

    if open_browser:
        webbrowser.open(filepath.as_uri())

    return filepath
