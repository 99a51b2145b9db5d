# tests/helpers.py

"""Builders for snapshots and fixture markup shared across tests."""

from pathlib import Path

from fuel_prices.models.price_entry import PriceEntry
from fuel_prices.models.snapshot import Snapshot

FIXTURES_DIR = Path(__file__).parent / "fixtures"
SOURCE = "https://example.com/hurtowe_ceny_paliw"


def fixture_html(name: str = "price_table.html") -> str:
    """Return the text of a fixture file."""
    return (FIXTURES_DIR / name).read_text(encoding="utf-8")


def make_snapshot(
    raws: dict[str, float | None],
    fetched_at: str = "2026-10-16T06:00:00.000Z",
) -> Snapshot:
    """Canonical snapshot with entries derived from per-m3 quotes."""
    return Snapshot(
        source=SOURCE,
        fetched_at=fetched_at,
        prices={k: PriceEntry.from_raw(v) for k, v in raws.items()},
    )
