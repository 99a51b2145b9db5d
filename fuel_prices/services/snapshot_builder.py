# fuel_prices/services/snapshot_builder.py

"""Turn extracted table rows into a Snapshot and detect price changes."""

import logging

from fuel_prices.config.settings import Settings
from fuel_prices.models.price_entry import PriceEntry
from fuel_prices.models.snapshot import (
    KEY_MODE_CANONICAL,
    KEY_MODE_VERBATIM,
    Snapshot,
)
from fuel_prices.parsing.fuel_classifier import (
    CANONICAL_KEYS,
    classify_fuel,
    row_name,
)
from fuel_prices.parsing.price_resolver import (
    Ambiguous,
    Resolved,
    resolve_price,
)

logger = logging.getLogger("fuel_prices.builder")


def _canonical_prices(
    rows: list[list[str]],
    vat_rate: float,
) -> dict[str, PriceEntry]:
    """Classify rows into the canonical key set, first match wins."""
    prices: dict[str, PriceEntry] = {
        key: PriceEntry() for key in CANONICAL_KEYS
    }
    for row in rows:
        name = row_name(row)
        key = classify_fuel(name)
        if key is None:
            continue
        if prices[key].raw is not None:
            logger.debug(
                "Ignoring later row for %s: %r", key, row
            )
            continue
        result = resolve_price(row)
        if isinstance(result, Resolved):
            prices[key] = PriceEntry.from_raw(result.value, vat_rate)
            logger.debug(
                "%s = %.2f via %s (%r)",
                key,
                result.value,
                result.heuristic,
                row,
            )
        elif isinstance(result, Ambiguous):
            logger.warning(
                "Ambiguous price for %s in row %r: %s",
                key,
                row,
                result.candidates,
            )
    return prices


def _verbatim_prices(
    rows: list[list[str]],
    vat_rate: float,
) -> dict[str, PriceEntry]:
    """Key every priced row by its scraped name."""
    prices: dict[str, PriceEntry] = {}
    for row in rows:
        name = row[0] if row else ""
        if not name:
            continue
        if name in prices and prices[name].raw is not None:
            continue
        result = resolve_price(row)
        if isinstance(result, Resolved):
            prices[name] = PriceEntry.from_raw(result.value, vat_rate)
        elif isinstance(result, Ambiguous):
            logger.warning(
                "Ambiguous price for %r: %s", name, result.candidates
            )
            prices[name] = PriceEntry()
        # Header and spacer rows carry no price at all
    return prices


def build_snapshot(
    rows: list[list[str]],
    source: str,
    fetched_at: str,
    key_mode: str = Settings.KEY_MODE,
    vat_rate: float = Settings.VAT_RATE,
) -> Snapshot:
    """Resolve and classify *rows* into a new :class:`Snapshot`."""
    if key_mode == KEY_MODE_CANONICAL:
        prices = _canonical_prices(rows, vat_rate)
    elif key_mode == KEY_MODE_VERBATIM:
        prices = _verbatim_prices(rows, vat_rate)
    else:
        raise ValueError(f"Unknown key mode: {key_mode!r}")

    found = sum(1 for p in prices.values() if p.raw is not None)
    logger.info(
        "Built snapshot with %d/%d prices (key_mode=%s)",
        found,
        len(prices),
        key_mode,
    )
    return Snapshot(
        source=source,
        fetched_at=fetched_at,
        prices=prices,
        key_mode=key_mode,
    )


def prices_equal(
    a: dict[str, float | None],
    b: dict[str, float | None],
    tolerance: float = Settings.PRICE_TOLERANCE,
) -> bool:
    """Compare two key->value maps; a missing key counts as ``None``."""
    for key in set(a) | set(b):
        va = a.get(key)
        vb = b.get(key)
        if (va is None) != (vb is None):
            return False
        if va is not None and vb is not None and abs(va - vb) > tolerance:
            return False
    return True


def snapshots_equal(
    previous: Snapshot | None,
    current: Snapshot,
    field_name: str = Settings.COMPARE_FIELD,
    tolerance: float = Settings.PRICE_TOLERANCE,
) -> bool:
    """True when *current* carries the same prices as *previous*.

    Timestamps and source URLs are ignored.
    """
    if previous is None:
        return False
    return prices_equal(
        previous.values(field_name),
        current.values(field_name),
        tolerance,
    )
