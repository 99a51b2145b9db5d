# fuel_prices/models/migration.py

"""Upgrade persisted snapshots from older layouts to the current schema.

Layouts seen in the wild:

* version 0 - no ``schema_version``; each price is a bare number or null.
* version 1 - no ``schema_version``; each price is a ``{raw, per_liter,
  gross}`` object, possibly with only some of the fields present.
* version 2 - explicit ``schema_version`` and ``key_mode``.
"""

import logging
from typing import Any

from fuel_prices.config.settings import Settings
from fuel_prices.errors import SnapshotFormatError
from fuel_prices.models.price_entry import PriceEntry, _as_number
from fuel_prices.models.snapshot import (
    KEY_MODE_CANONICAL,
    KEY_MODE_VERBATIM,
    Snapshot,
)
from fuel_prices.parsing.fuel_classifier import (
    CANONICAL_KEYS,
    LEGACY_KEY_ALIASES,
)

logger = logging.getLogger("fuel_prices.migration")

# Bare legacy numbers at or above this are per-m3 quotes, below it per-litre
_LEGACY_RAW_THRESHOLD = 100.0


def detect_schema_version(data: dict[str, Any]) -> int:
    """Return the layout version of a persisted snapshot dict."""
    declared = data.get("schema_version")
    if declared is not None:
        if not isinstance(declared, int) or isinstance(declared, bool):
            raise SnapshotFormatError(
                f"Invalid schema_version: {declared!r}"
            )
        return declared
    prices = data.get("prices") or {}
    if not isinstance(prices, dict):
        raise SnapshotFormatError("Snapshot 'prices' must be an object")
    if any(isinstance(v, dict) for v in prices.values()):
        return 1
    return 0


def _legacy_entry(value: Any, vat_rate: float) -> PriceEntry:
    """Interpret a bare version-0 number."""
    number = _as_number(value)
    if number is None:
        return PriceEntry()
    if number >= _LEGACY_RAW_THRESHOLD:
        return PriceEntry.from_raw(number, vat_rate=vat_rate)
    return PriceEntry(per_liter=number, gross=number * vat_rate)


def _guess_key_mode(keys: list[str]) -> str:
    known = set(CANONICAL_KEYS) | set(LEGACY_KEY_ALIASES)
    if all(k in known for k in keys):
        return KEY_MODE_CANONICAL
    return KEY_MODE_VERBATIM


def _alias_keys(
    prices: dict[str, PriceEntry],
) -> dict[str, PriceEntry]:
    """Rename legacy Polish keys to canonical ones, first value wins."""
    result: dict[str, PriceEntry] = {}
    for name, entry in prices.items():
        key = LEGACY_KEY_ALIASES.get(name, name)
        if key in result and result[key].gross is not None:
            continue
        result[key] = entry
    return result


def migrate_snapshot(
    data: dict[str, Any],
    vat_rate: float = Settings.VAT_RATE,
) -> Snapshot:
    """Normalise any known snapshot layout into a current :class:`Snapshot`.

    Raises:
        SnapshotFormatError: The dict is not a snapshot or declares a
            schema version newer than this code understands.
    """
    if not isinstance(data, dict):
        raise SnapshotFormatError(
            f"Snapshot must be an object, got {type(data).__name__}"
        )
    raw_prices = data.get("prices") or {}
    if not isinstance(raw_prices, dict):
        raise SnapshotFormatError("Snapshot 'prices' must be an object")
    version = detect_schema_version(data)
    if version > Settings.SCHEMA_VERSION:
        raise SnapshotFormatError(
            f"Unsupported schema_version {version} "
            f"(newest known: {Settings.SCHEMA_VERSION})"
        )

    prices: dict[str, PriceEntry] = {}
    for name, value in raw_prices.items():
        if isinstance(value, dict):
            prices[str(name)] = PriceEntry.from_dict(value, vat_rate=vat_rate)
        else:
            prices[str(name)] = _legacy_entry(value, vat_rate)

    key_mode = data.get("key_mode") or _guess_key_mode(list(prices))
    if key_mode == KEY_MODE_CANONICAL:
        prices = _alias_keys(prices)

    if version < Settings.SCHEMA_VERSION:
        logger.debug(
            "Migrated snapshot from schema v%d (%d prices, key_mode=%s)",
            version,
            len(prices),
            key_mode,
        )

    return Snapshot(
        source=str(data.get("source") or ""),
        fetched_at=str(data.get("fetched_at") or ""),
        prices=prices,
        key_mode=key_mode,
        schema_version=Settings.SCHEMA_VERSION,
    )


def migrate_history(
    entries: list[Any],
    vat_rate: float = Settings.VAT_RATE,
) -> list[Snapshot]:
    """Migrate every history entry, dropping the ones that cannot be read."""
    snapshots: list[Snapshot] = []
    for index, item in enumerate(entries):
        try:
            snapshots.append(migrate_snapshot(item, vat_rate=vat_rate))
        except SnapshotFormatError as exc:
            logger.warning(
                "Skipping unreadable history entry #%d: %s", index, exc
            )
    return snapshots
