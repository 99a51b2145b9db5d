# fuel_prices/models/snapshot.py

"""Timestamped price snapshot as persisted in prices.json and history.json."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from fuel_prices.config.settings import Settings
from fuel_prices.models.price_entry import PriceEntry

KEY_MODE_CANONICAL = "canonical"
KEY_MODE_VERBATIM = "verbatim"


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. ``2026-01-05T06:00:00.000Z``."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class Snapshot:
    """One fetched-and-parsed reading of the wholesale price table."""

    source: str
    fetched_at: str
    prices: dict[str, PriceEntry] = field(
        default_factory=lambda: dict[str, PriceEntry]()
    )
    key_mode: str = KEY_MODE_CANONICAL
    schema_version: int = Settings.SCHEMA_VERSION

    def values(self, field_name: str) -> dict[str, float | None]:
        """Map every fuel key to one numeric field of its entry."""
        return {
            name: entry.value(field_name)
            for name, entry in self.prices.items()
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "source": self.source,
            "fetched_at": self.fetched_at,
            "key_mode": self.key_mode,
            "prices": {
                name: entry.to_dict()
                for name, entry in self.prices.items()
            },
        }
