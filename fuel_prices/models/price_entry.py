# fuel_prices/models/price_entry.py

"""Per-fuel price reading with derived net and gross per-litre values."""

from dataclasses import dataclass
from typing import Any

from fuel_prices.config.settings import Settings

PRICE_FIELDS: tuple[str, ...] = ("raw", "per_liter", "gross")


def _as_number(value: Any) -> float | None:
    """Coerce a JSON value to float, keeping null (and junk) as None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).replace(",", "."))
    except ValueError:
        return None


@dataclass
class PriceEntry:
    """Wholesale price of one fuel.

    ``raw`` is quoted per 1000 litres, ``per_liter`` is the net price per
    litre and ``gross`` includes VAT.  Any field may be ``None`` when the
    page did not yield a confident number.
    """

    raw: float | None = None
    per_liter: float | None = None
    gross: float | None = None

    @classmethod
    def from_raw(
        cls,
        raw: float | None,
        vat_rate: float = Settings.VAT_RATE,
        unit_liters: int = Settings.RAW_UNIT_LITERS,
    ) -> "PriceEntry":
        """Derive per-litre net and gross prices from a per-m3 quote."""
        if raw is None:
            return cls()
        per_liter = raw / unit_liters
        return cls(raw=raw, per_liter=per_liter, gross=per_liter * vat_rate)

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        vat_rate: float = Settings.VAT_RATE,
        unit_liters: int = Settings.RAW_UNIT_LITERS,
    ) -> "PriceEntry":
        """Read a persisted entry, filling in derivable missing fields."""
        raw = _as_number(data.get("raw"))
        per_liter = _as_number(data.get("per_liter"))
        gross = _as_number(data.get("gross"))
        if per_liter is None and raw is not None:
            per_liter = raw / unit_liters
        if gross is None and per_liter is not None:
            gross = per_liter * vat_rate
        return cls(raw=raw, per_liter=per_liter, gross=gross)

    def value(self, field_name: str) -> float | None:
        """Return one numeric field by name (``raw``, ``per_liter``, ``gross``)."""
        if field_name not in PRICE_FIELDS:
            raise ValueError(f"Unknown price field: {field_name!r}")
        result: float | None = getattr(self, field_name)
        return result

    def to_dict(self) -> dict[str, float | None]:
        return {
            "raw": self.raw,
            "per_liter": self.per_liter,
            "gross": self.gross,
        }
