# fuel_prices/parsing/fuel_classifier.py

"""Map free-text fuel names from the price table to canonical keys."""

import re

CANONICAL_KEYS: tuple[str, ...] = (
    "pb95",
    "pb98",
    "diesel",
    "heating_oil",
    "lpg",
)

# Keys written by older revisions of prices.json
LEGACY_KEY_ALIASES: dict[str, str] = {
    "benzyna": "pb95",
    "on": "diesel",
    "op": "heating_oil",
}

# Order matters: heating oil before diesel ("olej"), 98 before 95.
_RULES: list[tuple[str, re.Pattern[str]]] = [
    ("lpg", re.compile(r"\blpg\b|autogaz", re.IGNORECASE)),
    (
        "heating_oil",
        re.compile(r"opa[lł]owy|grzewcz|\bop\b|\bloo\b", re.IGNORECASE),
    ),
    (
        "pb98",
        re.compile(r"(?<!\d)98(?!\d)|benzyna\s+98", re.IGNORECASE),
    ),
    (
        "pb95",
        re.compile(
            r"(?<!\d)95(?!\d)|benzyna\s+95|eurosuper", re.IGNORECASE
        ),
    ),
    ("diesel", re.compile(r"diesel|nap[eę]dowy|\bon\b", re.IGNORECASE)),
]

_HAS_LETTER_RE = re.compile(r"[^\W\d_]")
# Decimal prices inside a name cell ("Pb95 4 448,00") would match 95/98
_PRICE_FRAGMENT_RE = re.compile(r"(?<!\w)\d[\d ]*[.,]\d{1,2}(?!\d)")


def row_name(row: list[str]) -> str:
    """Name text of a table row: the first cell plus any cell with letters."""
    if not row:
        return ""
    parts = [row[0]] + [
        cell for cell in row[1:] if _HAS_LETTER_RE.search(cell)
    ]
    text = " ".join(parts)
    return _PRICE_FRAGMENT_RE.sub(" ", text).strip()


def classify_fuel(text: str) -> str | None:
    """Return the canonical key for a fuel name, or ``None`` if unknown."""
    for key, pattern in _RULES:
        if pattern.search(text):
            return key
    return None
