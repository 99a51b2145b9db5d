# fuel_prices/parsing/price_resolver.py

"""Find the wholesale price in one table row.

The source table is not consistent about number formatting: decimal
commas and dots, space or dot thousands separators, prices split over
two cells, or integer quotes without any separator.  ``resolve_price``
applies a fixed list of heuristics in priority order and reports the
outcome as a tagged result instead of guessing a default:

1. direct decimal match (``4 448,00``, ``4.448,00``, ``4,448.00``)
2. single integer token scaled by digit count (``444800`` -> 4448.00)
3. adjacent-token recombination (``["4 448", "00"]`` -> 4448.00)
"""

import re
from dataclasses import dataclass
from typing import Union

_DATE_RE = re.compile(
    r"\b\d{4}-\d{1,2}-\d{1,2}\b"
    r"|\b\d{1,2}[./-]\d{1,2}[./-]\d{2,4}\b"
)
_TIME_RE = re.compile(r"\b\d{1,2}:\d{2}(?::\d{2})?\b")

_DECIMAL_RE = re.compile(
    r"(?<![\w.,])"
    r"(?P<int>\d{1,3}(?P<sep>[\s.,])\d{3}(?:(?P=sep)\d{3})*|\d+)"
    r"(?P<dec>[.,])(?P<frac>\d{1,2})"
    r"(?!\w|[.,]\d)"
)
_INT_TOKEN_RE = re.compile(
    r"(?<![\w.,])"
    r"(?:\d{1,3}(?P<sep>[\s.])\d{3}(?:(?P=sep)\d{3})*|\d+)"
    r"(?!\w|[.,]\d)"
)

# digit count -> divisor for bare integer quotes
_TOKEN_SCALE: dict[int, int] = {4: 1, 5: 10, 6: 100}


@dataclass(frozen=True)
class Resolved:
    """A price was found; ``heuristic`` names the rule that matched."""

    value: float
    heuristic: str


@dataclass(frozen=True)
class Ambiguous:
    """Several incompatible numbers could be the price."""

    candidates: tuple[float, ...]


@dataclass(frozen=True)
class NotFound:
    """Nothing in the row looks like a price."""


Resolution = Union[Resolved, Ambiguous, NotFound]


def _candidate_cells(row: list[str]) -> list[str]:
    """Cells that may hold the price: all but the leading name cell."""
    cells = row[1:] if len(row) > 1 else row
    stripped = [_TIME_RE.sub(" ", _DATE_RE.sub(" ", c)) for c in cells]
    return [c for c in stripped if c.strip()]


def _direct_decimal(cells: list[str]) -> float | None:
    for cell in cells:
        for match in _DECIMAL_RE.finditer(cell):
            sep = match.group("sep")
            if sep is not None and sep == match.group("dec"):
                continue
            integer = re.sub(r"\D", "", match.group("int"))
            return float(f"{integer}.{match.group('frac')}")
    return None


def _integer_tokens(cells: list[str]) -> list[str]:
    """Digit strings of every integer token, thousands separators removed."""
    tokens: list[str] = []
    for cell in cells:
        for match in _INT_TOKEN_RE.finditer(cell):
            tokens.append(re.sub(r"\D", "", match.group(0)))
    return tokens


def _scale_token(digits: str) -> float | None:
    divisor = _TOKEN_SCALE.get(len(digits))
    if divisor is None:
        return None
    return int(digits) / divisor


def _recombine(tokens: list[str]) -> float | None:
    for whole, fraction in zip(tokens, tokens[1:]):
        if len(fraction) == 2:
            return float(f"{int(whole)}.{fraction}")
    return None


def resolve_price(row: list[str]) -> Resolution:
    """Locate the price in *row* using the ordered heuristics.

    Never raises; an unusable row yields :class:`NotFound` or
    :class:`Ambiguous`.
    """
    if not row:
        return NotFound()
    cells = _candidate_cells(row)

    direct = _direct_decimal(cells)
    if direct is not None:
        return Resolved(direct, "decimal")

    tokens = _integer_tokens(cells)
    if not tokens:
        return NotFound()

    if len(tokens) == 1:
        single = _scale_token(tokens[0])
        if single is None:
            return NotFound()
        return Resolved(single, "single_token")

    combined = _recombine(tokens)
    if combined is not None:
        return Resolved(combined, "recombined")

    scaled: list[float] = []
    for token in tokens:
        value = _scale_token(token)
        if value is not None and value not in scaled:
            scaled.append(value)
    if len(scaled) == 1:
        return Resolved(scaled[0], "single_token")
    if scaled:
        return Ambiguous(tuple(scaled))
    return NotFound()


def price_or_none(row: list[str]) -> float | None:
    """Collapse :func:`resolve_price` to a nullable float."""
    result = resolve_price(row)
    if isinstance(result, Resolved):
        return result.value
    return None
