# fuel_prices/parsing/table_extractor.py

"""Extract the first HTML table as rows of trimmed cell strings."""

import logging
import re

from bs4 import BeautifulSoup, Tag

from fuel_prices.errors import TableNotFoundError

logger = logging.getLogger("fuel_prices.parsing")

_WHITESPACE_RE = re.compile(r"\s+")


def clean_cell_text(text: str) -> str:
    """Collapse whitespace runs (NBSP included) to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_rows(html: str) -> list[list[str]]:
    """Return the first ``<table>`` in *html* as a list of cell-text rows.

    Entities are decoded by the parser; markup inside cells is dropped.
    Rows without any ``th``/``td`` cells are skipped.

    Raises:
        TableNotFoundError: The markup has no ``<table>`` element.
    """
    soup = BeautifulSoup(html, "lxml")
    table = soup.find("table")
    if not isinstance(table, Tag):
        raise TableNotFoundError("No <table> found in the fetched page")

    rows: list[list[str]] = []
    for tr in table.find_all("tr"):
        cells = [
            clean_cell_text(cell.get_text())
            for cell in tr.find_all(["th", "td"])
        ]
        if cells:
            rows.append(cells)

    logger.debug("Extracted %d table rows", len(rows))
    return rows
