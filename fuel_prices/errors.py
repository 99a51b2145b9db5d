# fuel_prices/errors.py

"""Exceptions that abort a price update run."""


class PriceScrapeError(Exception):
    """Base class for fatal errors of a single update run."""


class FetchError(PriceScrapeError):
    """The source page could not be downloaded (transport error or non-2xx)."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Fetch failed for {url}: {reason}")
        self.url = url
        self.reason = reason


class TableNotFoundError(PriceScrapeError):
    """The fetched markup contains no price table."""


class SnapshotFormatError(PriceScrapeError):
    """A persisted snapshot uses a schema this version cannot read."""
