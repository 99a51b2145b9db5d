# fuel_prices/scrapers/price_page_scraper.py

"""Downloads the wholesale price page and extracts its table rows."""

import logging

from curl_cffi import requests as curl_requests

from fuel_prices.config.settings import Settings
from fuel_prices.errors import FetchError
from fuel_prices.parsing.table_extractor import extract_rows


class PricePageScraper:
    """Single-shot fetcher for the wholesale price table.

    One GET per run with a static user agent; no retries or backoff.
    A non-2xx status or a transport error raises :class:`FetchError`.
    """

    def __init__(self, url: str | None = None) -> None:
        self.settings = Settings()
        self.url = url or self.settings.SOURCE_URL
        self.logger = logging.getLogger("fuel_prices.scraper")
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )

    def _headers(self) -> dict[str, str]:
        return {
            **self.settings.DEFAULT_HEADERS,
            "User-Agent": self.settings.USER_AGENT,
        }

    def fetch_html(self) -> str:
        """GET the source page and return its body text."""
        self.logger.info("Fetching %s", self.url)
        try:
            resp = self.session.get(
                self.url,
                headers=self._headers(),
                timeout=self.settings.REQUEST_TIMEOUT,
                allow_redirects=True,
            )
        except Exception as exc:
            self.logger.error(
                "Request error for %s: %s", self.url, exc, exc_info=True
            )
            raise FetchError(self.url, str(exc)) from exc

        if not 200 <= resp.status_code < 300:
            self.logger.error(
                "HTTP %d from %s", resp.status_code, self.url
            )
            raise FetchError(self.url, f"HTTP {resp.status_code}")

        self.logger.debug(
            "Fetched %d characters from %s", len(resp.text), self.url
        )
        return str(resp.text)

    def get_rows(self) -> list[list[str]]:
        """Fetch the page and return the first table as cell rows.

        Raises:
            FetchError: The page could not be downloaded.
            TableNotFoundError: The page has no table.
        """
        return extract_rows(self.fetch_html())
