# fuel_prices/services/price_updater.py

"""One scheduled update: fetch, parse, compare, and persist on change."""

import logging
from dataclasses import dataclass
from pathlib import Path

from fuel_prices.config.settings import Settings
from fuel_prices.models.price_entry import PRICE_FIELDS
from fuel_prices.models.snapshot import (
    KEY_MODE_CANONICAL,
    KEY_MODE_VERBATIM,
    Snapshot,
    utc_timestamp,
)
from fuel_prices.scrapers.price_page_scraper import PricePageScraper
from fuel_prices.services.snapshot_builder import (
    build_snapshot,
    snapshots_equal,
)
from fuel_prices.storage.snapshot_store import SnapshotStore

logger = logging.getLogger("fuel_prices.updater")

STATUS_WRITTEN = "written"
STATUS_UNCHANGED = "unchanged"


@dataclass
class UpdateResult:
    """Outcome of a completed update run."""

    status: str
    snapshot: Snapshot
    previous: Snapshot | None = None
    backup_path: Path | None = None
    history_length: int = 0

    @property
    def changed(self) -> bool:
        return self.status == STATUS_WRITTEN


class PriceUpdater:
    """Coordinates scraper, snapshot builder and store for one run.

    Errors from fetching or parsing propagate before anything is
    written, so a failed run never leaves partial files behind.
    """

    def __init__(
        self,
        scraper: PricePageScraper | None = None,
        store: SnapshotStore | None = None,
        key_mode: str | None = None,
        compare_field: str | None = None,
    ) -> None:
        self.settings = Settings()
        self.scraper = scraper or PricePageScraper()
        self.store = store or SnapshotStore()
        self.key_mode = key_mode or self.settings.KEY_MODE
        self.compare_field = compare_field or self.settings.COMPARE_FIELD
        if self.key_mode not in (KEY_MODE_CANONICAL, KEY_MODE_VERBATIM):
            raise ValueError(f"Unknown key mode: {self.key_mode!r}")
        if self.compare_field not in PRICE_FIELDS:
            raise ValueError(
                f"Unknown compare field: {self.compare_field!r}"
            )

    def build(self, fetched_at: str | None = None) -> Snapshot:
        """Fetch the page and build a snapshot without touching disk."""
        rows = self.scraper.get_rows()
        return build_snapshot(
            rows,
            source=self.scraper.url,
            fetched_at=fetched_at or utc_timestamp(),
            key_mode=self.key_mode,
            vat_rate=self.settings.VAT_RATE,
        )

    def run(self, fetched_at: str | None = None) -> UpdateResult:
        """Execute the update; raises :class:`PriceScrapeError` on failure."""
        snapshot = self.build(fetched_at)
        previous = self.store.load_current()

        if snapshots_equal(
            previous,
            snapshot,
            field_name=self.compare_field,
            tolerance=self.settings.PRICE_TOLERANCE,
        ):
            logger.info("Prices unchanged, nothing written")
            return UpdateResult(
                status=STATUS_UNCHANGED,
                snapshot=snapshot,
                previous=previous,
            )

        if previous is None:
            logger.info("No previous snapshot, writing the first one")
        saved = self.store.save(snapshot)
        return UpdateResult(
            status=STATUS_WRITTEN,
            snapshot=snapshot,
            previous=previous,
            backup_path=saved.backup_path,
            history_length=saved.history_length,
        )
