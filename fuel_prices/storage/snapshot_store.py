# fuel_prices/storage/snapshot_store.py

"""Persists the current snapshot, per-change backups and capped history."""

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fuel_prices.config.settings import Settings
from fuel_prices.errors import SnapshotFormatError
from fuel_prices.models.migration import migrate_history, migrate_snapshot
from fuel_prices.models.snapshot import Snapshot

logger = logging.getLogger("fuel_prices.storage")


def backup_filename(fetched_at: str) -> str:
    """``prices-<timestamp>.json`` with ``:`` and ``.`` replaced by ``-``."""
    safe = fetched_at.replace(":", "-").replace(".", "-")
    return f"prices-{safe}.json"


def _write_json(path: Path, data: Any) -> None:
    """Write *data* as indented UTF-8 JSON, replacing *path* in one step."""
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
        f.write("\n")
    os.replace(tmp_path, path)


def _read_json(path: Path) -> Any:
    """Load JSON from *path*; ``None`` when missing or malformed."""
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.warning("Ignoring unreadable %s: %s", path, exc)
        return None


@dataclass
class SaveResult:
    """Paths touched by a successful :meth:`SnapshotStore.save`."""

    prices_path: Path
    backup_path: Path
    history_path: Path
    history_length: int


class SnapshotStore:
    """File-backed store for ``prices.json`` and ``history.json``."""

    def __init__(
        self,
        data_dir: Path | None = None,
        max_history: int | None = None,
    ) -> None:
        self.data_dir: Path = data_dir or Settings.DATA_DIR
        self.max_history: int = (
            max_history
            if max_history is not None
            else Settings.MAX_HISTORY_ENTRIES
        )
        if self.max_history < 1:
            raise ValueError("max_history must be at least 1")
        logger.debug(
            "SnapshotStore initialised, data_dir=%s max_history=%d",
            self.data_dir,
            self.max_history,
        )

    @property
    def prices_path(self) -> Path:
        return self.data_dir / Settings.PRICES_FILE

    @property
    def history_path(self) -> Path:
        return self.data_dir / Settings.HISTORY_FILE

    @property
    def backup_dir(self) -> Path:
        return self.data_dir / Settings.HISTORY_DIR

    # ── Reading ──────────────────────────────────────────

    def load_current(self) -> Snapshot | None:
        """Return the stored snapshot, or ``None`` if absent or malformed."""
        data = _read_json(self.prices_path)
        if data is None:
            return None
        try:
            return migrate_snapshot(data)
        except SnapshotFormatError as exc:
            logger.warning(
                "Treating %s as absent: %s", self.prices_path, exc
            )
            return None

    def load_history(self) -> list[Snapshot]:
        """Return stored history oldest first; ``[]`` if absent or malformed."""
        data = _read_json(self.history_path)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning(
                "Treating %s as empty: expected a list, got %s",
                self.history_path,
                type(data).__name__,
            )
            return []
        return migrate_history(data)

    def list_backups(self) -> list[Path]:
        """Backup files sorted by name (and therefore by timestamp)."""
        if not self.backup_dir.exists():
            return []
        return sorted(self.backup_dir.glob("prices-*.json"))

    # ── Writing ──────────────────────────────────────────

    def append_history(
        self,
        history: list[Snapshot],
        snapshot: Snapshot,
    ) -> list[Snapshot]:
        """Append *snapshot* and drop the oldest entries beyond the cap."""
        updated = [*history, snapshot]
        overflow = len(updated) - self.max_history
        if overflow > 0:
            logger.info("Evicting %d oldest history entries", overflow)
            updated = updated[overflow:]
        return updated

    def save(self, snapshot: Snapshot) -> SaveResult:
        """Write the snapshot, its immutable backup and the updated history."""
        history = self.load_history()
        self.data_dir.mkdir(parents=True, exist_ok=True)
        payload = snapshot.to_dict()

        _write_json(self.prices_path, payload)
        logger.info("Saved %s", self.prices_path)

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        backup_path = self.backup_dir / backup_filename(snapshot.fetched_at)
        _write_json(backup_path, payload)
        logger.info("Saved backup %s", backup_path)

        updated = self.append_history(history, snapshot)
        _write_json(self.history_path, [s.to_dict() for s in updated])
        logger.info(
            "Updated %s (%d entries)", self.history_path, len(updated)
        )

        return SaveResult(
            prices_path=self.prices_path,
            backup_path=backup_path,
            history_path=self.history_path,
            history_length=len(updated),
        )
