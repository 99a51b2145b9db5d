# fuel_prices/storage/margin_store.py

"""Per-fuel margin overrides, kept apart from the price snapshots.

Margins are integers in grosze.  They are a local display preference and
are never written into ``prices.json`` or ``history.json``.
"""

import json
import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from urllib.parse import quote

from fuel_prices.config.settings import Settings

logger = logging.getLogger("fuel_prices.margins")

_LEADING_INT_RE = re.compile(r"[+-]?\d+")


def margin_key(name: str) -> str:
    """Storage key for a fuel name, e.g. ``margin:Pb%2095``."""
    return "margin:" + quote(name, safe="-_.!~*'()")


def parse_margin(value: object) -> int:
    """Read a stored margin from its leading integer; junk counts as 0."""
    if value is None or isinstance(value, bool):
        return 0
    match = _LEADING_INT_RE.match(str(value).strip())
    return int(match.group(0)) if match else 0


class MarginStore(ABC):
    """Key-value store for margin overrides, injected into renderers."""

    @abstractmethod
    def _read(self, key: str) -> object:
        ...

    @abstractmethod
    def _write(self, key: str, value: str) -> None:
        ...

    def get(self, name: str) -> int:
        """Margin for *name* in grosze (0 when unset)."""
        return parse_margin(self._read(margin_key(name)))

    def set(self, name: str, grosze: int) -> None:
        self._write(margin_key(name), str(int(grosze)))
        logger.info("Margin for %s set to %d gr", name, grosze)

    def reset(self, name: str) -> None:
        self.set(name, 0)


class InMemoryMarginStore(MarginStore):
    """Dict-backed store for tests and one-off renders."""

    def __init__(self, initial: dict[str, int] | None = None) -> None:
        self._data: dict[str, str] = {}
        for name, grosze in (initial or {}).items():
            self._data[margin_key(name)] = str(grosze)

    def _read(self, key: str) -> object:
        return self._data.get(key)

    def _write(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonMarginStore(MarginStore):
    """Margins persisted in a local JSON object file (``margins.json``)."""

    def __init__(self, path: Path | None = None) -> None:
        self.path: Path = path or Settings.DATA_DIR / Settings.MARGINS_FILE

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable %s: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring %s: not a JSON object", self.path)
            return {}
        return data

    def _read(self, key: str) -> object:
        return self._load().get(key)

    def _write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
