# fuel_prices/config/settings.py

"""Central configuration for the fuel_prices tracker."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


def _env_path(name: str, default: Path) -> Path:
    """Read a path override from the environment."""
    value = os.getenv(name)
    return Path(value) if value else default


class Settings:
    """Central configuration for the fuel_prices tracker."""

    # --- Source ---
    SOURCE_URL: str = os.getenv(
        "FUEL_PRICES_SOURCE_URL",
        "https://spot.lotosspv1.pl/2/hurtowe_ceny_paliw",
    )
    USER_AGENT: str = "Mozilla/5.0 (compatible; PriceFetcher/1.0)"
    REQUEST_TIMEOUT: int = 30           # Seconds before a request times out

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "pl-PL,pl;q=0.9,en;q=0.8",
    }

    # --- Pricing ---
    VAT_RATE: float = 1.23              # Gross = net * VAT_RATE
    RAW_UNIT_LITERS: int = 1000         # Raw prices are quoted per m3
    PRICE_TOLERANCE: float = 1e-6       # Change detection epsilon
    COMPARE_FIELD: str = os.getenv("FUEL_PRICES_COMPARE_FIELD", "gross")
    KEY_MODE: str = os.getenv("FUEL_PRICES_KEY_MODE", "canonical")
    SCHEMA_VERSION: int = 2

    # --- History ---
    MAX_HISTORY_ENTRIES: int = int(
        os.getenv("FUEL_PRICES_MAX_HISTORY", "1000")
    )

    # --- Dashboard ---
    CHART_WIDTH: int = 720
    CHART_HEIGHT: int = 200
    CHART_PADDING: int = 30
    CHART_POINT_LIMIT: int = 60         # Newest snapshots shown by default

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    DATA_DIR: Path = _env_path("FUEL_PRICES_DATA_DIR", BASE_DIR / "data")
    PRICES_FILE: str = "prices.json"
    HISTORY_FILE: str = "history.json"
    HISTORY_DIR: str = "history"
    MARGINS_FILE: str = "margins.json"
    DASHBOARD_FILE: str = "dashboard.html"
    CHARTS_DIR: str = "charts"
    LOGS_DIR: Path = BASE_DIR / "logs"
    LOG_RETENTION: int = int(os.getenv("FUEL_PRICES_LOG_RETENTION", "30"))
