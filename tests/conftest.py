# tests/conftest.py

"""Shared pytest fixtures for all fuel_prices tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from fuel_prices.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_data_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Point DATA_DIR at a per-test temp dir so nothing lands in the repo."""
    original = Settings.DATA_DIR
    data_dir = tmp_path / "data"
    Settings.DATA_DIR = data_dir
    yield data_dir
    Settings.DATA_DIR = original
