"""Shared fixtures."""

import pytest

from cutplan.config import configure


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Reload settings from a clean environment for every test."""
    monkeypatch.chdir(tmp_path)  # No stray .env
    for name in ("SHEET_WIDTH", "SHEET_HEIGHT", "KERF", "TRIM", "PRICE_PER_SHEET",
                 "MARKUP_MULTIPLIER", "LABOR_PER_SQUARE_METER", "EFFECTIVE_SHEET_AREA_M2"):
        monkeypatch.delenv(f"CUTPLAN_{name}", raising=False)
    configure(None)
    yield
    configure(None)
