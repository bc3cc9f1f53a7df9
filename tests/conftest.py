"""
Shared pytest fixtures for maritime-ghg tests.

Price defaults are read from the environment when the settings module is
imported, so the variables are cleared before any maritime_ghg import.
"""

import os

import pytest

for _key in ("DEFAULT_EUA_PRICE_EUR", "GFI_TIER1_PRICE_USD", "GFI_TIER2_PRICE_USD"):
    os.environ.pop(_key, None)

from maritime_ghg.schemas import MonthlyLog  # noqa: E402


@pytest.fixture
def fossil_mix():
    """Annual fuel mix of a handysize tanker (MT)."""
    return {"hfo": 100.0, "lfo": 50.0, "mgo": 25.0}


@pytest.fixture
def monthly_logs():
    """Twelve identical months: 100 MT at sea, 10 MT in port, 5000 nm."""
    return [
        MonthlyLog(
            sea_days=20,
            port_days=8,
            anchorage_days=2,
            sea_consumption_mt=100,
            port_consumption_mt=10,
            distance_nm=5000,
        )
        for _ in range(12)
    ]
