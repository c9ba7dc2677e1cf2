from __future__ import annotations

from datetime import date

import pytest
from itinerary_fares.fares import FareTable, build_fare_table

TOKYO_OKINAWA_ROWS = [
    {
        "from": "Tokyo",
        "to": "Okinawa",
        "fare": "12000",
        "priceType": "Standard",
        "validFrom": "2025-06-01",
        "validTo": "2025-06-30",
    }
]

HANEDA_ALIAS_ROWS = [{"alias": "Haneda", "canonical": "Tokyo"}]


@pytest.fixture
def tokyo_okinawa_table() -> FareTable:
    return build_fare_table(
        TOKYO_OKINAWA_ROWS, HANEDA_ALIAS_ROWS, source="transport.csv"
    )


@pytest.fixture
def mid_june() -> date:
    return date(2025, 6, 15)
