from __future__ import annotations

import json
from datetime import date

from itinerary_fares.fares import FareTable, Leg, build_fare_table, resolve_itinerary

ROUND_TRIP_ROWS = [
    {"from": "Tokyo", "to": "Okinawa", "fare": "12000", "validFrom": "2025-06-01", "validTo": "2025-06-30"},
    {"from": "Okinawa", "to": "Tokyo", "fare": "13000", "validFrom": "2025-06-01", "validTo": "2025-06-30"},
    {"from": "Tokyo", "to": "Sapporo", "fare": "9000", "validFrom": "2025-06-01", "validTo": "2025-06-30"},
]


def _table() -> FareTable:
    return build_fare_table(ROUND_TRIP_ROWS, source="transport.csv")


def _legs() -> list[Leg]:
    return [
        Leg(date(2025, 6, 10), "Haneda", "Naha"),
        Leg(date(2025, 6, 14), "Okinawa", "Tokyo"),
        Leg(date(2025, 7, 1), "Tokyo", "Sapporo"),
        Leg(date(2025, 6, 20), "Osaka", "Fukuoka"),
    ]


def test_report_counts_and_total() -> None:
    report = resolve_itinerary(_table(), _legs())

    assert [r.index for r in report.results] == [1, 2, 3, 4]
    assert report.hit_count == 2
    assert report.miss_count == 2
    assert [r.index for r in report.hits] == [1, 2]
    assert report.total_fare() == 25000
    assert report.results[0].match.from_place == "Tokyo"
    assert report.results[0].match.to_place == "Okinawa"


def test_excluded_legs_leave_the_total() -> None:
    report = resolve_itinerary(_table(), _legs())
    assert report.total_fare(excluded=[2]) == 12000
    # excluding a miss changes nothing
    assert report.total_fare(excluded=[3, 4]) == 25000
    assert report.total_fare(excluded=[1, 2]) == 0


def test_miss_diagnostics_distinguish_reasons() -> None:
    report = resolve_itinerary(_table(), _legs())
    diags = report.miss_diagnostics()

    assert [(d.index, d.reason) for d in diags] == [(3, "out_of_period"), (4, "unregistered")]
    assert diags[0].line() == "- 2025-07-01 Tokyo→Sapporo (out_of_period)"
    assert diags[1].tried == ("Osaka→Fukuoka", "Fukuoka→Osaka")


def test_report_json_is_stable() -> None:
    report = resolve_itinerary(_table(), _legs())
    doc = json.loads(report.to_json(excluded=[2]))

    assert doc["hits"] == 2
    assert doc["misses"] == 2
    assert doc["total_fare"] == 12000
    assert doc["excluded"] == [2]
    assert doc["legs"][0]["input_from"] == "Haneda"
    assert doc["legs"][0]["record"]["fare"] == 12000
    assert doc["legs"][0]["record"]["valid_from"] == "2025-06-01"
    assert doc["legs"][2]["record"] is None
    assert [m["reason"] for m in doc["miss_diagnostics"]] == ["out_of_period", "unregistered"]
    assert report.to_json(excluded=[2]) == report.to_json(excluded=[2])


def test_empty_itinerary() -> None:
    report = resolve_itinerary(_table(), [])
    assert report.results == []
    assert report.total_fare() == 0
    assert report.miss_diagnostics() == []
