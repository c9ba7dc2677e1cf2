from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from itinerary_fares.core.dates import ymd
from itinerary_fares.core.text import normalize_for_place_key

ROUTE_KEY_SEP = "||"


def route_key(from_place: str, to_place: str) -> str:
    return (
        normalize_for_place_key(from_place)
        + ROUTE_KEY_SEP
        + normalize_for_place_key(to_place)
    )


@dataclass(frozen=True, slots=True)
class Period:
    """Inclusive date range. `raw` keeps the source text for diagnostics."""

    start: date
    end: date
    raw: str = ""


@dataclass(frozen=True, slots=True)
class FareRecord:
    from_place: str
    to_place: str
    price_type: str
    fare: int
    valid_from: date
    valid_to: date
    source: str = ""
    rule: str = ""

    @property
    def dedup_key(self) -> tuple[str, str, str, date, date]:
        return (
            self.from_place,
            self.to_place,
            self.price_type,
            self.valid_from,
            self.valid_to,
        )

    @property
    def window_days(self) -> int:
        return (self.valid_to - self.valid_from).days

    def covers(self, d: date) -> bool:
        return self.valid_from <= d <= self.valid_to

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.from_place,
            "to": self.to_place,
            "price_type": self.price_type,
            "fare": self.fare,
            "valid_from": ymd(self.valid_from),
            "valid_to": ymd(self.valid_to),
            "source": self.source,
            "rule": self.rule,
        }


@dataclass(frozen=True, slots=True)
class Leg:
    date: date
    from_place: str
    to_place: str


@dataclass(frozen=True, slots=True)
class MatchResult:
    hit: bool
    record: FareRecord | None
    from_place: str
    to_place: str
    tried: tuple[str, ...]
    has_any_route: bool
    reverse: bool = False

    @property
    def fare(self) -> int | None:
        return self.record.fare if self.record is not None else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "hit": self.hit,
            "record": self.record.to_dict() if self.record is not None else None,
            "from": self.from_place,
            "to": self.to_place,
            "tried": list(self.tried),
            "has_any_route": self.has_any_route,
            "reverse": self.reverse,
        }


@dataclass(frozen=True, slots=True)
class TableSummary:
    source: str
    location: str
    raw_rows: int
    fares: int
    routes: int
    places: int
    built_at: str
    skipped_rows: int = 0
    dropped_periods: int = 0

    @property
    def is_empty(self) -> bool:
        return self.fares == 0 or self.places == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "location": self.location,
            "raw_rows": self.raw_rows,
            "fares": self.fares,
            "routes": self.routes,
            "places": self.places,
            "built_at": self.built_at,
            "skipped_rows": self.skipped_rows,
            "dropped_periods": self.dropped_periods,
            "is_empty": self.is_empty,
        }

    def status_line(self) -> str:
        return (
            f"{self.source} / routes={self.routes} / fares={self.fares} "
            f"/ places={self.places} / updated={self.built_at}"
        )
