from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Collection, Iterable, Literal

from itinerary_fares.core.dates import ymd
from itinerary_fares.core.json import stable_json_dumps

from .models import Leg, MatchResult
from .table import FareTable

MissReason = Literal["out_of_period", "unregistered"]


@dataclass(frozen=True, slots=True)
class LegResult:
    index: int
    leg: Leg
    match: MatchResult

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "date": ymd(self.leg.date),
            "input_from": self.leg.from_place,
            "input_to": self.leg.to_place,
            **self.match.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class MissDiagnostic:
    index: int
    date: str
    from_place: str
    to_place: str
    tried: tuple[str, ...]
    has_any_route: bool

    @property
    def reason(self) -> MissReason:
        return "out_of_period" if self.has_any_route else "unregistered"

    def line(self) -> str:
        return f"- {self.date} {self.from_place}→{self.to_place} ({self.reason})"


@dataclass(slots=True)
class ItineraryReport:
    results: list[LegResult] = field(default_factory=list)

    @property
    def hits(self) -> list[LegResult]:
        return [r for r in self.results if r.match.hit]

    @property
    def misses(self) -> list[LegResult]:
        return [r for r in self.results if not r.match.hit]

    @property
    def hit_count(self) -> int:
        return len(self.hits)

    @property
    def miss_count(self) -> int:
        return len(self.results) - self.hit_count

    def total_fare(self, excluded: Collection[int] = ()) -> int:
        """Sum of hit fares, leaving out legs whose index is in `excluded`."""
        return sum(
            r.match.record.fare
            for r in self.hits
            if r.match.record is not None and r.index not in excluded
        )

    def miss_diagnostics(self) -> list[MissDiagnostic]:
        return [
            MissDiagnostic(
                index=r.index,
                date=ymd(r.leg.date),
                from_place=r.match.from_place,
                to_place=r.match.to_place,
                tried=r.match.tried,
                has_any_route=r.match.has_any_route,
            )
            for r in self.misses
        ]

    def to_dict(self, excluded: Collection[int] = ()) -> dict[str, Any]:
        return {
            "legs": [r.to_dict() for r in self.results],
            "hits": self.hit_count,
            "misses": self.miss_count,
            "total_fare": self.total_fare(excluded),
            "excluded": sorted(excluded),
            "miss_diagnostics": [
                {
                    "index": m.index,
                    "date": m.date,
                    "from": m.from_place,
                    "to": m.to_place,
                    "tried": list(m.tried),
                    "has_any_route": m.has_any_route,
                    "reason": m.reason,
                }
                for m in self.miss_diagnostics()
            ],
        }

    def to_json(self, excluded: Collection[int] = ()) -> str:
        return stable_json_dumps(self.to_dict(excluded))


def resolve_itinerary(table: FareTable, legs: Iterable[Leg]) -> ItineraryReport:
    """Resolve every leg on its own; indices are 1-based in input order."""
    report = ItineraryReport()
    for i, leg in enumerate(legs, start=1):
        match = table.resolve(leg.date, leg.from_place, leg.to_place)
        report.results.append(LegResult(index=i, leg=leg, match=match))
    return report
