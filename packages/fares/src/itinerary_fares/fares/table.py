from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Collection, Iterable, Mapping, Sequence

import structlog
from itinerary_fares.core.config import DEFAULT_PRICE_TYPE
from itinerary_fares.core.time import local_now_stamp
from itinerary_fares.ingest.headers import CanonicalField, normalize_row_keys

from .aliases import AliasTable
from .models import FareRecord, MatchResult, TableSummary, route_key
from .periods import resolve_periods
from .resolver import RouteIndex, resolve_leg

log = structlog.get_logger(__name__)

_not_fare_chars = re.compile(r"[^0-9-]")
_leading_int = re.compile(r"^-?\d+")


def parse_fare(text: str | None) -> int:
    """
    Keep digits and '-' only and read the leading integer. Unreadable and
    negative amounts become 0: "¥12,000" -> 12000, "n/a" -> 0, "-500" -> 0.
    """
    cleaned = _not_fare_chars.sub("", "" if text is None else str(text))
    m = _leading_int.match(cleaned)
    return max(int(m[0]), 0) if m else 0


def build_route_index(records: Iterable[FareRecord]) -> dict[str, tuple[FareRecord, ...]]:
    groups: dict[str, list[FareRecord]] = {}
    for r in records:
        groups.setdefault(route_key(r.from_place, r.to_place), []).append(r)
    return {
        k: tuple(sorted(v, key=lambda r: (r.valid_from, r.valid_to, r.fare)))
        for k, v in groups.items()
    }


@dataclass(frozen=True)
class FareTable:
    """
    One complete, immutable build of the fare data. Reloading produces a new
    table; nothing here is updated in place.
    """

    records: tuple[FareRecord, ...]
    route_index: RouteIndex
    places: tuple[str, ...]
    aliases: AliasTable
    summary: TableSummary

    @property
    def is_empty(self) -> bool:
        return self.summary.is_empty

    def routes_for(self, from_place: str, to_place: str) -> tuple[FareRecord, ...]:
        return tuple(self.route_index.get(route_key(from_place, to_place), ()))

    def resolve_place(self, name: str) -> str:
        return self.aliases.resolve(name)

    def resolve(
        self,
        d: date,
        from_place: str,
        to_place: str,
        *,
        peak_keys: Collection[str] | None = None,
    ) -> MatchResult:
        return resolve_leg(
            self.route_index, self.aliases, d, from_place, to_place, peak_keys=peak_keys
        )


def build_fare_table(
    raw_rows: Sequence[Mapping[str, Any]],
    alias_rows: Sequence[Mapping[str, Any]] | None = None,
    *,
    source: str = "",
    location: str = "",
    default_price_type: str = DEFAULT_PRICE_TYPE,
) -> FareTable:
    records: list[FareRecord] = []
    seen: set[tuple[str, str, str, date, date]] = set()
    places: set[str] = set()
    skipped_rows = 0
    dropped_periods = 0

    for raw in raw_rows:
        row = normalize_row_keys(raw)

        from_place = row.get(CanonicalField.from_place, "").strip()
        to_place = row.get(CanonicalField.to_place, "").strip()
        if not from_place or not to_place:
            skipped_rows += 1
            continue

        price_type = row.get(CanonicalField.price_type, "").strip() or default_price_type
        fare = parse_fare(row.get(CanonicalField.fare))
        rule = row.get(CanonicalField.rule, "").strip()

        periods, dropped = resolve_periods(row)
        dropped_periods += dropped

        for p in periods:
            rec = FareRecord(
                from_place=from_place,
                to_place=to_place,
                price_type=price_type,
                fare=fare,
                valid_from=p.start,
                valid_to=p.end,
                source=source,
                rule=rule,
            )
            if rec.dedup_key in seen:
                continue
            seen.add(rec.dedup_key)
            records.append(rec)
            places.add(from_place)
            places.add(to_place)

    place_list = tuple(sorted(places))
    aliases = AliasTable.build(place_list, alias_rows)
    index = build_route_index(records)

    summary = TableSummary(
        source=source,
        location=location,
        raw_rows=len(raw_rows),
        fares=len(records),
        routes=len(index),
        places=len(place_list),
        built_at=local_now_stamp(),
        skipped_rows=skipped_rows,
        dropped_periods=dropped_periods,
    )

    if summary.is_empty:
        log.warning(
            "fare_table.empty",
            source=source,
            raw_rows=summary.raw_rows,
            skipped_rows=skipped_rows,
            dropped_periods=dropped_periods,
        )
    else:
        log.info(
            "fare_table.built",
            source=source,
            raw_rows=summary.raw_rows,
            fares=summary.fares,
            routes=summary.routes,
            places=summary.places,
            aliases=len(aliases),
            skipped_rows=skipped_rows,
            dropped_periods=dropped_periods,
        )

    return FareTable(
        records=tuple(records),
        route_index=MappingProxyType(index),
        places=place_list,
        aliases=aliases,
        summary=summary,
    )
