from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any, Iterable, Mapping, Sequence

import httpx
from itinerary_fares.core import (
    DEFAULT_PRICE_TYPE,
    EmptyFareTableError,
    EventLogger,
    Settings,
    get_logger,
    monotonic_ms,
)
from itinerary_fares.fares import (
    FareTable,
    ItineraryReport,
    Leg,
    MatchResult,
    TableSummary,
    build_fare_table,
    resolve_itinerary,
)
from itinerary_fares.ingest import load_alias_rows, load_fare_rows


class FareBook:
    """
    Owner of the active fare table.

    A reload builds a complete new table and then replaces the reference in
    one assignment. If the build fails the previous table stays active, and
    callers holding an older table keep a valid object.
    """

    def __init__(
        self,
        *,
        default_price_type: str = DEFAULT_PRICE_TYPE,
        timeout_s: float = 10.0,
        http_client: httpx.Client | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        self.default_price_type = default_price_type
        self.timeout_s = timeout_s
        self.http_client = http_client
        self.logger: EventLogger = logger or get_logger("itinerary_fares.book")
        self._table: FareTable | None = None

    @classmethod
    def from_settings(cls, s: Settings, **kw: Any) -> "FareBook":
        return cls(default_price_type=s.default_price_type, timeout_s=s.http_timeout_s, **kw)

    @property
    def table(self) -> FareTable | None:
        return self._table

    @property
    def is_loaded(self) -> bool:
        return self._table is not None and not self._table.is_empty

    @property
    def summary(self) -> TableSummary | None:
        return self._table.summary if self._table is not None else None

    def reload_from_rows(
        self,
        raw_rows: Sequence[Mapping[str, Any]],
        alias_rows: Sequence[Mapping[str, Any]] | None = None,
        *,
        source: str = "",
        location: str = "",
    ) -> FareTable:
        t0 = monotonic_ms()
        table = build_fare_table(
            raw_rows,
            alias_rows,
            source=source,
            location=location,
            default_price_type=self.default_price_type,
        )
        self._table = table
        self.logger.info(
            "fare_book.swapped",
            source=source,
            fares=table.summary.fares,
            empty=table.is_empty,
            duration_ms=monotonic_ms() - t0,
        )
        return table

    def reload_from_sources(
        self,
        fares: str | Path,
        aliases: str | Path | None = None,
    ) -> FareTable:
        """
        Load the fare table (required) and alias sheet (optional), then swap.
        Load errors propagate and leave the current table in place.
        """
        src, parsed = load_fare_rows(
            fares, timeout_s=self.timeout_s, client=self.http_client
        )
        alias_rows = load_alias_rows(
            aliases, timeout_s=self.timeout_s, client=self.http_client
        )
        self.logger.info(
            "fare_book.loaded",
            location=src.location,
            fmt=parsed.fmt,
            rows=len(parsed.rows),
            alias_rows=len(alias_rows),
        )
        return self.reload_from_rows(
            parsed.rows, alias_rows, source=src.name, location=src.location
        )

    def _require_table(self) -> FareTable:
        table = self._table
        if table is None:
            raise EmptyFareTableError("no fare table loaded")
        if table.is_empty:
            raise EmptyFareTableError(
                f"fare table {table.summary.source or '<rows>'} has no usable records "
                f"(raw_rows={table.summary.raw_rows})"
            )
        return table

    def resolve(self, d: date, from_place: str, to_place: str) -> MatchResult:
        return self._require_table().resolve(d, from_place, to_place)

    def resolve_itinerary(self, legs: Iterable[Leg]) -> ItineraryReport:
        table = self._require_table()
        report = resolve_itinerary(table, legs)
        self.logger.info(
            "itinerary.resolved",
            legs=len(report.results),
            hits=report.hit_count,
            misses=report.miss_count,
        )
        return report

    def places(self) -> list[str]:
        return list(self._table.places) if self._table is not None else []

    def alias_sample(self, limit: int = 120) -> list[tuple[str, str]]:
        if self._table is None:
            return []
        out: list[tuple[str, str]] = []
        for item in self._table.aliases.items():
            if len(out) >= limit:
                break
            out.append(item)
        return out
