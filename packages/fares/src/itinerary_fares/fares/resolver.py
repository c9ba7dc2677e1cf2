from __future__ import annotations

from datetime import date
from typing import Collection, Iterable, Mapping, Sequence

from itinerary_fares.core.config import PEAK_PRICE_TYPES
from itinerary_fares.core.text import normalize_for_display_match

from .aliases import AliasTable
from .models import FareRecord, MatchResult, route_key

RouteIndex = Mapping[str, Sequence[FareRecord]]

_PEAK_KEYS = frozenset(normalize_for_display_match(p) for p in PEAK_PRICE_TYPES)


def is_peak(price_type: str, peak_keys: Collection[str] = _PEAK_KEYS) -> bool:
    return normalize_for_display_match(price_type) in peak_keys


def candidate_rank(
    record: FareRecord, peak_keys: Collection[str] = _PEAK_KEYS
) -> tuple[int, int, int]:
    """
    Sort key for records covering the same date, smallest wins:
    narrowest validity window, then a peak/premium tier, then the lower fare.

    The narrowest window models a specific season overriding a broad
    fallback fare.
    """
    return (
        record.window_days,
        0 if is_peak(record.price_type, peak_keys) else 1,
        record.fare,
    )


def pick_best(
    records: Iterable[FareRecord],
    d: date,
    peak_keys: Collection[str] = _PEAK_KEYS,
) -> FareRecord | None:
    candidates = [r for r in records if r.covers(d)]
    if not candidates:
        return None
    return min(candidates, key=lambda r: candidate_rank(r, peak_keys))


def _direction(a: str, b: str) -> str:
    return f"{a}→{b}"


def resolve_leg(
    route_index: RouteIndex,
    aliases: AliasTable,
    d: date,
    from_place: str,
    to_place: str,
    *,
    peak_keys: Collection[str] | None = None,
) -> MatchResult:
    """
    Best fare for one leg. The forward direction is searched first; a fare
    listed only the other way round is accepted and flagged `reverse`.
    """
    peak_keys = _PEAK_KEYS if peak_keys is None else peak_keys
    f = aliases.resolve(from_place)
    t = aliases.resolve(to_place)

    forward = route_index.get(route_key(f, t), ())
    backward = route_index.get(route_key(t, f), ())
    has_any_route = bool(forward) or bool(backward)

    best = pick_best(forward, d, peak_keys)
    if best is not None:
        return MatchResult(
            hit=True,
            record=best,
            from_place=f,
            to_place=t,
            tried=(_direction(f, t),),
            has_any_route=has_any_route,
        )

    tried = (_direction(f, t), _direction(t, f))
    best = pick_best(backward, d, peak_keys)
    if best is not None:
        return MatchResult(
            hit=True,
            record=best,
            from_place=f,
            to_place=t,
            tried=tried,
            has_any_route=has_any_route,
            reverse=True,
        )

    return MatchResult(
        hit=False,
        record=None,
        from_place=f,
        to_place=t,
        tried=tried,
        has_any_route=has_any_route,
    )
