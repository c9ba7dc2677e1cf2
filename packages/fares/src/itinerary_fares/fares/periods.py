from __future__ import annotations

import re
from datetime import date
from typing import Mapping

from itinerary_fares.core.dates import parse_date, shift_year, ymd
from itinerary_fares.ingest.headers import CanonicalField

from .models import Period

# "2025-06-01〜2025-06-30 / 2025-09-01〜2025-10-25"
_range = re.compile(
    r"(\d{4}[/-]\d{1,2}[/-]\d{1,2})\s*[〜～~\-–—―]\s*(\d{4}[/-]\d{1,2}[/-]\d{1,2})"
)


def parse_period_ranges(text: str | None) -> list[Period]:
    """
    Ranges are scanned rather than split on '/', so YYYY/MM/DD endpoints
    survive next to the '/' segment separator.
    """
    t = "" if text is None else str(text).strip()
    if not t:
        return []

    out: list[Period] = []
    for m in _range.finditer(t):
        a = parse_date(m[1])
        b = parse_date(m[2])
        if a and b:
            out.append(Period(start=a, end=b, raw=m[0]))
    return out


def boarding_window(row: Mapping[str, str]) -> tuple[date | None, date | None]:
    return (
        parse_date(row.get(CanonicalField.whole_from)),
        parse_date(row.get(CanonicalField.whole_to)),
    )


def extract_periods(row: Mapping[str, str]) -> list[Period]:
    """
    Validity ranges of a normalized row, first source that yields any:
    explicit validFrom/validTo, the validRange text, the boarding window.
    """
    vf = parse_date(row.get(CanonicalField.valid_from))
    vt = parse_date(row.get(CanonicalField.valid_to))
    if vf and vt:
        raw = f"{row.get(CanonicalField.valid_from)}〜{row.get(CanonicalField.valid_to)}"
        return [Period(start=vf, end=vt, raw=raw)]

    ranges = parse_period_ranges(row.get(CanonicalField.valid_range))
    if ranges:
        return ranges

    wf, wt = boarding_window(row)
    if wf and wt:
        return [Period(start=wf, end=wt, raw=f"{ymd(wf)}〜{ymd(wt)}")]
    return []


def _roll_forward(d: date, start_year: int, start_month: int) -> date:
    if d.year == start_year and d.month < start_month:
        return shift_year(d, 1)
    return d


def align_to_boarding_window(
    period: Period, whole_from: date | None, whole_to: date | None
) -> Period | None:
    """
    Fit a validity range into its boarding window.

    Seasons that run into the next year are often written with the start
    year on their Jan-Mar dates; those dates are rolled forward a year. The
    result is clamped to the window, and None means nothing is left.
    """
    start, end = period.start, period.end

    if whole_from is None or whole_to is None:
        return period if start <= end else None

    if whole_to.year > whole_from.year:
        start = _roll_forward(start, whole_from.year, whole_from.month)
        end = _roll_forward(end, whole_from.year, whole_from.month)
        if end < whole_from:
            start = shift_year(start, 1)
            end = shift_year(end, 1)

    start = max(start, whole_from)
    end = min(end, whole_to)
    if start > end:
        return None
    return Period(start=start, end=end, raw=period.raw)


def resolve_periods(row: Mapping[str, str]) -> tuple[list[Period], int]:
    """
    Extract and align. Returns (kept periods, number dropped by alignment).
    """
    wf, wt = boarding_window(row)
    kept: list[Period] = []
    dropped = 0
    for p in extract_periods(row):
        aligned = align_to_boarding_window(p, wf, wt)
        if aligned is None:
            dropped += 1
            continue
        kept.append(aligned)
    return kept, dropped
