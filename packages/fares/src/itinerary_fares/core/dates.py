from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

_ymd_dash = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
_ymd_slash = re.compile(r"^(\d{4})/(\d{1,2})/(\d{1,2})$")
_ym_slash = re.compile(r"^(\d{4})/(\d{1,2})$")
_md = re.compile(r"^(\d{1,2})[/\-](\d{1,2})$")


@dataclass(frozen=True, slots=True)
class LooseDate:
    """
    A parsed calendar date.

    `year_inferred` is True when the text carried no year (bare `M/D`) and
    the current calendar year was assumed.
    """

    value: date
    year_inferred: bool = False


def _mk(y: int, m: int, d: int) -> date | None:
    try:
        return date(y, m, d)
    except ValueError:
        return None


def parse_date_loose(s: str | None, *, today: date | None = None) -> LooseDate | None:
    """
    Accepts, in order: YYYY-MM-DD, YYYY/MM/DD, YYYY/MM (day 1), M/D or M-D
    (current year). Anything else, including impossible dates, gives None.
    """
    t = "" if s is None else str(s).strip()
    if not t:
        return None

    m = _ymd_dash.match(t) or _ymd_slash.match(t)
    if m:
        d = _mk(int(m[1]), int(m[2]), int(m[3]))
        return LooseDate(d) if d else None

    m = _ym_slash.match(t)
    if m:
        d = _mk(int(m[1]), int(m[2]), 1)
        return LooseDate(d) if d else None

    m = _md.match(t)
    if m:
        year = (today or date.today()).year
        d = _mk(year, int(m[1]), int(m[2]))
        return LooseDate(d, year_inferred=True) if d else None

    return None


def parse_date(s: str | None, *, today: date | None = None) -> date | None:
    parsed = parse_date_loose(s, today=today)
    return parsed.value if parsed else None


def shift_year(d: date, years: int) -> date:
    """Move `d` by whole years; Feb 29 lands on Mar 1 in a non-leap year."""
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        return date(d.year + years, 3, 1)


def ymd(d: date | None) -> str:
    return d.isoformat() if d else ""
