from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from typing import Literal

import polars as pl
from itinerary_fares.core.errors import FareTableShapeError, InputDataError

from .headers import has_fare_shape

TableFormat = Literal["csv", "tsv"]
RawRow = dict[str, str]


@dataclass(frozen=True, slots=True)
class ParsedRows:
    rows: list[RawRow]
    fmt: TableFormat


def strip_bom(s: str | None) -> str:
    return ("" if s is None else str(s)).lstrip("\ufeff")


def looks_like_html(text: str | None) -> bool:
    """Static hosts answer missing files with an HTML page; catch that early."""
    t = ("" if text is None else str(text)).strip()[:300].lower()
    return (
        t.startswith("<!doctype")
        or t.startswith("<html")
        or "<head" in t
        or "<body" in t
    )


def detect_format(text: str, hint: str | None = None) -> TableFormat:
    name = (hint or "").lower()
    if name.endswith(".tsv"):
        return "tsv"
    if name.endswith(".csv"):
        return "csv"
    return "tsv" if ("\t" in text and "," not in text) else "csv"


def _to_row(header: list[str], values: list[str | None]) -> RawRow:
    row: RawRow = {}
    for j, h in enumerate(header):
        v = values[j] if j < len(values) else None
        val = ("" if v is None else str(v)).strip()
        # Duplicate labels: keep the first non-empty value.
        if h not in row or (row[h] == "" and val != ""):
            row[h] = val
    return row


def _is_blank(row: RawRow) -> bool:
    return all(v == "" for v in row.values())


def _read_with_polars(text: str, fmt: TableFormat) -> list[RawRow]:
    df = pl.read_csv(
        io.BytesIO(text.encode("utf-8")),
        separator="\t" if fmt == "tsv" else ",",
        quote_char=None if fmt == "tsv" else '"',
        infer_schema_length=0,
        truncate_ragged_lines=True,
    )
    header = [strip_bom(c).strip() for c in df.columns]
    rows = [_to_row(header, list(r)) for r in df.iter_rows()]
    return [r for r in rows if not _is_blank(r)]


def _read_with_csv(text: str, fmt: TableFormat) -> list[RawRow]:
    if fmt == "tsv":
        lines = [ln for ln in text.replace("\r", "").split("\n") if ln.strip()]
        records: list[list[str]] = [ln.split("\t") for ln in lines]
    else:
        records = list(csv.reader(io.StringIO(text, newline="")))
    if not records:
        return []
    header = [strip_bom(h).strip() for h in records[0]]
    rows = [_to_row(header, list(r)) for r in records[1:]]
    return [r for r in rows if not _is_blank(r)]


def read_rows(text: str, fmt: TableFormat) -> list[RawRow]:
    """
    Parse delimited text into rows keyed by the (trimmed) header labels.

    CSV honours doubled-quote escaping inside quoted fields; TSV is split on
    tabs verbatim. Blank lines and all-blank rows are skipped.
    """
    text = strip_bom(text)
    if not text.strip():
        return []
    try:
        return _read_with_polars(text, fmt)
    except Exception:
        return _read_with_csv(text, fmt)


def parse_fare_rows(text: str, hint: str | None = None) -> ParsedRows:
    if looks_like_html(text):
        raise InputDataError(
            f"{hint or 'fare table'} returned HTML instead of tabular data"
        )
    fmt = detect_format(text, hint)
    rows = read_rows(text, fmt)
    ok, reason = has_fare_shape(rows)
    if not ok:
        raise FareTableShapeError(
            f"fare table has no origin/destination/fare columns ({reason})"
        )
    return ParsedRows(rows=rows, fmt=fmt)


def parse_alias_rows(text: str, hint: str | None = None) -> list[RawRow]:
    if looks_like_html(text):
        return []
    return read_rows(text, detect_format(text, hint))
