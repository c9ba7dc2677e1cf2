from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from itinerary_fares.book import FareBook
from itinerary_fares.core import (
    FareError,
    bind,
    configure_logging,
    get_logger,
    load_settings,
    parse_date,
    ymd,
)
from itinerary_fares.fares import ItineraryReport, Leg
from itinerary_fares.ingest import (
    detect_format,
    load_source_text,
    normalize_row_keys,
    read_rows,
)
from rich.console import Console
from rich.table import Table

console = Console()

EXIT_OK = 0
EXIT_MISS = 1
EXIT_LOAD_ERROR = 2

_DATE_LABELS = ("date", "日付", "搭乗日")


@dataclass(frozen=True, slots=True)
class _CommonArgs:
    cmd: str
    fares: str
    aliases: str | None


def _add_common_args(p: argparse.ArgumentParser, *, fares: str, aliases: str | None) -> None:
    p.add_argument(
        "--fares",
        default=fares,
        help="Fare table (CSV/TSV path or http(s) URL). Default from ITINERARY_FARES_FARE_TABLE.",
    )
    p.add_argument(
        "--aliases",
        default=aliases,
        help="Optional alias sheet (CSV path or URL). Missing sheets are ignored.",
    )


def _build_parser(*, fares: str, aliases: str | None) -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="itinerary-fares")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("summary", help="Load the fare table and print its summary")
    _add_common_args(sp, fares=fares, aliases=aliases)

    sp = sub.add_parser("places", help="List canonical place names")
    _add_common_args(sp, fares=fares, aliases=aliases)

    sp = sub.add_parser("resolve", help="Resolve fares for itinerary legs")
    _add_common_args(sp, fares=fares, aliases=aliases)
    sp.add_argument(
        "--leg",
        nargs=3,
        action="append",
        metavar=("DATE", "FROM", "TO"),
        dest="legs",
        help="One leg (repeatable). DATE as YYYY-MM-DD, YYYY/MM/DD or M/D.",
    )
    sp.add_argument(
        "--legs-file",
        default=None,
        help="CSV/TSV with date, from, to columns.",
    )
    sp.add_argument(
        "--exclude",
        type=int,
        action="append",
        default=[],
        metavar="N",
        help="Leave leg N (1-based) out of the fare total (repeatable).",
    )
    sp.add_argument("--json", action="store_true", help="Print the report as JSON")

    return p


def _common(args: argparse.Namespace) -> _CommonArgs:
    return _CommonArgs(
        cmd=str(args.cmd),
        fares=str(args.fares),
        aliases=(str(args.aliases) if args.aliases else None),
    )


def parse_leg(date_text: str, from_place: str, to_place: str) -> Leg | str:
    """A Leg, or an error message describing why the triple was rejected."""
    d = parse_date(date_text)
    if d is None:
        return f"unreadable date: {date_text!r}"
    f, t = from_place.strip(), to_place.strip()
    if not f or not t:
        return f"empty origin/destination: {date_text} {from_place!r} -> {to_place!r}"
    return Leg(date=d, from_place=f, to_place=t)


def read_legs_file(location: str | Path) -> tuple[list[Leg], list[str]]:
    """
    Legs from a CSV/TSV path or URL. Unreadable rows come back as messages;
    an unreadable file raises like any other source.
    """
    src = load_source_text(location)
    fmt = detect_format(src.text, src.name)
    legs: list[Leg] = []
    errors: list[str] = []
    for raw in read_rows(src.text, fmt):
        row = normalize_row_keys(raw)
        date_text = next((row[k] for k in _DATE_LABELS if row.get(k)), "")
        got = parse_leg(date_text, row.get("from", ""), row.get("to", ""))
        if isinstance(got, Leg):
            legs.append(got)
        else:
            errors.append(got)
    return legs, errors


def _collect_legs(args: argparse.Namespace) -> tuple[list[Leg], list[str]]:
    legs: list[Leg] = []
    errors: list[str] = []
    for d, f, t in args.legs or []:
        got = parse_leg(d, f, t)
        if isinstance(got, Leg):
            legs.append(got)
        else:
            errors.append(got)
    if args.legs_file:
        more, errs = read_legs_file(args.legs_file)
        legs.extend(more)
        errors.extend(errs)
    return legs, errors


def _print_summary(book: FareBook) -> None:
    s = book.summary
    if s is None:
        return
    tbl = Table(title="Fare table", show_header=False, box=None)
    for k, v in s.to_dict().items():
        tbl.add_row(k, str(v))
    console.print(tbl)
    if s.is_empty:
        console.print(
            f"[yellow]Fare table loaded but holds no usable records "
            f"(raw_rows={s.raw_rows}). Check the validity period columns.[/yellow]"
        )


def _print_report(report: ItineraryReport, excluded: Sequence[int]) -> None:
    tbl = Table(title="Legs", show_header=True)
    for col in ("#", "date", "from", "to", "tier", "fare", "status"):
        tbl.add_column(col)

    for r in report.results:
        m = r.match
        if m.hit and m.record is not None:
            status = f"{ymd(m.record.valid_from)}〜{ymd(m.record.valid_to)}"
            if m.reverse:
                status += " (reverse)"
            if r.index in excluded:
                status += " [excluded]"
            tier, fare = m.record.price_type, f"{m.record.fare:,}"
        else:
            status = (
                "[yellow]out of period[/yellow]"
                if m.has_any_route
                else "[red]unregistered[/red]"
            )
            tier, fare = "-", "-"
        tbl.add_row(
            str(r.index), ymd(r.leg.date), m.from_place, m.to_place, tier, fare, status
        )
    console.print(tbl)

    included = [h for h in report.hits if h.index not in excluded]
    total = f"{report.total_fare(excluded):,}" if included else "-"
    console.print(
        f"hits={len(included)}/{report.hit_count} misses={report.miss_count} total={total}"
    )

    diags = report.miss_diagnostics()
    if diags:
        console.print("\n".join(d.line() for d in diags))


def main(argv: list[str] | None = None) -> int:
    s = load_settings()
    args = _build_parser(fares=s.fare_table, aliases=s.alias_table).parse_args(argv)
    common = _common(args)

    configure_logging(level=s.log_level, fmt=s.log_format)
    log = get_logger("itinerary_fares")
    bind(command=common.cmd)

    book = FareBook.from_settings(s, logger=log)
    try:
        book.reload_from_sources(common.fares, common.aliases)
    except FareError as e:
        console.print(f"[red]Failed to load fare table:[/red] {e}")
        return EXIT_LOAD_ERROR

    if common.cmd == "summary":
        _print_summary(book)
        return EXIT_OK

    if common.cmd == "places":
        for p in book.places():
            console.print(p)
        return EXIT_OK

    try:
        legs, errors = _collect_legs(args)
    except FareError as e:
        console.print(f"[red]Failed to read legs file:[/red] {e}")
        return EXIT_LOAD_ERROR
    for err in errors:
        console.print(f"[yellow]skipped:[/yellow] {err}")
    if not legs:
        console.print("[yellow]No legs to resolve.[/yellow]")
        return EXIT_OK

    try:
        report = book.resolve_itinerary(legs)
    except FareError as e:
        console.print(f"[red]{e}[/red]")
        return EXIT_LOAD_ERROR

    excluded = sorted(set(args.exclude))
    if args.json:
        console.print_json(report.to_json(excluded))
    else:
        _print_report(report, excluded)

    return EXIT_MISS if report.miss_count else EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
