from .aliases import COMMON_ALIASES, AliasTable, suffix_variants
from .itinerary import ItineraryReport, LegResult, MissDiagnostic, resolve_itinerary
from .models import FareRecord, Leg, MatchResult, Period, TableSummary, route_key
from .periods import (
    align_to_boarding_window,
    extract_periods,
    parse_period_ranges,
    resolve_periods,
)
from .resolver import candidate_rank, is_peak, pick_best, resolve_leg
from .table import FareTable, build_fare_table, build_route_index, parse_fare

__all__ = [
    "COMMON_ALIASES",
    "AliasTable",
    "suffix_variants",
    "ItineraryReport",
    "LegResult",
    "MissDiagnostic",
    "resolve_itinerary",
    "FareRecord",
    "Leg",
    "MatchResult",
    "Period",
    "TableSummary",
    "route_key",
    "align_to_boarding_window",
    "extract_periods",
    "parse_period_ranges",
    "resolve_periods",
    "candidate_rank",
    "is_peak",
    "pick_best",
    "resolve_leg",
    "FareTable",
    "build_fare_table",
    "build_route_index",
    "parse_fare",
]
