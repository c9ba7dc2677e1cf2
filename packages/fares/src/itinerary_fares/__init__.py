from .book import FareBook
from .fares import (
    AliasTable,
    FareRecord,
    FareTable,
    ItineraryReport,
    Leg,
    MatchResult,
    TableSummary,
    build_fare_table,
    resolve_itinerary,
)

__version__ = "0.1.0"

__all__ = [
    "FareBook",
    "AliasTable",
    "FareRecord",
    "FareTable",
    "ItineraryReport",
    "Leg",
    "MatchResult",
    "TableSummary",
    "build_fare_table",
    "resolve_itinerary",
    "__version__",
]
