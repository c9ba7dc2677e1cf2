from .config import DEFAULT_PRICE_TYPE, PEAK_PRICE_TYPES, Settings, load_settings
from .dates import LooseDate, parse_date, parse_date_loose, shift_year, ymd
from .errors import (
    EmptyFareTableError,
    FareError,
    FareTableShapeError,
    InputDataError,
    SourceError,
    TransientError,
)
from .json import stable_json_dumps
from .logging import EventLogger, bind, configure_logging, get_logger
from .text import clean_text, normalize_for_display_match, normalize_for_place_key
from .time import local_now_stamp, monotonic_ms

__all__ = [
    "DEFAULT_PRICE_TYPE",
    "PEAK_PRICE_TYPES",
    "Settings",
    "load_settings",
    "LooseDate",
    "parse_date",
    "parse_date_loose",
    "shift_year",
    "ymd",
    "EmptyFareTableError",
    "FareError",
    "FareTableShapeError",
    "InputDataError",
    "SourceError",
    "TransientError",
    "stable_json_dumps",
    "EventLogger",
    "bind",
    "configure_logging",
    "get_logger",
    "clean_text",
    "normalize_for_display_match",
    "normalize_for_place_key",
    "local_now_stamp",
    "monotonic_ms",
]
