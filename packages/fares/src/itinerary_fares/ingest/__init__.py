from .headers import (
    CanonicalField,
    NormalizedRow,
    canonicalize,
    has_fare_shape,
    normalize_header_label,
    normalize_row_keys,
)
from .sources import (
    SourceText,
    load_alias_rows,
    load_fare_rows,
    load_source_text,
    make_http_client,
)
from .tabular import (
    ParsedRows,
    RawRow,
    detect_format,
    looks_like_html,
    parse_alias_rows,
    parse_fare_rows,
    read_rows,
)

__all__ = [
    "CanonicalField",
    "NormalizedRow",
    "canonicalize",
    "has_fare_shape",
    "normalize_header_label",
    "normalize_row_keys",
    "SourceText",
    "load_alias_rows",
    "load_fare_rows",
    "load_source_text",
    "make_http_client",
    "ParsedRows",
    "RawRow",
    "detect_format",
    "looks_like_html",
    "parse_alias_rows",
    "parse_fare_rows",
    "read_rows",
]
