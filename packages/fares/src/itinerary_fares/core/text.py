from __future__ import annotations

import re

_ws = re.compile(r"[\s\u3000]+", flags=re.UNICODE)
_dashes = re.compile(r"[\u2010\u2011\u2013\u2014\u2212]")
_middle_dots = re.compile(r"[・･]")
_brackets = re.compile(r"[()（）\[\]【】]")


def normalize_for_display_match(s: str | None) -> str:
    """
    General comparison form: strip, drop whitespace runs (incl. U+3000),
    fold dash variants to '-', lowercase.

    Whitespace is removed rather than collapsed so that "New York",
    "NewYork" and "New　York" compare equal.
    """
    if s is None:
        return ""
    x = _ws.sub("", str(s).strip())
    x = _dashes.sub("-", x)
    return x.lower()


def normalize_for_place_key(s: str | None) -> str:
    """
    Place and alias lookup key: `normalize_for_display_match` plus removal
    of middle dots and brackets.
    """
    x = normalize_for_display_match(s)
    x = _middle_dots.sub("", x)
    return _brackets.sub("", x)


def clean_text(s: str | None) -> str:
    if s is None:
        return ""
    return str(s).strip()
