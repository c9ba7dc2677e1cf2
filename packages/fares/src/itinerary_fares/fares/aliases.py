from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping, Sequence

from itinerary_fares.core.text import clean_text, normalize_for_place_key
from itinerary_fares.ingest.headers import CanonicalField, normalize_row_keys

_SUFFIX_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"(都|道|府|県)$"),
    re.compile(r"\s*prefecture$", re.IGNORECASE),
    re.compile(r"空港$"),
    re.compile(r"\s*airport$", re.IGNORECASE),
)

# (alias, canonical); used only when the canonical name is a known place.
COMMON_ALIASES: tuple[tuple[str, str], ...] = (
    ("羽田", "東京"),
    ("成田", "東京"),
    ("那覇", "沖縄"),
    ("Haneda", "Tokyo"),
    ("Narita", "Tokyo"),
    ("Naha", "Okinawa"),
)


def suffix_variants(place: str) -> list[str]:
    out: list[str] = []
    for pat in _SUFFIX_PATTERNS:
        v = pat.sub("", place).strip()
        if v and v != place and v not in out:
            out.append(v)
    return out


@dataclass(frozen=True)
class AliasTable:
    """
    Normalized alias key -> canonical display name.

    Layers are applied in order. Every place maps to itself. Suffix-stripped
    variants and curated common names only take keys that are still free.
    Explicit alias rows overwrite whatever is there.
    """

    _entries: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        places: Iterable[str],
        alias_rows: Sequence[Mapping[str, Any]] | None = None,
    ) -> "AliasTable":
        place_list = list(places)
        known = set(place_list)
        m: dict[str, str] = {}

        for p in place_list:
            m[normalize_for_place_key(p)] = p

        for p in place_list:
            for v in suffix_variants(p):
                m.setdefault(normalize_for_place_key(v), p)

        for alias, canon in COMMON_ALIASES:
            if canon in known:
                m.setdefault(normalize_for_place_key(alias), canon)

        for row in alias_rows or ():
            n = normalize_row_keys(row)
            alias = clean_text(n.get(CanonicalField.alias))
            canon = clean_text(n.get(CanonicalField.canonical))
            if not alias or not canon:
                continue
            key = normalize_for_place_key(alias)
            if key:
                m[key] = canon

        return cls(MappingProxyType(m))

    def resolve(self, name: str | None) -> str:
        """Canonical display name; unknown names come back trimmed."""
        key = normalize_for_place_key(name)
        if not key:
            return ""
        return self._entries.get(key) or clean_text(name)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._entries.items())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and normalize_for_place_key(name) in self._entries
