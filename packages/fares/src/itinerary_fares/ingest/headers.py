from __future__ import annotations

import re
from enum import StrEnum
from typing import Any, Mapping, Sequence

_bom = re.compile(r"^\ufeff")
_ws = re.compile(r"[\s\u3000]+")
_brackets = re.compile(r"[()（）\[\]【】]")
_dashes = re.compile(r"[\u2010\u2011\u2013\u2014\u2015\u30fc]")


class CanonicalField(StrEnum):
    from_place = "from"
    to_place = "to"
    fare = "fare"
    price_type = "priceType"
    whole_from = "wholeFrom"
    whole_to = "wholeTo"
    valid_from = "validFrom"
    valid_to = "validTo"
    valid_range = "validRange"
    alias = "alias"
    canonical = "canonical"
    rule = "rule"


# Tested top to bottom, first containment hit wins. Compound labels come
# before the short ones they contain ("validFrom" holds "from",
# "priceType" holds "price", "価格適用期間開始" holds "価格適用期間").
SYNONYMS: tuple[tuple[CanonicalField, tuple[str, ...]], ...] = (
    (
        CanonicalField.whole_from,
        ("搭乗期間開始", "搭乗開始", "搭乗期間from", "boardfrom", "boardingfrom", "wholefrom"),
    ),
    (
        CanonicalField.whole_to,
        ("搭乗期間終了", "搭乗終了", "搭乗期間to", "boardto", "boardingto", "wholeto"),
    ),
    (
        CanonicalField.valid_from,
        ("価格適用期間開始", "価格適用開始", "適用開始", "periodfrom", "farefrom", "validfrom"),
    ),
    (
        CanonicalField.valid_to,
        ("価格適用期間終了", "価格適用終了", "適用終了", "periodto", "fareto", "validto"),
    ),
    (
        CanonicalField.valid_range,
        ("価格適用期間", "適用期間", "validrange", "period", "range"),
    ),
    (
        CanonicalField.from_place,
        ("出発地", "発地", "出発", "出発場所", "発駅", "乗車地", "from", "origin"),
    ),
    (
        CanonicalField.to_place,
        ("到着地", "着地", "到着", "到着場所", "着駅", "降車地", "to", "destination"),
    ),
    (
        CanonicalField.price_type,
        ("価格タイプ", "価格ﾀｲﾌﾟ", "シーズン", "区分", "season", "type", "tier"),
    ),
    (
        CanonicalField.fare,
        ("運賃", "金額", "料金", "運賃額", "fare", "price", "amount"),
    ),
    (
        CanonicalField.alias,
        ("別名", "入力", "候補", "表記ゆれ", "表記揺れ", "alias", "synonym"),
    ),
    (
        CanonicalField.canonical,
        ("正規", "正規名", "統一名", "正式名称", "canonical"),
    ),
    (
        CanonicalField.rule,
        ("根拠", "備考", "注記", "参照", "rule", "note"),
    ),
)


def normalize_header_label(label: str | None) -> str:
    x = "" if label is None else str(label)
    x = _bom.sub("", x)
    x = _ws.sub("", x)
    x = _brackets.sub("", x)
    x = _dashes.sub("-", x)
    return x.lower()


_NORMALIZED_SYNONYMS: tuple[tuple[CanonicalField, tuple[str, ...]], ...] = tuple(
    (field, tuple(normalize_header_label(s) for s in terms)) for field, terms in SYNONYMS
)


def canonicalize(label: str | None) -> CanonicalField | str:
    """
    Map a column label to its canonical field.

    Unknown labels pass through in normalized form so that extra columns
    survive without breaking ingestion.
    """
    nk = normalize_header_label(label)
    if not nk:
        return nk
    for field, terms in _NORMALIZED_SYNONYMS:
        if any(t in nk for t in terms):
            return field
    return nk


NormalizedRow = dict[str, str]


def normalize_row_keys(row: Mapping[str, Any] | None) -> NormalizedRow:
    """
    Re-key a raw row by canonical field. When several labels land on the
    same field the first non-empty value is kept.
    """
    out: NormalizedRow = {}
    for k, v in (row or {}).items():
        ck = str(canonicalize(k))
        val = "" if v is None else str(v).strip()
        if ck not in out or (out[ck] == "" and val != ""):
            out[ck] = val
    return out


def has_fare_shape(rows: Sequence[Mapping[str, Any]]) -> tuple[bool, str]:
    """
    Check that the first row exposes origin, destination and fare columns.

    Returns (ok, reason); reason is empty when ok.
    """
    if not rows:
        return False, "no rows"
    n = normalize_row_keys(rows[0])
    ok = (
        CanonicalField.from_place in n
        and CanonicalField.to_place in n
        and CanonicalField.fare in n
    )
    if ok:
        return True, ""
    return False, f"headers={','.join(str(k) for k in rows[0].keys())}"
