from __future__ import annotations

from pathlib import Path

import httpx
import pytest
from itinerary_fares.core.errors import InputDataError, SourceError
from itinerary_fares.ingest import sources

FARES_CSV = "出発地,到着地,運賃,価格適用期間\n東京,沖縄,12000,2025-06-01〜2025-06-30\n"


def _client(routes: dict[str, tuple[int, str]]) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        status, body = routes.get(str(request.url), (404, "<html>missing</html>"))
        return httpx.Response(status, text=body)

    return sources.make_http_client(transport=httpx.MockTransport(handler))


def test_load_fare_rows_from_path(tmp_path: Path) -> None:
    p = tmp_path / "transport.csv"
    p.write_text("\ufeff" + FARES_CSV, encoding="utf-8")

    src, parsed = sources.load_fare_rows(p)
    assert src.name == "transport.csv"
    assert src.location == str(p)
    assert parsed.fmt == "csv"
    assert parsed.rows[0]["出発地"] == "東京"


def test_load_source_text_missing_path(tmp_path: Path) -> None:
    with pytest.raises(SourceError):
        sources.load_source_text(tmp_path / "nope.csv")


def test_load_fare_rows_from_url() -> None:
    url = "https://fares.example.test/data/transport.csv?_ts=1"
    with _client({url: (200, FARES_CSV)}) as c:
        src, parsed = sources.load_fare_rows(url, client=c)
    assert src.name == "transport.csv"
    assert len(parsed.rows) == 1


def test_http_errors_and_html_pages() -> None:
    with _client({}) as c:
        with pytest.raises(SourceError):
            sources.load_source_text("https://fares.example.test/transport.csv", client=c)

    url = "https://fares.example.test/transport.csv"
    with _client({url: (200, "<!doctype html><html></html>")}) as c:
        with pytest.raises(InputDataError):
            sources.load_fare_rows(url, client=c)


def test_load_alias_rows_is_optional(tmp_path: Path) -> None:
    assert sources.load_alias_rows(None) == []
    assert sources.load_alias_rows(tmp_path / "missing.csv") == []

    with _client({}) as c:
        assert sources.load_alias_rows("https://fares.example.test/aliases.csv", client=c) == []

    p = tmp_path / "place_aliases.csv"
    p.write_text("別名,正規名\n羽田,東京\n", encoding="utf-8")
    assert sources.load_alias_rows(p) == [{"別名": "羽田", "正規名": "東京"}]


def test_non_utf8_fare_table_is_input_data_error(tmp_path: Path) -> None:
    p = tmp_path / "transport.csv"
    p.write_bytes(FARES_CSV.encode("shift_jis"))

    with pytest.raises(InputDataError, match="not UTF-8"):
        sources.load_fare_rows(p)


def test_non_utf8_alias_sheet_yields_no_rows(tmp_path: Path) -> None:
    p = tmp_path / "place_aliases.csv"
    p.write_bytes("別名,正規名\n羽田,東京\n".encode("shift_jis"))
    assert sources.load_alias_rows(p) == []
