from __future__ import annotations

from pathlib import Path

import pytest
from itinerary_fares import cli
from itinerary_fares.core import config
from itinerary_fares.fares import Leg

FARES_CSV = (
    "出発地,到着地,価格タイプ,運賃,価格適用期間\n"
    "東京,沖縄,通常,12000,2025-06-01〜2025-06-30\n"
    "沖縄,東京,通常,13000,2025-06-01〜2025-06-30\n"
)


@pytest.fixture(autouse=True)
def _quiet_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.setenv("ITINERARY_FARES_LOG_LEVEL", "WARNING")
    monkeypatch.setenv("ITINERARY_FARES_ALIAS_TABLE", str(tmp_path / "no_aliases.csv"))
    config.load_settings.cache_clear()
    yield
    config.load_settings.cache_clear()


@pytest.fixture
def fares_file(tmp_path: Path) -> Path:
    p = tmp_path / "transport.csv"
    p.write_text(FARES_CSV, encoding="utf-8")
    return p


def test_parse_leg() -> None:
    got = cli.parse_leg("2025/06/10", " 羽田 ", "那覇")
    assert isinstance(got, Leg)
    assert (got.from_place, got.to_place) == ("羽田", "那覇")
    assert "unreadable date" in str(cli.parse_leg("someday", "A", "B"))
    assert "empty origin" in str(cli.parse_leg("2025-06-10", "A", " "))


def test_read_legs_file(tmp_path: Path) -> None:
    p = tmp_path / "legs.csv"
    p.write_text("日付,出発地,到着地\n2025-06-10,東京,沖縄\nlater,沖縄,東京\n", encoding="utf-8")
    legs, errors = cli.read_legs_file(p)
    assert [(leg.from_place, leg.to_place) for leg in legs] == [("東京", "沖縄")]
    assert len(errors) == 1


def test_summary_and_places(fares_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["summary", "--fares", str(fares_file)]) == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "transport.csv" in out

    assert cli.main(["places", "--fares", str(fares_file)]) == cli.EXIT_OK
    out = capsys.readouterr().out
    names = out.split()
    assert names.index("東京") < names.index("沖縄")


def test_resolve_all_hits(fares_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    code = cli.main(
        [
            "resolve",
            "--fares", str(fares_file),
            "--leg", "2025-06-10", "羽田", "那覇",
            "--leg", "2025-06-14", "沖縄", "東京",
        ]
    )
    assert code == cli.EXIT_OK
    out = capsys.readouterr().out
    assert "total=25,000" in out


def test_resolve_json_with_miss_and_exclusion(
    fares_file: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = cli.main(
        [
            "resolve",
            "--fares", str(fares_file),
            "--leg", "2025-06-10", "東京", "沖縄",
            "--leg", "2025-06-14", "沖縄", "東京",
            "--leg", "2025-07-01", "東京", "沖縄",
            "--exclude", "2",
            "--json",
        ]
    )
    assert code == cli.EXIT_MISS
    out = capsys.readouterr().out
    assert '"total_fare": 12000' in out
    assert '"reason": "out_of_period"' in out


def test_load_failures_exit_with_load_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["summary", "--fares", str(tmp_path / "missing.csv")]) == cli.EXIT_LOAD_ERROR

    html = tmp_path / "page.csv"
    html.write_text("<html><body>login</body></html>", encoding="utf-8")
    assert cli.main(["summary", "--fares", str(html)]) == cli.EXIT_LOAD_ERROR
    assert "Failed to load fare table" in capsys.readouterr().out


def test_resolve_against_empty_table(tmp_path: Path) -> None:
    p = tmp_path / "transport.csv"
    p.write_text("from,to,fare\nTokyo,Okinawa,12000\n", encoding="utf-8")
    code = cli.main(["resolve", "--fares", str(p), "--leg", "2025-06-10", "Tokyo", "Okinawa"])
    assert code == cli.EXIT_LOAD_ERROR


def test_resolve_without_legs(fares_file: Path) -> None:
    assert cli.main(["resolve", "--fares", str(fares_file)]) == cli.EXIT_OK


def test_non_utf8_fare_table_exits_with_load_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    p = tmp_path / "transport.csv"
    p.write_bytes(FARES_CSV.encode("shift_jis"))
    assert cli.main(["summary", "--fares", str(p)]) == cli.EXIT_LOAD_ERROR
    assert "Failed to load fare table" in capsys.readouterr().out


def test_non_utf8_alias_sheet_is_ignored(fares_file: Path, tmp_path: Path) -> None:
    aliases = tmp_path / "place_aliases.csv"
    aliases.write_bytes("別名,正規名\n羽田,東京\n".encode("shift_jis"))
    code = cli.main(
        [
            "resolve",
            "--fares", str(fares_file),
            "--aliases", str(aliases),
            "--leg", "2025-06-10", "東京", "沖縄",
        ]
    )
    assert code == cli.EXIT_OK


def test_missing_legs_file_exits_with_load_error(
    fares_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = cli.main(
        ["resolve", "--fares", str(fares_file), "--legs-file", str(tmp_path / "legs.csv")]
    )
    assert code == cli.EXIT_LOAD_ERROR
    assert "Failed to read legs file" in capsys.readouterr().out


def test_resolve_from_legs_file(fares_file: Path, tmp_path: Path) -> None:
    legs = tmp_path / "legs.tsv"
    legs.write_text("搭乗日\t出発地\t到着地\n2025/06/10\t羽田\t那覇\n", encoding="utf-8")
    code = cli.main(["resolve", "--fares", str(fares_file), "--legs-file", str(legs)])
    assert code == cli.EXIT_OK
