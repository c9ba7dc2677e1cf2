from __future__ import annotations

import pytest
from itinerary_fares.core import config, errors, stable_json_dumps


def test_settings_defaults_and_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    s = config.Settings()
    assert s.default_price_type == config.DEFAULT_PRICE_TYPE
    assert s.log_format == "console"

    monkeypatch.setenv("ITINERARY_FARES_FARE_TABLE", "https://example.test/fares.tsv")
    monkeypatch.setenv("ITINERARY_FARES_DEFAULT_PRICE_TYPE", "Standard")
    monkeypatch.setenv("ITINERARY_FARES_LOG_FORMAT", "json")
    s = config.Settings()
    assert s.fare_table == "https://example.test/fares.tsv"
    assert s.default_price_type == "Standard"
    assert s.log_format == "json"


def test_load_settings_is_cached() -> None:
    config.load_settings.cache_clear()
    assert config.load_settings() is config.load_settings()


def test_error_hierarchy() -> None:
    assert issubclass(errors.FareTableShapeError, errors.InputDataError)
    assert issubclass(errors.SourceError, errors.TransientError)
    assert issubclass(errors.EmptyFareTableError, errors.FareError)
    assert not issubclass(errors.EmptyFareTableError, errors.InputDataError)


def test_stable_json_dumps_keeps_cjk() -> None:
    assert stable_json_dumps({"b": "東京", "a": 1}, indent=None) == '{"a":1,"b":"東京"}'
