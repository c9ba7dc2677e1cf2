from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LogFormat = Literal["json", "console"]

DEFAULT_PRICE_TYPE = "通常"

PEAK_PRICE_TYPES = ("ピーク", "peak", "premium")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ITINERARY_FARES_",
        env_file=".env",
        extra="ignore",
    )

    fare_table: str = Field(default="data/transport.csv")
    alias_table: str | None = Field(default="data/place_aliases.csv")
    log_level: str = Field(default="INFO")
    log_format: LogFormat = Field(default="console")
    default_price_type: str = Field(default=DEFAULT_PRICE_TYPE, min_length=1)
    http_timeout_s: float = Field(default=10.0, gt=0)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    return Settings()
