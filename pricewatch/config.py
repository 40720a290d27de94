from datetime import datetime, timezone
from typing import List

import pandas as pd
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Universe
    DEFAULT_SYMBOLS: str = "AAPL,MSFT,UBER,GOOG"

    # Polling
    POLL_INTERVAL_SECONDS: float = 30.0
    SMA_WINDOW: int = 30

    # Defaults
    DEFAULT_DATA_SOURCE: str = "yahoo"
    LOG_LEVEL: str = "INFO"
    SHOW_PROGRESS: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @field_validator("POLL_INTERVAL_SECONDS")
    @classmethod
    def _positive_interval(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("POLL_INTERVAL_SECONDS must be positive")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()


def parse_symbols(text: str) -> List[str]:
    """
    Split a comma-separated symbol list. Order and duplicates are preserved.
    """
    symbols = [s.strip() for s in text.split(",")]
    symbols = [s for s in symbols if s]
    if not symbols:
        raise ValueError(f"No symbols found in {text!r}")
    return symbols


def parse_start_date(text: str) -> datetime:
    """
    Parse the start of the reporting period into a UTC datetime.
    Naive values are taken to be UTC already.
    """
    try:
        ts = pd.Timestamp(text)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Couldn't parse start date {text!r}: {e}") from e

    if pd.isna(ts):
        raise ValueError(f"Couldn't parse start date {text!r}")

    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    else:
        ts = ts.tz_convert("UTC")
    return ts.to_pydatetime().astimezone(timezone.utc)


settings = Settings()
