from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TimeRange(BaseModel):
    """
    Period a price history is requested for. Both ends are UTC.
    start <= end is not enforced; the provider decides what an inverted range means.
    """
    start: datetime
    end: datetime

    model_config = ConfigDict(frozen=True)

    @field_validator("start", "end")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @classmethod
    def ending_now(cls, start: datetime, now: Optional[datetime] = None) -> "TimeRange":
        return cls(start=start, end=now or datetime.now(timezone.utc))


class SummaryRecord(BaseModel):
    """
    One reporting row for a symbol over a polling tick.
    """
    period_start: datetime
    symbol: str
    price: float
    pct_change: float = Field(..., description="Relative change over the period as a fraction (0.05 == 5%)")
    period_min: float
    period_max: float
    sma: float = Field(0.0, description="Latest windowed moving average, 0.0 if no window fits")

    model_config = ConfigDict(frozen=True)

    @field_validator("period_start")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)
