"""Tests for settings, argument parsing helpers and the time-range model."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from pricewatch.config import Settings, parse_start_date, parse_symbols
from pricewatch.schemas import TimeRange


class TestParseSymbols:

    def test_default_universe(self):
        assert parse_symbols(Settings().DEFAULT_SYMBOLS) == ["AAPL", "MSFT", "UBER", "GOOG"]

    def test_keeps_order_case_and_duplicates(self):
        assert parse_symbols("msft, AAPL,,msft ") == ["msft", "AAPL", "msft"]

    @pytest.mark.parametrize("text", ["", ",", " , "])
    def test_nothing_to_poll(self, text):
        with pytest.raises(ValueError):
            parse_symbols(text)


class TestParseStartDate:

    def test_date_only_is_midnight_utc(self):
        assert parse_start_date("2024-01-01") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    def test_rfc3339_with_offset_is_converted(self):
        parsed = parse_start_date("2024-01-01T05:00:00+02:00")
        assert parsed == datetime(2024, 1, 1, 3, 0, tzinfo=timezone.utc)
        assert parsed.utcoffset() == timedelta(0)

    def test_zulu_suffix(self):
        assert parse_start_date("2024-01-01T00:00:00Z") == datetime(2024, 1, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", ["not-a-date", "", "2024-13-45"])
    def test_malformed(self, text):
        with pytest.raises(ValueError):
            parse_start_date(text)


class TestSettings:

    def test_defaults(self):
        s = Settings()
        assert s.POLL_INTERVAL_SECONDS == 30.0
        assert s.SMA_WINDOW == 30
        assert s.DEFAULT_DATA_SOURCE == "yahoo"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("SMA_WINDOW", "10")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        s = Settings()
        assert s.SMA_WINDOW == 10
        assert s.LOG_LEVEL == "DEBUG"

    def test_interval_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(POLL_INTERVAL_SECONDS=0)


class TestTimeRange:

    def test_naive_values_are_utc(self):
        tr = TimeRange(start=datetime(2024, 1, 1), end=datetime(2024, 2, 1))
        assert tr.start.tzinfo == timezone.utc
        assert tr.end.tzinfo == timezone.utc

    def test_inverted_range_is_allowed(self):
        tr = TimeRange(start=datetime(2024, 2, 1), end=datetime(2024, 1, 1))
        assert tr.start > tr.end

    def test_ending_now(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        before = datetime.now(timezone.utc)
        tr = TimeRange.ending_now(start)
        assert tr.start == start
        assert tr.end >= before

    def test_frozen(self):
        tr = TimeRange(start=datetime(2024, 1, 1), end=datetime(2024, 2, 1))
        with pytest.raises(ValidationError):
            tr.start = datetime(2023, 1, 1)
