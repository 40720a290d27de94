"""Shared fakes for the polling pipeline tests."""

import io
from datetime import datetime, timezone
from typing import Dict, List, Tuple, Union

import pandas as pd
import pytest

from pricewatch.reporting.csv_report import CsvReportSink
from pricewatch.schemas import TimeRange


def quotes_frame(closes: List[float], adj_closes: List[float] = None, start: str = "2024-01-02") -> pd.DataFrame:
    """Daily quote frame in the normalised provider shape."""
    df = pd.DataFrame({
        'date': pd.date_range(start=start, periods=len(closes), freq='B', tz='UTC'),
        'close': closes,
    })
    if adj_closes is not None:
        df['adj_close'] = adj_closes
    return df


class FakeProvider:
    """
    Provider returning canned frames per symbol. A value that is an
    exception instance is raised instead.
    """
    def __init__(self, responses: Dict[str, Union[pd.DataFrame, Exception]]):
        self.responses = responses
        self.calls: List[Tuple[str, datetime, datetime]] = []

    def fetch_history(self, symbol, start, end):
        self.calls.append((symbol, start, end))
        response = self.responses[symbol]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def period_start():
    return datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def time_range(period_start):
    return TimeRange(start=period_start, end=datetime(2024, 6, 1, tzinfo=timezone.utc))


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def sink(output):
    return CsvReportSink(output)
