import asyncio
import pandas as pd
import yfinance as yf
from datetime import datetime
from typing import List, Optional, Protocol
import logging

from pricewatch.config import settings
from pricewatch.data.processing import extract_closing_prices
from pricewatch.schemas import TimeRange

logger = logging.getLogger(__name__)


class DataUnavailableError(RuntimeError):
    """
    Price history could not be retrieved for a symbol. Every provider-level
    problem (network, parsing, unknown symbol) is reported as this one kind.
    """
    def __init__(self, symbol: str, reason: str = ""):
        self.symbol = symbol
        msg = f"Invalid data for {symbol}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class PriceHistoryProvider(Protocol):
    def fetch_history(self, symbol: str, start: datetime, end: datetime) -> pd.DataFrame:
        """
        Blocking call returning daily quotes with at least 'date' and 'close'
        columns (optionally 'adj_close'). Raises on any provider error.
        """
        ...


class YahooHistoryProvider:
    """
    Daily quote history from Yahoo Finance.
    """
    def __init__(self, interval: str = "1d"):
        self.interval = interval

    def fetch_history(self, symbol: str, start: datetime, end: datetime) -> pd.DataFrame:
        logger.debug(f"Fetching {symbol} from Yahoo Finance ({start} to {end})...")
        df = yf.Ticker(symbol).history(
            start=start,
            end=end,
            interval=self.interval,
            auto_adjust=False,
            raise_errors=True
        )

        if df is None or df.empty:
            logger.warning(f"No data returned from Yahoo for {symbol}")
            return pd.DataFrame(columns=['date', 'close'])

        return self._normalize(df)

    @staticmethod
    def _normalize(df: pd.DataFrame) -> pd.DataFrame:
        # Handle MultiIndex columns if present
        if isinstance(df.columns, pd.MultiIndex):
            df = df.copy()
            df.columns = df.columns.get_level_values(0)

        # Reset index to make Date a column
        df = df.reset_index()

        # Standardize columns to lowercase (Including 'Date' -> 'date')
        df.columns = [str(c).lower() for c in df.columns]
        df = df.rename(columns={'adj close': 'adj_close', 'datetime': 'date'})

        expected_cols = ['date', 'close', 'adj_close']
        return df[[c for c in expected_cols if c in df.columns]]


def get_provider(source: str) -> PriceHistoryProvider:
    if source == "yahoo":
        return YahooHistoryProvider()
    raise ValueError(f"Unknown source: {source}")


class ClosingPriceFetcher:
    """
    Turns a symbol and a time range into a time-ordered closing-price series.
    """
    def __init__(self, provider: Optional[PriceHistoryProvider] = None):
        self.provider = provider or get_provider(settings.DEFAULT_DATA_SOURCE)

    async def fetch_closing_data(self, symbol: str, time_range: TimeRange) -> List[float]:
        """
        Fetch and order the closing prices for `symbol` over `time_range`.
        An empty history is a valid (empty) result; anything the provider or
        the extraction step raises becomes DataUnavailableError.
        """
        try:
            # Provider calls block; run them off the event loop so symbols overlap
            df = await asyncio.to_thread(
                self.provider.fetch_history, symbol, time_range.start, time_range.end
            )
            if df is None or df.empty:
                return []
            return extract_closing_prices(df, symbol)
        except Exception as e:
            logger.debug(f"Provider error for {symbol}: {e!r}")
            raise DataUnavailableError(symbol, str(e)) from e
