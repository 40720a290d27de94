from datetime import datetime
from typing import List, Optional, Sequence
import logging

from pricewatch.config import settings
from pricewatch.data.ingestion import ClosingPriceFetcher
from pricewatch.features.signals import WindowedSMA, max_price, min_price, price_difference
from pricewatch.schemas import SummaryRecord, TimeRange

logger = logging.getLogger(__name__)


def process_closing_data(
    symbol: str,
    closes: Sequence[float],
    period_start: datetime,
    sma_window: int = 30
) -> Optional[SummaryRecord]:
    """
    Build the summary row for one symbol. An empty series has nothing to
    report and gives None.
    """
    if len(closes) == 0:
        return None

    # Both present because closes is non-empty
    period_max = max_price(closes)
    period_min = min_price(closes)
    last_price = float(closes[-1])

    _, pct_change = price_difference(closes) or (0.0, 0.0)
    sma: List[float] = WindowedSMA(sma_window).calculate(closes) or []

    return SummaryRecord(
        period_start=period_start,
        symbol=symbol,
        price=last_price,
        pct_change=pct_change,
        period_min=period_min,
        period_max=period_max,
        sma=sma[-1] if sma else 0.0,
    )


class SymbolWorker:
    """
    Fetch + compute for a single symbol. Fetch failures propagate unchanged.
    """
    def __init__(self, fetcher: Optional[ClosingPriceFetcher] = None, sma_window: Optional[int] = None):
        self.fetcher = fetcher or ClosingPriceFetcher()
        self.sma_window = settings.SMA_WINDOW if sma_window is None else sma_window

    async def run(self, symbol: str, time_range: TimeRange) -> Optional[SummaryRecord]:
        closes = await self.fetcher.fetch_closing_data(symbol, time_range)
        if not closes:
            logger.warning(f"No closes for {symbol} between {time_range.start} and {time_range.end}")
            return None

        return process_closing_data(symbol, closes, time_range.start, self.sma_window)
