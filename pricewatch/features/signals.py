import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union


PriceSeries = Union[Sequence[float], np.ndarray, pd.Series]


def _as_array(series: PriceSeries) -> np.ndarray:
    return np.asarray(series, dtype=float)


def price_difference(series: PriceSeries) -> Optional[Tuple[float, float]]:
    """
    Absolute and relative change between the first and last price.

    The relative change is measured against the first price. A first price of
    exactly 0.0 is replaced by 1.0 as the divisor, so in that case the relative
    change equals the absolute change.

    Returns (absolute, relative), or None for an empty series.
    """
    values = _as_array(series)
    if values.size == 0:
        return None

    first, last = values[0], values[-1]
    abs_diff = float(last - first)
    divisor = first if first != 0.0 else 1.0
    rel_diff = float(abs_diff / divisor)
    return abs_diff, rel_diff


def min_price(series: PriceSeries) -> Optional[float]:
    """Lowest price in the series, None if empty."""
    values = _as_array(series)
    if values.size == 0:
        return None
    return float(values.min())


def max_price(series: PriceSeries) -> Optional[float]:
    """Highest price in the series, None if empty."""
    values = _as_array(series)
    if values.size == 0:
        return None
    return float(values.max())


def windowed_sma(series: PriceSeries, window_size: int) -> Optional[List[float]]:
    """
    Simple moving average over every full window of `window_size` prices.

    Returns len(series) - window_size + 1 averages in series order.
    An empty series or a window of 1 or less gives None; a window longer
    than the series gives an empty list.
    """
    values = _as_array(series)
    if values.size == 0 or window_size <= 1:
        return None
    if window_size > values.size:
        return []

    sma = pd.Series(values).rolling(window=window_size).mean()
    # first window_size - 1 rows are partial windows
    return sma.iloc[window_size - 1:].tolist()


@dataclass(frozen=True)
class WindowedSMA:
    """Moving average with a fixed window, for callers that carry the window around."""
    window_size: int = 30

    def calculate(self, series: PriceSeries) -> Optional[List[float]]:
        return windowed_sma(series, self.window_size)
