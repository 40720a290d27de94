import pandas as pd
import logging
from typing import List

logger = logging.getLogger(__name__)


def extract_closing_prices(df: pd.DataFrame, symbol: str = "") -> List[float]:
    """
    Takes a normalised quote frame and produces the closing-price series:
    - Sort by date (stable, so equal timestamps keep provider order)
    - Use Adjusted Close if available, else Close
    - Drop timestamps, keep price order only
    """
    if df.empty:
        return []

    if 'date' not in df.columns:
        raise ValueError(f"No date column in quotes for {symbol}")

    price_col = 'adj_close' if 'adj_close' in df.columns else 'close'
    if price_col not in df.columns:
        raise ValueError(f"No close or adj_close column in quotes for {symbol}")

    # Provider does not guarantee ordering
    ordered = df.sort_values('date', kind='stable')
    closes = ordered[price_col].astype(float).tolist()

    logger.debug(f"Extracted {len(closes)} closes for {symbol} using '{price_col}'")
    return closes
