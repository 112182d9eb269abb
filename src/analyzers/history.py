"""
Price History Statistics

Summary figures for a quote's daily price history, used by the text
summary shown next to the chart data.
"""

import logging
from typing import Dict, Optional, Sequence

import numpy as np
import pandas as pd

from src.data.models import PricePoint

logger = logging.getLogger(__name__)


def _convert_to_dataframe(price_history: Sequence[PricePoint]) -> pd.DataFrame:
    """Convert price history points to a date-indexed DataFrame."""
    frame = pd.DataFrame([{
        'date': point.date,
        'price': point.price,
        'volume': point.volume,
    } for point in price_history])
    return frame.set_index('date').sort_index()


def calculate_moving_average(price_history: Sequence[PricePoint], period: int) -> Optional[float]:
    """Simple moving average of the last ``period`` prices, or None if too short."""
    if len(price_history) < period:
        return None

    prices = _convert_to_dataframe(price_history)['price']
    return round(float(prices.rolling(window=period).mean().iloc[-1]), 2)


def summarize_history(price_history: Sequence[PricePoint]) -> Optional[Dict[str, float]]:
    """Summarize a price history series.

    Args:
        price_history: Daily points, any order

    Returns:
        Dict with start/end prices, change percent, high, low, average price,
        average volume and daily volatility (percent), or None when the
        series has fewer than two points
    """
    if not price_history or len(price_history) < 2:
        return None

    data = _convert_to_dataframe(price_history)
    prices = data['price']
    daily_returns = prices.pct_change().dropna()

    start_price = float(prices.iloc[0])
    end_price = float(prices.iloc[-1])
    volatility = float(daily_returns.std() * 100) if len(daily_returns) > 1 else 0.0

    return {
        'start_date': data.index[0],
        'end_date': data.index[-1],
        'start_price': start_price,
        'end_price': end_price,
        'change_percent': (end_price - start_price) / start_price * 100,
        'high': float(prices.max()),
        'low': float(prices.min()),
        'average_price': float(prices.mean()),
        'average_volume': float(data['volume'].mean()),
        'volatility': volatility if np.isfinite(volatility) else 0.0,
    }
