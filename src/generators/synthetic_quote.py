"""
Synthetic Quote Generator

Builds plausible quotes from the offline reference table, or from randomized
parameters for unknown tickers. Used as the demo/offline path and as the
silent fallback whenever a live fetch fails.
"""

import logging
import math
from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Optional

import numpy as np

from config.settings import market_config
from config.reference_data import DATA_TIMESTAMP, KNOWN_TICKERS, STOCK_REFERENCE
from src.data.errors import InvalidTicker
from src.data.models import PricePoint, Quote

logger = logging.getLogger(__name__)

_VOLUME_SUFFIXES = {"K": 1_000, "M": 1_000_000, "B": 1_000_000_000}


def normalize_ticker(raw: Optional[str]) -> str:
    """Strip and uppercase a user-entered symbol."""
    ticker = (raw or "").strip().upper()
    if not ticker:
        raise InvalidTicker()
    return ticker


def is_demo_ticker(ticker: str) -> bool:
    return ticker.upper() in market_config.DEMO_TICKERS


def has_offline_data(ticker: str) -> bool:
    return ticker.upper() in KNOWN_TICKERS


def parse_volume(value) -> Optional[float]:
    """Parse volumes such as ``58.5M`` or ``250K`` into share counts."""
    if value is None:
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip().upper()
    multiplier = _VOLUME_SUFFIXES.get(text[-1:], 1)
    if multiplier != 1:
        text = text[:-1]
    try:
        return float(text) * multiplier
    except ValueError:
        logger.warning(f"Unparseable volume value: {value!r}")
        return None


def days_until(target: date, now: datetime) -> int:
    """Whole days from ``now`` to midnight UTC of ``target``, rounded up."""
    target_instant = datetime.combine(target, time(), tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return math.ceil((target_instant - now).total_seconds() / 86400)


class SyntheticQuoteGenerator:
    """Generates offline quotes with randomized magnitudes."""

    def __init__(self, rng: np.random.Generator = None,
                 reference: Dict[str, dict] = None):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.reference = reference if reference is not None else STOCK_REFERENCE

    def generate(self, ticker: str, now: datetime = None,
                 current_price: Optional[float] = None) -> Quote:
        """Produce a complete synthetic quote for ``ticker``.

        When ``current_price`` is given (a live price), the quote is anchored
        on it and only the surrounding envelope is synthesized.
        """
        now = now or datetime.now(timezone.utc)
        ticker = normalize_ticker(ticker)
        info = self.reference.get(ticker)
        is_known = info is not None
        info = info or {}

        change_fraction = self.rng.uniform(-market_config.MAX_DAILY_CHANGE,
                                           market_config.MAX_DAILY_CHANGE)
        if current_price is not None:
            base_price = current_price / (1 + change_fraction)
        else:
            base_price = info.get("base_price")
            if base_price is None:
                base_price = self.rng.uniform(50, 250)
            current_price = base_price * (1 + change_fraction)

        week_high, week_low = info.get("week_high_52"), info.get("week_low_52")
        if week_high is None or week_low is None:
            week_high = base_price * (1 + self.rng.uniform(0.1, 0.52))
            week_low = base_price * (1 - self.rng.uniform(0.1, 0.52))

        day_low, day_high = self._day_range(current_price)

        average_volume = parse_volume(info.get("avg_volume"))
        if average_volume is not None:
            volume = average_volume * self.rng.uniform(0.7, 1.3)
        else:
            volume = self.rng.uniform(5_000_000, 55_000_000)

        if info.get("earnings_date"):
            earnings_date = date.fromisoformat(info["earnings_date"])
        else:
            earnings_date = now.date() + timedelta(days=int(self.rng.integers(14, 105)))

        quote = Quote(
            ticker=ticker,
            name=info.get("name", f"{ticker} Corporation"),
            sector=info.get("sector", "Unknown"),
            current_price=current_price,
            daily_change=current_price - base_price,
            daily_change_percent=change_fraction * 100,
            week_high_52=week_high,
            week_low_52=week_low,
            day_range_low=day_low,
            day_range_high=day_high,
            volume=float(math.floor(volume)),
            price_history=self.price_history(base_price, now.date()),
            earnings_date=earnings_date,
            days_to_earnings=days_until(earnings_date, now),
            market_cap=info.get("market_cap", "N/A"),
            pe_ratio=info.get("pe_ratio"),
            target_price=info.get("target_price"),
            is_live_data=False,
            is_known_ticker=is_known,
            is_demo_ticker=is_demo_ticker(ticker),
            data_timestamp=DATA_TIMESTAMP,
            fetched_at=now,
        )
        logger.debug(f"Generated synthetic quote for {ticker}: ${current_price:.2f}")
        return quote

    def price_history(self, base_price: float, end: date, days: int = None) -> tuple:
        """Random-walk daily series ending on ``end``, oldest first."""
        days = days or market_config.HISTORY_DAYS
        points = []
        price = base_price
        for offset in range(days - 1, -1, -1):
            step = self.rng.uniform(-market_config.MAX_HISTORY_STEP, market_config.MAX_HISTORY_STEP)
            price = price * (1 + step)
            points.append(PricePoint(
                date=(end - timedelta(days=offset)).isoformat(),
                price=price,
                volume=int(self.rng.integers(5_000_000, 55_000_000)),
            ))
        return tuple(points)

    def _day_range(self, current_price: float):
        volatility = market_config.DAY_RANGE_VOLATILITY
        low = current_price * (1 - self.rng.uniform(0, volatility))
        high = current_price * (1 + self.rng.uniform(0, volatility))
        return min(low, current_price), max(high, current_price)
