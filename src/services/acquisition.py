"""
Quote Acquisition Layer

Decides where a quote comes from. Demo and known tickers are served offline;
anything else gets one bounded live fetch, and every failure on that path
falls back to a synthetic quote. Acquisition errors never reach the user.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

from config.settings import Settings, settings as default_settings, market_config
from src.data.errors import AcquisitionFailure
from src.data.models import Quote
from src.generators.synthetic_quote import (
    SyntheticQuoteGenerator,
    has_offline_data,
    is_demo_ticker,
    normalize_ticker,
)
from src.integrations.quote_client import QuoteClient
from src.utils.database import InMemoryKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


class QuoteAcquisitionLayer:
    """Live-or-synthetic quote source with provenance tracking."""

    def __init__(self, client: QuoteClient = None, generator: SyntheticQuoteGenerator = None,
                 store: KeyValueStore = None, config: Settings = None):
        self.client = client or QuoteClient()
        self.generator = generator or SyntheticQuoteGenerator()
        self.store = store if store is not None else InMemoryKeyValueStore()
        self.config = config or default_settings

        self.last_live_update: Optional[datetime] = None
        self._last_success: Dict[str, datetime] = {}

    async def initialize(self):
        """Load the persisted last-live-update timestamp and the ticker it belongs to.

        The restored instant seeds freshness for that ticker, so a quote fetched
        just before a restart is still shown as live inside the window.
        """
        try:
            raw = await self.store.get(market_config.LAST_LIVE_UPDATE_KEY)
            ticker = await self.store.get(market_config.LAST_LIVE_TICKER_KEY)
        except Exception as e:
            logger.warning(f"Could not read last live update: {e}")
            return

        if not raw:
            return
        try:
            self.last_live_update = datetime.fromtimestamp(int(raw) / 1000, tz=timezone.utc)
            logger.info(f"Last live update restored: {self.last_live_update.isoformat()}")
            if ticker:
                self._last_success[ticker.upper()] = self.last_live_update
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed last live update {raw!r}: {e}")

    def is_fresh(self, ticker: str, now: datetime = None) -> bool:
        """Whether ``ticker`` had a successful live fetch within the freshness window."""
        now = now or datetime.now(timezone.utc)
        last = self._last_success.get(ticker.upper())
        if last is None:
            return False
        return (now - last).total_seconds() < self.config.freshness_window

    def uses_offline_path(self, ticker: str) -> bool:
        return is_demo_ticker(ticker) or has_offline_data(ticker)

    async def acquire(self, ticker: str, now: datetime = None) -> Quote:
        """Return a usable quote for ``ticker``.

        Only an empty ticker raises (``InvalidTicker``); every network or
        parse failure resolves to a synthetic quote.
        """
        ticker = normalize_ticker(ticker)

        if self.uses_offline_path(ticker):
            logger.info(f"Using offline data for {ticker}")
            return self.generator.generate(ticker, now)

        try:
            logger.info(f"Attempting to fetch real data for {ticker}...")
            price = await self._fetch_live(ticker, self.config.search_timeout_seconds)
            now = now or datetime.now(timezone.utc)
            await self._record_success(ticker, now)
            quote = self.generator.generate(ticker, now, current_price=price)
            logger.info(f"Successfully fetched real data for {ticker}: ${price:.2f}")
            return quote.model_copy(update={"is_live_data": self.is_fresh(ticker, now)})
        except AcquisitionFailure as e:
            logger.info(f"Real data fetch failed ({e}), using sample data for {ticker}")
        except Exception as e:
            logger.error(f"Unexpected acquisition error for {ticker}: {e}")

        return self.generator.generate(ticker, now)

    async def refresh(self, ticker: str, now: datetime = None) -> Optional[float]:
        """Fetch a fresh live price, or ``None`` when the fetch fails."""
        try:
            price = await self._fetch_live(ticker, self.config.refresh_timeout_seconds)
        except AcquisitionFailure as e:
            logger.info(f"API refresh failed: {e} - keeping last known quote")
            return None
        except Exception as e:
            logger.error(f"Unexpected refresh error for {ticker}: {e}")
            return None

        await self._record_success(ticker, now or datetime.now(timezone.utc))
        logger.info(f"Fresh data updated: {ticker} = ${price:.2f}")
        return price

    async def _fetch_live(self, ticker: str, timeout: float) -> float:
        try:
            # wait_for cancels the request task once the deadline passes
            return await asyncio.wait_for(self.client.fetch_price(ticker, timeout=timeout), timeout)
        except asyncio.TimeoutError as e:
            raise AcquisitionFailure(f"timeout after {timeout}s") from e

    async def _record_success(self, ticker: str, now: datetime):
        self._last_success[ticker.upper()] = now
        self.last_live_update = now
        try:
            await self.store.set(market_config.LAST_LIVE_UPDATE_KEY, str(int(now.timestamp() * 1000)))
            await self.store.set(market_config.LAST_LIVE_TICKER_KEY, ticker.upper())
        except Exception as e:
            logger.warning(f"Could not persist last live update: {e}")
