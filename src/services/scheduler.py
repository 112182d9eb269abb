"""
Refresh Scheduler

Re-acquires the active quote on a market-aware cadence. Owns at most one
asyncio task; the interval is re-derived from the market phase before every
sleep, so a session that spans the open or close adapts on its own.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional, Set

from config.settings import settings
from src.analyzers.utils import format_interval
from src.data.errors import NoActiveTicker
from src.market.clock import MarketClock
from src.market.interval_policy import effective_interval

logger = logging.getLogger(__name__)

TickCallback = Callable[[], Awaitable[None]]


class RefreshScheduler:
    """Idle/Running state machine around a single recurring timer task."""

    def __init__(self, tick_callback: TickCallback, clock: MarketClock = None,
                 base_interval_seconds: int = None, sleep=asyncio.sleep):
        self.tick_callback = tick_callback
        self.clock = clock or MarketClock()
        self.base_interval_seconds = base_interval_seconds or settings.refresh_interval_seconds
        self.enabled = False
        self.ticker: Optional[str] = None

        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self._in_flight: Set[asyncio.Future] = set()

    @property
    def running(self) -> bool:
        return self.enabled and self._task is not None and not self._task.done()

    def current_interval(self, now: datetime = None) -> int:
        return effective_interval(self.clock.phase(now), self.base_interval_seconds)

    def start(self, ticker: Optional[str]):
        """Arm the recurring timer for ``ticker``; must run inside an event loop."""
        if not ticker:
            raise NoActiveTicker()

        self._cancel_timer()
        self.ticker = ticker
        self.enabled = True
        self._task = asyncio.create_task(self._run())
        logger.info(f"Auto-refresh started for {ticker}: every {format_interval(self.current_interval())}")

    def stop(self):
        """Cancel the timer. Safe to call when already idle."""
        was_enabled = self.enabled
        self.enabled = False
        self._cancel_timer()
        if was_enabled:
            logger.info("Auto-refresh stopped")

    def retarget(self, ticker: str):
        """Point a running session at a new ticker without re-arming."""
        self.ticker = ticker

    def set_base_interval(self, seconds: int):
        """Change the base interval; a running timer is re-armed immediately."""
        if seconds is None or seconds <= 0:
            raise ValueError(f"Refresh interval must be positive, got {seconds}")

        self.base_interval_seconds = int(seconds)
        logger.info(f"Refresh interval changed to: {self.base_interval_seconds}")
        if self.enabled:
            self.start(self.ticker)

    def on_visibility_change(self, hidden: bool):
        """Pause when the host is hidden. Becoming visible never resumes."""
        if hidden and self.enabled:
            logger.info("Page hidden - pausing auto-refresh")
            self.stop()

    def _cancel_timer(self):
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()

    async def _run(self):
        while self.enabled:
            interval = self.current_interval()
            await self._sleep(interval)
            if not self.enabled:
                break

            # Shielded so stop() cannot abort an acquisition that is already in flight
            tick = asyncio.ensure_future(self.tick_callback())
            self._in_flight.add(tick)
            tick.add_done_callback(self._tick_done)
            try:
                await asyncio.shield(tick)
            except Exception:
                # reported by _tick_done; keep the timer alive
                continue

    def _tick_done(self, tick: asyncio.Future):
        self._in_flight.discard(tick)
        if tick.cancelled():
            return
        error = tick.exception()
        if error is not None:
            logger.error(f"Refresh tick failed: {error}")
