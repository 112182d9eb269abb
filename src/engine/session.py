"""
Tracker Session

Owns the active ticker, the active quote and the request-generation token,
and routes user events to the engine components. Every acquisition result is
tagged with the generation current when it started; results from an older
generation are dropped, so a late response can never overwrite the state of a
newer search.
"""

import asyncio
import logging
from typing import Optional, Protocol

from config.settings import Settings, settings as default_settings
from src.analyzers.projection import project
from src.analyzers.utils import provenance_label
from src.data.errors import TrackerError
from src.data.models import AlertRule, Direction, Projection, Quote, RenderPayload
from src.generators.random_walk import RandomWalkUpdater
from src.generators.synthetic_quote import normalize_ticker
from src.market.clock import MarketClock
from src.services.acquisition import QuoteAcquisitionLayer
from src.services.alerts import AlertEvaluator
from src.services.scheduler import RefreshScheduler

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, payload: RenderPayload) -> None: ...


class TrackerSession:
    """Single-ticker tracking session."""

    def __init__(self, acquisition: QuoteAcquisitionLayer = None, evaluator: AlertEvaluator = None,
                 walker: RandomWalkUpdater = None, clock: MarketClock = None,
                 config: Settings = None, renderer: Renderer = None, sleep=asyncio.sleep):
        self.config = config or default_settings
        self.acquisition = acquisition or QuoteAcquisitionLayer(config=self.config)
        self.evaluator = evaluator or AlertEvaluator()
        self.walker = walker or RandomWalkUpdater()
        self.clock = clock or MarketClock(self.config.exchange_timezone)
        self.renderer = renderer
        self.scheduler = RefreshScheduler(
            self.refresh_tick,
            clock=self.clock,
            base_interval_seconds=self.config.refresh_interval_seconds,
            sleep=sleep,
        )

        self.active_ticker: Optional[str] = None
        self.active_quote: Optional[Quote] = None
        self.generation = 0

        self.projection_percentage: Optional[float] = None
        self.projection_direction = Direction.RISE
        self.projection: Optional[Projection] = None

        self.message: Optional[str] = None
        self._message_handle: Optional[asyncio.TimerHandle] = None

    # ── Quote lifecycle ────────────────────────────────────

    async def search(self, raw_ticker: str) -> Optional[Quote]:
        """Make ``raw_ticker`` the active ticker and acquire its quote."""
        try:
            ticker = normalize_ticker(raw_ticker)
        except TrackerError as e:
            self.show_message(e.user_message)
            return None

        self.generation += 1
        generation = self.generation
        self.active_ticker = ticker
        self.active_quote = None
        self.projection = None
        if self.scheduler.enabled:
            self.scheduler.retarget(ticker)

        logger.info(f"Starting search for {ticker} (generation {generation})")
        quote = await self.acquisition.acquire(ticker)

        if generation != self.generation:
            logger.info(f"Discarding stale quote for {ticker} (generation {generation})")
            return None

        await self._apply_quote(quote)
        return quote

    async def refresh_tick(self):
        """One scheduled refresh: live fetch for live quotes, random walk otherwise."""
        quote, generation = self.active_quote, self.generation
        if quote is None:
            return

        if quote.is_live_data:
            price = await self.acquisition.refresh(quote.ticker)
            if generation != self.generation or self.active_quote is None \
                    or self.active_quote.ticker != quote.ticker:
                logger.info(f"Discarding stale refresh for {quote.ticker}")
                return
            if price is None:
                # Failed refresh: the quote stays live only inside the freshness window
                if self.acquisition.is_fresh(quote.ticker):
                    return
                logger.info(f"Live data for {quote.ticker} is stale - showing as sample data")
                updated = self.active_quote.model_copy(update={"is_live_data": False})
            else:
                updated = self.active_quote.with_price(price, is_live_data=True)
        else:
            updated = self.walker.step(quote, self.clock.phase())
            if updated is None:
                return

        await self._apply_quote(updated)

    async def _apply_quote(self, quote: Quote):
        self.active_quote = quote
        self._recompute_projection()
        await self.evaluator.evaluate(quote.current_price, quote.ticker)
        self.render()

    # ── Projection ─────────────────────────────────────────

    def set_projection(self, percentage, direction=Direction.RISE) -> Optional[Projection]:
        try:
            self.projection_direction = Direction(direction)
        except ValueError:
            self.show_message(f"Unknown direction: {direction}")
            return None
        self.projection_percentage = percentage

        try:
            self.projection = self._project()
        except TrackerError as e:
            self.projection = None
            self.show_message(e.user_message)
        self.render()
        return self.projection

    def _project(self) -> Optional[Projection]:
        if self.projection_percentage is None:
            return None
        current_price = self.active_quote.current_price if self.active_quote else None
        return project(current_price, self.projection_percentage, self.projection_direction)

    def _recompute_projection(self):
        try:
            self.projection = self._project()
        except TrackerError:
            self.projection = None

    # ── Alerts ─────────────────────────────────────────────

    def add_alert(self, direction, percentage) -> Optional[AlertRule]:
        try:
            rule = self.evaluator.create_rule(self.active_quote, direction, percentage)
        except ValueError:
            self.show_message(f"Unknown direction: {direction}")
            return None
        except TrackerError as e:
            self.show_message(e.user_message)
            return None
        self.render()
        return rule

    def remove_alert(self, rule_id: int) -> bool:
        removed = self.evaluator.remove_rule(rule_id)
        self.render()
        return removed

    # ── Refresh control ────────────────────────────────────

    def start_refresh(self) -> bool:
        try:
            self.scheduler.start(self.active_ticker)
        except TrackerError as e:
            self.show_message(e.user_message)
            return False
        self.render()
        return True

    def stop_refresh(self):
        self.scheduler.stop()
        self.render()

    def toggle_refresh(self) -> bool:
        if self.scheduler.enabled:
            self.stop_refresh()
            return False
        return self.start_refresh()

    def set_refresh_interval(self, seconds: int) -> bool:
        try:
            self.scheduler.set_base_interval(seconds)
        except ValueError as e:
            self.show_message(str(e))
            return False
        self.render()
        return True

    def on_visibility_change(self, hidden: bool):
        self.scheduler.on_visibility_change(hidden)

    # ── Transient messages ─────────────────────────────────

    def show_message(self, text: str):
        """Show ``text`` until ``error_display_seconds`` elapse."""
        logger.info(f"User message: {text}")
        self.message = text
        if self._message_handle is not None:
            self._message_handle.cancel()
            self._message_handle = None
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None
        if loop is not None:
            self._message_handle = loop.call_later(self.config.error_display_seconds, self.clear_message)
        self.render()

    def clear_message(self):
        self.message = None
        self._message_handle = None
        self.render()

    # ── Rendering ──────────────────────────────────────────

    def payload(self) -> RenderPayload:
        interval = self.scheduler.current_interval() if self.scheduler.enabled else None
        return RenderPayload(
            quote=self.active_quote,
            phase=self.clock.current_description(),
            provenance=provenance_label(self.active_quote),
            projection=self.projection,
            alerts=self.evaluator.rules,
            message=self.message,
            refresh_enabled=self.scheduler.enabled,
            effective_interval_seconds=interval,
        )

    def render(self):
        if self.renderer is not None:
            self.renderer.render(self.payload())
