"""
Market Clock

Maps wall-clock instants onto the trading-session phase of a single exchange.
All boundaries are expressed in exchange-local civil time, so DST shifts are
absorbed by the timezone conversion.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from config.settings import settings, market_config
from src.data.models import MarketPhase, PhaseDescription

logger = logging.getLogger(__name__)

_STATUS_COLORS = {
    MarketPhase.OPEN: "#4caf50",
    MarketPhase.PRE_MARKET: "#ffa726",
    MarketPhase.AFTER_HOURS: "#ff9800",
    MarketPhase.CLOSED_WEEKDAY: "#ff6b6b",
    MarketPhase.CLOSED_WEEKEND: "#ff6b6b",
}


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as e.g. ``9:30 AM ET``."""
    hours, mins = divmod(minutes, 60)
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours - 12 if hours > 12 else (12 if hours == 0 else hours)
    return f"{display_hours}:{mins:02d} {period} ET"


class MarketClock:
    """Trading-session clock for a fixed exchange timezone."""

    def __init__(self, timezone_name: str = None):
        self.timezone = ZoneInfo(timezone_name or settings.exchange_timezone)

    def local_time(self, now: Optional[datetime] = None) -> datetime:
        """Project ``now`` into exchange-local time.

        Naive datetimes are treated as UTC.
        """
        if now is None:
            now = datetime.now(timezone.utc)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now.astimezone(self.timezone)

    def phase(self, now: Optional[datetime] = None) -> MarketPhase:
        local = self.local_time(now)

        # Saturday=5, Sunday=6
        if local.weekday() >= 5:
            return MarketPhase.CLOSED_WEEKEND

        minutes = local.hour * 60 + local.minute
        if minutes < market_config.PRE_MARKET_START:
            return MarketPhase.CLOSED_WEEKDAY
        if minutes < market_config.REGULAR_OPEN:
            return MarketPhase.PRE_MARKET
        if minutes < market_config.REGULAR_CLOSE:
            return MarketPhase.OPEN
        if minutes < market_config.AFTER_HOURS_END:
            return MarketPhase.AFTER_HOURS
        return MarketPhase.CLOSED_WEEKDAY

    def next_open(self, now: Optional[datetime] = None) -> datetime:
        """Next regular-session open, in exchange-local time.

        Holidays are not modelled; Friday at or after the close rolls to Monday.
        """
        local = self.local_time(now)
        weekday = local.weekday()

        days_to_add = 1
        if weekday == 4 and local.hour * 60 + local.minute >= market_config.REGULAR_CLOSE:
            days_to_add = 3
        elif weekday == 5:
            days_to_add = 2
        elif weekday == 6:
            days_to_add = 1

        open_hour, open_minute = divmod(market_config.REGULAR_OPEN, 60)
        next_day = (local + timedelta(days=days_to_add)).date()
        return datetime(next_day.year, next_day.month, next_day.day,
                        open_hour, open_minute, tzinfo=self.timezone)

    def describe_phase(self, phase: MarketPhase, now: Optional[datetime] = None) -> PhaseDescription:
        """Human-readable label and next-boundary text for ``phase``."""
        if phase is MarketPhase.OPEN:
            label = "Market Open"
            next_event = f"Market closes at {format_minutes(market_config.REGULAR_CLOSE)}"
        elif phase is MarketPhase.PRE_MARKET:
            label = "Pre-Market Trading"
            next_event = f"Market opens at {format_minutes(market_config.REGULAR_OPEN)}"
        elif phase is MarketPhase.AFTER_HOURS:
            label = "After-Hours Trading"
            next_event = f"After-hours ends at {format_minutes(market_config.AFTER_HOURS_END)}"
        elif phase is MarketPhase.CLOSED_WEEKEND:
            label = "Market Closed - Weekend"
            next_event = self._next_open_text(now)
        else:
            label = "Market Closed"
            local = self.local_time(now)
            if local.hour * 60 + local.minute < market_config.PRE_MARKET_START:
                next_event = f"Pre-market starts at {format_minutes(market_config.PRE_MARKET_START)}"
            else:
                next_event = self._next_open_text(now)

        return PhaseDescription(
            phase=phase,
            label=label,
            next_boundary_description=next_event,
            status_color=_STATUS_COLORS[phase],
        )

    def current_description(self, now: Optional[datetime] = None) -> PhaseDescription:
        return self.describe_phase(self.phase(now), now)

    def _next_open_text(self, now: Optional[datetime]) -> str:
        next_open = self.next_open(now)
        return (f"Next open: {next_open.strftime('%a %b')} {next_open.day} "
                f"at {format_minutes(market_config.REGULAR_OPEN)}")
