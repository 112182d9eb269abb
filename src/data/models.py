from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Tuple
from pydantic import BaseModel


class MarketPhase(str, Enum):
    """Trading-session phase of the exchange."""
    OPEN = "open"
    PRE_MARKET = "pre-market"
    AFTER_HOURS = "after-hours"
    CLOSED_WEEKDAY = "closed-weekday"
    CLOSED_WEEKEND = "closed-weekend"

    @property
    def is_extended(self) -> bool:
        return self in (MarketPhase.PRE_MARKET, MarketPhase.AFTER_HOURS)

    @property
    def is_closed(self) -> bool:
        return self in (MarketPhase.CLOSED_WEEKDAY, MarketPhase.CLOSED_WEEKEND)


class Direction(str, Enum):
    RISE = "rise"
    DROP = "drop"

    @property
    def past_tense(self) -> str:
        return "risen" if self is Direction.RISE else "dropped"

    def apply(self, price: float, percentage: float) -> float:
        """Move ``price`` by ``percentage`` percent in this direction."""
        if self is Direction.DROP:
            return price * (1 - percentage / 100)
        return price * (1 + percentage / 100)


class PhaseDescription(BaseModel):
    """Display framing for a market phase."""
    phase: MarketPhase
    label: str
    next_boundary_description: str
    status_color: str


# Core quote data models
class PricePoint(BaseModel):
    """One daily point of the price history series."""
    date: str
    price: float
    volume: int


class Quote(BaseModel):
    """Authoritative snapshot for the active ticker."""
    ticker: str
    name: str
    sector: str
    current_price: float
    daily_change: float
    daily_change_percent: float
    week_high_52: float
    week_low_52: float
    day_range_low: float
    day_range_high: float
    volume: float
    price_history: Tuple[PricePoint, ...]
    earnings_date: Optional[date] = None
    days_to_earnings: Optional[int] = None
    market_cap: str = "N/A"
    pe_ratio: Optional[float] = None
    target_price: Optional[float] = None
    is_live_data: bool = False
    is_known_ticker: bool = False
    is_demo_ticker: bool = False
    data_timestamp: Optional[str] = None
    fetched_at: Optional[datetime] = None

    @property
    def base_price(self) -> float:
        """Price before today's cumulative change."""
        return self.current_price - self.daily_change

    def with_price(self, new_price: float, is_live_data: Optional[bool] = None) -> "Quote":
        """Return a copy moved to ``new_price``; history and ranges are kept.

        Daily change is recomputed against :attr:`base_price`.
        """
        base = self.base_price
        update = {
            "current_price": new_price,
            "daily_change": new_price - base,
            "daily_change_percent": (new_price - base) / base * 100 if base else 0.0,
        }
        if is_live_data is not None:
            update["is_live_data"] = is_live_data
        return self.model_copy(update=update)


class AlertRule(BaseModel):
    """User-defined threshold alert bound to a symbol and a base price."""
    id: int
    symbol: str
    direction: Direction
    percentage: float
    base_price: float
    target_price: float
    created_at: datetime

    def is_triggered(self, current_price: float) -> bool:
        if self.direction is Direction.DROP:
            return current_price <= self.target_price
        return current_price >= self.target_price

    def describe(self) -> str:
        return (f"{self.symbol}: Alert me if price {self.direction.value}s by "
                f"{self.percentage:g}% (target: ${self.target_price:,.2f})")


class Projection(BaseModel):
    """Projected price for a percentage move."""
    current_price: float
    percentage: float
    direction: Direction
    projected_price: float
    delta: float


class RenderPayload(BaseModel):
    """Everything the rendering collaborator needs for one repaint."""
    quote: Optional[Quote] = None
    phase: PhaseDescription
    provenance: str
    projection: Optional[Projection] = None
    alerts: List[AlertRule] = []
    message: Optional[str] = None
    refresh_enabled: bool = False
    effective_interval_seconds: Optional[int] = None
