from config.settings import market_config
from src.data.models import MarketPhase


def effective_interval(phase: MarketPhase, base_seconds: int) -> int:
    """Refresh interval for ``phase`` given the user's base interval.

    Polling slows as the market moves away from regular trading: each phase
    has a floor, and the base interval is scaled up outside regular hours.
    Weekends always poll every ten minutes.
    """
    if phase is MarketPhase.OPEN:
        return max(market_config.OPEN_MIN_INTERVAL, base_seconds)
    if phase.is_extended:
        return max(market_config.EXTENDED_MIN_INTERVAL, base_seconds * 2)
    if phase is MarketPhase.CLOSED_WEEKDAY:
        return max(market_config.CLOSED_MIN_INTERVAL, base_seconds * 4)
    return market_config.WEEKEND_INTERVAL
