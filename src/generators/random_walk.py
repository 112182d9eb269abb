import logging
from typing import Optional

import numpy as np

from src.data.models import MarketPhase, Quote

logger = logging.getLogger(__name__)

# phase -> (activation probability, max fractional move)
VOLATILITY_PROFILES = {
    MarketPhase.OPEN: (0.8, 0.03),
    MarketPhase.PRE_MARKET: (0.4, 0.015),
    MarketPhase.AFTER_HOURS: (0.4, 0.015),
    MarketPhase.CLOSED_WEEKDAY: (0.1, 0.005),
    MarketPhase.CLOSED_WEEKEND: (0.1, 0.005),
}


class RandomWalkUpdater:
    """Nudges a synthetic quote's price between refresh ticks.

    Only price and daily change move; history and ranges stay put.
    """

    def __init__(self, rng: np.random.Generator = None):
        self.rng = rng if rng is not None else np.random.default_rng()

    def step(self, quote: Quote, phase: MarketPhase) -> Optional[Quote]:
        """Return the moved quote, or ``None`` when this tick is quiet."""
        probability, max_move = VOLATILITY_PROFILES[phase]

        if self.rng.random() >= probability:
            logger.debug(f"No price change - market {phase.value}, low activity")
            return None

        move = self.rng.uniform(-max_move, max_move)
        new_price = quote.current_price * (1 + move)
        logger.info(f"Simulated update for {quote.ticker}: ${new_price:.2f} "
                    f"({move * 100:+.2f}%) [{phase.value}]")
        return quote.with_price(new_price)
