"""
Price Projection Module

Pure helpers for "what if the price moves by N%" calculations.
"""

import logging

from config.settings import market_config
from src.data.errors import NoActiveQuote
from src.data.models import Direction, Projection
from src.analyzers.utils import validate_percentage

logger = logging.getLogger(__name__)


def project(current_price: float, percentage: float, direction) -> Projection:
    """Project ``current_price`` by ``percentage`` percent.

    Args:
        current_price: Price of the active quote
        percentage: Size of the move, in (0, 100]
        direction: ``rise`` or ``drop``

    Returns:
        Projection with the projected price and its delta from the current price

    Raises:
        InvalidPercentage: if percentage is outside (0, 100]
        NoActiveQuote: if there is no positive current price
    """
    if not current_price or current_price <= 0:
        raise NoActiveQuote("Please enter a stock ticker first to calculate projections")

    percentage = validate_percentage(percentage, market_config.MAX_PROJECTION_PERCENTAGE)
    direction = Direction(direction)

    projected_price = direction.apply(current_price, percentage)
    delta = projected_price - current_price

    logger.debug(f"Projection calculated: {direction.value} {percentage}% = "
                 f"${projected_price:.2f} ({delta:+.2f})")

    return Projection(
        current_price=current_price,
        percentage=percentage,
        direction=direction,
        projected_price=projected_price,
        delta=delta,
    )
