import logging
from datetime import datetime, timezone
from itertools import count
from typing import List, Optional

from config.settings import market_config
from src.analyzers.utils import validate_percentage
from src.data.errors import NoActiveQuote
from src.data.models import AlertRule, Direction, Quote
from src.integrations.notifier import LogNotifier, Notifier

logger = logging.getLogger(__name__)


class AlertEvaluator:
    """Holds threshold rules and fires each one at most once."""

    def __init__(self, notifier: Notifier = None):
        self.notifier = notifier or LogNotifier()
        self._rules: List[AlertRule] = []
        self._ids = count(1)

    @property
    def rules(self) -> List[AlertRule]:
        return list(self._rules)

    def rules_for(self, symbol: str) -> List[AlertRule]:
        return [rule for rule in self._rules if rule.symbol == symbol]

    def create_rule(self, quote: Optional[Quote], direction, percentage,
                    now: datetime = None) -> AlertRule:
        """Create a rule against the active quote's ticker and price."""
        percentage = validate_percentage(percentage, market_config.MAX_ALERT_PERCENTAGE)
        if quote is None:
            raise NoActiveQuote()

        direction = Direction(direction)
        rule = AlertRule(
            id=next(self._ids),
            symbol=quote.ticker,
            direction=direction,
            percentage=percentage,
            base_price=quote.current_price,
            target_price=direction.apply(quote.current_price, percentage),
            created_at=now or datetime.now(timezone.utc),
        )
        self._rules.append(rule)
        logger.info(f"Alert set: {rule.describe()}")
        return rule

    def remove_rule(self, rule_id: int) -> bool:
        before = len(self._rules)
        self._rules = [rule for rule in self._rules if rule.id != rule_id]
        return len(self._rules) != before

    async def evaluate(self, current_price: float, symbol: str) -> List[AlertRule]:
        """Fire and remove every rule for ``symbol`` satisfied by ``current_price``.

        Rules for other symbols stay dormant.
        """
        if not current_price or not self._rules:
            return []

        fired = [rule for rule in self.rules_for(symbol) if rule.is_triggered(current_price)]
        if not fired:
            return []

        fired_ids = {rule.id for rule in fired}
        self._rules = [rule for rule in self._rules if rule.id not in fired_ids]

        for rule in fired:
            message = (f"{rule.symbol} has {rule.direction.past_tense} by {rule.percentage:g}%! "
                       f"Current price: ${current_price:,.2f}")
            logger.info(f"Alert triggered: {rule.describe()}")
            try:
                await self.notifier.notify("Price Alert!", message)
            except Exception as e:
                logger.error(f"Failed to deliver alert notification: {e}")

        return fired
