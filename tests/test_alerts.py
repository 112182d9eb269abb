import pytest
from unittest.mock import AsyncMock

from src.data.errors import InvalidPercentage, NoActiveQuote
from src.data.models import Direction
from src.integrations.notifier import LogNotifier
from src.services.alerts import AlertEvaluator


class TestAlertEvaluator:
    """Test suite for fire-once threshold alerts."""

    @pytest.fixture
    def notifier(self):
        return LogNotifier()

    @pytest.fixture
    def evaluator(self, notifier):
        return AlertEvaluator(notifier)

    def test_drop_rule_target_price(self, evaluator, make_quote):
        quote = make_quote("DEMO", price=100.0)

        rule = evaluator.create_rule(quote, "drop", 10)

        assert rule.symbol == "DEMO"
        assert rule.direction == Direction.DROP
        assert rule.base_price == 100.0
        assert rule.target_price == pytest.approx(90.0)

    def test_rise_rule_target_price(self, evaluator, make_quote):
        rule = evaluator.create_rule(make_quote("DEMO", price=200.0), Direction.RISE, 5)

        assert rule.target_price == pytest.approx(210.0)

    def test_rule_ids_are_unique(self, evaluator, make_quote):
        quote = make_quote("DEMO", price=100.0)

        first = evaluator.create_rule(quote, "drop", 10)
        second = evaluator.create_rule(quote, "rise", 10)

        assert first.id != second.id

    @pytest.mark.asyncio
    async def test_fires_exactly_once(self, evaluator, notifier, make_quote):
        rule = evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", 10)

        fired = await evaluator.evaluate(90.0, "DEMO")
        again = await evaluator.evaluate(85.0, "DEMO")

        assert [r.id for r in fired] == [rule.id]
        assert again == []
        assert evaluator.rules == []
        assert notifier.sent == [("Price Alert!", "DEMO has dropped by 10%! Current price: $90.00")]

    @pytest.mark.asyncio
    async def test_rise_fires_at_or_above_target(self, evaluator, make_quote):
        evaluator.create_rule(make_quote("DEMO", price=100.0), "rise", 10)

        assert await evaluator.evaluate(109.0, "DEMO") == []
        assert len(await evaluator.evaluate(110.5, "DEMO")) == 1

    @pytest.mark.asyncio
    async def test_unsatisfied_rule_stays_active(self, evaluator, make_quote):
        evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", 10)

        assert await evaluator.evaluate(95.0, "DEMO") == []
        assert len(evaluator.rules) == 1

    @pytest.mark.asyncio
    async def test_other_symbols_stay_dormant(self, evaluator, make_quote):
        evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", 10)
        evaluator.create_rule(make_quote("TEST", price=100.0), "drop", 10)

        fired = await evaluator.evaluate(50.0, "TEST")

        assert [r.symbol for r in fired] == ["TEST"]
        assert [r.symbol for r in evaluator.rules] == ["DEMO"]

    @pytest.mark.asyncio
    async def test_notifier_failure_does_not_block(self, make_quote):
        notifier = AsyncMock()
        notifier.notify.side_effect = RuntimeError("delivery failed")
        evaluator = AlertEvaluator(notifier)
        evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", 10)

        fired = await evaluator.evaluate(80.0, "DEMO")

        assert len(fired) == 1
        assert evaluator.rules == []

    def test_remove_rule(self, evaluator, make_quote):
        rule = evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", 10)

        assert evaluator.remove_rule(rule.id) is True
        assert evaluator.remove_rule(rule.id) is False
        assert evaluator.rules == []

    @pytest.mark.parametrize("percentage", [0, -5, 50.01, 75, "abc", None, float("nan")])
    def test_invalid_percentage(self, evaluator, make_quote, percentage):
        with pytest.raises(InvalidPercentage):
            evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", percentage)

    def test_fifty_percent_is_allowed(self, evaluator, make_quote):
        rule = evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", "50")
        assert rule.target_price == pytest.approx(50.0)

    def test_requires_active_quote(self, evaluator):
        with pytest.raises(NoActiveQuote):
            evaluator.create_rule(None, "drop", 10)

    def test_describe(self, evaluator, make_quote):
        rule = evaluator.create_rule(make_quote("DEMO", price=100.0), "drop", 10)
        assert rule.describe() == "DEMO: Alert me if price drops by 10% (target: $90.00)"
