import pytest
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock

import numpy as np

from src.data.errors import InvalidTicker
from src.data.models import MarketPhase
from src.generators.random_walk import RandomWalkUpdater
from src.generators.synthetic_quote import (
    SyntheticQuoteGenerator,
    days_until,
    has_offline_data,
    is_demo_ticker,
    normalize_ticker,
    parse_volume,
)


class TestSyntheticQuoteGenerator:
    """Test suite for offline quote generation."""

    @pytest.fixture
    def generator(self):
        return SyntheticQuoteGenerator(rng=np.random.default_rng(42))

    @pytest.fixture
    def now(self):
        return datetime(2025, 9, 14, 12, 0, tzinfo=timezone.utc)

    def test_day_range_always_contains_current_price(self, generator, now):
        """Check the day-range invariant over many random tickers."""
        tickers = ["AAPL", "DEMO", "GME", "XYZ", "QWERTY", "BB"] + [f"T{i}" for i in range(200)]

        for ticker in tickers:
            quote = generator.generate(ticker, now)
            assert quote.day_range_low <= quote.current_price <= quote.day_range_high

    def test_known_ticker_uses_reference_data(self, generator, now):
        quote = generator.generate("aapl", now)

        assert quote.ticker == "AAPL"
        assert quote.name == "Apple Inc."
        assert quote.sector == "Technology"
        assert quote.week_high_52 == 260.10
        assert quote.week_low_52 == 169.21
        assert quote.earnings_date == date(2025, 10, 30)
        assert quote.market_cap == "3.6T"
        assert quote.is_known_ticker is True
        assert quote.is_live_data is False
        assert 58_500_000 * 0.7 <= quote.volume <= 58_500_000 * 1.3

    def test_known_ticker_price_within_daily_band(self, generator, now):
        quote = generator.generate("AAPL", now)

        assert 234.07 * 0.96 <= quote.current_price <= 234.07 * 1.04
        assert quote.base_price == pytest.approx(234.07)

    def test_unknown_ticker_is_synthesized(self, generator, now):
        quote = generator.generate("XYZ", now)

        assert quote.name == "XYZ Corporation"
        assert quote.sector == "Unknown"
        assert quote.is_known_ticker is False
        assert quote.market_cap == "N/A"
        assert 50 * 0.96 <= quote.current_price <= 250 * 1.04
        assert quote.week_low_52 < quote.base_price < quote.week_high_52
        assert 5_000_000 <= quote.volume <= 55_000_000

    def test_daily_change_percent_relation(self, generator, now):
        quote = generator.generate("XYZ", now)

        expected = quote.daily_change / (quote.current_price - quote.daily_change) * 100
        assert quote.daily_change_percent == pytest.approx(expected)

    def test_price_history_is_thirty_ascending_days(self, generator, now):
        quote = generator.generate("TSLA", now)
        dates = [point.date for point in quote.price_history]

        assert len(quote.price_history) == 30
        assert dates == sorted(dates)
        assert dates[-1] == now.date().isoformat()
        assert dates[0] == (now.date() - timedelta(days=29)).isoformat()
        assert all(point.price > 0 for point in quote.price_history)

    def test_earnings_days_from_reference(self, generator, now):
        """2025-10-30 midnight UTC is 45.5 days after noon on 2025-09-14."""
        quote = generator.generate("AAPL", now)
        assert quote.days_to_earnings == 46

    def test_synthesized_earnings_date_in_window(self, generator, now):
        quote = generator.generate("XYZ", now)

        assert 14 <= quote.days_to_earnings <= 104
        assert quote.earnings_date == now.date() + timedelta(days=quote.days_to_earnings)

    def test_anchored_on_live_price(self, generator, now):
        quote = generator.generate("XYZ", now, current_price=123.45)

        assert quote.current_price == 123.45
        assert quote.day_range_low <= 123.45 <= quote.day_range_high
        assert quote.name == "XYZ Corporation"

    def test_demo_ticker_flag(self, generator, now):
        assert generator.generate("demo", now).is_demo_ticker is True
        assert generator.generate("AAPL", now).is_demo_ticker is False

    def test_empty_ticker_rejected(self, generator, now):
        with pytest.raises(InvalidTicker):
            generator.generate("   ", now)


class TestTickerHelpers:
    """Test suite for ticker and volume helpers."""

    def test_normalize_ticker(self):
        assert normalize_ticker("  msft ") == "MSFT"
        with pytest.raises(InvalidTicker):
            normalize_ticker("")
        with pytest.raises(InvalidTicker):
            normalize_ticker(None)

    def test_demo_and_offline_membership(self):
        assert is_demo_ticker("sample") is True
        assert is_demo_ticker("AAPL") is False
        assert has_offline_data("brk.b") is True
        assert has_offline_data("XYZ") is False

    def test_parse_volume(self):
        assert parse_volume("58.5M") == 58_500_000
        assert parse_volume("250K") == 250_000
        assert parse_volume(1200) == 1200.0
        assert parse_volume(None) is None
        assert parse_volume("lots") is None

    def test_days_until_rounds_up(self):
        now = datetime(2025, 9, 14, 12, 0, tzinfo=timezone.utc)

        assert days_until(date(2025, 9, 15), now) == 1
        assert days_until(date(2025, 9, 14), now) == 0
        assert days_until(date(2025, 9, 10), now) == -4


class TestRandomWalkUpdater:
    """Test suite for phase-dependent price nudges."""

    def make_rng(self, draw: float, move: float):
        rng = MagicMock()
        rng.random.return_value = draw
        rng.uniform.return_value = move
        return rng

    def test_failed_activation_is_noop(self, make_quote):
        quote = make_quote("DEMO", price=100.0)
        walker = RandomWalkUpdater(rng=self.make_rng(draw=0.85, move=0.02))

        assert walker.step(quote, MarketPhase.OPEN) is None

    def test_open_move_updates_price_and_change(self, make_quote):
        quote = make_quote("DEMO", price=100.0)
        walker = RandomWalkUpdater(rng=self.make_rng(draw=0.5, move=0.02))

        updated = walker.step(quote, MarketPhase.OPEN)

        assert updated.current_price == pytest.approx(102.0)
        assert updated.base_price == pytest.approx(quote.base_price)
        assert updated.daily_change == pytest.approx(102.0 - quote.base_price)
        assert updated.daily_change_percent == pytest.approx(
            (102.0 - quote.base_price) / quote.base_price * 100)

    def test_history_and_ranges_are_untouched(self, make_quote):
        quote = make_quote("DEMO", price=100.0)
        walker = RandomWalkUpdater(rng=self.make_rng(draw=0.0, move=-0.01))

        updated = walker.step(quote, MarketPhase.AFTER_HOURS)

        assert updated.price_history == quote.price_history
        assert updated.week_high_52 == quote.week_high_52
        assert updated.day_range_low == quote.day_range_low
        assert quote.current_price == 100.0

    @pytest.mark.parametrize("phase, probability, max_move", [
        (MarketPhase.OPEN, 0.8, 0.03),
        (MarketPhase.PRE_MARKET, 0.4, 0.015),
        (MarketPhase.AFTER_HOURS, 0.4, 0.015),
        (MarketPhase.CLOSED_WEEKDAY, 0.1, 0.005),
        (MarketPhase.CLOSED_WEEKEND, 0.1, 0.005),
    ])
    def test_profiles_by_phase(self, make_quote, phase, probability, max_move):
        quote = make_quote("DEMO", price=100.0)

        quiet = RandomWalkUpdater(rng=self.make_rng(draw=probability, move=0.0))
        assert quiet.step(quote, phase) is None

        rng = self.make_rng(draw=probability - 0.01, move=0.0)
        RandomWalkUpdater(rng=rng).step(quote, phase)
        rng.uniform.assert_called_once_with(-max_move, max_move)

    def test_moves_stay_within_bounds(self, make_quote):
        quote = make_quote("DEMO", price=100.0)
        walker = RandomWalkUpdater(rng=np.random.default_rng(3))

        for _ in range(200):
            updated = walker.step(quote, MarketPhase.OPEN)
            if updated is not None:
                assert 97.0 <= updated.current_price <= 103.0
