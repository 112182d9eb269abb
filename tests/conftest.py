import pytest
import sys
from datetime import datetime, timezone
from pathlib import Path

import numpy as np

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from config.settings import Settings
from src.generators.synthetic_quote import SyntheticQuoteGenerator


# Pytest configuration
def pytest_configure(config):
    """Configure pytest markers and other settings."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test"
    )
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )


@pytest.fixture
def fixed_now():
    """A Tuesday, mid-session in New York."""
    return datetime(2025, 9, 16, 15, 0, tzinfo=timezone.utc)


@pytest.fixture
def test_settings(tmp_path):
    """Settings isolated from any local .env file."""
    return Settings(
        _env_file=None,
        search_timeout_seconds=0.2,
        refresh_timeout_seconds=0.2,
        refresh_interval_seconds=60,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'state.db'}",
        error_display_seconds=0.05,
        log_file="",
    )


@pytest.fixture
def make_quote(fixed_now):
    """Factory for synthetic quotes with a seeded generator."""
    generator = SyntheticQuoteGenerator(rng=np.random.default_rng(7))

    def _make(ticker: str = "DEMO", price: float = None, is_live_data: bool = False):
        quote = generator.generate(ticker, fixed_now)
        if price is not None:
            quote = quote.with_price(price)
        if is_live_data:
            quote = quote.model_copy(update={"is_live_data": True})
        return quote

    return _make
