import logging
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """Application settings and configuration."""

    # Quote API Configuration
    quote_base_url: str = Field(default="https://query1.finance.yahoo.com/v8/finance/chart")
    # Optional CORS-style proxy; the chart URL is passed as its ``url`` parameter
    quote_proxy_url: Optional[str] = Field(default=None)
    search_timeout_seconds: float = Field(default=3.0)
    refresh_timeout_seconds: float = Field(default=5.0)

    # Refresh Configuration
    refresh_interval_seconds: int = Field(default=300)
    # Falls back to refresh_interval_seconds when unset
    freshness_window_seconds: Optional[float] = Field(default=None)
    exchange_timezone: str = Field(default="America/New_York")

    # Database Configuration
    database_url: str = Field(default="sqlite+aiosqlite:///stock_tracker.db")

    # Alert Configuration
    alert_webhook_url: Optional[str] = Field(default=None)
    error_display_seconds: float = Field(default=5.0)

    # Logging
    log_level: str = Field(default="INFO")
    log_file: str = Field(default="stock_tracker.log")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def freshness_window(self) -> float:
        """Seconds a live quote stays live after the last successful fetch."""
        if self.freshness_window_seconds is not None:
            return self.freshness_window_seconds
        return float(self.refresh_interval_seconds)


# Global settings instance
settings = Settings()


# Market-specific configurations
class MarketConfig:
    """Market session and simulation constants."""

    # Session boundaries, minutes since local midnight
    PRE_MARKET_START = 4 * 60
    REGULAR_OPEN = 9 * 60 + 30
    REGULAR_CLOSE = 16 * 60
    AFTER_HOURS_END = 20 * 60

    # Reserved demo tickers
    DEMO_TICKERS = ("DEMO", "TEST", "SAMPLE")

    # Percentage limits
    MAX_ALERT_PERCENTAGE = 50.0
    MAX_PROJECTION_PERCENTAGE = 100.0

    # Polling floors, seconds
    OPEN_MIN_INTERVAL = 30
    EXTENDED_MIN_INTERVAL = 120
    CLOSED_MIN_INTERVAL = 300
    WEEKEND_INTERVAL = 600

    # Synthetic data
    HISTORY_DAYS = 30
    MAX_DAILY_CHANGE = 0.04
    MAX_HISTORY_STEP = 0.03
    DAY_RANGE_VOLATILITY = 0.03

    # Persistence keys
    LAST_LIVE_UPDATE_KEY = "last_live_update"
    LAST_LIVE_TICKER_KEY = "last_live_ticker"


# Initialize market config
market_config = MarketConfig()


def configure_logging(config: Settings = settings) -> None:
    """Set up root logging from settings."""
    handlers = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
