from datetime import date
from typing import Optional
import logging
import math

from src.analyzers.history import summarize_history
from src.data.errors import InvalidPercentage
from src.data.models import Quote

logger = logging.getLogger(__name__)


def validate_percentage(percentage, upper: float) -> float:
    """Return ``percentage`` as a float in ``(0, upper]`` or raise InvalidPercentage."""
    message = f"Please enter a percentage greater than 0 and at most {upper:g}"
    try:
        value = float(percentage)
    except (TypeError, ValueError):
        raise InvalidPercentage(message)
    if not math.isfinite(value) or value <= 0 or value > upper:
        raise InvalidPercentage(message)
    return value


def format_currency(amount: Optional[float]) -> str:
    """Format a number as US dollars, e.g. ``$1,234.50`` or ``-$3.20``."""
    if amount is None:
        return "N/A"
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_interval(seconds: float) -> str:
    """Format a refresh interval, e.g. ``5 minutes`` or ``1 hour``."""
    if seconds < 60:
        return f"{seconds:g} second{'' if seconds == 1 else 's'}"
    minutes = seconds / 60
    if minutes < 60:
        return f"{minutes:g} minute{'' if minutes == 1 else 's'}"
    hours = minutes / 60
    return f"{hours:g} hour{'' if hours == 1 else 's'}"


def format_volume(volume: Optional[float]) -> str:
    """Format share volume with K/M suffixes."""
    if volume is None or volume != volume:
        return "N/A"

    if volume >= 1_000_000:
        return f"{volume / 1_000_000:.1f}M"
    elif volume >= 1_000:
        return f"{volume / 1_000:.1f}K"
    return str(int(volume))


def format_earnings(earnings_date: Optional[date], days_to_earnings: Optional[int]) -> str:
    """Format an earnings date with a relative-day hint."""
    if earnings_date is None or days_to_earnings is None:
        return "Unknown"

    formatted = f"{earnings_date.strftime('%b')} {earnings_date.day}, {earnings_date.year}"
    if days_to_earnings < 0:
        return f"{formatted} ({abs(days_to_earnings)} days ago)"
    if days_to_earnings == 0:
        return f"{formatted} (Today!)"
    if days_to_earnings == 1:
        return f"{formatted} (Tomorrow)"
    return f"{formatted} ({days_to_earnings} days)"


def get_quote_summary(quote: Quote) -> str:
    """Generate a human-readable summary of a quote.

    Args:
        quote: The quote to summarize

    Returns:
        Formatted summary string
    """
    change_sign = "+" if quote.daily_change >= 0 else ""
    summary = f"{quote.ticker} - {quote.name} ({quote.sector})\n"
    summary += f"Price: {format_currency(quote.current_price)} "
    summary += f"({change_sign}{format_currency(quote.daily_change)}, "
    summary += f"{change_sign}{quote.daily_change_percent:.2f}%)\n\n"

    summary += "📊 RANGES:\n"
    summary += f"• Day: {format_currency(quote.day_range_low)} - {format_currency(quote.day_range_high)}\n"
    summary += f"• 52-week: {format_currency(quote.week_low_52)} - {format_currency(quote.week_high_52)}\n"

    summary += "\n📈 FUNDAMENTALS:\n"
    summary += f"• Volume: {format_volume(quote.volume)}\n"
    summary += f"• Market cap: {quote.market_cap}\n"
    if quote.pe_ratio is not None:
        summary += f"• P/E: {quote.pe_ratio:.1f}\n"
    else:
        summary += "• P/E: N/A\n"
    summary += f"• Analyst target: {format_currency(quote.target_price)}\n"
    summary += f"• Earnings: {format_earnings(quote.earnings_date, quote.days_to_earnings)}\n"

    stats = summarize_history(quote.price_history)
    if stats is not None:
        trend = "up" if stats['change_percent'] > 0 else "down"
        summary += f"\n{len(quote.price_history)}-day trend: {trend} {stats['change_percent']:+.1f}% "
        summary += f"from {format_currency(stats['start_price'])} ({stats['start_date']}) "
        summary += f"to {format_currency(stats['end_price'])} ({stats['end_date']})\n"
        summary += f"• Range: {format_currency(stats['low'])} - {format_currency(stats['high'])}, "
        summary += f"avg {format_currency(stats['average_price'])}\n"
        summary += f"• Avg volume: {format_volume(stats['average_volume'])}, "
        summary += f"daily volatility {stats['volatility']:.2f}%\n"

    return summary


def provenance_label(quote: Optional[Quote]) -> str:
    """Data framing shown next to the price: live, demo, offline or sample."""
    if quote is None:
        return "none"
    if quote.is_live_data:
        return "live"
    if quote.is_demo_ticker:
        return "demo"
    if quote.is_known_ticker:
        return "offline"
    return "sample"
