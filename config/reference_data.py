"""
Offline Stock Reference Configuration

Static snapshot used to build plausible quotes when live data is unavailable.
Tickers listed here are served from this table without any network call.
Last updated: September 2025
"""

DATA_TIMESTAMP = "2025-09-14T12:00:00Z"

STOCK_REFERENCE = {
    # Demo tickers
    "DEMO": {"base_price": 165.50, "name": "Demo Corporation", "sector": "Technology"},
    "TEST": {"base_price": 89.25, "name": "Test Industries", "sector": "Financial"},
    "SAMPLE": {"base_price": 234.75, "name": "Sample Corp", "sector": "Healthcare"},

    # Major tech stocks
    "AAPL": {
        "base_price": 234.07,
        "name": "Apple Inc.",
        "sector": "Technology",
        "week_high_52": 260.10,
        "week_low_52": 169.21,
        "earnings_date": "2025-10-30",
        "market_cap": "3.6T",
        "pe_ratio": 28.5,
        "target_price": 275.0,
        "avg_volume": "58.5M",
    },
    "GOOGL": {
        "base_price": 240.80,
        "name": "Alphabet Inc.",
        "sector": "Technology",
        "week_high_52": 242.25,
        "week_low_52": 140.53,
        "earnings_date": "2025-10-23",
        "market_cap": "2.1T",
        "pe_ratio": 23.8,
        "target_price": 280.0,
        "avg_volume": "34.2M",
    },
    "MSFT": {
        "base_price": 509.90,
        "name": "Microsoft Corporation",
        "sector": "Technology",
        "week_high_52": 555.45,
        "week_low_52": 344.79,
        "earnings_date": "2025-10-29",
        "market_cap": "3.1T",
        "pe_ratio": 31.2,
        "target_price": 580.0,
        "avg_volume": "28.7M",
    },
    "TSLA": {
        "base_price": 395.94,
        "name": "Tesla Inc.",
        "sector": "Consumer Cyclical",
        "week_high_52": 488.54,
        "week_low_52": 212.11,
        "earnings_date": "2025-10-22",
        "market_cap": "1.3T",
        "pe_ratio": 65.4,
        "target_price": 420.0,
        "avg_volume": "89.3M",
    },
    "AMZN": {"base_price": 228.15, "name": "Amazon.com Inc.", "sector": "Consumer Cyclical",
             "week_high_52": 242.52, "week_low_52": 161.38, "earnings_date": "2025-10-30"},
    "NVDA": {"base_price": 177.82, "name": "NVIDIA Corporation", "sector": "Technology",
             "week_high_52": 184.48, "week_low_52": 86.62, "earnings_date": "2025-11-19"},
    "META": {"base_price": 755.59, "name": "Meta Platforms Inc.", "sector": "Technology",
             "week_high_52": 755.59, "week_low_52": 455.72, "earnings_date": "2025-10-25"},
    "NFLX": {"base_price": 1188.44, "name": "Netflix Inc.", "sector": "Communication Services",
             "week_high_52": 1188.44, "week_low_52": 865.23, "earnings_date": "2025-10-17"},

    # ETFs
    "SPY": {"base_price": 435.20, "name": "SPDR S&P 500 ETF", "sector": "ETF"},
    "QQQ": {"base_price": 365.80, "name": "Invesco QQQ ETF", "sector": "ETF"},

    # Financial
    "BRK.B": {"base_price": 342.50, "name": "Berkshire Hathaway Inc.", "sector": "Financial"},
    "JPM": {"base_price": 145.75, "name": "JPMorgan Chase & Co.", "sector": "Financial",
            "earnings_date": "2025-10-11"},
    "V": {"base_price": 245.30, "name": "Visa Inc.", "sector": "Financial", "earnings_date": "2025-10-24"},
    "MA": {"base_price": 415.60, "name": "Mastercard Inc.", "sector": "Financial"},

    # Healthcare & Consumer
    "JNJ": {"base_price": 160.25, "name": "Johnson & Johnson", "sector": "Healthcare",
            "earnings_date": "2025-10-16"},
    "PG": {"base_price": 155.40, "name": "Procter & Gamble Co.", "sector": "Consumer Defensive"},
    "UNH": {"base_price": 485.90, "name": "UnitedHealth Group Inc.", "sector": "Healthcare",
            "earnings_date": "2025-10-17"},
    "HD": {"base_price": 325.15, "name": "Home Depot Inc.", "sector": "Consumer Cyclical"},

    # Entertainment
    "DIS": {"base_price": 95.50, "name": "Walt Disney Co.", "sector": "Communication Services"},
    "DISNEY": {"base_price": 95.50, "name": "Walt Disney Co.", "sector": "Communication Services"},

    # Beverages
    "KO": {"base_price": 58.75, "name": "Coca-Cola Co.", "sector": "Consumer Defensive"},
    "COCA": {"base_price": 58.75, "name": "Coca-Cola Co.", "sector": "Consumer Defensive"},

    # Retail
    "WMT": {"base_price": 155.80, "name": "Walmart Inc.", "sector": "Consumer Defensive"},
    "WALMART": {"base_price": 155.80, "name": "Walmart Inc.", "sector": "Consumer Defensive"},

    # Apparel
    "NKE": {"base_price": 105.25, "name": "Nike Inc.", "sector": "Consumer Cyclical"},
    "NIKE": {"base_price": 105.25, "name": "Nike Inc.", "sector": "Consumer Cyclical"},

    # Fintech/Crypto
    "COIN": {"base_price": 185.40, "name": "Coinbase Global Inc.", "sector": "Financial"},
    "SQ": {"base_price": 65.25, "name": "Block Inc.", "sector": "Technology"},
    "PYPL": {"base_price": 78.90, "name": "PayPal Holdings Inc.", "sector": "Financial"},
    "MSTR": {"base_price": 1245.75, "name": "MicroStrategy Inc.", "sector": "Technology"},

    # Meme stocks
    "GME": {"base_price": 18.50, "name": "GameStop Corp.", "sector": "Consumer Cyclical"},
    "AMC": {"base_price": 5.25, "name": "AMC Entertainment Holdings", "sector": "Communication Services"},
    "BB": {"base_price": 3.45, "name": "BlackBerry Ltd.", "sector": "Technology"},
    "NOK": {"base_price": 4.15, "name": "Nokia Corporation", "sector": "Technology"},

    # Mining & Resources
    "CCJ": {"base_price": 78.11, "name": "Cameco Corporation", "sector": "Energy"},
    "FCX": {"base_price": 42.30, "name": "Freeport-McMoRan Inc.", "sector": "Basic Materials"},
    "NEM": {"base_price": 38.75, "name": "Newmont Corporation", "sector": "Basic Materials"},
}

# Tickers served offline without attempting a network fetch
KNOWN_TICKERS = frozenset(STOCK_REFERENCE)
