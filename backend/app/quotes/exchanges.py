"""Exchange tables and user-facing messages for quote resolution."""

# US exchanges
US_MAJOR_EXCHANGES: frozenset[str] = frozenset({"NASDAQ", "NYSE", "AMEX"})

# Indian exchanges allow longer symbols (up to 10 characters)
INDIAN_EXCHANGES: frozenset[str] = frozenset({"NSE", "BSE", "MCX", "NCDEX", "ICEX"})

# Every exchange prefix accepted by the ticker parser
RECOGNIZED_EXCHANGES: frozenset[str] = frozenset(
    {
        # US
        "NASDAQ",
        "NYSE",
        "AMEX",
        # UK/Europe
        "LSE",
        "LON",
        "FRA",
        "AMS",
        "SWX",
        "BME",
        "BIT",
        "OSE",
        "XETRA",
        "EURONEXT",
        # Asia Pacific
        "TSE",
        "ASX",
        "TSX",
        "HKEX",
        "TYO",
        # India
        "BSE",
        "NSE",
        "MCX",
        "NCDEX",
        "ICEX",
        # China
        "SSE",
        "SZSE",
    }
)

# Exchanges the international providers can quote. A bare symbol also routes here.
INTERNATIONAL_ROUTE_EXCHANGES: frozenset[str] = frozenset(
    {
        "NASDAQ",
        "NYSE",
        "AMEX",
        "LSE",
        "LON",
        "FRA",
        "XETRA",
        "EURONEXT",
        "TYO",
        "TSE",
        "HKEX",
        "ASX",
        "TSX",
    }
)

# Symbol suffixes used by Alpha Vantage and Yahoo for Indian listings
INDIAN_MARKET_SUFFIXES: dict[str, str] = {"NSE": ".NS", "BSE": ".BO"}

INDIAN_SYMBOL_PATTERN = r"^[A-Z]{1,10}$"
DEFAULT_SYMBOL_PATTERN = r"^[A-Z]{1,5}$"

# Seconds a resolved quote (or failure) stays valid
QUOTE_CACHE_TTL = 5 * 60
# Seconds a rate-limited failure stays cached before the keyed provider is retried
RATE_LIMITED_CACHE_TTL = 60
# Seconds screener fundamentals stay valid
FUNDAMENTALS_CACHE_TTL = 24 * 60 * 60

MSG_INVALID_FORMAT = "Invalid ticker format. Use formats like 'AAPL' or 'NASDAQ:AAPL'."
MSG_NOT_FOUND = "Stock ticker not found. Please check the symbol and try again."
MSG_RATE_LIMITED = "API rate limit reached. Please try again later."
MSG_FETCH_FAILED = "Failed to fetch stock price"
