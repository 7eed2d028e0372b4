"""
Market-data constants and default configuration values.

Values are organized by category for easy maintenance and auditing.
"""

from typing import Final


# =============================================================================
# Exchange REST Endpoints
# =============================================================================

BINANCE_REST_URL: Final[str] = "https://api.binance.com/api/v3"
MEXC_REST_URL: Final[str] = "https://api.mexc.com/api/v3"
BITGET_REST_URL: Final[str] = "https://api.bitget.com/api/v2/spot/market"
BYBIT_REST_URL: Final[str] = "https://api.bybit.com/v5/market"

# Binance-style endpoints (also served by MEXC)
ENDPOINT_TICKER_PRICE: Final[str] = "/ticker/price"
ENDPOINT_TICKER_24H: Final[str] = "/ticker/24hr"
ENDPOINT_DEPTH: Final[str] = "/depth"

# Bitget endpoints
BITGET_ENDPOINT_TICKERS: Final[str] = "/tickers"
BITGET_ENDPOINT_ORDERBOOK: Final[str] = "/orderbook"
BITGET_SUCCESS_CODE: Final[str] = "00000"

# Bybit endpoints
BYBIT_ENDPOINT_TICKERS: Final[str] = "/tickers"
BYBIT_ENDPOINT_ORDERBOOK: Final[str] = "/orderbook"
BYBIT_CATEGORY: Final[str] = "spot"
BYBIT_SUCCESS_CODE: Final[int] = 0


# =============================================================================
# Tracked Markets
# =============================================================================

DEFAULT_BASE_ASSET: Final[str] = "VANA"

DEFAULT_MARKETS: Final[dict[str, tuple[str, ...]]] = {
    "binance": ("VANAUSDT", "VANAUSDC", "VANAFDUSD"),
    "mexc": ("VANAUSDT",),
    "bitget": ("VANAUSDT",),
    "bybit": ("VANAUSDT",),
}

# Quote assets recognised when splitting a symbol into base/quote
DEFAULT_QUOTE_ASSETS: Final[tuple[str, ...]] = (
    "USDT",
    "USDC",
    "FDUSD",
    "BTC",
    "ETH",
    "BNB",
)


# =============================================================================
# Order Book & Liquidity
# =============================================================================

# Levels requested per side from depth endpoints
DEFAULT_DEPTH_LIMIT: Final[int] = 20

# Depth band around the mid-price (±2%)
DEFAULT_BAND_PERCENT: Final[float] = 0.02

# Band depth below this USD notional is flagged as low liquidity
DEFAULT_LOW_LIQUIDITY_THRESHOLD_USD: Final[float] = 60_000.0


# =============================================================================
# Trading Fees
# =============================================================================

# Default spot taker fee (0.1%), charged once per leg
DEFAULT_TAKER_FEE: Final[float] = 0.001

# Threshold used by the filtered dashboard view (0.25%)
FILTERED_VIEW_MIN_NET: Final[float] = 0.0025


# =============================================================================
# Network
# =============================================================================

DEFAULT_REQUEST_TIMEOUT: Final[float] = 10.0  # seconds
DEFAULT_CYCLE_TIMEOUT: Final[float] = 30.0  # seconds
DEFAULT_REFRESH_INTERVAL: Final[float] = 15.0  # seconds

HTTP_TOO_MANY_REQUESTS: Final[int] = 429

CONNECTOR_LIMIT: Final[int] = 100
CONNECTOR_LIMIT_PER_HOST: Final[int] = 20
KEEPALIVE_TIMEOUT: Final[float] = 30.0  # seconds


# =============================================================================
# Logging & Telemetry
# =============================================================================

LOG_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Maximum log queue size
MAX_LOG_QUEUE_SIZE: Final[int] = 10_000
