"""
Shared constants for the option scanner.

This module centralizes default values used by configuration loading, the
gateway client and the result logger.
"""

# =============================================================================
# Gateway Defaults
# =============================================================================

DEFAULT_GATEWAY_HOST = "localhost"
DEFAULT_GATEWAY_PORT = 5000
DEFAULT_REQUEST_TIMEOUT = 30
"""Per-request timeout in seconds."""

LAST_PRICE_FIELD = "31"
"""Market data snapshot field id for the last traded price."""


# =============================================================================
# Scan Defaults
# =============================================================================

DEFAULT_SCAN_INTERVAL = 300
"""Seconds to wait between scan cycles."""

DEFAULT_MIN_PROFIT_PERCENT = 2.0
DEFAULT_STRIKE_COUNT = 20
"""Strikes requested on each side of at-the-money."""

DEFAULT_SYMBOLS = ("AAPL", "MSFT", "GOOGL")


# =============================================================================
# Output Defaults
# =============================================================================

DEFAULT_LOG_FILE_PATH = "./logs/scanner.log"
DEFAULT_OPTIONS_LOG_DIR = "./logs/options/"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

CSV_COLUMNS = (
    "timestamp",
    "symbol",
    "option_type",
    "type_emoji",
    "expiration",
    "strike",
    "option_price",
    "stock_price",
    "profit_percent",
    "volume",
    "implied_volatility",
    "contract_id",
)
