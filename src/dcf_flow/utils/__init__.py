"""Configuration, logging and display helpers."""

from .config import (
    TICKER_CSV_PATH, DRIFT_TOLERANCE, FALLBACK_PRICE, PSEUDO_PRICE_FLOOR,
    PSEUDO_PRICE_SPAN, SENSITIVITY_HORIZON_YEARS, POPULAR_TICKER_COUNT,
    MAX_SEARCH_RESULTS, REQUIRED_COLUMNS, LOG_LEVEL, LOG_FORMAT,
    API_HOST, API_PORT, API_RELOAD,
)
from .logger import get_logger
from .formatters import (
    format_percent, format_multiple, format_currency, format_number, format_price,
)

__all__ = [
    "TICKER_CSV_PATH", "DRIFT_TOLERANCE", "FALLBACK_PRICE", "PSEUDO_PRICE_FLOOR",
    "PSEUDO_PRICE_SPAN", "SENSITIVITY_HORIZON_YEARS", "POPULAR_TICKER_COUNT",
    "MAX_SEARCH_RESULTS", "REQUIRED_COLUMNS", "LOG_LEVEL", "LOG_FORMAT",
    "API_HOST", "API_PORT", "API_RELOAD", "get_logger",
    "format_percent", "format_multiple", "format_currency", "format_number",
    "format_price",
]
