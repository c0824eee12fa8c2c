#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Configuration module: centralize all environment variables and defaults.
Supports easy overrides without modifying code.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env
load_dotenv()

# ========== DATA FILE PATHS ==========
PACKAGE_DIR = Path(__file__).parent.parent.resolve()
DATA_DIR = PACKAGE_DIR / "data"

TICKER_CSV_PATH = os.getenv("TICKER_CSV", str(DATA_DIR / "tickers.csv"))

# ========== VALUATION DEFAULTS ==========
# Absolute tolerance used when comparing live assumptions against the baseline
DRIFT_TOLERANCE = float(os.getenv("DRIFT_TOLERANCE", "1e-4"))

# Price shown when no ticker has been selected yet
FALLBACK_PRICE = float(os.getenv("FALLBACK_PRICE", "150.0"))

# Pseudo-price band for tickers without a quoted price: [FLOOR, FLOOR + SPAN)
PSEUDO_PRICE_FLOOR = 100.0
PSEUDO_PRICE_SPAN = 150

# Horizon used by the sensitivity grid when the caller does not pass one
SENSITIVITY_HORIZON_YEARS = int(os.getenv("SENSITIVITY_HORIZON_YEARS", "5"))

# Search results
POPULAR_TICKER_COUNT = int(os.getenv("POPULAR_TICKER_COUNT", "10"))
MAX_SEARCH_RESULTS = int(os.getenv("MAX_SEARCH_RESULTS", "20"))

# ========== LOGGING CONFIGURATION ==========
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "%(asctime)s [%(levelname)s] %(name)s: %(message)s")

# ========== API CONFIGURATION ==========
API_HOST = os.getenv("API_HOST", "127.0.0.1")
API_PORT = int(os.getenv("API_PORT", "8000"))
API_RELOAD = os.getenv("API_RELOAD", "False").lower() == "true"

# ========== TICKER CATALOG SCHEMA ==========
REQUIRED_COLUMNS = [
    "symbol", "name", "sector", "industry", "market_cap_tier",
    "business_model", "blurb", "current_price",
]

if __name__ == "__main__":
    print("=" * 60)
    print("Configuration Summary")
    print("=" * 60)
    print(f"Ticker CSV: {TICKER_CSV_PATH}")
    print(f"Drift tolerance: {DRIFT_TOLERANCE}")
    print(f"Fallback price: {FALLBACK_PRICE}")
    print(f"Sensitivity horizon: {SENSITIVITY_HORIZON_YEARS}y")
    print(f"Log Level: {LOG_LEVEL}")
    print(f"API: {API_HOST}:{API_PORT}")
    print("=" * 60)
