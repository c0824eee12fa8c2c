#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Ticker repository: catalog loading, symbol lookup/search and default revenue
driver templates keyed by business model and sector.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import pandas as pd

from ..utils import (
    get_logger, TICKER_CSV_PATH, REQUIRED_COLUMNS, POPULAR_TICKER_COUNT, MAX_SEARCH_RESULTS,
)
from ..dcf.models import BusinessModelTag, DCFTicker, MarketCapTier, RevenueDriver, UnitType

logger = get_logger(__name__)

# (title, subtitle, unit, value, min, max, step)
DriverTemplate = Tuple[str, str, UnitType, float, float, float, float]

P = UnitType.PERCENT

SUBSCRIPTION_DRIVERS: Sequence[DriverTemplate] = (
    ("Customer Growth", "Year-over-year subscriber additions", P, 15.0, -5.0, 40.0, 1.0),
    ("ARPU Growth", "Average revenue per user expansion", P, 8.0, -10.0, 25.0, 1.0),
    ("Net Revenue Retention", "Existing customer spend change", P, 110.0, 85.0, 140.0, 1.0),
)

FINANCIAL_TRANSACTIONAL_DRIVERS: Sequence[DriverTemplate] = (
    ("Transaction Volume", "Growth in number of transactions", P, 12.0, -10.0, 35.0, 1.0),
    ("Average Transaction Size", "Dollars per transaction growth", P, 5.0, -5.0, 20.0, 1.0),
    ("Take Rate", "Fee as % of transaction value", P, 2.5, 1.5, 4.0, 0.1),
)

TRANSACTIONAL_DRIVERS: Sequence[DriverTemplate] = (
    ("Volume Growth", "Units sold year-over-year", P, 8.0, -15.0, 30.0, 1.0),
    ("Pricing Power", "Price increases captured", P, 4.0, -5.0, 15.0, 0.5),
    ("New Channels", "Revenue from new distribution", P, 10.0, 0.0, 30.0, 1.0),
)

FINANCIAL_ASSET_HEAVY_DRIVERS: Sequence[DriverTemplate] = (
    ("Loan Growth", "Lending portfolio expansion", P, 6.0, -5.0, 20.0, 1.0),
    ("Net Interest Margin", "Spread on lending activities", P, 3.2, 2.0, 5.0, 0.1),
    ("Fee Income Growth", "Non-interest revenue expansion", P, 8.0, -5.0, 20.0, 1.0),
)

ASSET_HEAVY_DRIVERS: Sequence[DriverTemplate] = (
    ("Capacity Utilization", "Asset productivity improvement", P, 75.0, 50.0, 95.0, 1.0),
    ("Pricing Growth", "Rate per unit of capacity", P, 5.0, -10.0, 20.0, 1.0),
    ("Asset Base Growth", "New capacity coming online", P, 8.0, 0.0, 25.0, 1.0),
)

PLATFORM_DRIVERS: Sequence[DriverTemplate] = (
    ("Active Users", "Growth in active user base", P, 18.0, -5.0, 50.0, 1.0),
    ("Monetization Rate", "Revenue per active user", P, 12.0, -10.0, 35.0, 1.0),
    ("Network Effects", "Value multiplier from scale", UnitType.MULTIPLE, 1.15, 0.90, 1.40, 0.05),
)

ADVERTISING_DRIVERS: Sequence[DriverTemplate] = (
    ("Impressions Growth", "Ad inventory expansion", P, 14.0, -10.0, 40.0, 1.0),
    ("CPM Growth", "Cost per thousand impressions", P, 6.0, -15.0, 25.0, 1.0),
    ("Ad Load Increase", "More ads per user session", P, 8.0, 0.0, 20.0, 1.0),
)

GENERIC_DRIVERS: Sequence[DriverTemplate] = (
    ("Revenue Growth", "Year-over-year top-line growth", P, 10.0, -10.0, 40.0, 1.0),
    ("Market Share Gain", "Share of addressable market", P, 5.0, -5.0, 20.0, 1.0),
    ("Product Mix Shift", "Higher-value product adoption", P, 7.0, -10.0, 25.0, 1.0),
)


def load_ticker_frame(path: str = TICKER_CSV_PATH) -> pd.DataFrame:
    """
    Load the ticker catalog from CSV.
    Returns an empty DataFrame if the file is missing, unreadable or lacks
    required columns.
    """
    try:
        df = pd.read_csv(path, dtype={"symbol": str}, keep_default_na=False, na_values=[""])
    except FileNotFoundError:
        logger.error(f"Ticker CSV not found: {path}")
        return pd.DataFrame(columns=REQUIRED_COLUMNS)
    except Exception as e:
        logger.error(f"Failed to load ticker CSV: {e}")
        return pd.DataFrame(columns=REQUIRED_COLUMNS)

    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        logger.error(f"Ticker CSV missing columns: {missing}")
        return pd.DataFrame(columns=REQUIRED_COLUMNS)

    df["current_price"] = pd.to_numeric(df["current_price"], errors="coerce")
    logger.info(f"Loaded {len(df):,} tickers from CSV: {path}")
    return df


def _row_to_ticker(row: pd.Series) -> Optional[DCFTicker]:
    try:
        price = row["current_price"]
        return DCFTicker(
            symbol=str(row["symbol"]),
            name=str(row["name"]),
            sector=str(row["sector"]),
            industry=str(row["industry"]),
            market_cap_tier=MarketCapTier(row["market_cap_tier"]),
            business_model=BusinessModelTag(row["business_model"]),
            blurb=str(row["blurb"]) if pd.notna(row["blurb"]) else "",
            current_price=float(price) if pd.notna(price) else None,
        )
    except ValueError as e:
        logger.warning(f"Skipping ticker row {row.get('symbol')!r}: {e}")
        return None


class CatalogTickerRepository:
    """Catalog-backed TickerRepository."""

    def __init__(self, tickers: Optional[List[DCFTicker]] = None, path: str = TICKER_CSV_PATH):
        if tickers is None:
            frame = load_ticker_frame(path)
            tickers = [t for t in (_row_to_ticker(r) for _, r in frame.iterrows()) if t]
        self.all_tickers: List[DCFTicker] = list(tickers)

    @property
    def popular_tickers(self) -> List[DCFTicker]:
        return self.all_tickers[:POPULAR_TICKER_COUNT]

    def find_ticker(self, symbol: str) -> Optional[DCFTicker]:
        wanted = symbol.strip().upper()
        return next((t for t in self.all_tickers if t.symbol == wanted), None)

    def search(self, query: str) -> List[DCFTicker]:
        """
        Rank matches: exact symbol, symbol prefix, symbol substring, then
        case-insensitive name matches. Blank query returns the popular list.
        """
        trimmed = query.strip()
        if not trimmed:
            return self.popular_tickers

        upper = trimmed.upper()
        lower = trimmed.lower()
        exact, prefix, substring, by_name = [], [], [], []
        for t in self.all_tickers:
            if t.symbol == upper:
                exact.append(t)
            elif t.symbol.startswith(upper):
                prefix.append(t)
            elif upper in t.symbol:
                substring.append(t)
            elif lower in t.name.lower():
                by_name.append(t)

        return (exact + prefix + substring + by_name)[:MAX_SEARCH_RESULTS]

    def generate_default_revenue_drivers(
        self, business_model: BusinessModelTag, sector: str
    ) -> List[RevenueDriver]:
        templates = self._templates_for(business_model, sector)
        drivers = [
            RevenueDriver(
                title=title, subtitle=subtitle, unit=unit,
                value=value, min=lo, max=hi, step=step,
            )
            for title, subtitle, unit, value, lo, hi, step in templates
        ]
        logger.debug(
            f"Generated {len(drivers)} drivers for {business_model.value} / {sector}"
        )
        return drivers

    @staticmethod
    def _templates_for(business_model: BusinessModelTag, sector: str) -> Sequence[DriverTemplate]:
        financial = "Financial" in sector
        if business_model is BusinessModelTag.TRANSACTIONAL:
            return FINANCIAL_TRANSACTIONAL_DRIVERS if financial else TRANSACTIONAL_DRIVERS
        if business_model is BusinessModelTag.ASSET_HEAVY:
            return FINANCIAL_ASSET_HEAVY_DRIVERS if financial else ASSET_HEAVY_DRIVERS
        by_model: Dict[BusinessModelTag, Sequence[DriverTemplate]] = {
            BusinessModelTag.SUBSCRIPTION: SUBSCRIPTION_DRIVERS,
            BusinessModelTag.PLATFORM: PLATFORM_DRIVERS,
            BusinessModelTag.ADVERTISING: ADVERTISING_DRIVERS,
        }
        return by_model.get(business_model, GENERIC_DRIVERS)
