#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Multiple-based price forecast.

Projects revenue at a constant CAGR, applies an operating margin and tax rate,
values the business at revenue x exit multiple each year and converts to a
per-share implied price. Inputs here are decimals (0.08 = 8%).
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from ..utils import get_logger

logger = get_logger(__name__)

MIN_FORECAST_YEARS = 10
EPSILON = 1e-6


@dataclass(frozen=True)
class ForecastAssumptions:
    current_price: float = 100.0
    current_revenue: float = 1_000.0
    revenue_cagr: float = 0.08
    operating_margin: float = 0.22
    tax_rate: float = 0.21
    shares_outstanding: float = 1_000.0
    net_debt: float = 0.0
    exit_multiple: float = 4.0
    horizon_years: int = 5
    discount_rate: Optional[float] = None


@dataclass(frozen=True)
class ProjectionRow:
    year: int
    revenue: float
    operating_income: float
    after_tax_operating_income: float
    implied_enterprise_value: float
    implied_equity_value: float
    implied_price: float


@dataclass(frozen=True)
class ReturnSummary:
    horizon_years: int
    total_return: float
    annualized_return: float


@dataclass(frozen=True)
class ForecastResult:
    fair_value: float
    current_price: float
    upside_percent: float
    projections: List[ProjectionRow] = field(default_factory=list)
    returns_by_horizon: List[ReturnSummary] = field(default_factory=list)

    def projections_frame(self) -> pd.DataFrame:
        """Projection rows as a DataFrame indexed by year."""
        return pd.DataFrame([vars(r) for r in self.projections]).set_index("year")


class MultipleForecastEngine:
    """Default ForecastEngine."""

    def forecast(
        self, ticker: str, assumptions: ForecastAssumptions, horizons: Sequence[int]
    ) -> ForecastResult:
        max_year = max(MIN_FORECAST_YEARS, max(horizons, default=MIN_FORECAST_YEARS))
        shares = max(assumptions.shares_outstanding, EPSILON)
        current_price = max(assumptions.current_price, EPSILON)

        years = np.arange(0, max_year + 1)
        revenue = assumptions.current_revenue * np.power(1.0 + assumptions.revenue_cagr, years)
        operating_income = revenue * assumptions.operating_margin
        after_tax = operating_income * (1.0 - assumptions.tax_rate)
        enterprise_value = revenue * assumptions.exit_multiple
        equity_value = enterprise_value - assumptions.net_debt
        implied_price = equity_value / shares

        projections = [
            ProjectionRow(
                year=int(y),
                revenue=float(rev),
                operating_income=float(oi),
                after_tax_operating_income=float(at),
                implied_enterprise_value=float(ev),
                implied_equity_value=float(eq),
                implied_price=float(px),
            )
            for y, rev, oi, at, ev, eq, px in zip(
                years, revenue, operating_income, after_tax,
                enterprise_value, equity_value, implied_price,
            )
        ]

        returns = []
        for horizon in sorted(horizons):
            row = projections[horizon] if 0 <= horizon < len(projections) else projections[-1]
            price = max(row.implied_price, 0.0)
            returns.append(ReturnSummary(
                horizon_years=horizon,
                total_return=price / current_price - 1.0,
                annualized_return=(price / current_price) ** (1.0 / max(horizon, 1)) - 1.0,
            ))

        fair_value = projections[-1].implied_price
        logger.debug(
            f"Forecast {ticker}: fair value {fair_value:.2f} over {max_year}y "
            f"vs price {assumptions.current_price:.2f}"
        )
        return ForecastResult(
            fair_value=fair_value,
            current_price=assumptions.current_price,
            upside_percent=fair_value / current_price - 1.0,
            projections=projections,
            returns_by_horizon=returns,
        )
