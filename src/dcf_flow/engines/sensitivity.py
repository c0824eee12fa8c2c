#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Sensitivity grid: annualized return across revenue CAGR x exit multiple.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

import numpy as np
import pandas as pd

from ..utils import get_logger, SENSITIVITY_HORIZON_YEARS
from .forecast import ForecastAssumptions, MultipleForecastEngine
from .interfaces import ForecastEngine

logger = get_logger(__name__)

CAGR_OFFSETS = np.array([-0.02, -0.01, 0.0, 0.01, 0.02])
MULTIPLE_OFFSETS = np.array([-2.0, -1.0, 0.0, 1.0, 2.0])
MIN_EXIT_MULTIPLE = 0.1


@dataclass(frozen=True)
class SensitivityResult:
    """``grid[i][j]`` is the return for ``cagr_values[i]`` and ``multiple_values[j]``."""
    grid: List[List[float]] = field(default_factory=list)
    cagr_values: List[float] = field(default_factory=list)
    multiple_values: List[float] = field(default_factory=list)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            self.grid,
            index=pd.Index(self.cagr_values, name="revenue_cagr"),
            columns=pd.Index(self.multiple_values, name="exit_multiple"),
        )


class GridSensitivityEngine:
    """Default SensitivityEngine; reruns a forecast engine for every cell."""

    def __init__(self, forecast_engine: Optional[ForecastEngine] = None):
        self.forecast_engine = forecast_engine or MultipleForecastEngine()

    def analyze(
        self, assumptions: ForecastAssumptions, horizon_years: int = SENSITIVITY_HORIZON_YEARS
    ) -> SensitivityResult:
        cagr_values = (assumptions.revenue_cagr + CAGR_OFFSETS).tolist()
        multiple_values = (assumptions.exit_multiple + MULTIPLE_OFFSETS).tolist()

        grid = []
        for cagr in cagr_values:
            row = []
            for multiple in multiple_values:
                cell = replace(
                    assumptions,
                    revenue_cagr=cagr,
                    exit_multiple=max(multiple, MIN_EXIT_MULTIPLE),
                    horizon_years=horizon_years,
                )
                result = self.forecast_engine.forecast("SENSE", cell, [horizon_years])
                returns = result.returns_by_horizon
                row.append(returns[0].annualized_return if returns else 0.0)
            grid.append(row)

        logger.info(
            f"Sensitivity grid {len(cagr_values)}x{len(multiple_values)} at {horizon_years}y: "
            f"range {float(np.min(grid)):.2%} .. {float(np.max(grid)):.2%}"
        )
        return SensitivityResult(
            grid=grid, cagr_values=cagr_values, multiple_values=multiple_values
        )
