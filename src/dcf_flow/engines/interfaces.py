#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Contracts for the collaborators the flow engine calls out to.

Any object with matching methods satisfies these protocols, so tests can pass
light stubs in place of the built-in implementations.
"""

from typing import List, Protocol, Sequence, TYPE_CHECKING

from ..dcf import logic
from ..dcf.models import BusinessModelTag, DCFInputs, RevenueDriver, ScenarioPreset

if TYPE_CHECKING:
    from .forecast import ForecastAssumptions, ForecastResult
    from .sensitivity import SensitivityResult


class TickerRepository(Protocol):
    def generate_default_revenue_drivers(
        self, business_model: BusinessModelTag, sector: str
    ) -> List[RevenueDriver]:
        """Default driver set for a business model / sector pair.

        Not guaranteed to be idempotent: callers must not rely on repeat calls
        returning identical ids or values.
        """
        ...


class ForecastEngine(Protocol):
    def forecast(
        self, ticker: str, assumptions: "ForecastAssumptions", horizons: Sequence[int]
    ) -> "ForecastResult":
        ...


class SensitivityEngine(Protocol):
    def analyze(
        self, assumptions: "ForecastAssumptions", horizon_years: int = ...
    ) -> "SensitivityResult":
        ...


class DCFEngine(Protocol):
    def scenario_inputs(self, base: DCFInputs, preset: ScenarioPreset) -> DCFInputs:
        ...


class BuiltinDCFEngine:
    """DCFEngine backed by ``dcf.logic.scenario_inputs``."""

    def scenario_inputs(self, base: DCFInputs, preset: ScenarioPreset) -> DCFInputs:
        return logic.scenario_inputs(base, preset)
