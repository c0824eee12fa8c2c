#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Drift detection: compare live assumptions with the baseline snapshot.

Numeric fields drift when they differ by more than ``tolerance``; the terminal
method drifts on any difference. A driver missing from the baseline (or from
the live list) never counts as drifted.
"""

from typing import Dict, Tuple

from ..utils import DRIFT_TOLERANCE
from ..dcf.models import OperatingAssumptions, ValuationAssumptions
from .state import FlowState

OPERATING_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("gross_margin", "Gross Margin"),
    ("operating_margin", "Operating Margin"),
    ("tax_rate", "Tax Rate"),
    ("capex_percent", "CapEx %"),
    ("working_capital_percent", "Working Capital %"),
)

VALUATION_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("discount_rate", "Discount Rate"),
    ("terminal_growth", "Terminal Growth"),
)


def differs(current: float, base: float, tolerance: float = DRIFT_TOLERANCE) -> bool:
    return abs(current - base) > tolerance


def is_revenue_driver_drifted(
    state: FlowState, driver_id: str, tolerance: float = DRIFT_TOLERANCE
) -> bool:
    base_value = state.snapshot.drivers.get(driver_id)
    driver = state.driver(driver_id)
    if base_value is None or driver is None:
        return False
    return differs(driver.value, base_value, tolerance)


def is_any_revenue_driver_drifted(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> bool:
    return any(
        is_revenue_driver_drifted(state, d.id, tolerance) for d in state.revenue_drivers
    )


def drifted_operating_fields(
    current: OperatingAssumptions, base: OperatingAssumptions, tolerance: float = DRIFT_TOLERANCE
) -> Dict[str, str]:
    """Attribute name -> display label for each drifted operating field, in display order."""
    return {
        name: label
        for name, label in OPERATING_FIELDS
        if differs(getattr(current, name), getattr(base, name), tolerance)
    }


def drifted_valuation_fields(
    current: ValuationAssumptions, base: ValuationAssumptions, tolerance: float = DRIFT_TOLERANCE
) -> Dict[str, str]:
    fields = {
        name: label
        for name, label in VALUATION_FIELDS
        if differs(getattr(current, name), getattr(base, name), tolerance)
    }
    if current.terminal_method != base.terminal_method:
        fields["terminal_method"] = "Terminal Method"
    return fields


def is_operating_drifted(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> bool:
    return bool(drifted_operating_fields(state.operating, state.snapshot.operating, tolerance))


def is_valuation_drifted(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> bool:
    return bool(drifted_valuation_fields(state.valuation, state.snapshot.valuation, tolerance))


def has_any_drift(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> bool:
    return (
        is_any_revenue_driver_drifted(state, tolerance)
        or is_operating_drifted(state, tolerance)
        or is_valuation_drifted(state, tolerance)
    )
