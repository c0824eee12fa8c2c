#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Change tracking: before/after rows for every drifted field.

Pure functions of the state; calling them repeatedly yields equal lists.
"""

from typing import List

from ..utils import DRIFT_TOLERANCE, format_percent
from ..dcf.models import ChangeItem
from .drift import drifted_operating_fields, drifted_valuation_fields, is_revenue_driver_drifted
from .state import FlowState


def revenue_changes(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> List[ChangeItem]:
    changes = []
    for driver in state.revenue_drivers:
        if is_revenue_driver_drifted(state, driver.id, tolerance):
            base_value = state.snapshot.drivers[driver.id]
            changes.append(ChangeItem(
                label=driver.title,
                base_value=driver.unit.format(base_value),
                current_value=driver.unit.format(driver.value),
            ))
    return changes


def operating_changes(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> List[ChangeItem]:
    current, base = state.operating, state.snapshot.operating
    return [
        ChangeItem(
            label=label,
            base_value=format_percent(getattr(base, name)),
            current_value=format_percent(getattr(current, name)),
        )
        for name, label in drifted_operating_fields(current, base, tolerance).items()
    ]


def valuation_changes(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> List[ChangeItem]:
    current, base = state.valuation, state.snapshot.valuation
    changes = []
    for name, label in drifted_valuation_fields(current, base, tolerance).items():
        if name == "terminal_method":
            changes.append(ChangeItem(
                label=label,
                base_value=base.terminal_method.value,
                current_value=current.terminal_method.value,
            ))
        else:
            changes.append(ChangeItem(
                label=label,
                base_value=format_percent(getattr(base, name)),
                current_value=format_percent(getattr(current, name)),
            ))
    return changes


def all_changes(state: FlowState, tolerance: float = DRIFT_TOLERANCE) -> List[ChangeItem]:
    return (
        revenue_changes(state, tolerance)
        + operating_changes(state, tolerance)
        + valuation_changes(state, tolerance)
    )
