"""Flow-scoped valuation state: reducers, drift detection and change tracking."""

from .state import (
    FlowState, select_ticker, set_lens, set_operating, set_valuation, set_driver_value,
    save_base_snapshot, save_operating_snapshot, save_valuation_snapshot,
    reset_operating_to_defaults, generate_revenue_drivers, apply_preset,
    apply_operating_preset, current_inputs, base_inputs, apply_scenario,
    revert_revenue_drivers_to_base, revert_operating_to_base, revert_valuation_to_base,
    revert_all_to_base, toggle_watchlist, is_in_watchlist, reset, reset_all_to_defaults,
)
from .drift import (
    is_revenue_driver_drifted, is_any_revenue_driver_drifted, is_operating_drifted,
    is_valuation_drifted, has_any_drift,
)
from .changes import revenue_changes, operating_changes, valuation_changes, all_changes
from .session import FlowSession

__all__ = [
    "FlowState", "select_ticker", "set_lens", "set_operating", "set_valuation",
    "set_driver_value", "save_base_snapshot", "save_operating_snapshot",
    "save_valuation_snapshot", "reset_operating_to_defaults", "generate_revenue_drivers",
    "apply_preset", "apply_operating_preset", "current_inputs", "base_inputs",
    "apply_scenario", "revert_revenue_drivers_to_base", "revert_operating_to_base",
    "revert_valuation_to_base", "revert_all_to_base", "toggle_watchlist",
    "is_in_watchlist", "reset", "reset_all_to_defaults",
    "is_revenue_driver_drifted", "is_any_revenue_driver_drifted", "is_operating_drifted",
    "is_valuation_drifted", "has_any_drift",
    "revenue_changes", "operating_changes", "valuation_changes", "all_changes",
    "FlowSession",
]
