#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FlowSession: the mutable holder of a ``FlowState`` for one UI flow.

Each mutating method swaps ``self.state`` for the reducer's result, so readers
always see a consistent value. Not thread-safe; one session belongs to one UI
event loop. ``generate_revenue_drivers`` is the only call that leaves the
engine, and overlapping calls must be serialized by the caller.
"""

from typing import Callable, List, Optional

from ..utils import get_logger, format_price
from ..dcf.models import (
    ChangeItem, DCFInputs, DCFTicker, InvestmentLens, OperatingAssumptions,
    PresetScenario, ScenarioPreset, ValuationAssumptions,
)
from ..engines.interfaces import DCFEngine, TickerRepository
from . import changes as change_tracker, drift, state as reducers
from .state import FlowState

logger = get_logger(__name__)


class FlowSession:
    def __init__(
        self,
        repository: TickerRepository,
        dcf_engine: Optional[DCFEngine] = None,
        state: Optional[FlowState] = None,
    ):
        self.repository = repository
        self.dcf_engine = dcf_engine
        self.state = state or FlowState()

    def dispatch(self, reducer: Callable[..., FlowState], *args, **kwargs) -> FlowState:
        self.state = reducer(self.state, *args, **kwargs)
        return self.state

    # ----- ticker & inputs -----

    def select_ticker(self, ticker: DCFTicker, generate_drivers: bool = True) -> FlowState:
        """Start a valuation for ``ticker``; by default loads its default drivers too."""
        logger.info(
            f"Selected {ticker.symbol} ({ticker.name}) at {format_price(ticker.current_price)}"
        )
        self.dispatch(reducers.select_ticker, ticker)
        if generate_drivers:
            self.generate_revenue_drivers()
        return self.state

    def generate_revenue_drivers(self) -> FlowState:
        return self.dispatch(reducers.generate_revenue_drivers, self.repository)

    def set_lens(self, lens: InvestmentLens) -> FlowState:
        return self.dispatch(reducers.set_lens, lens)

    def set_driver_value(self, driver_id: str, value: float) -> FlowState:
        return self.dispatch(reducers.set_driver_value, driver_id, value)

    def set_operating(self, operating: OperatingAssumptions) -> FlowState:
        return self.dispatch(reducers.set_operating, operating)

    def set_valuation(self, valuation: ValuationAssumptions) -> FlowState:
        return self.dispatch(reducers.set_valuation, valuation)

    # ----- presets & snapshots -----

    def apply_preset(self, preset: PresetScenario) -> FlowState:
        return self.dispatch(reducers.apply_preset, preset)

    def apply_operating_preset(self, preset: PresetScenario) -> FlowState:
        return self.dispatch(reducers.apply_operating_preset, preset)

    def apply_scenario(self, preset: ScenarioPreset) -> FlowState:
        return self.dispatch(reducers.apply_scenario, preset, self.dcf_engine)

    def save_base_snapshot(self) -> FlowState:
        return self.dispatch(reducers.save_base_snapshot)

    def save_operating_snapshot(self) -> FlowState:
        return self.dispatch(reducers.save_operating_snapshot)

    def save_valuation_snapshot(self) -> FlowState:
        return self.dispatch(reducers.save_valuation_snapshot)

    def reset_operating_to_defaults(self) -> FlowState:
        return self.dispatch(reducers.reset_operating_to_defaults)

    def revert_all_to_base(self) -> FlowState:
        return self.dispatch(reducers.revert_all_to_base)

    def current_inputs(self) -> DCFInputs:
        return reducers.current_inputs(self.state)

    def base_inputs(self) -> DCFInputs:
        return reducers.base_inputs(self.state)

    # ----- drift & changes -----

    def has_any_drift(self) -> bool:
        return drift.has_any_drift(self.state)

    def changes(self) -> List[ChangeItem]:
        return change_tracker.all_changes(self.state)

    # ----- watchlist & lifecycle -----

    def toggle_watchlist(self, symbol: str) -> FlowState:
        return self.dispatch(reducers.toggle_watchlist, symbol)

    def reset(self) -> FlowState:
        return self.dispatch(reducers.reset)

    def reset_all_to_defaults(self) -> FlowState:
        return self.dispatch(reducers.reset_all_to_defaults)
