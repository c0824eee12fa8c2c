#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Flow state for one in-progress valuation session, and the reducers that move
it forward.

``FlowState`` is an immutable value. Every operation below is a pure function
``(state, ...) -> state``; the caller (see ``session.FlowSession``) owns the
single mutable cell that holds the current value.

Baseline snapshot lifecycle:
  - drivers: captured when drivers are generated for a ticker, and whenever
    Consensus is applied or ``save_base_snapshot`` is called
  - operating: captured on driver generation, ``save_operating_snapshot`` and
    ``reset_operating_to_defaults``
  - valuation: captured by ``save_valuation_snapshot``
  - ``apply_scenario(BASE)`` re-captures all three; ``reset`` clears all three
"""

from dataclasses import dataclass, field, replace
from typing import FrozenSet, Optional, Tuple

from ..utils import get_logger
from ..dcf import logic
from ..dcf.models import (
    BEAR_OPERATING, BULL_OPERATING, BaselineSnapshot, DCFInputs, DCFTicker,
    InvestmentLens, OperatingAssumptions, PresetScenario, RevenueDriver,
    ScenarioPreset, ValuationAssumptions,
)
from ..engines.interfaces import BuiltinDCFEngine, DCFEngine, TickerRepository

logger = get_logger(__name__)

BEAR_QUARTILE = 0.25
BULL_QUARTILE = 0.75


@dataclass(frozen=True)
class FlowState:
    ticker: Optional[DCFTicker] = None
    lens: InvestmentLens = field(default_factory=InvestmentLens)
    revenue_drivers: Tuple[RevenueDriver, ...] = ()
    operating: OperatingAssumptions = field(default_factory=OperatingAssumptions)
    valuation: ValuationAssumptions = field(default_factory=ValuationAssumptions)
    snapshot: BaselineSnapshot = field(default_factory=BaselineSnapshot)
    watchlist: FrozenSet[str] = frozenset()

    # ----- derived values, recomputed on every read -----

    @property
    def derived_top_line_revenue(self) -> float:
        return logic.revenue_index(self.revenue_drivers)

    @property
    def derived_free_cash_flow_index(self) -> float:
        return logic.fcf_index(self.derived_top_line_revenue, self.operating)

    @property
    def baseline_current_price(self) -> float:
        return logic.baseline_price(self.ticker)

    @property
    def derived_intrinsic_value(self) -> float:
        return logic.intrinsic_value(self.derived_free_cash_flow_index, self.valuation)

    @property
    def derived_upside_percent(self) -> float:
        return logic.upside_percent(self.derived_intrinsic_value, self.baseline_current_price)

    @property
    def derived_cagr(self) -> float:
        return logic.cagr_percent(
            self.derived_intrinsic_value, self.baseline_current_price, self.lens.horizon.years
        )

    def driver(self, driver_id: str) -> Optional[RevenueDriver]:
        return next((d for d in self.revenue_drivers if d.id == driver_id), None)


# ============================================================================
# Plain setters
# ============================================================================

def select_ticker(state: FlowState, ticker: Optional[DCFTicker]) -> FlowState:
    return replace(state, ticker=ticker)


def set_lens(state: FlowState, lens: InvestmentLens) -> FlowState:
    return replace(state, lens=lens)


def set_operating(state: FlowState, operating: OperatingAssumptions) -> FlowState:
    return replace(state, operating=operating)


def set_valuation(state: FlowState, valuation: ValuationAssumptions) -> FlowState:
    return replace(state, valuation=valuation)


def set_driver_value(state: FlowState, driver_id: str, value: float) -> FlowState:
    """Set one driver's value. Bounds are not enforced; unknown ids are a no-op."""
    if state.driver(driver_id) is None:
        logger.warning(f"set_driver_value: unknown driver id {driver_id}")
        return state
    drivers = tuple(
        d.with_value(value) if d.id == driver_id else d for d in state.revenue_drivers
    )
    return replace(state, revenue_drivers=drivers)


# ============================================================================
# Snapshots
# ============================================================================

def save_base_snapshot(state: FlowState) -> FlowState:
    drivers = {d.id: d.value for d in state.revenue_drivers}
    logger.debug(f"Driver baseline captured ({len(drivers)} drivers)")
    return replace(state, snapshot=replace(state.snapshot, drivers=drivers))


def save_operating_snapshot(state: FlowState) -> FlowState:
    return replace(state, snapshot=replace(state.snapshot, operating=state.operating))


def save_valuation_snapshot(state: FlowState) -> FlowState:
    return replace(state, snapshot=replace(state.snapshot, valuation=state.valuation))


def reset_operating_to_defaults(state: FlowState) -> FlowState:
    return save_operating_snapshot(replace(state, operating=OperatingAssumptions()))


# ============================================================================
# Driver generation
# ============================================================================

def generate_revenue_drivers(state: FlowState, repository: TickerRepository) -> FlowState:
    """
    Replace the drivers with the repository defaults for the selected ticker
    and capture the driver and operating baselines, so Base has a target from
    the first render. Without a ticker the state is returned unchanged.
    """
    ticker = state.ticker
    if ticker is None:
        logger.warning("generate_revenue_drivers called without a selected ticker")
        return state

    drivers = repository.generate_default_revenue_drivers(ticker.business_model, ticker.sector)
    logger.info(f"{ticker.symbol}: {len(drivers)} revenue drivers ({ticker.business_model.value})")

    state = replace(state, revenue_drivers=tuple(drivers))
    state = save_base_snapshot(state)
    return save_operating_snapshot(state)


# ============================================================================
# Preset application
# ============================================================================

def _at_position(driver: RevenueDriver, position: float) -> RevenueDriver:
    return driver.with_value(driver.min + (driver.max - driver.min) * position)


def _apply_consensus(state: FlowState) -> FlowState:
    drivers = tuple(d.with_value((d.min + d.max) / 2.0) for d in state.revenue_drivers)
    return save_base_snapshot(replace(state, revenue_drivers=drivers))


def _restore_base(state: FlowState) -> FlowState:
    baseline = state.snapshot.drivers
    if not baseline:
        logger.info("No driver baseline yet; applying Consensus instead of Base")
        return _apply_consensus(state)
    drivers = tuple(
        d.with_value(baseline[d.id]) if d.id in baseline else d
        for d in state.revenue_drivers
    )
    return replace(state, revenue_drivers=drivers)


def apply_preset(state: FlowState, preset: PresetScenario) -> FlowState:
    """
    Rewrite every driver value for a preset; ids and bounds are kept.

    Consensus -> range midpoint, and becomes the new driver baseline
    Bear      -> lower quartile of the range
    Bull      -> upper quartile of the range
    Base      -> values from the driver baseline (Consensus if none exists)
    """
    logger.info(f"Applying {preset.display_name} preset to {len(state.revenue_drivers)} drivers")
    if preset is PresetScenario.CONSENSUS:
        return _apply_consensus(state)
    if preset is PresetScenario.BASE:
        return _restore_base(state)
    position = BEAR_QUARTILE if preset is PresetScenario.BEAR else BULL_QUARTILE
    drivers = tuple(_at_position(d, position) for d in state.revenue_drivers)
    return replace(state, revenue_drivers=drivers)


def apply_operating_preset(state: FlowState, preset: PresetScenario) -> FlowState:
    """Bear/Bull load fixed assumption sets; Consensus/Base restore the operating baseline."""
    if preset is PresetScenario.BEAR:
        operating = BEAR_OPERATING
    elif preset is PresetScenario.BULL:
        operating = BULL_OPERATING
    else:
        operating = state.snapshot.operating
    return replace(state, operating=operating)


# ============================================================================
# Whole-bundle scenarios
# ============================================================================

def current_inputs(state: FlowState) -> DCFInputs:
    return DCFInputs(
        revenue_drivers=state.revenue_drivers,
        operating=state.operating,
        valuation=state.valuation,
        horizon_years=state.lens.horizon.years,
        current_price=state.baseline_current_price,
    )


def base_inputs(state: FlowState) -> DCFInputs:
    """Inputs rebuilt from the baseline snapshot (drivers without a baseline keep their live value)."""
    baseline = state.snapshot.drivers
    drivers = tuple(
        d.with_value(baseline[d.id]) if d.id in baseline else d
        for d in state.revenue_drivers
    )
    return DCFInputs(
        revenue_drivers=drivers,
        operating=state.snapshot.operating,
        valuation=state.snapshot.valuation,
        horizon_years=state.lens.horizon.years,
        current_price=state.baseline_current_price,
    )


def apply_scenario(
    state: FlowState, preset: ScenarioPreset, engine: Optional[DCFEngine] = None
) -> FlowState:
    """Run the DCF engine on the baseline inputs and write the result back to live state."""
    engine = engine or BuiltinDCFEngine()
    adjusted = engine.scenario_inputs(base_inputs(state), preset)

    state = replace(
        state,
        revenue_drivers=tuple(adjusted.revenue_drivers),
        operating=adjusted.operating,
        valuation=adjusted.valuation,
    )
    if preset is ScenarioPreset.BASE:
        state = save_valuation_snapshot(save_operating_snapshot(save_base_snapshot(state)))
    logger.info(f"Scenario '{preset.value}' applied")
    return state


# ============================================================================
# Revert
# ============================================================================

def revert_revenue_drivers_to_base(state: FlowState) -> FlowState:
    return _restore_base(state)


def revert_operating_to_base(state: FlowState) -> FlowState:
    return replace(state, operating=state.snapshot.operating)


def revert_valuation_to_base(state: FlowState) -> FlowState:
    return replace(state, valuation=state.snapshot.valuation)


def revert_all_to_base(state: FlowState) -> FlowState:
    state = revert_revenue_drivers_to_base(state)
    state = revert_operating_to_base(state)
    return revert_valuation_to_base(state)


# ============================================================================
# Watchlist & reset
# ============================================================================

def toggle_watchlist(state: FlowState, symbol: str) -> FlowState:
    return replace(state, watchlist=state.watchlist ^ {symbol})


def is_in_watchlist(state: FlowState, symbol: str) -> bool:
    return symbol in state.watchlist


def reset(state: FlowState) -> FlowState:
    """Abandon the session: clear ticker, lens, drivers and every baseline."""
    logger.info("Flow reset")
    return replace(
        state,
        ticker=None,
        lens=InvestmentLens(),
        revenue_drivers=(),
        snapshot=BaselineSnapshot(),
    )


def reset_all_to_defaults(state: FlowState) -> FlowState:
    logger.info("Flow reset to defaults (watchlist cleared)")
    return FlowState()
