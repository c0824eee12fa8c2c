#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
DCF valuation engine: pure derivation functions for the setup flow.

Turns revenue drivers, operating and valuation assumptions into a revenue
index, FCF index, intrinsic value, upside and CAGR. The valuation shape is a
single blended present-value approximation (not a per-year cash-flow ladder):

    forecastPV = FCF * 1.2 * 0.9 / max(0.01, r)
    terminalPV = FCF * 1.2 * 0.6 / max(0.01, r - g)

Every function is total: degenerate inputs are clamped or replaced with a
neutral default instead of raising.
"""

import hashlib
import math
from dataclasses import replace
from typing import Iterable, List, Optional, Tuple

import numpy as np

from ..utils import get_logger, FALLBACK_PRICE, PSEUDO_PRICE_FLOOR, PSEUDO_PRICE_SPAN
from .models import (
    DCFInputs, DCFOutputs, DCFTicker, InvestmentStyle, OperatingAssumptions,
    RevenueDriver, ScenarioPreset, UnitType, ValuationAssumptions,
)

logger = get_logger(__name__)

# ===== Clamp bounds =====
REVENUE_INDEX_BASELINE = 100.0
REVENUE_INDEX_BOUNDS = (30.0, 300.0)
FCF_MARGIN_BOUNDS = (0.0, 0.35)
FCF_INDEX_BOUNDS = (0.0, 120.0)
INTRINSIC_BOUNDS = (20.0, 800.0)
CAGR_BOUNDS = (-50.0, 50.0)

BASE_SCALE = 1.2
FORECAST_WEIGHT = 0.9
TERMINAL_WEIGHT = 0.6
MIN_RATE = 0.01

# Terminal value share shown next to the valuation (fixed approximation)
TERMINAL_SHARE_PERCENT = 65.0

SPARKLINE_POINTS = 6


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp into [lower, upper]; NaN collapses to the lower bound."""
    if math.isnan(value):
        return lower
    return min(max(value, lower), upper)


# ============================================================================
# Driver Aggregator
# ============================================================================

def driver_multiplier(driver: RevenueDriver) -> float:
    """
    Per-driver revenue multiplier.

    percent  -> 1 + value/100
    multiple -> value
    number / currency -> value rescaled from [min, max] into [0.8, 1.2];
    an empty or inverted range is neutral (1.0).
    """
    if driver.unit is UnitType.PERCENT:
        return 1.0 + driver.value / 100.0
    if driver.unit is UnitType.MULTIPLE:
        return driver.value
    span = driver.max - driver.min
    if not span > 0:
        return 1.0
    normalized = (driver.value - driver.min) / span
    return 0.8 + normalized * 0.4


def revenue_index(drivers: Iterable[RevenueDriver]) -> float:
    """
    Fold revenue drivers into a revenue index anchored at 100.

    Drivers with ``impacts_revenue`` False are ignored. An empty list yields
    exactly 100.0; otherwise the result is clamped to [30, 300].
    """
    drivers = list(drivers)
    if not drivers:
        return REVENUE_INDEX_BASELINE

    total_multiplier = 1.0
    for driver in drivers:
        if driver.impacts_revenue:
            total_multiplier *= driver_multiplier(driver)

    return clamp(REVENUE_INDEX_BASELINE * total_multiplier, *REVENUE_INDEX_BOUNDS)


# ============================================================================
# Margin Estimator
# ============================================================================

def fcf_margin(operating: OperatingAssumptions) -> float:
    """After-tax operating margin less capex and working capital, as a decimal in [0, 0.35]."""
    raw = (
        operating.operating_margin * (1.0 - operating.tax_rate / 100.0)
        - operating.capex_percent
        - operating.working_capital_percent
    )
    return clamp(max(0.0, raw) / 100.0, *FCF_MARGIN_BOUNDS)


def fcf_index(rev_index: float, operating: OperatingAssumptions) -> float:
    return clamp(rev_index * fcf_margin(operating), *FCF_INDEX_BOUNDS)


# ============================================================================
# Valuation Projector
# ============================================================================

def intrinsic_value(fcf: float, valuation: ValuationAssumptions) -> float:
    """
    Blend forecast-period and terminal present values into an intrinsic value.

    The terminal factor only floors (r - g) at 1%; g >= r therefore yields a
    large but finite value that the [20, 800] clamp absorbs.
    """
    pv_factor = 1.0 / max(MIN_RATE, valuation.discount_rate / 100.0)
    terminal_factor = 1.0 / max(
        MIN_RATE, (valuation.discount_rate - valuation.terminal_growth) / 100.0
    )

    forecast_pv = fcf * BASE_SCALE * FORECAST_WEIGHT * pv_factor
    terminal_pv = fcf * BASE_SCALE * TERMINAL_WEIGHT * terminal_factor

    logger.debug(
        f"Intrinsic blend: forecastPV={forecast_pv:.4f}, terminalPV={terminal_pv:.4f}"
    )
    return clamp(forecast_pv + terminal_pv, *INTRINSIC_BOUNDS)


# ============================================================================
# Return Calculator
# ============================================================================

def pseudo_price(symbol: str) -> float:
    """
    Deterministic stand-in price in [100, 250) for tickers without a quote.

    Uses the first 8 bytes of SHA-256 over the upper-cased symbol so the value
    is identical across processes and interpreter versions.
    """
    digest = hashlib.sha256(symbol.upper().encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:8], "big") % PSEUDO_PRICE_SPAN
    return PSEUDO_PRICE_FLOOR + float(bucket)


def baseline_price(ticker: Optional[DCFTicker]) -> float:
    if ticker is None:
        return FALLBACK_PRICE
    if ticker.current_price is not None:
        return ticker.current_price
    return pseudo_price(ticker.symbol)


def upside_percent(intrinsic: float, current: float) -> float:
    if not current > 0:
        return 0.0
    return (intrinsic - current) / current * 100.0


def cagr_percent(intrinsic: float, current: float, years: float) -> float:
    if not (current > 0 and years > 0):
        return 0.0
    ratio = intrinsic / current
    if ratio <= 0:
        return CAGR_BOUNDS[0]
    cagr = (ratio ** (1.0 / years) - 1.0) * 100.0
    return clamp(cagr, *CAGR_BOUNDS)


# ============================================================================
# Pure evaluation over an input bundle
# ============================================================================

def evaluate_dcf(inputs: DCFInputs) -> DCFOutputs:
    """Evaluate the full chain for an input bundle without touching any state."""
    rev = revenue_index(inputs.revenue_drivers)
    margin = fcf_margin(inputs.operating)
    fcf = fcf_index(rev, inputs.operating)
    intrinsic = intrinsic_value(fcf, inputs.valuation)

    outputs = DCFOutputs(
        revenue_index=rev,
        fcf_margin=margin,
        fcf_index=fcf,
        intrinsic_value=intrinsic,
        upside_percent=upside_percent(intrinsic, inputs.current_price),
        cagr_percent=cagr_percent(intrinsic, inputs.current_price, inputs.horizon_years),
        terminal_share_percent=TERMINAL_SHARE_PERCENT,
    )
    logger.debug(
        f"DCF evaluated: revenue={rev:.2f}, fcf={fcf:.2f}, intrinsic={intrinsic:.2f}, "
        f"upside={outputs.upside_percent:.1f}%, cagr={outputs.cagr_percent:.1f}%"
    )
    return outputs


# ============================================================================
# Whole-bundle scenario adjustment
# ============================================================================

def _shift_driver(driver: RevenueDriver, direction: int) -> RevenueDriver:
    """Move a driver 20% of its range (0.05 for multiples) toward min or max."""
    if driver.unit is UnitType.MULTIPLE:
        step = 0.05
    else:
        step = driver.range * 0.20
    if direction < 0:
        return driver.with_value(max(driver.min, driver.value - step))
    return driver.with_value(min(driver.max, driver.value + step))


def scenario_inputs(base: DCFInputs, preset: ScenarioPreset) -> DCFInputs:
    """
    Derive Bear/Bull inputs from a base bundle with deterministic nudges.

    Bear: drivers down, margin -3pt, capex +1pt, working capital +0.5pt,
          discount rate +1pt, terminal growth -0.3pt.
    Bull: the mirror image, each move bounded by a sensible band.
    Terminal growth is always kept at least 0.5pt under the discount rate.
    """
    if preset is ScenarioPreset.BASE:
        return base

    op = base.operating
    val = base.valuation

    if preset is ScenarioPreset.BEAR:
        drivers = tuple(_shift_driver(d, -1) for d in base.revenue_drivers)
        operating = replace(
            op,
            operating_margin=max(5.0, op.operating_margin - 3.0),
            capex_percent=min(15.0, op.capex_percent + 1.0),
            working_capital_percent=min(5.0, op.working_capital_percent + 0.5),
        )
        discount = min(20.0, val.discount_rate + 1.0)
        growth = max(1.0, val.terminal_growth - 0.3)
    else:
        drivers = tuple(_shift_driver(d, 1) for d in base.revenue_drivers)
        operating = replace(
            op,
            operating_margin=min(40.0, op.operating_margin + 3.0),
            capex_percent=max(1.0, op.capex_percent - 1.0),
            working_capital_percent=max(0.0, op.working_capital_percent - 0.5),
        )
        discount = max(5.0, val.discount_rate - 1.0)
        growth = min(4.0, val.terminal_growth + 0.3)

    if growth >= discount - 0.5:
        growth = discount - 0.6

    logger.debug(f"Scenario '{preset.value}': discount={discount}, terminal_growth={growth:.2f}")
    return replace(
        base,
        revenue_drivers=drivers,
        operating=operating,
        valuation=replace(val, discount_rate=discount, terminal_growth=growth),
    )


# ============================================================================
# Aggressiveness score & confidence label
# ============================================================================

def _band_position(value: float, low: float, high: float) -> float:
    return clamp((value - low) / (high - low), 0.0, 1.0)


def aggressiveness_score(inputs: DCFInputs) -> float:
    """
    Score 0-100 of how aggressive the assumptions are.

    45% average driver position within range, 30% operating margin within
    5-40%, 25% valuation (low discount rate and high terminal growth).
    """
    positions = [
        (d.value - d.min) / d.range
        for d in inputs.revenue_drivers
        if d.impacts_revenue and d.range > 0
    ]
    revenue_avg = sum(positions) / len(positions) if positions else 0.5

    margin_pos = _band_position(inputs.operating.operating_margin, 5.0, 40.0)
    discount_pos = 1.0 - _band_position(inputs.valuation.discount_rate, 5.0, 20.0)
    terminal_pos = _band_position(inputs.valuation.terminal_growth, 1.0, 4.0)
    valuation_pos = (discount_pos + terminal_pos) / 2.0

    score = 100.0 * (0.45 * revenue_avg + 0.30 * margin_pos + 0.25 * valuation_pos)
    return clamp(score, 0.0, 100.0)


_STYLE_TARGETS = {
    InvestmentStyle.CONSERVATIVE: 25.0,
    InvestmentStyle.BASE: 50.0,
    InvestmentStyle.AGGRESSIVE: 75.0,
}


def confidence_label(score: float, target_style: InvestmentStyle) -> Tuple[str, bool, float]:
    """Return (label, is_aligned, target_score); aligned within 12 points of the lens target."""
    if score <= 33:
        label = "Conservative"
    elif score <= 66:
        label = "Balanced"
    else:
        label = "Aggressive"

    target = _STYLE_TARGETS[target_style]
    return label, abs(score - target) <= 12.0, target


# ============================================================================
# Sparkline series
# ============================================================================

def sparkline_data(metric: str, inputs: DCFInputs) -> List[float]:
    """
    Six-point illustrative series.

    metric="revenue":   100 -> revenue index along progress^0.9
    metric="intrinsic": current price -> intrinsic, curved by the discount rate
    """
    progress = np.linspace(0.0, 1.0, SPARKLINE_POINTS)

    if metric == "revenue":
        start = REVENUE_INDEX_BASELINE
        end = revenue_index(inputs.revenue_drivers)
        curve = np.power(progress, 0.9)
    elif metric == "intrinsic":
        start = inputs.current_price
        end = evaluate_dcf(inputs).intrinsic_value
        curve = np.power(progress, 1.0 + inputs.valuation.discount_rate / 100.0 * 0.5)
    else:
        logger.warning(f"Unknown sparkline metric '{metric}'; returning flat series")
        return [0.0] * SPARKLINE_POINTS

    return [float(v) for v in start + (end - start) * curve]
