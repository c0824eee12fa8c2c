#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for the pure valuation functions (src/dcf_flow/dcf/logic.py)

Covers the driver aggregator, margin estimator, valuation projector, return
calculator, the whole-bundle scenario adjustment and the aggressiveness score.
"""

import math

import pytest

from dcf_flow.dcf import logic
from dcf_flow.dcf.models import (
    BEAR_OPERATING, BULL_OPERATING, DCFInputs, DCFTicker, BusinessModelTag, InvestmentStyle,
    MarketCapTier, OperatingAssumptions, RevenueDriver, ScenarioPreset, UnitType, ValuationAssumptions,
)

# ============================================================================
# Test Data
# ============================================================================


def make_driver(value, lo=0.0, hi=20.0, unit=UnitType.PERCENT, impacts_revenue=True):
    return RevenueDriver(
        title="Growth", subtitle="", unit=unit, value=value, min=lo, max=hi, step=1.0,
        impacts_revenue=impacts_revenue,
    )


def worked_example_intrinsic(fcf, discount_rate=9.0, terminal_growth=2.5):
    """Blended PV computed directly from the published formula."""
    pv_factor = 1.0 / max(0.01, discount_rate / 100.0)
    terminal_factor = 1.0 / max(0.01, (discount_rate - terminal_growth) / 100.0)
    return fcf * 1.2 * 0.9 * pv_factor + fcf * 1.2 * 0.6 * terminal_factor


# ============================================================================
# Driver Aggregator
# ============================================================================


def test_empty_driver_list_is_exactly_baseline():
    """Test 1: No drivers yields exactly 100.0."""
    assert logic.revenue_index([]) == 100.0


def test_driver_multipliers_by_unit():
    """Test 2: Percent, multiple and number/currency multipliers."""
    assert logic.driver_multiplier(make_driver(10.0)) == pytest.approx(1.10)
    assert logic.driver_multiplier(make_driver(1.15, 0.9, 1.4, UnitType.MULTIPLE)) == 1.15
    # number: midpoint of the range maps to 1.0, ends to 0.8 / 1.2
    assert logic.driver_multiplier(make_driver(50.0, 0.0, 100.0, UnitType.NUMBER)) == pytest.approx(1.0)
    assert logic.driver_multiplier(make_driver(0.0, 0.0, 100.0, UnitType.CURRENCY)) == pytest.approx(0.8)
    assert logic.driver_multiplier(make_driver(100.0, 0.0, 100.0, UnitType.NUMBER)) == pytest.approx(1.2)


def test_degenerate_number_range_is_neutral():
    """Test 3: Empty or inverted number ranges contribute a 1.0 multiplier."""
    assert logic.driver_multiplier(make_driver(5.0, 5.0, 5.0, UnitType.NUMBER)) == 1.0
    assert logic.driver_multiplier(make_driver(5.0, 10.0, 0.0, UnitType.CURRENCY)) == 1.0


def test_non_revenue_drivers_are_ignored():
    """Test 4: Drivers flagged impacts_revenue=False do not move the index."""
    drivers = [make_driver(10.0), make_driver(90.0, 0.0, 100.0, impacts_revenue=False)]
    assert logic.revenue_index(drivers) == pytest.approx(110.0)


def test_revenue_index_is_clamped():
    """Test 5: Revenue index stays within [30, 300]."""
    high = [make_driver(3.0, 0.0, 5.0, UnitType.MULTIPLE)] * 3
    low = [make_driver(-90.0, -100.0, 0.0)] * 2
    assert logic.revenue_index(high) == 300.0
    assert logic.revenue_index(low) == 30.0


def test_nan_collapses_to_lower_bound():
    """Test 6: NaN inputs are mapped to the lower clamp bound."""
    assert logic.clamp(float("nan"), 20.0, 800.0) == 20.0
    assert logic.revenue_index([make_driver(float("nan"))]) == 30.0


@pytest.mark.parametrize("unit", list(UnitType))
@pytest.mark.parametrize("value", [-1e6, -100.0, -1.0, 0.0, 0.5, 10.0, 250.0, 1e6])
def test_revenue_index_bounds_for_every_unit(unit, value):
    """Test 7: Any driver value of any unit keeps the index within [30, 300]."""
    drivers = [make_driver(value, -100.0, 300.0, unit)] * 3
    assert 30.0 <= logic.revenue_index(drivers) <= 300.0


# ============================================================================
# Margin Estimator & Valuation Projector
# ============================================================================


def test_worked_example():
    """Test 8: One +10% driver with default assumptions."""
    operating = OperatingAssumptions()
    valuation = ValuationAssumptions()

    rev = logic.revenue_index([make_driver(10.0)])
    margin = logic.fcf_margin(operating)
    fcf = logic.fcf_index(rev, operating)
    intrinsic = logic.intrinsic_value(fcf, valuation)

    assert rev == pytest.approx(110.0)
    assert margin == pytest.approx((22.0 * 0.79 - 4.0 - 1.0) / 100.0)
    assert fcf == pytest.approx(110.0 * margin)
    assert intrinsic == pytest.approx(worked_example_intrinsic(fcf), abs=1e-6)
    assert intrinsic == pytest.approx(314.2615, abs=1e-3)


def test_fcf_margin_floor_and_cap():
    """Test 9: FCF margin floors at 0 and caps at 35%."""
    burning = OperatingAssumptions(operating_margin=5.0, capex_percent=15.0)
    rich = OperatingAssumptions(operating_margin=100.0, tax_rate=0.0, capex_percent=0.0,
                                working_capital_percent=0.0)
    assert logic.fcf_margin(burning) == 0.0
    assert logic.fcf_margin(rich) == 0.35
    assert logic.fcf_index(300.0, rich) == pytest.approx(105.0)


@pytest.mark.parametrize("operating", [
    OperatingAssumptions(),
    BEAR_OPERATING,
    BULL_OPERATING,
    OperatingAssumptions(operating_margin=100.0, tax_rate=0.0, capex_percent=0.0,
                         working_capital_percent=0.0),
    OperatingAssumptions(operating_margin=0.0, capex_percent=50.0),
])
@pytest.mark.parametrize("rev", [30.0, 100.0, 300.0])
def test_fcf_index_bounds(operating, rev):
    """Test 10: FCF index stays within [0, 120] across margins and revenue levels."""
    assert 0.0 <= logic.fcf_index(rev, operating) <= 120.0


def test_terminal_growth_equal_to_discount_stays_finite():
    """Test 11: tg == dr produces a finite, clamped value."""
    valuation = ValuationAssumptions(discount_rate=9.0, terminal_growth=9.0)
    value = logic.intrinsic_value(13.618, valuation)
    assert math.isfinite(value)
    assert value <= 800.0
    assert value == 800.0


def test_intrinsic_value_bounds():
    """Test 12: Intrinsic value stays within [20, 800]."""
    assert logic.intrinsic_value(0.0, ValuationAssumptions()) == 20.0
    assert logic.intrinsic_value(120.0, ValuationAssumptions(discount_rate=0.0)) == 800.0


# ============================================================================
# Return Calculator
# ============================================================================


def test_pseudo_price_is_deterministic_and_in_band():
    """Test 13: Pseudo-price is stable per symbol and within [100, 250)."""
    for symbol in ["AAPL", "ZZZZ", "X", "brk.b"]:
        price = logic.pseudo_price(symbol)
        assert 100.0 <= price < 250.0
        assert price == logic.pseudo_price(symbol)
        assert price == float(int(price))
    assert logic.pseudo_price("aapl") == logic.pseudo_price("AAPL")


def test_baseline_price_sources():
    """Test 14: Quote, then pseudo-price, then the 150 fallback."""
    quoted = DCFTicker("ABC", "Abc", "Tech", "Software", MarketCapTier.MID,
                       BusinessModelTag.SUBSCRIPTION, current_price=42.5)
    unquoted = DCFTicker("ABC", "Abc", "Tech", "Software", MarketCapTier.MID,
                         BusinessModelTag.SUBSCRIPTION)
    assert logic.baseline_price(quoted) == 42.5
    assert logic.baseline_price(unquoted) == logic.pseudo_price("ABC")
    assert logic.baseline_price(None) == 150.0


def test_upside_and_cagr_guards():
    """Test 15: Non-positive price or horizon yields 0; CAGR is clamped."""
    assert logic.upside_percent(200.0, 0.0) == 0.0
    assert logic.upside_percent(300.0, 150.0) == pytest.approx(100.0)
    assert logic.cagr_percent(200.0, 100.0, 0) == 0.0
    assert logic.cagr_percent(200.0, -5.0, 5) == 0.0
    assert logic.cagr_percent(800.0, 20.0, 1) == 50.0
    assert logic.cagr_percent(20.0, 800.0, 1) == -50.0
    assert logic.cagr_percent(121.0, 100.0, 2) == pytest.approx(10.0)


def test_evaluate_dcf_matches_stepwise_chain():
    """Test 16: evaluate_dcf equals the step-by-step derivation."""
    inputs = DCFInputs(revenue_drivers=(make_driver(10.0),), current_price=150.0)
    outputs = logic.evaluate_dcf(inputs)

    fcf = logic.fcf_index(110.0, inputs.operating)
    intrinsic = logic.intrinsic_value(fcf, inputs.valuation)
    assert outputs.revenue_index == pytest.approx(110.0)
    assert outputs.intrinsic_value == pytest.approx(intrinsic)
    assert outputs.upside_percent == pytest.approx((intrinsic - 150.0) / 150.0 * 100.0)
    assert outputs.cagr_percent == pytest.approx(((intrinsic / 150.0) ** 0.2 - 1.0) * 100.0)
    assert outputs.terminal_share_percent == 65.0


# ============================================================================
# Scenario Adjustment & Aggressiveness
# ============================================================================


def test_scenario_inputs_bear_and_bull():
    """Test 17: Bear/Bull nudges on drivers, operating and valuation."""
    base = DCFInputs(revenue_drivers=(
        make_driver(10.0),
        make_driver(1.15, 0.9, 1.4, UnitType.MULTIPLE),
    ))

    bear = logic.scenario_inputs(base, ScenarioPreset.BEAR)
    assert bear.revenue_drivers[0].value == pytest.approx(6.0)
    assert bear.revenue_drivers[1].value == pytest.approx(1.10)
    assert bear.revenue_drivers[0].id == base.revenue_drivers[0].id
    assert bear.operating.operating_margin == 19.0
    assert bear.operating.capex_percent == 5.0
    assert bear.operating.working_capital_percent == 1.5
    assert bear.valuation.discount_rate == 10.0
    assert bear.valuation.terminal_growth == pytest.approx(2.2)

    bull = logic.scenario_inputs(base, ScenarioPreset.BULL)
    assert bull.revenue_drivers[0].value == pytest.approx(14.0)
    assert bull.operating.operating_margin == 25.0
    assert bull.operating.capex_percent == 3.0
    assert bull.operating.working_capital_percent == 0.5
    assert bull.valuation.discount_rate == 8.0
    assert bull.valuation.terminal_growth == pytest.approx(2.8)

    assert logic.scenario_inputs(base, ScenarioPreset.BASE) is base


def test_scenario_keeps_growth_below_discount():
    """Test 18: Terminal growth is kept at least 0.5pt under the discount rate."""
    base = DCFInputs(valuation=ValuationAssumptions(discount_rate=2.0, terminal_growth=3.0))
    bear = logic.scenario_inputs(base, ScenarioPreset.BEAR)
    assert bear.valuation.discount_rate == 3.0
    assert bear.valuation.terminal_growth == pytest.approx(2.4)


def test_aggressiveness_and_confidence():
    """Test 19: Default inputs score as Balanced and align with the Base lens."""
    score = logic.aggressiveness_score(DCFInputs())
    expected = 100.0 * (0.45 * 0.5 + 0.30 * (17.0 / 35.0) + 0.25 * ((1 - 4.0 / 15.0) + 0.5) / 2)
    assert score == pytest.approx(expected)

    label, aligned, target = logic.confidence_label(score, InvestmentStyle.BASE)
    assert label == "Balanced"
    assert aligned is True
    assert target == 50.0

    label, aligned, _ = logic.confidence_label(90.0, InvestmentStyle.CONSERVATIVE)
    assert label == "Aggressive"
    assert aligned is False
    assert logic.confidence_label(10.0, InvestmentStyle.CONSERVATIVE)[0] == "Conservative"


def test_sparkline_series():
    """Test 20: Six-point series from start to end; unknown metric is flat."""
    inputs = DCFInputs(revenue_drivers=(make_driver(10.0),), current_price=150.0)

    revenue = logic.sparkline_data("revenue", inputs)
    assert len(revenue) == 6
    assert revenue[0] == pytest.approx(100.0)
    assert revenue[-1] == pytest.approx(110.0)
    assert revenue == sorted(revenue)

    intrinsic = logic.sparkline_data("intrinsic", inputs)
    assert intrinsic[0] == pytest.approx(150.0)
    assert intrinsic[-1] == pytest.approx(logic.evaluate_dcf(inputs).intrinsic_value)

    assert logic.sparkline_data("margin", inputs) == [0.0] * 6
