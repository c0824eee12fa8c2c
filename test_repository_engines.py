#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Test suite for the ticker catalog and the default engines
(src/dcf_flow/data/repository.py, src/dcf_flow/engines/)
"""

import pandas as pd
import pytest

from dcf_flow.data import CatalogTickerRepository, load_ticker_frame
from dcf_flow.dcf.models import BusinessModelTag, UnitType
from dcf_flow.engines import (
    ForecastAssumptions, GridSensitivityEngine, MultipleForecastEngine,
)
from dcf_flow.utils import REQUIRED_COLUMNS

# ============================================================================
# Test Client Setup
# ============================================================================

repository = CatalogTickerRepository()
forecast_engine = MultipleForecastEngine()

# ============================================================================
# Ticker Catalog
# ============================================================================


def test_catalog_loads_packaged_csv():
    """Test 1: The packaged catalog loads with every required column."""
    frame = load_ticker_frame()
    assert list(frame.columns[: len(REQUIRED_COLUMNS)]) == REQUIRED_COLUMNS
    assert len(frame) == len(repository.all_tickers) == 55
    assert frame["symbol"].is_unique


def test_missing_or_malformed_csv_gives_empty_catalog(tmp_path):
    """Test 2: Missing file or columns yields an empty catalog, not an error."""
    assert CatalogTickerRepository(path=str(tmp_path / "nope.csv")).all_tickers == []

    bad = tmp_path / "bad.csv"
    pd.DataFrame({"symbol": ["AAA"], "name": ["Aaa"]}).to_csv(bad, index=False)
    assert load_ticker_frame(str(bad)).empty


def test_find_ticker_is_case_insensitive():
    """Test 3: Lookup by symbol ignores case and surrounding whitespace."""
    apple = repository.find_ticker(" aapl ")
    assert apple is not None
    assert apple.name == "Apple Inc."
    assert apple.current_price == pytest.approx(185.50)
    assert repository.find_ticker("NOPE") is None


def test_search_ranking():
    """Test 4: Exact symbol first, then prefixes, then name matches."""
    assert [t.symbol for t in repository.search("")] == [
        t.symbol for t in repository.all_tickers[:10]
    ]
    results = repository.search("ma")
    symbols = [t.symbol for t in results]
    assert symbols[0] == "MA"
    assert len(results) <= 20

    by_name = repository.search("apple")
    assert by_name and by_name[0].symbol == "AAPL"


def test_driver_templates_by_model_and_sector():
    """Test 5: Templates follow business model, with financial variants."""
    bank = repository.generate_default_revenue_drivers(BusinessModelTag.ASSET_HEAVY, "Financial Services")
    industrial = repository.generate_default_revenue_drivers(BusinessModelTag.ASSET_HEAVY, "Industrials")
    platform = repository.generate_default_revenue_drivers(BusinessModelTag.PLATFORM, "Technology")
    other = repository.generate_default_revenue_drivers(BusinessModelTag.OTHER, "Technology")

    assert [d.title for d in bank][0] == "Loan Growth"
    assert [d.title for d in industrial][0] == "Capacity Utilization"
    assert platform[-1].unit is UnitType.MULTIPLE
    assert platform[-1].value == 1.15
    assert [d.title for d in other][0] == "Revenue Growth"
    for driver in bank + industrial + platform + other:
        assert driver.min <= driver.value <= driver.max


def test_driver_generation_issues_fresh_ids():
    """Test 6: Repeat calls produce new driver identities."""
    first = repository.generate_default_revenue_drivers(BusinessModelTag.SUBSCRIPTION, "Technology")
    second = repository.generate_default_revenue_drivers(BusinessModelTag.SUBSCRIPTION, "Technology")
    assert {d.id for d in first}.isdisjoint({d.id for d in second})


# ============================================================================
# Forecast Engine
# ============================================================================


def test_forecast_projection_rows():
    """Test 7: At least ten projected years, price = revenue x multiple / shares."""
    assumptions = ForecastAssumptions(current_price=5.0)
    result = forecast_engine.forecast("ABC", assumptions, [1, 3, 5])

    frame = result.projections_frame()
    assert frame.index.name == "year"
    assert list(frame.index) == list(range(11))
    assert frame.loc[5, "revenue"] == pytest.approx(1000.0 * 1.08 ** 5)
    assert frame.loc[5, "implied_price"] == pytest.approx(1000.0 * 1.08 ** 5 * 4.0 / 1000.0)
    assert frame.loc[1, "after_tax_operating_income"] == pytest.approx(1080.0 * 0.22 * 0.79)

    assert [r.horizon_years for r in result.returns_by_horizon] == [1, 3, 5]
    five = result.returns_by_horizon[-1]
    assert five.total_return == pytest.approx(frame.loc[5, "implied_price"] / 5.0 - 1.0)
    assert result.fair_value == pytest.approx(frame.loc[10, "implied_price"])


def test_forecast_extends_for_long_horizons():
    """Test 8: Horizons past ten years extend the projection."""
    result = forecast_engine.forecast("ABC", ForecastAssumptions(), [15])
    assert len(result.projections) == 16
    assert result.returns_by_horizon[0].horizon_years == 15


# ============================================================================
# Sensitivity Engine
# ============================================================================


def test_sensitivity_grid_shape_and_center():
    """Test 9: 5x5 grid centred on the base assumptions."""
    assumptions = ForecastAssumptions(current_price=5.0)
    result = GridSensitivityEngine(forecast_engine).analyze(assumptions, horizon_years=5)

    frame = result.to_frame()
    assert frame.shape == (5, 5)
    assert frame.index.name == "revenue_cagr"
    assert result.cagr_values[2] == pytest.approx(0.08)
    assert result.multiple_values == pytest.approx([2.0, 3.0, 4.0, 5.0, 6.0])

    base = forecast_engine.forecast("ABC", assumptions, [5]).returns_by_horizon[0]
    assert result.grid[2][2] == pytest.approx(base.annualized_return)


def test_sensitivity_is_monotonic():
    """Test 10: Higher CAGR and higher multiple never lower the return."""
    frame = GridSensitivityEngine().analyze(ForecastAssumptions(current_price=5.0)).to_frame()
    for _, row in frame.iterrows():
        assert list(row) == sorted(row)
    for column in frame.columns:
        assert list(frame[column]) == sorted(frame[column])
