#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FastAPI adapter over the DCF flow engine.

Endpoints:
  GET  /health
  POST /evaluate                 DCF inputs -> derived outputs
  POST /scenario/{preset}        bear/base/bull adjusted inputs + outputs
  POST /forecast                 multiple-based price forecast
  POST /sensitivity              CAGR x exit multiple return grid
  GET  /tickers/search?q=...     catalog search
  GET  /tickers/{symbol}/drivers default revenue drivers for a ticker

The engine itself never raises; request validation is left to pydantic (422).
"""

import os
from dataclasses import asdict
from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Path, Query
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import BaseModel, Field, field_validator

from ..dcf import logic
from ..dcf.models import (
    DCFInputs, InvestmentStyle, OperatingAssumptions, RevenueDriver, ScenarioPreset,
    TerminalMethod, UnitType, ValuationAssumptions,
)
from ..data import CatalogTickerRepository
from ..engines import (
    BuiltinDCFEngine, ForecastAssumptions, GridSensitivityEngine, MultipleForecastEngine,
)
from ..utils import get_logger, API_HOST, API_PORT, API_RELOAD, SENSITIVITY_HORIZON_YEARS

logger = get_logger(__name__)

SERVICE_NAME = "DCF Flow Valuation API"
SERVICE_VERSION = "1.0.0"

# Longest horizon any request may ask for
MAX_HORIZON_YEARS = 30

# ============================================================================
# FastAPI App Setup
# ============================================================================

app = FastAPI(
    title=SERVICE_NAME,
    description="Derived intrinsic value, upside, CAGR and scenario presets for the DCF setup flow",
    version=SERVICE_VERSION,
)

repository = CatalogTickerRepository()
dcf_engine = BuiltinDCFEngine()
forecast_engine = MultipleForecastEngine()
sensitivity_engine = GridSensitivityEngine(forecast_engine)


# ============================================================================
# Pydantic Models
# ============================================================================


class RevenueDriverModel(BaseModel):
    """A single revenue driver slider."""

    id: Optional[str] = None
    title: str = ""
    subtitle: str = ""
    unit: UnitType = UnitType.PERCENT
    value: float
    min: float
    max: float
    step: float = 1.0
    impacts_revenue: bool = True

    def to_driver(self) -> RevenueDriver:
        data = self.model_dump(exclude_none=True)
        return RevenueDriver(**data)


class OperatingModel(BaseModel):
    """Operating assumptions (percent, 0-100)."""

    gross_margin: float = Field(55.0, ge=0, le=100)
    operating_margin: float = Field(22.0, ge=0, le=100)
    tax_rate: float = Field(21.0, ge=0, le=100)
    capex_percent: float = Field(4.0, ge=0, le=100)
    working_capital_percent: float = Field(1.0, ge=0, le=100)


class ValuationModel(BaseModel):
    """Valuation assumptions (percent, 0-100)."""

    discount_rate: float = Field(9.0, ge=0, le=100)
    terminal_growth: float = Field(2.5, ge=-100, le=100)
    terminal_method: TerminalMethod = TerminalMethod.PERPETUITY
    exit_multiple: Optional[float] = Field(None, gt=0)


class DCFInputsModel(BaseModel):
    """Input bundle for evaluation and scenario requests."""

    revenue_drivers: List[RevenueDriverModel] = Field(default_factory=list)
    operating: OperatingModel = Field(default_factory=OperatingModel)
    valuation: ValuationModel = Field(default_factory=ValuationModel)
    horizon_years: int = Field(5, ge=1, le=MAX_HORIZON_YEARS, description="Return horizon in years")
    current_price: float = Field(..., gt=0, description="Baseline share price")

    def to_inputs(self) -> DCFInputs:
        return DCFInputs(
            revenue_drivers=tuple(d.to_driver() for d in self.revenue_drivers),
            operating=OperatingAssumptions(**self.operating.model_dump()),
            valuation=ValuationAssumptions(**self.valuation.model_dump()),
            horizon_years=self.horizon_years,
            current_price=self.current_price,
        )


class DCFOutputsModel(BaseModel):
    revenue_index: float
    fcf_margin: float
    fcf_index: float
    intrinsic_value: float
    upside_percent: float
    cagr_percent: float
    terminal_share_percent: float
    aggressiveness_score: float
    confidence_label: str
    aligned_with_style: bool


class ScenarioResponse(BaseModel):
    preset: ScenarioPreset
    inputs: DCFInputsModel
    outputs: DCFOutputsModel


class ForecastAssumptionsModel(BaseModel):
    """Forecast inputs (decimals: 0.08 = 8%)."""

    current_price: float = Field(100.0, gt=0)
    current_revenue: float = Field(1_000.0, ge=0)
    revenue_cagr: float = Field(0.08, gt=-1, lt=5)
    operating_margin: float = Field(0.22, ge=-1, le=1)
    tax_rate: float = Field(0.21, ge=0, lt=1)
    shares_outstanding: float = Field(1_000.0, gt=0)
    net_debt: float = 0.0
    exit_multiple: float = Field(4.0, gt=0)
    horizon_years: int = Field(5, ge=1, le=MAX_HORIZON_YEARS)
    discount_rate: Optional[float] = None

    def to_assumptions(self) -> ForecastAssumptions:
        return ForecastAssumptions(**self.model_dump())


class ForecastRequest(BaseModel):
    symbol: str = Field(..., description="Ticker symbol (e.g., AAPL)")
    assumptions: ForecastAssumptionsModel = Field(default_factory=ForecastAssumptionsModel)
    horizons: List[int] = Field(default_factory=lambda: [1, 3, 5, 10])

    @field_validator("symbol")
    @classmethod
    def validate_symbol(cls, v):
        if not v or not v.replace(".", "").isalpha():
            raise ValueError("Symbol must contain only letters")
        return v.upper()

    @field_validator("horizons")
    @classmethod
    def validate_horizons(cls, v):
        if not v or any(h < 1 or h > MAX_HORIZON_YEARS for h in v):
            raise ValueError(f"Horizons must be a non-empty list of years between 1 and {MAX_HORIZON_YEARS}")
        return v


class SensitivityRequest(BaseModel):
    assumptions: ForecastAssumptionsModel = Field(default_factory=ForecastAssumptionsModel)
    horizon_years: int = Field(SENSITIVITY_HORIZON_YEARS, ge=1, le=MAX_HORIZON_YEARS)


class TickerModel(BaseModel):
    symbol: str
    name: str
    sector: str
    industry: str
    market_cap_tier: str
    business_model: str
    current_price: Optional[float] = None


class ErrorDetail(BaseModel):
    """Error response detail."""

    error_code: str
    error_message: str
    field: Optional[str] = None
    timestamp: str = Field(default_factory=lambda: date.today().isoformat())


# ============================================================================
# Helper Functions
# ============================================================================


def _evaluate(inputs: DCFInputs, style: InvestmentStyle = InvestmentStyle.BASE) -> DCFOutputsModel:
    """Evaluate inputs and attach the aggressiveness score and its label."""
    outputs = logic.evaluate_dcf(inputs)
    score = logic.aggressiveness_score(inputs)
    label, aligned, _ = logic.confidence_label(score, style)
    return DCFOutputsModel(
        **asdict(outputs),
        aggressiveness_score=score,
        confidence_label=label,
        aligned_with_style=aligned,
    )


def _inputs_model(inputs: DCFInputs) -> DCFInputsModel:
    return DCFInputsModel(
        revenue_drivers=[RevenueDriverModel(**asdict(d)) for d in inputs.revenue_drivers],
        operating=OperatingModel(**asdict(inputs.operating)),
        valuation=ValuationModel(**asdict(inputs.valuation)),
        horizon_years=inputs.horizon_years,
        current_price=inputs.current_price,
    )


# ============================================================================
# API Endpoints
# ============================================================================


@app.get("/health")
def health_check():
    """Health check endpoint."""
    logger.info("Health check requested")
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
    }


@app.post("/evaluate", response_model=DCFOutputsModel, tags=["Valuation"])
def evaluate(
    request: DCFInputsModel,
    style: InvestmentStyle = Query(InvestmentStyle.BASE, description="Lens style the score is compared to"),
):
    """Derive revenue index, FCF index, intrinsic value, upside and CAGR."""
    inputs = request.to_inputs()
    result = _evaluate(inputs, style)
    logger.info(
        f"Evaluated {len(inputs.revenue_drivers)} drivers: intrinsic={result.intrinsic_value:.2f}, "
        f"upside={result.upside_percent:.1f}%"
    )
    return result


@app.post("/scenario/{preset}", response_model=ScenarioResponse, tags=["Valuation"])
def scenario(
    request: DCFInputsModel,
    preset: ScenarioPreset = Path(..., description="bear, base or bull"),
    style: InvestmentStyle = Query(InvestmentStyle.BASE, description="Lens style the score is compared to"),
):
    """Apply a Bear/Base/Bull adjustment to the whole input bundle and evaluate it."""
    adjusted = dcf_engine.scenario_inputs(request.to_inputs(), preset)
    logger.info(f"Scenario '{preset.value}' evaluated")
    return ScenarioResponse(
        preset=preset, inputs=_inputs_model(adjusted), outputs=_evaluate(adjusted, style)
    )


@app.post("/forecast", response_model=Dict[str, Any], tags=["Forecast"])
def forecast(request: ForecastRequest):
    """Project implied prices and returns per horizon."""
    result = forecast_engine.forecast(
        request.symbol, request.assumptions.to_assumptions(), request.horizons
    )
    logger.info(f"Forecast {request.symbol}: fair value {result.fair_value:.2f}")
    return asdict(result)


@app.post("/sensitivity", response_model=Dict[str, Any], tags=["Forecast"])
def sensitivity(request: SensitivityRequest):
    """Annualized return grid over revenue CAGR (rows) and exit multiple (columns)."""
    result = sensitivity_engine.analyze(request.assumptions.to_assumptions(), request.horizon_years)
    return asdict(result)


@app.get("/tickers/search", response_model=List[TickerModel], tags=["Tickers"])
def search_tickers(q: str = Query("", description="Symbol or company name")):
    """Ranked catalog search; blank query returns popular tickers."""
    return [
        TickerModel(
            symbol=t.symbol,
            name=t.name,
            sector=t.sector,
            industry=t.industry,
            market_cap_tier=t.market_cap_tier.value,
            business_model=t.business_model.value,
            current_price=t.current_price,
        )
        for t in repository.search(q)
    ]


@app.get("/tickers/{symbol}/drivers", response_model=List[RevenueDriverModel], tags=["Tickers"])
def ticker_drivers(symbol: str = Path(..., description="Ticker symbol")):
    """Default revenue drivers for a ticker's business model and sector."""
    ticker = repository.find_ticker(symbol)
    if ticker is None:
        raise HTTPException(status_code=404, detail=f"Symbol '{symbol.upper()}' not found")
    drivers = repository.generate_default_revenue_drivers(ticker.business_model, ticker.sector)
    return [RevenueDriverModel(**asdict(d)) for d in drivers]


@app.get("/", include_in_schema=False)
def root():
    """Redirect to docs."""
    return RedirectResponse("/docs")


# ============================================================================
# Exception Handlers
# ============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    """Handle HTTP exceptions with structured response."""
    logger.error(f"HTTP Exception: {exc.status_code} - {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorDetail(
            error_code=f"HTTP_{exc.status_code}",
            error_message=str(exc.detail),
        ).model_dump(),
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle unexpected exceptions with structured response."""
    logger.error(f"Unhandled exception: {type(exc).__name__}: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=ErrorDetail(
            error_code="INTERNAL_ERROR",
            error_message=f"Internal server error: {type(exc).__name__}",
        ).model_dump(),
    )


# ============================================================================
# Main
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", str(API_PORT)))
    logger.info(f"Starting {SERVICE_NAME} on {API_HOST}:{port}...")
    uvicorn.run(app, host=API_HOST, port=port, reload=API_RELOAD)
