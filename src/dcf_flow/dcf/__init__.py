"""DCF valuation engine: value types and pure derivation functions."""

from .models import (
    UnitType, MarketCapTier, BusinessModelTag, DCFHorizon, InvestmentStyle,
    InvestmentObjective, TerminalMethod, PresetScenario, ScenarioPreset,
    RevenueDriver, OperatingAssumptions, ValuationAssumptions, InvestmentLens,
    DCFTicker, BaselineSnapshot, ChangeItem, DCFInputs, DCFOutputs,
    BEAR_OPERATING, BULL_OPERATING,
)
from .logic import (
    clamp, driver_multiplier, revenue_index, fcf_margin, fcf_index,
    intrinsic_value, pseudo_price, baseline_price, upside_percent, cagr_percent,
    evaluate_dcf, scenario_inputs, aggressiveness_score, confidence_label,
    sparkline_data,
)

__all__ = [
    "UnitType", "MarketCapTier", "BusinessModelTag", "DCFHorizon", "InvestmentStyle",
    "InvestmentObjective", "TerminalMethod", "PresetScenario", "ScenarioPreset",
    "RevenueDriver", "OperatingAssumptions", "ValuationAssumptions", "InvestmentLens",
    "DCFTicker", "BaselineSnapshot", "ChangeItem", "DCFInputs", "DCFOutputs",
    "BEAR_OPERATING", "BULL_OPERATING",
    "clamp", "driver_multiplier", "revenue_index", "fcf_margin", "fcf_index",
    "intrinsic_value", "pseudo_price", "baseline_price", "upside_percent", "cagr_percent",
    "evaluate_dcf", "scenario_inputs", "aggressiveness_score", "confidence_label",
    "sparkline_data",
]
