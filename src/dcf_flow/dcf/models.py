#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Value types for the DCF setup flow: drivers, assumptions, lens, tickers,
presets and the input/output bundles of the pure evaluator.

All types are immutable; state changes go through ``dataclasses.replace``.
Percentages are stored in the 0-100 domain (9.0 means 9%).
"""

import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Optional, Tuple

from ..utils import format_percent, format_multiple, format_currency, format_number


class UnitType(str, Enum):
    PERCENT = "percent"
    MULTIPLE = "multiple"
    CURRENCY = "currency"
    NUMBER = "number"

    def format(self, value: float) -> str:
        if self is UnitType.PERCENT:
            return format_percent(value)
        if self is UnitType.MULTIPLE:
            return format_multiple(value)
        if self is UnitType.CURRENCY:
            return format_currency(value)
        return format_number(value)


class MarketCapTier(str, Enum):
    SMALL = "small"
    MID = "mid"
    LARGE = "large"

    @property
    def display_name(self) -> str:
        return f"{self.value.title()} Cap"


class BusinessModelTag(str, Enum):
    SUBSCRIPTION = "subscription"
    TRANSACTIONAL = "transactional"
    ASSET_HEAVY = "assetHeavy"
    PLATFORM = "platform"
    ADVERTISING = "advertising"
    OTHER = "other"


class DCFHorizon(str, Enum):
    ONE_YEAR = "1Y"
    THREE_YEAR = "3Y"
    FIVE_YEAR = "5Y"
    TEN_YEAR = "10Y"

    @property
    def years(self) -> int:
        return int(self.value[:-1])


class InvestmentStyle(str, Enum):
    CONSERVATIVE = "conservative"
    BASE = "base"
    AGGRESSIVE = "aggressive"


class InvestmentObjective(str, Enum):
    APPRECIATION = "appreciation"
    COMPOUNDING = "compounding"
    DOWNSIDE_PROTECTION = "downsideProtection"


class TerminalMethod(str, Enum):
    PERPETUITY = "Perpetuity Growth"
    EXIT_MULTIPLE = "Exit Multiple"


class PresetScenario(str, Enum):
    """Granular presets applied to drivers and operating assumptions."""
    CONSENSUS = "consensus"
    BEAR = "bear"
    BASE = "base"
    BULL = "bull"

    @property
    def display_name(self) -> str:
        return self.value.title()


class ScenarioPreset(str, Enum):
    """Presets understood by the whole-bundle DCF engine path."""
    BEAR = "bear"
    BASE = "base"
    BULL = "bull"


@dataclass(frozen=True)
class RevenueDriver:
    title: str
    subtitle: str
    unit: UnitType
    value: float
    min: float
    max: float
    step: float
    impacts_revenue: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def with_value(self, value: float) -> "RevenueDriver":
        """Copy with a new value; identity and bounds are preserved."""
        return replace(self, value=value)

    @property
    def range(self) -> float:
        return self.max - self.min


@dataclass(frozen=True)
class OperatingAssumptions:
    gross_margin: float = 55.0
    operating_margin: float = 22.0
    tax_rate: float = 21.0
    capex_percent: float = 4.0            # % of revenue
    working_capital_percent: float = 1.0  # % of revenue


BEAR_OPERATING = OperatingAssumptions(
    gross_margin=48.0, operating_margin=16.0, tax_rate=24.0,
    capex_percent=6.0, working_capital_percent=2.0,
)
BULL_OPERATING = OperatingAssumptions(
    gross_margin=62.0, operating_margin=28.0, tax_rate=18.0,
    capex_percent=2.5, working_capital_percent=0.5,
)


@dataclass(frozen=True)
class ValuationAssumptions:
    discount_rate: float = 9.0
    terminal_growth: float = 2.5
    terminal_method: TerminalMethod = TerminalMethod.PERPETUITY
    exit_multiple: Optional[float] = None


_LENS_PREVIEWS = {
    (InvestmentStyle.CONSERVATIVE, InvestmentObjective.DOWNSIDE_PROTECTION):
        "This lens will bias your assumptions toward lower risk and capital preservation.",
    (InvestmentStyle.AGGRESSIVE, InvestmentObjective.APPRECIATION):
        "This lens will bias your assumptions toward high growth and upside capture.",
    (InvestmentStyle.BASE, InvestmentObjective.COMPOUNDING):
        "This lens will bias your assumptions toward steady, sustainable growth.",
}


@dataclass(frozen=True)
class InvestmentLens:
    horizon: DCFHorizon = DCFHorizon.FIVE_YEAR
    style: InvestmentStyle = InvestmentStyle.BASE
    objective: InvestmentObjective = InvestmentObjective.APPRECIATION

    @property
    def preview_text(self) -> str:
        text = _LENS_PREVIEWS.get((self.style, self.objective))
        if text:
            return text
        if self.style is InvestmentStyle.CONSERVATIVE:
            return "This lens will bias your assumptions toward lower risk and cautious projections."
        if self.style is InvestmentStyle.AGGRESSIVE:
            return "This lens will bias your assumptions toward higher growth and optimistic outcomes."
        return "This lens will bias your assumptions toward balanced, moderate projections."


@dataclass(frozen=True)
class DCFTicker:
    symbol: str
    name: str
    sector: str
    industry: str
    market_cap_tier: MarketCapTier
    business_model: BusinessModelTag
    blurb: str = ""
    current_price: Optional[float] = None
    currency: str = "USD"
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        object.__setattr__(self, "symbol", self.symbol.upper())


@dataclass(frozen=True)
class BaselineSnapshot:
    """Baseline values that drift is measured against.

    ``drivers`` maps driver id to its baseline value; an empty mapping means
    no driver baseline has been captured yet.
    """
    drivers: Dict[str, float] = field(default_factory=dict)
    operating: OperatingAssumptions = field(default_factory=OperatingAssumptions)
    valuation: ValuationAssumptions = field(default_factory=ValuationAssumptions)


@dataclass(frozen=True)
class ChangeItem:
    label: str
    base_value: str
    current_value: str


@dataclass(frozen=True)
class DCFInputs:
    revenue_drivers: Tuple[RevenueDriver, ...] = ()
    operating: OperatingAssumptions = field(default_factory=OperatingAssumptions)
    valuation: ValuationAssumptions = field(default_factory=ValuationAssumptions)
    horizon_years: int = 5
    current_price: float = 150.0


@dataclass(frozen=True)
class DCFOutputs:
    revenue_index: float
    fcf_margin: float
    fcf_index: float
    intrinsic_value: float
    upside_percent: float
    cagr_percent: float
    terminal_share_percent: float
