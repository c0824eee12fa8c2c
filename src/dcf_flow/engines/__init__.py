"""External engine contracts and their built-in implementations."""

from .interfaces import (
    TickerRepository, ForecastEngine, SensitivityEngine, DCFEngine, BuiltinDCFEngine,
)
from .forecast import (
    ForecastAssumptions, ProjectionRow, ReturnSummary, ForecastResult,
    MultipleForecastEngine,
)
from .sensitivity import SensitivityResult, GridSensitivityEngine

__all__ = [
    "TickerRepository", "ForecastEngine", "SensitivityEngine", "DCFEngine",
    "BuiltinDCFEngine", "ForecastAssumptions", "ProjectionRow", "ReturnSummary",
    "ForecastResult", "MultipleForecastEngine", "SensitivityResult",
    "GridSensitivityEngine",
]
