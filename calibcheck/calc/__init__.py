"""Calculation framework: results, rules, runner, market data and engine."""

from .engine import CalculationEngine, DefaultCalculationEngine
from .executor import DaemonThreadPoolExecutor
from .marketdata import (
    CURVE_GROUP,
    CalculationEnvironment,
    FeedIdMapping,
    LinkResolver,
    MarketDataFactory,
    ObservableMarketData,
    ObservableMarketDataFunction,
    TimeSeriesProvider,
)
from .measures import Column, Measure
from .results import (
    CurrencyAmount,
    Failure,
    FailureReason,
    MultiCurrencyAmount,
    Result,
    Results,
)
from .rules import (
    CalculationRules,
    MarketDataConfig,
    MarketDataMappings,
    MarketDataRule,
    MarketDataRules,
    PricingRules,
)
from .runner import CalculationRunner, CalculationTask

__all__ = [
    "CalculationEngine",
    "DefaultCalculationEngine",
    "DaemonThreadPoolExecutor",
    "CURVE_GROUP",
    "CalculationEnvironment",
    "FeedIdMapping",
    "LinkResolver",
    "MarketDataFactory",
    "ObservableMarketData",
    "ObservableMarketDataFunction",
    "TimeSeriesProvider",
    "Column",
    "Measure",
    "CurrencyAmount",
    "MultiCurrencyAmount",
    "Failure",
    "FailureReason",
    "Result",
    "Results",
    "CalculationRules",
    "MarketDataConfig",
    "MarketDataMappings",
    "MarketDataRule",
    "MarketDataRules",
    "PricingRules",
    "CalculationRunner",
    "CalculationTask",
]
