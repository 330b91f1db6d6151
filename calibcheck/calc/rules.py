"""
Calculation rules: pricing functions, market data configuration and the
rules that bind calculation targets to market data.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Type

from calibcheck.curves.definitions import CurveGroupDefinition, CurveGroupName
from calibcheck.errors import ConfigNotFoundError

from .measures import Measure

logger = logging.getLogger(__name__)

PricingFunction = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class MarketDataMappings:
    """Which market data a target uses; here, the curve group supplying curves."""

    curve_group: CurveGroupName


@dataclass(frozen=True)
class MarketDataRule:
    """Applies ``mappings`` to targets accepted by ``target_types`` (all when empty)."""

    mappings: MarketDataMappings
    target_types: Tuple[type, ...] = ()

    @classmethod
    def any_target(cls, mappings: MarketDataMappings) -> "MarketDataRule":
        return cls(mappings=mappings)

    @classmethod
    def of_target_types(cls, mappings: MarketDataMappings, *types: type) -> "MarketDataRule":
        if not types:
            raise ValueError("At least one target type is required")
        return cls(mappings=mappings, target_types=tuple(types))

    def matches(self, target: Any) -> bool:
        return not self.target_types or isinstance(target, self.target_types)


@dataclass(frozen=True)
class MarketDataRules:
    """Ordered rules; the first matching rule wins."""

    rules: Tuple[MarketDataRule, ...] = ()

    @classmethod
    def of(cls, *rules: MarketDataRule) -> "MarketDataRules":
        return cls(tuple(rules))

    @classmethod
    def empty(cls) -> "MarketDataRules":
        return cls()

    def mappings_for(self, target: Any) -> Optional[MarketDataMappings]:
        for rule in self.rules:
            if rule.matches(target):
                return rule.mappings
        return None


@dataclass(frozen=True)
class MarketDataConfig:
    """Curve group definitions available to the market data factory, by name."""

    curve_groups: Mapping[CurveGroupName, CurveGroupDefinition] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "curve_groups", MappingProxyType(dict(self.curve_groups)))

    @classmethod
    def builder(cls) -> "MarketDataConfigBuilder":
        return MarketDataConfigBuilder()

    def get_curve_group(self, name: CurveGroupName) -> CurveGroupDefinition:
        try:
            return self.curve_groups[name]
        except KeyError:
            raise ConfigNotFoundError(name, self.curve_groups.keys()) from None

    def __hash__(self) -> int:
        return hash(tuple(sorted(self.curve_groups)))


class MarketDataConfigBuilder:
    def __init__(self):
        self._curve_groups: Dict[CurveGroupName, CurveGroupDefinition] = {}

    def add(self, name: CurveGroupName, definition: CurveGroupDefinition) -> "MarketDataConfigBuilder":
        """Bind ``name`` to ``definition``; re-adding a name replaces the binding."""
        if name in self._curve_groups:
            logger.debug("Replacing market data config for curve group %s", name)
        self._curve_groups[name] = definition
        return self

    def build(self) -> MarketDataConfig:
        return MarketDataConfig(self._curve_groups)


class PricingRules:
    """Pricing functions by trade type and measure.

    Lookup follows the trade's class hierarchy, so a function registered for
    a base class applies to its subclasses unless overridden.
    """

    def __init__(self, functions: Optional[Mapping[Type, Mapping[Measure, PricingFunction]]] = None):
        self._functions: Dict[Type, Dict[Measure, PricingFunction]] = {
            trade_type: dict(by_measure) for trade_type, by_measure in (functions or {}).items()
        }

    @classmethod
    def empty(cls) -> "PricingRules":
        return cls()

    def with_function(
        self, trade_type: Type, measure: Measure, function: PricingFunction
    ) -> "PricingRules":
        functions = {t: dict(m) for t, m in self._functions.items()}
        functions.setdefault(trade_type, {})[measure] = function
        return PricingRules(functions)

    def function_for(self, trade: Any, measure: Measure) -> Optional[PricingFunction]:
        for klass in type(trade).__mro__:
            by_measure = self._functions.get(klass)
            if by_measure and measure in by_measure:
                return by_measure[measure]
        return None

    def trade_types(self) -> Tuple[Type, ...]:
        return tuple(self._functions)

    def __repr__(self) -> str:
        names = sorted(t.__name__ for t in self._functions)
        return f"PricingRules({names})"


@dataclass(frozen=True)
class CalculationRules:
    """The complete set of rules for calculating measures."""

    pricing_rules: PricingRules
    market_data_config: MarketDataConfig = field(default_factory=MarketDataConfig)
    market_data_rules: MarketDataRules = field(default_factory=MarketDataRules.empty)
