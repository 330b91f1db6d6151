"""
Calculation request assembly.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from calibcheck.calc.measures import Column, Measure
from calibcheck.calc.rules import (
    CalculationRules,
    MarketDataConfig,
    MarketDataMappings,
    MarketDataRule,
    MarketDataRules,
    PricingRules,
)
from calibcheck.curves.definitions import CurveGroupDefinition, CurveGroupName
from calibcheck.pricing import StandardComponents
from calibcheck.trades import Trade

PRESENT_VALUE_COLUMNS: Tuple[Column, ...] = (Column.of(Measure.PRESENT_VALUE),)


@dataclass(frozen=True)
class CalculationRequest:
    """Trades, result columns and rules handed to the engine in one call."""

    trades: Tuple[Trade, ...]
    columns: Tuple[Column, ...]
    rules: CalculationRules

    def __post_init__(self):
        object.__setattr__(self, "trades", tuple(self.trades))
        object.__setattr__(self, "columns", tuple(self.columns))


def build_rules(
    group_name: CurveGroupName,
    definition: CurveGroupDefinition,
    pricing_rules: Optional[PricingRules] = None,
) -> CalculationRules:
    """Rules binding every trade to ``group_name`` and that name to ``definition``."""
    if pricing_rules is None:
        pricing_rules = StandardComponents.pricing_rules()
    market_data_config = MarketDataConfig.builder().add(group_name, definition).build()
    market_data_rules = MarketDataRules.of(
        MarketDataRule.any_target(MarketDataMappings(curve_group=group_name))
    )
    return CalculationRules(
        pricing_rules=pricing_rules,
        market_data_config=market_data_config,
        market_data_rules=market_data_rules,
    )


def build_request(
    trades: Sequence[Trade],
    group_name: CurveGroupName,
    definition: CurveGroupDefinition,
    pricing_rules: Optional[PricingRules] = None,
) -> CalculationRequest:
    """Assemble the present value request for the calibration trades."""
    return CalculationRequest(
        trades=tuple(trades),
        columns=PRESENT_VALUE_COLUMNS,
        rules=build_rules(group_name, definition, pricing_rules),
    )
