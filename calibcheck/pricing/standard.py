"""
Standard pricing rules and market data functions.

These wire the QuantLib calibrator and pricers into the calculation
framework, mirroring how the engine is configured in production.
"""

from typing import Callable, Dict

from calibcheck.calc.marketdata import CURVE_GROUP
from calibcheck.calc.measures import Measure
from calibcheck.calc.rules import PricingRules
from calibcheck.trades import (
    FixedIborSwapTrade,
    FixedOvernightSwapTrade,
    FraTrade,
    IborFixingDepositTrade,
    IborIborSwapTrade,
    TermDepositTrade,
)

from .calibration import QuantLibCurveGroupCalibrator
from .pricers import (
    present_value_fixed_ibor_swap,
    present_value_fixed_overnight_swap,
    present_value_fra,
    present_value_ibor_fixing_deposit,
    present_value_ibor_ibor_swap,
    present_value_term_deposit,
)

PRESENT_VALUE_FUNCTIONS = {
    TermDepositTrade: present_value_term_deposit,
    IborFixingDepositTrade: present_value_ibor_fixing_deposit,
    FraTrade: present_value_fra,
    FixedOvernightSwapTrade: present_value_fixed_overnight_swap,
    FixedIborSwapTrade: present_value_fixed_ibor_swap,
    IborIborSwapTrade: present_value_ibor_ibor_swap,
}


class StandardComponents:
    """Factory for the standard calculation components."""

    @staticmethod
    def pricing_rules() -> PricingRules:
        rules = PricingRules.empty()
        for trade_type, function in PRESENT_VALUE_FUNCTIONS.items():
            rules = rules.with_function(trade_type, Measure.PRESENT_VALUE, function)
        return rules

    @staticmethod
    def market_data_functions() -> Dict[str, Callable]:
        return {CURVE_GROUP: QuantLibCurveGroupCalibrator()}
