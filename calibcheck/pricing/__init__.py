"""
QuantLib-backed curve calibration and trade pricing.
"""

from .calibration import (
    CalibratedCurveGroup,
    CalibratorConfig,
    CalibrationMarket,
    QuantLibCurveGroupCalibrator,
    node_currency,
)
from .pricers import (
    present_value_fixed_ibor_swap,
    present_value_fixed_overnight_swap,
    present_value_fra,
    present_value_ibor_fixing_deposit,
    present_value_ibor_ibor_swap,
    present_value_term_deposit,
)
from .standard import PRESENT_VALUE_FUNCTIONS, StandardComponents

__all__ = [
    "CalibratedCurveGroup",
    "CalibratorConfig",
    "CalibrationMarket",
    "QuantLibCurveGroupCalibrator",
    "node_currency",
    "present_value_term_deposit",
    "present_value_ibor_fixing_deposit",
    "present_value_fra",
    "present_value_fixed_overnight_swap",
    "present_value_fixed_ibor_swap",
    "present_value_ibor_ibor_swap",
    "PRESENT_VALUE_FUNCTIONS",
    "StandardComponents",
]
