"""Curve group definitions, calibration nodes and group resolution."""

from .definitions import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveGroupEntry,
    CurveGroupName,
    CurveName,
    CurveValueType,
    Interpolator,
)
from .nodes import (
    CalibrationNode,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    IborIborSwapCurveNode,
    NodeType,
    TermDepositCurveNode,
)
from .resolver import Found, NotFound, resolve_curve_group, require_curve_group

__all__ = [
    "CurveDefinition",
    "CurveGroupDefinition",
    "CurveGroupEntry",
    "CurveGroupName",
    "CurveName",
    "CurveValueType",
    "Interpolator",
    "CalibrationNode",
    "NodeType",
    "TermDepositCurveNode",
    "IborFixingDepositCurveNode",
    "FraCurveNode",
    "FixedOvernightSwapCurveNode",
    "FixedIborSwapCurveNode",
    "IborIborSwapCurveNode",
    "Found",
    "NotFound",
    "resolve_curve_group",
    "require_curve_group",
]
