"""Multi-curve calibration repricing check.

This package verifies that every instrument used to calibrate a curve group
(OIS discounting plus IBOR projection curves) reprices to a present value of
zero under the calibrated curves.

Key modules:
- market: quote identifiers and immutable market snapshots
- curves: curve group definitions, calibration nodes, group resolution
- trades: trades synthesised from calibration nodes
- data: CSV loaders for curve configuration and quotes
- calc: calculation engine, runner, rules and result types
- pricing: QuantLib-backed calibration and pricing components
- pipeline: extraction, request building, orchestration, validation, timing
"""

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "market",
    "curves",
    "trades",
    "data",
    "calc",
    "pricing",
    "pipeline",
]
