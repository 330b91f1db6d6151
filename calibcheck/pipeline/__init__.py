"""Calibration check pipeline: extraction, request assembly, orchestration and validation."""

from .check import CalibrationCheck, CsvInputLoader, Evaluation
from .config import CheckConfig
from .extractor import count_nodes, excluded_nodes, extract_trades, is_extractable
from .orchestrator import CalculationComponents, CalculationOrchestrator
from .performance import PerformanceHarness, PerformanceReport
from .request import PRESENT_VALUE_COLUMNS, CalculationRequest, build_request, build_rules
from .validator import CheckStatus, InstrumentCheck, ResultValidator, ValidationReport

__all__ = [
    "CalibrationCheck",
    "CsvInputLoader",
    "Evaluation",
    "CheckConfig",
    "count_nodes",
    "excluded_nodes",
    "extract_trades",
    "is_extractable",
    "CalculationComponents",
    "CalculationOrchestrator",
    "PerformanceHarness",
    "PerformanceReport",
    "PRESENT_VALUE_COLUMNS",
    "CalculationRequest",
    "build_request",
    "build_rules",
    "CheckStatus",
    "InstrumentCheck",
    "ResultValidator",
    "ValidationReport",
]
