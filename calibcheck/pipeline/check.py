"""
End-to-end calibration check: load, extract, calculate and validate.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from calibcheck.calc.results import Results
from calibcheck.curves.definitions import CurveGroupDefinition
from calibcheck.curves.resolver import require_curve_group
from calibcheck.data.loaders import QuotesCsvLoader, RatesCalibrationCsvLoader
from calibcheck.market.snapshot import MarketSnapshot, build_snapshot
from calibcheck.trades import Trade

from .config import CheckConfig
from .extractor import count_nodes, extract_trades
from .orchestrator import CalculationOrchestrator
from .request import CalculationRequest, build_request
from .validator import ResultValidator, ValidationReport

logger = logging.getLogger(__name__)


class CsvInputLoader:
    """Reads curve groups and quotes from the CSV files named by a config."""

    def load(self, config: CheckConfig) -> Tuple[MarketSnapshot, List[CurveGroupDefinition]]:
        definitions = RatesCalibrationCsvLoader.load(
            config.groups_path, config.settings_path, config.calibrations_path
        )
        quotes = QuotesCsvLoader.load(config.valuation_date, config.quotes_path)
        return build_snapshot(config.valuation_date, quotes), definitions


@dataclass(frozen=True)
class Evaluation:
    definition: CurveGroupDefinition
    snapshot: MarketSnapshot
    request: CalculationRequest
    results: Results

    @property
    def trades(self) -> Tuple[Trade, ...]:
        return self.request.trades


class CalibrationCheck:
    """
    Checks that a calibrated curve group reprices its own instruments.

    An orchestrator passed in is left open for the caller; one created here
    is released by ``close`` or on leaving the ``with`` block.
    """

    def __init__(
        self,
        config: Optional[CheckConfig] = None,
        loader: Optional[CsvInputLoader] = None,
        orchestrator: Optional[CalculationOrchestrator] = None,
    ):
        self.config = config or CheckConfig.default()
        self.loader = loader or CsvInputLoader()
        self._owns_orchestrator = orchestrator is None
        self.orchestrator = orchestrator or CalculationOrchestrator(
            self.config.n_threads, timeout=self.config.timeout
        )
        self.validator = ResultValidator(self.config.tolerance, self.config.strict_multi_currency)

    def load(self) -> Tuple[MarketSnapshot, List[CurveGroupDefinition]]:
        snapshot, definitions = self.loader.load(self.config)
        logger.info(
            "Loaded %d curve group(s) and %d quotes for %s",
            len(definitions), len(snapshot), snapshot.valuation_date,
        )
        return snapshot, definitions

    def evaluate(self) -> Evaluation:
        """
        Run one calculation of all calibration trade PVs.

        Raises:
            ConfigNotFoundError: If the configured curve group was not loaded
            ConfigFormatError: If an input file is malformed
            MalformedRequestError: If the engine rejects the request
        """
        snapshot, definitions = self.load()
        name = self.config.curve_group_name
        definition = require_curve_group(definitions, name)
        trades = extract_trades(definition, snapshot)
        logger.info(
            "Curve group %s: %d trades from %d nodes", name, len(trades), count_nodes(definition)
        )
        request = build_request(
            trades, name, definition, self.orchestrator.components.pricing_rules
        )
        results = self.orchestrator.compute(
            request.trades, request.columns, request.rules, snapshot
        )
        return Evaluation(definition, snapshot, request, results)

    def validate(self, evaluation: Evaluation) -> ValidationReport:
        return self.validator.validate(evaluation.trades, evaluation.results)

    def run(self) -> ValidationReport:
        return self.validate(self.evaluate())

    def cycle(self) -> int:
        """One full cycle for timing; returns the results' row plus column count."""
        results = self.evaluate().results
        return results.row_count + results.column_count

    def close(self) -> None:
        if self._owns_orchestrator:
            self.orchestrator.shutdown()

    def __enter__(self) -> "CalibrationCheck":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
