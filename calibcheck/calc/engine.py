"""
Calculation engine: computes a results matrix for trades and columns.
"""

import logging
from typing import List, Optional, Protocol, Sequence

from calibcheck.errors import MalformedRequestError
from calibcheck.market.snapshot import MarketSnapshot

from .marketdata import CalculationEnvironment, LinkResolver, MarketDataFactory
from .measures import Column
from .results import FailureReason, Result, Results
from .rules import CalculationRules, MarketDataMappings, PricingRules
from .runner import CalculationRunner, CalculationTask

logger = logging.getLogger(__name__)


class CalculationEngine(Protocol):
    """Contract of an engine: one blocking call per request."""

    def calculate(
        self,
        trades: Sequence,
        columns: Sequence[Column],
        rules: CalculationRules,
        snapshot: MarketSnapshot,
    ) -> Results:
        ...


class DefaultCalculationEngine:
    """Engine combining a runner, a market data factory and a link resolver."""

    def __init__(
        self,
        runner: CalculationRunner,
        market_data_factory: MarketDataFactory,
        link_resolver: LinkResolver,
        timeout: Optional[float] = None,
    ):
        self.runner = runner
        self.market_data_factory = market_data_factory
        self.link_resolver = link_resolver
        self.timeout = timeout

    def calculate(
        self,
        trades: Sequence,
        columns: Sequence[Column],
        rules: CalculationRules,
        snapshot: MarketSnapshot,
    ) -> Results:
        """Calculate every (trade, column) cell.

        Args:
            trades: Trades to calculate, in result row order
            columns: Measures to calculate, in result column order
            rules: Pricing rules, market data config and market data rules
            snapshot: Market quotes at the valuation date

        Returns:
            Results with one row per trade and one column per column

        Raises:
            MalformedRequestError: If the request itself is invalid
        """
        trades = list(trades)
        columns = list(columns)
        self._check_request(columns, rules, snapshot)

        resolved = [self.link_resolver.resolve(trade) for trade in trades]
        mappings = [rules.market_data_rules.mappings_for(trade) for trade in resolved]
        required = {m.curve_group for m in mappings if m is not None}
        logger.debug(
            "Calculating %d trades x %d columns using curve groups %s",
            len(resolved), len(columns), sorted(required),
        )
        environment = self.market_data_factory.create_market_data(
            required, rules.market_data_config, snapshot
        )

        tasks: List[CalculationTask] = []
        for row, (trade, mapping) in enumerate(zip(resolved, mappings)):
            for col, column in enumerate(columns):
                tasks.append(
                    CalculationTask(
                        row=row,
                        column=col,
                        function=_cell_function(trade, column, mapping, environment, rules.pricing_rules),
                        description=f"{type(trade).__name__}/{column.header}",
                    )
                )
        return self.runner.run(tasks, len(resolved), len(columns), timeout=self.timeout)

    @staticmethod
    def _check_request(columns: List[Column], rules: CalculationRules, snapshot: MarketSnapshot) -> None:
        if not columns:
            raise MalformedRequestError("At least one column is required")
        bad = [c for c in columns if not isinstance(c, Column)]
        if bad:
            raise MalformedRequestError(f"Columns must be Column instances, got {bad}")
        if not isinstance(rules, CalculationRules):
            raise MalformedRequestError(f"Expected CalculationRules, got {type(rules).__name__}")
        if getattr(snapshot, "valuation_date", None) is None:
            raise MalformedRequestError("Market snapshot has no valuation date")


def _cell_function(
    trade,
    column: Column,
    mapping: Optional[MarketDataMappings],
    environment: CalculationEnvironment,
    pricing_rules: PricingRules,
):
    def calculate() -> Result:
        if mapping is None:
            return Result.failed(
                FailureReason.NOT_APPLICABLE,
                f"No market data rule matches {type(trade).__name__}",
            )
        function = pricing_rules.function_for(trade, column.measure)
        if function is None:
            return Result.failed(
                FailureReason.NOT_APPLICABLE,
                f"No pricing function for {type(trade).__name__} and {column.measure.value}",
            )
        market = environment.curve_group_result(mapping.curve_group)
        if market.is_failure:
            return Result(failure=market.failure)
        return Result.success(function(trade, market.value))

    return calculate
