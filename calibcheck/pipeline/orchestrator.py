"""
Calculation orchestration over a bounded worker pool.

The orchestrator owns the thread pool and the engine built on top of it.
Use it as a context manager, or call ``shutdown`` explicitly. Workers are
daemon threads, so cells abandoned after a timeout never hold the process
open.

QuantLib keeps the evaluation date in process-wide settings, so requests
are computed one at a time across all orchestrators of the process; the
cells of a single request still run in parallel.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Sequence

from calibcheck.calc.engine import DefaultCalculationEngine
from calibcheck.calc.executor import DaemonThreadPoolExecutor
from calibcheck.calc.marketdata import (
    FeedIdMapping,
    LinkResolver,
    MarketDataFactory,
    ObservableMarketDataFunction,
    TimeSeriesProvider,
)
from calibcheck.calc.measures import Column
from calibcheck.calc.results import Results
from calibcheck.calc.rules import CalculationRules, PricingRules
from calibcheck.calc.runner import CalculationRunner
from calibcheck.errors import MalformedRequestError
from calibcheck.market.snapshot import MarketSnapshot
from calibcheck.pricing import StandardComponents

logger = logging.getLogger(__name__)

_COMPUTE_LOCK = threading.Lock()


@dataclass(frozen=True)
class CalculationComponents:
    """
    Pricing capabilities the engine is wired with.

    ``standard()`` gives the QuantLib calibrator and pricers with no time
    series, no live quotes, identity feed mapping and no link resolution.
    Tests substitute fakes for any of them.
    """

    pricing_rules: PricingRules
    market_data_functions: Mapping[str, Callable]
    time_series_provider: TimeSeriesProvider = field(default_factory=TimeSeriesProvider.none)
    observable_function: ObservableMarketDataFunction = field(
        default_factory=ObservableMarketDataFunction.none
    )
    feed_id_mapping: FeedIdMapping = field(default_factory=FeedIdMapping.identity)
    link_resolver: LinkResolver = field(default_factory=LinkResolver.none)

    @classmethod
    def standard(cls) -> "CalculationComponents":
        return cls(
            pricing_rules=StandardComponents.pricing_rules(),
            market_data_functions=StandardComponents.market_data_functions(),
        )


class CalculationOrchestrator:
    """Runs calculation requests on a pool of ``n_threads`` workers."""

    def __init__(
        self,
        n_threads: int = 1,
        components: Optional[CalculationComponents] = None,
        timeout: Optional[float] = None,
    ):
        if n_threads < 1:
            raise ValueError(f"n_threads must be at least 1, got {n_threads}")
        self.n_threads = n_threads
        self.components = components or CalculationComponents.standard()
        self._executor = DaemonThreadPoolExecutor(
            max_workers=n_threads, thread_name_prefix="calibcheck-calc"
        )
        self._closed = False
        self.engine = DefaultCalculationEngine(
            CalculationRunner(self._executor),
            MarketDataFactory(
                self.components.time_series_provider,
                self.components.observable_function,
                self.components.feed_id_mapping,
                self.components.market_data_functions,
            ),
            self.components.link_resolver,
            timeout=timeout,
        )
        logger.debug("Created calculation pool with %d thread(s)", n_threads)

    @property
    def closed(self) -> bool:
        return self._closed

    def compute(
        self,
        trades: Sequence,
        columns: Sequence[Column],
        rules: CalculationRules,
        snapshot: MarketSnapshot,
    ) -> Results:
        """
        Calculate all cells and block until the matrix is complete.

        Failures of single cells are returned as failed results.

        Raises:
            MalformedRequestError: If the request is structurally invalid
            RuntimeError: If the orchestrator has been shut down
        """
        if self._closed:
            raise RuntimeError("Calculation orchestrator has been shut down")
        trades = list(trades)
        with _COMPUTE_LOCK:
            results = self.engine.calculate(trades, columns, rules, snapshot)
        if results.row_count != len(trades):
            raise MalformedRequestError(
                f"Engine returned {results.row_count} rows for {len(trades)} trades"
            )
        return results

    def shutdown(self, wait: bool = True) -> None:
        """Release the worker pool; without ``wait`` queued cells are cancelled."""
        if self._closed:
            return
        self._closed = True
        self._executor.shutdown(wait=wait, cancel_futures=not wait)
        logger.debug("Calculation pool shut down (wait=%s)", wait)

    def __enter__(self) -> "CalculationOrchestrator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # abandon queued work when leaving on an error
        self.shutdown(wait=exc_type is None)

