"""
Market data construction for a calculation.

The factory combines the snapshot quotes with three pluggable providers
(time series, observable quotes missing from the snapshot, feed id
mapping) and builds the calibrated curve groups the calculation needs
using the registered market data functions.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterable, Mapping

from calibcheck.curves.definitions import CurveGroupDefinition, CurveGroupName
from calibcheck.errors import ConfigNotFoundError, MalformedRequestError, MissingMarketDataError
from calibcheck.market.quotes import QuoteId
from calibcheck.market.snapshot import MarketSnapshot

from .results import FailureReason, Result
from .rules import MarketDataConfig

logger = logging.getLogger(__name__)

CURVE_GROUP = "curve_group"

CurveGroupFunction = Callable[[CurveGroupDefinition, "ObservableMarketData"], Any]


class TimeSeriesProvider:
    """Supplies historical fixings; ``none()`` supplies nothing."""

    def __init__(self, series: Mapping[str, Mapping[date, float]] = None):
        self._series = {key: dict(values) for key, values in (series or {}).items()}

    @classmethod
    def none(cls) -> "TimeSeriesProvider":
        return cls()

    def time_series(self, key: str) -> Mapping[date, float]:
        return MappingProxyType(self._series.get(key, {}))


class ObservableMarketDataFunction:
    """Sources quotes absent from the snapshot; ``none()`` always fails."""

    def __init__(self, source: Callable[[QuoteId], Result] = None):
        self._source = source

    @classmethod
    def none(cls) -> "ObservableMarketDataFunction":
        return cls()

    def build(self, quote_id: QuoteId) -> Result:
        if self._source is None:
            return Result.failed(
                FailureReason.MISSING_DATA,
                f"No market data function available to provide {quote_id}",
            )
        return self._source(quote_id)


class FeedIdMapping:
    """Maps quote ids to the ids used by a data feed; ``identity()`` is a no-op."""

    def __init__(self, mapping: Mapping[QuoteId, QuoteId] = None):
        self._mapping = dict(mapping or {})

    @classmethod
    def identity(cls) -> "FeedIdMapping":
        return cls()

    def id_for(self, quote_id: QuoteId) -> QuoteId:
        return self._mapping.get(quote_id, quote_id)


class LinkResolver:
    """Resolves references held by trades; ``none()`` leaves trades unchanged."""

    def __init__(self, resolve: Callable[[Any], Any] = None):
        self._resolve = resolve

    @classmethod
    def none(cls) -> "LinkResolver":
        return cls()

    def resolve(self, target: Any) -> Any:
        if self._resolve is None:
            return target
        return self._resolve(target)


class ObservableMarketData:
    """Quote lookup used by market data functions during calibration."""

    def __init__(
        self,
        snapshot: MarketSnapshot,
        feed_id_mapping: FeedIdMapping,
        observable_function: ObservableMarketDataFunction,
        time_series_provider: TimeSeriesProvider,
    ):
        self._snapshot = snapshot
        self._feed_id_mapping = feed_id_mapping
        self._observable_function = observable_function
        self._time_series_provider = time_series_provider

    @property
    def valuation_date(self) -> date:
        return self._snapshot.valuation_date

    def value(self, quote_id: QuoteId) -> float:
        found = self._snapshot.find(quote_id)
        if found is not None:
            return found
        result = self._observable_function.build(self._feed_id_mapping.id_for(quote_id))
        if result.is_failure:
            raise MissingMarketDataError(quote_id)
        return float(result.value)

    def time_series(self, key: str) -> Mapping[date, float]:
        return self._time_series_provider.time_series(key)


@dataclass(frozen=True)
class CalculationEnvironment:
    """Market data built for one calculation: calibrated curve groups by name."""

    valuation_date: date
    curve_groups: Mapping[CurveGroupName, Result] = field(default_factory=dict)

    def curve_group_result(self, name: CurveGroupName) -> Result:
        try:
            return self.curve_groups[name]
        except KeyError:
            return Result.failed(
                FailureReason.MISSING_DATA, f"Curve group {name} was not built for this calculation"
            )


class MarketDataFactory:
    """Builds the market data a calculation requires from a snapshot."""

    def __init__(
        self,
        time_series_provider: TimeSeriesProvider,
        observable_function: ObservableMarketDataFunction,
        feed_id_mapping: FeedIdMapping,
        market_data_functions: Mapping[str, CurveGroupFunction],
    ):
        self.time_series_provider = time_series_provider
        self.observable_function = observable_function
        self.feed_id_mapping = feed_id_mapping
        self._functions = dict(market_data_functions)
        if CURVE_GROUP not in self._functions:
            raise ValueError(f"A '{CURVE_GROUP}' market data function is required")

    def observable_market_data(self, snapshot: MarketSnapshot) -> ObservableMarketData:
        return ObservableMarketData(
            snapshot, self.feed_id_mapping, self.observable_function, self.time_series_provider
        )

    def create_market_data(
        self,
        curve_groups: Iterable[CurveGroupName],
        config: MarketDataConfig,
        snapshot: MarketSnapshot,
    ) -> CalculationEnvironment:
        """Calibrate every required curve group.

        A group whose calibration raises is recorded as a failed result so
        that only the cells depending on it fail. A group missing from the
        configuration makes the request malformed and aborts it.
        """
        observable = self.observable_market_data(snapshot)
        function = self._functions[CURVE_GROUP]
        built: Dict[CurveGroupName, Result] = {}
        for name in sorted(set(curve_groups)):
            try:
                definition = config.get_curve_group(name)
            except ConfigNotFoundError as exc:
                raise MalformedRequestError(
                    f"Market data rules refer to curve group {name} which has no configuration"
                ) from exc
            try:
                built[name] = Result.success(function(definition, observable))
                logger.debug("Calibrated curve group %s", name)
            except Exception as exc:
                logger.warning("Calibration of curve group %s failed: %s", name, exc)
                built[name] = Result.of_exception(exc)
        return CalculationEnvironment(snapshot.valuation_date, MappingProxyType(built))
