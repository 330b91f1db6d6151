"""
Immutable market data snapshot built from loaded quotes.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple, Union

from calibcheck.errors import MissingMarketDataError

from .quotes import QuoteId

logger = logging.getLogger(__name__)

QuoteValues = Union[Mapping[QuoteId, float], Iterable[Tuple[QuoteId, float]]]


@dataclass(frozen=True)
class MarketSnapshot:
    """Valuation date plus a read-only mapping of quote id to value.

    Instances are never mutated after construction and may be shared
    between worker threads.
    """

    valuation_date: date
    values: Mapping[QuoteId, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def value(self, quote_id: QuoteId) -> float:
        """Return the quote value, raising MissingMarketDataError if absent."""
        try:
            return self.values[quote_id]
        except KeyError:
            raise MissingMarketDataError(quote_id) from None

    def find(self, quote_id: QuoteId) -> Optional[float]:
        return self.values.get(quote_id)

    def contains(self, quote_id: QuoteId) -> bool:
        return quote_id in self.values

    @property
    def quote_ids(self) -> Tuple[QuoteId, ...]:
        return tuple(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[QuoteId]:
        return iter(self.values)

    # mappingproxy is unhashable
    def __hash__(self) -> int:
        return hash((self.valuation_date, frozenset(self.values.items())))


def build_snapshot(valuation_date: date, quotes: QuoteValues) -> MarketSnapshot:
    """Assemble a market snapshot; duplicate quote ids keep the last value."""
    items = quotes.items() if isinstance(quotes, Mapping) else quotes
    values: Dict[QuoteId, float] = {}
    for quote_id, value in items:
        values[quote_id] = float(value)
    logger.debug("Built snapshot for %s with %d quotes", valuation_date, len(values))
    return MarketSnapshot(valuation_date=valuation_date, values=values)


class MarketSnapshotBuilder:
    """Fluent builder mirroring the usual "valuation date + add values" flow."""

    def __init__(self):
        self._valuation_date: Optional[date] = None
        self._values: Dict[QuoteId, float] = {}

    def valuation_date(self, valuation_date: date) -> "MarketSnapshotBuilder":
        self._valuation_date = valuation_date
        return self

    def add_value(self, quote_id: QuoteId, value: float) -> "MarketSnapshotBuilder":
        self._values[quote_id] = float(value)
        return self

    def add_values(self, quotes: QuoteValues) -> "MarketSnapshotBuilder":
        items = quotes.items() if isinstance(quotes, Mapping) else quotes
        for quote_id, value in items:
            self.add_value(quote_id, value)
        return self

    def build(self) -> MarketSnapshot:
        if self._valuation_date is None:
            raise ValueError("Valuation date must be set before building a snapshot")
        return build_snapshot(self._valuation_date, self._values)
