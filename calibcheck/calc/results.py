"""
Calculation result types.

A ``Result`` is either a success wrapping a value or a failure carrying a
reason and message. ``Results`` is the matrix returned by the engine: one
row per trade, one column per requested measure, both in request order.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from calibcheck.errors import (
    CalibrationError,
    MalformedRequestError,
    MissingMarketDataError,
)


@dataclass(frozen=True)
class CurrencyAmount:
    """An amount in a single currency."""

    currency: str
    amount: float

    def __str__(self) -> str:
        return f"{self.currency} {self.amount}"


@dataclass(frozen=True)
class MultiCurrencyAmount:
    """A set of amounts, at most one per currency."""

    amounts: Tuple[CurrencyAmount, ...] = ()

    @classmethod
    def of(cls, *amounts: CurrencyAmount) -> "MultiCurrencyAmount":
        totals: Dict[str, float] = {}
        for ca in amounts:
            totals[ca.currency] = totals.get(ca.currency, 0.0) + ca.amount
        return cls(tuple(CurrencyAmount(ccy, amt) for ccy, amt in sorted(totals.items())))

    @property
    def currencies(self) -> Tuple[str, ...]:
        return tuple(ca.currency for ca in self.amounts)

    def get(self, currency: str) -> CurrencyAmount:
        for ca in self.amounts:
            if ca.currency == currency:
                return ca
        return CurrencyAmount(currency, 0.0)

    def __iter__(self) -> Iterator[CurrencyAmount]:
        return iter(self.amounts)

    def __len__(self) -> int:
        return len(self.amounts)

    def __str__(self) -> str:
        return "[" + ", ".join(str(ca) for ca in self.amounts) + "]"


class FailureReason(Enum):
    """Why a cell could not be calculated."""

    MISSING_DATA = "MISSING_DATA"
    CALCULATION_FAILED = "CALCULATION_FAILED"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    message: str
    exception_type: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.reason.value}: {self.message}"


def _reason_for(exc: BaseException) -> FailureReason:
    if isinstance(exc, MissingMarketDataError):
        return FailureReason.MISSING_DATA
    if isinstance(exc, CalibrationError):
        return FailureReason.CALCULATION_FAILED
    return FailureReason.ERROR


@dataclass(frozen=True)
class Result:
    """Success or failure of a single calculation."""

    value: Any = None
    failure: Optional[Failure] = None

    @classmethod
    def success(cls, value: Any) -> "Result":
        return cls(value=value)

    @classmethod
    def failed(cls, reason: FailureReason, message: str) -> "Result":
        return cls(failure=Failure(reason, message))

    @classmethod
    def of_exception(cls, exc: BaseException) -> "Result":
        return cls(failure=Failure(_reason_for(exc), str(exc), type(exc).__name__))

    @property
    def is_success(self) -> bool:
        return self.failure is None

    @property
    def is_failure(self) -> bool:
        return self.failure is not None


@dataclass(frozen=True)
class Results:
    """Row-major results matrix aligned with the requested trades and columns."""

    row_count: int
    column_count: int
    items: Tuple[Result, ...]

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if len(self.items) != self.row_count * self.column_count:
            raise MalformedRequestError(
                f"Results hold {len(self.items)} cells, expected "
                f"{self.row_count} rows x {self.column_count} columns"
            )

    def get(self, row: int, column: int = 0) -> Result:
        if not 0 <= row < self.row_count or not 0 <= column < self.column_count:
            raise IndexError(f"Cell ({row}, {column}) outside {self.row_count}x{self.column_count}")
        return self.items[row * self.column_count + column]

    def column(self, column: int = 0) -> Tuple[Result, ...]:
        return tuple(self.get(row, column) for row in range(self.row_count))

    def row(self, row: int) -> Tuple[Result, ...]:
        return tuple(self.get(row, column) for column in range(self.column_count))
