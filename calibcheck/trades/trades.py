"""
Trades synthesised from calibration nodes.

Every trade is immutable and carries what the pricers need: dates, the
fixed rate taken from the market quote, a notional and the conventions.
"""

from dataclasses import dataclass
from datetime import date

from calibcheck.conventions.indices import IborIndexConvention
from calibcheck.conventions.instruments import (
    FixedIborSwapConvention,
    FixedOvernightSwapConvention,
    IborIborSwapConvention,
    TermDepositConvention,
)
from calibcheck.conventions.types import BuySell


@dataclass(frozen=True)
class Trade:
    """Base class of all calibration trades."""

    trade_date: date

    @property
    def trade_type(self) -> str:
        return type(self).__name__


@dataclass(frozen=True)
class TermDepositTrade(Trade):
    """Cash deposit from ``start_date`` to ``end_date`` at ``rate``."""

    convention: TermDepositConvention
    start_date: date
    end_date: date
    rate: float
    notional: float = 1.0
    buy_sell: BuySell = BuySell.BUY

    @property
    def currency(self) -> str:
        return self.convention.currency


@dataclass(frozen=True)
class IborFixingDepositTrade(Trade):
    """Deposit replicating an IBOR fixing; used only to calibrate the index curve."""

    index: IborIndexConvention
    fixing_date: date
    start_date: date
    end_date: date
    rate: float
    notional: float = 1.0
    buy_sell: BuySell = BuySell.BUY

    @property
    def currency(self) -> str:
        return self.index.currency


@dataclass(frozen=True)
class FraTrade(Trade):
    """Forward rate agreement on ``index`` settled at ``start_date``."""

    index: IborIndexConvention
    months_to_start: int
    fixing_date: date
    start_date: date
    end_date: date
    rate: float
    notional: float = 1.0
    buy_sell: BuySell = BuySell.BUY

    @property
    def currency(self) -> str:
        return self.index.currency


@dataclass(frozen=True)
class FixedOvernightSwapTrade(Trade):
    """Fixed vs compounded overnight swap; BUY pays fixed."""

    convention: FixedOvernightSwapConvention
    tenor: str
    start_date: date
    end_date: date
    rate: float
    notional: float = 1.0
    buy_sell: BuySell = BuySell.BUY

    @property
    def currency(self) -> str:
        return self.convention.index.currency


@dataclass(frozen=True)
class FixedIborSwapTrade(Trade):
    """Fixed vs IBOR swap; BUY pays fixed."""

    convention: FixedIborSwapConvention
    tenor: str
    start_date: date
    end_date: date
    rate: float
    notional: float = 1.0
    buy_sell: BuySell = BuySell.BUY

    @property
    def currency(self) -> str:
        return self.convention.index.currency


@dataclass(frozen=True)
class IborIborSwapTrade(Trade):
    """IBOR vs IBOR basis swap; ``rate`` is the spread on the spread index leg, which BUY pays."""

    convention: IborIborSwapConvention
    tenor: str
    start_date: date
    end_date: date
    rate: float
    notional: float = 1.0
    buy_sell: BuySell = BuySell.BUY

    @property
    def currency(self) -> str:
        return self.convention.currency
