"""
Calibration nodes: one market instrument used to fit a curve.

A node knows which quote it reads and how to synthesise the concrete trade
for a valuation date. The calibrator reads the same attributes to build
its rate helpers, so the node is the single source of an instrument's
dates and conventions.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Protocol

from calibcheck.conventions.calendars import tenor_to_months
from calibcheck.conventions.indices import IborIndexConvention
from calibcheck.conventions.instruments import (
    FixedIborSwapConvention,
    FixedOvernightSwapConvention,
    IborIborSwapConvention,
    TermDepositConvention,
)
from calibcheck.conventions.types import BusinessDayAdjustment
from calibcheck.market.quotes import QuoteId
from calibcheck.trades import (
    FixedIborSwapTrade,
    FixedOvernightSwapTrade,
    FraTrade,
    IborFixingDepositTrade,
    IborIborSwapTrade,
    TermDepositTrade,
    Trade,
)


class MarketDataView(Protocol):
    """Anything that can supply quote values for a valuation date."""

    valuation_date: date

    def value(self, quote_id: QuoteId) -> float:
        ...


class NodeType(Enum):
    """Instrument kind of a calibration node."""

    TERM_DEPOSIT = "DEP"
    IBOR_FIXING_DEPOSIT = "IFD"
    FRA = "FRA"
    FIXED_OVERNIGHT_SWAP = "OIS"
    FIXED_IBOR_SWAP = "IRS"
    IBOR_IBOR_SWAP = "BS"

    @property
    def is_tradable(self) -> bool:
        """False for nodes that replicate a fixing rather than a market trade."""
        return self is not NodeType.IBOR_FIXING_DEPOSIT


@dataclass(frozen=True)
class CalibrationNode(ABC):
    """Base class of all curve nodes."""

    label: str
    quote_id: QuoteId

    @property
    @abstractmethod
    def node_type(self) -> NodeType:
        ...

    @abstractmethod
    def trade(self, valuation_date: date, market: MarketDataView) -> Trade:
        """Create the trade this node represents, priced at the market quote."""

    def rate(self, market: MarketDataView) -> float:
        return market.value(self.quote_id)


@dataclass(frozen=True)
class TermDepositCurveNode(CalibrationNode):
    """Term deposit starting after the convention's settlement lag."""

    convention: TermDepositConvention
    tenor: str

    @property
    def node_type(self) -> NodeType:
        return NodeType.TERM_DEPOSIT

    def trade(self, valuation_date: date, market: MarketDataView) -> TermDepositTrade:
        calendar = self.convention.calendar_obj
        start = calendar.add_business_days(
            calendar.adjust(valuation_date), self.convention.settlement_lag_days
        )
        end = calendar.advance(
            start, self.tenor, self.convention.business_day_adjustment, False
        )
        return TermDepositTrade(
            trade_date=valuation_date,
            convention=self.convention,
            start_date=start,
            end_date=end,
            rate=self.rate(market),
        )


@dataclass(frozen=True)
class IborFixingDepositCurveNode(CalibrationNode):
    """Deposit whose rate is the index fixing; not a real market trade."""

    index: IborIndexConvention

    @property
    def node_type(self) -> NodeType:
        return NodeType.IBOR_FIXING_DEPOSIT

    def trade(self, valuation_date: date, market: MarketDataView) -> IborFixingDepositTrade:
        calendar = self.index.calendar_obj
        start = calendar.add_business_days(calendar.adjust(valuation_date), self.index.fixing_days)
        end = calendar.advance(
            start,
            self.index.tenor,
            self.index.business_day_adjustment,
            self.index.end_of_month,
        )
        return IborFixingDepositTrade(
            trade_date=valuation_date,
            index=self.index,
            fixing_date=calendar.add_business_days(start, -self.index.fixing_days),
            start_date=start,
            end_date=end,
            rate=self.rate(market),
        )


@dataclass(frozen=True)
class FraCurveNode(CalibrationNode):
    """FRA starting ``months_to_start`` after spot, e.g. 3M x 6M on EURIBOR 3M."""

    index: IborIndexConvention
    months_to_start: int

    @property
    def node_type(self) -> NodeType:
        return NodeType.FRA

    @property
    def months_to_end(self) -> int:
        return self.months_to_start + tenor_to_months(self.index.tenor)

    def trade(self, valuation_date: date, market: MarketDataView) -> FraTrade:
        calendar = self.index.calendar_obj
        spot = calendar.add_business_days(calendar.adjust(valuation_date), self.index.fixing_days)
        start = calendar.advance(
            spot,
            f"{self.months_to_start}M",
            self.index.business_day_adjustment,
            self.index.end_of_month,
        )
        end = calendar.advance(
            start,
            self.index.tenor,
            self.index.business_day_adjustment,
            self.index.end_of_month,
        )
        return FraTrade(
            trade_date=valuation_date,
            index=self.index,
            months_to_start=self.months_to_start,
            fixing_date=calendar.add_business_days(start, -self.index.fixing_days),
            start_date=start,
            end_date=end,
            rate=self.rate(market),
        )


@dataclass(frozen=True)
class FixedOvernightSwapCurveNode(CalibrationNode):
    """Spot starting fixed vs overnight swap of the given tenor."""

    convention: FixedOvernightSwapConvention
    tenor: str

    @property
    def node_type(self) -> NodeType:
        return NodeType.FIXED_OVERNIGHT_SWAP

    def trade(self, valuation_date: date, market: MarketDataView) -> FixedOvernightSwapTrade:
        calendar = self.convention.index.calendar_obj
        start = calendar.add_business_days(
            calendar.adjust(valuation_date), self.convention.settlement_lag_days
        )
        return FixedOvernightSwapTrade(
            trade_date=valuation_date,
            convention=self.convention,
            tenor=self.tenor,
            start_date=start,
            end_date=calendar.advance(start, self.tenor, BusinessDayAdjustment.MODIFIED_FOLLOWING),
            rate=self.rate(market),
        )


@dataclass(frozen=True)
class FixedIborSwapCurveNode(CalibrationNode):
    """Spot starting fixed vs IBOR swap of the given tenor."""

    convention: FixedIborSwapConvention
    tenor: str

    @property
    def node_type(self) -> NodeType:
        return NodeType.FIXED_IBOR_SWAP

    def trade(self, valuation_date: date, market: MarketDataView) -> FixedIborSwapTrade:
        calendar = self.convention.calendar_obj
        start = calendar.add_business_days(
            calendar.adjust(valuation_date), self.convention.settlement_lag_days
        )
        return FixedIborSwapTrade(
            trade_date=valuation_date,
            convention=self.convention,
            tenor=self.tenor,
            start_date=start,
            end_date=calendar.advance(
                start, self.tenor, self.convention.fixed_business_day_adjustment
            ),
            rate=self.rate(market),
        )


@dataclass(frozen=True)
class IborIborSwapCurveNode(CalibrationNode):
    """Spot starting basis swap; the quote is the spread on the shorter index."""

    convention: IborIborSwapConvention
    tenor: str

    @property
    def node_type(self) -> NodeType:
        return NodeType.IBOR_IBOR_SWAP

    def trade(self, valuation_date: date, market: MarketDataView) -> IborIborSwapTrade:
        calendar = self.convention.calendar_obj
        start = calendar.add_business_days(
            calendar.adjust(valuation_date), self.convention.settlement_lag_days
        )
        return IborIborSwapTrade(
            trade_date=valuation_date,
            convention=self.convention,
            tenor=self.tenor,
            start_date=start,
            end_date=calendar.advance(
                start, self.tenor, self.convention.business_day_adjustment
            ),
            rate=self.rate(market),
        )
