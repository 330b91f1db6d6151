"""
Present value pricers for calibration trades.

All pricers take a trade and a calibrated curve group and return the PV in
the trade currency. Swaps are valued with QuantLib instruments built with
the same schedule conventions as the calibration helpers, so that a trade
built from a node quote reprices to zero on the calibrated curves.
"""

import logging

import QuantLib as ql

from calibcheck.calc.results import CurrencyAmount
from calibcheck.conventions.calendars import parse_tenor
from calibcheck.conventions.daycount import to_ql_date
from calibcheck.trades import (
    FixedIborSwapTrade,
    FixedOvernightSwapTrade,
    FraTrade,
    IborFixingDepositTrade,
    IborIborSwapTrade,
    TermDepositTrade,
)

from .calibration import CalibratedCurveGroup

logger = logging.getLogger(__name__)


def present_value_term_deposit(trade: TermDepositTrade, market: CalibratedCurveGroup) -> CurrencyAmount:
    """PV of a deposit: pay the notional at start, receive it with interest at end."""
    curve = market.discount_curve(trade.currency)
    tau = trade.convention.day_count.year_fraction(trade.start_date, trade.end_date)
    df_start = curve.discount(to_ql_date(trade.start_date))
    df_end = curve.discount(to_ql_date(trade.end_date))
    pv = -df_start + df_end * (1.0 + trade.rate * tau)
    return CurrencyAmount(trade.currency, trade.buy_sell.sign() * trade.notional * pv)


def present_value_ibor_fixing_deposit(
    trade: IborFixingDepositTrade, market: CalibratedCurveGroup
) -> CurrencyAmount:
    """PV of receiving the fixed rate against the index fixing at end date."""
    curve = market.discount_curve(trade.currency)
    forward = market.ibor_rate(trade.index, trade.fixing_date)
    tau = trade.index.day_count.year_fraction(trade.start_date, trade.end_date)
    df_end = curve.discount(to_ql_date(trade.end_date))
    pv = (trade.rate - forward) * tau * df_end
    return CurrencyAmount(trade.currency, trade.buy_sell.sign() * trade.notional * pv)


def present_value_fra(trade: FraTrade, market: CalibratedCurveGroup) -> CurrencyAmount:
    """
    PV of a FRA settled at its start date (ISDA discounting).

    PV = N * (F - K) * tau * DF(start) / (1 + F * tau), where BUY receives
    the floating rate F. A fixing date before the valuation date uses the
    recorded fixing instead of the forward.
    """
    curve = market.discount_curve(trade.currency)
    forward = market.ibor_rate(trade.index, trade.fixing_date)
    tau = trade.index.day_count.year_fraction(trade.start_date, trade.end_date)
    df_start = curve.discount(to_ql_date(trade.start_date))
    pv = (forward - trade.rate) * tau * df_start / (1.0 + forward * tau)
    return CurrencyAmount(trade.currency, trade.buy_sell.sign() * trade.notional * pv)


def present_value_fixed_overnight_swap(
    trade: FixedOvernightSwapTrade, market: CalibratedCurveGroup
) -> CurrencyAmount:
    """PV of a fixed vs overnight swap; BUY pays fixed."""
    conv = trade.convention
    swap = ql.MakeOIS(
        parse_tenor(trade.tenor),
        market.overnight_index(conv.index),
        trade.rate,
        ql.Period(0, ql.Days),
        settlementDays=conv.settlement_lag_days,
        paymentFrequency=conv.payment_frequency.to_quantlib(),
        discountingTermStructure=market.discount_handle(trade.currency),
    )
    # QuantLib swaps default to payer
    return CurrencyAmount(trade.currency, trade.buy_sell.sign() * trade.notional * swap.NPV())


def present_value_fixed_ibor_swap(
    trade: FixedIborSwapTrade, market: CalibratedCurveGroup
) -> CurrencyAmount:
    """PV of a fixed vs IBOR swap; BUY pays fixed."""
    conv = trade.convention
    calendar = conv.calendar_obj.quantlib
    adjustment = conv.fixed_business_day_adjustment.to_quantlib()
    swap = ql.MakeVanillaSwap(
        parse_tenor(trade.tenor),
        market.ibor_index(conv.index),
        trade.rate,
        ql.Period(0, ql.Days),
        settlementDays=conv.settlement_lag_days,
        fixedLegTenor=ql.Period(conv.fixed_frequency.to_quantlib()),
        fixedLegConvention=adjustment,
        fixedLegTerminationDateConvention=adjustment,
        fixedLegCalendar=calendar,
        fixedLegDayCount=conv.fixed_day_count.quantlib,
        fixedLegEndOfMonth=False,
        floatingLegCalendar=calendar,
        floatingLegEndOfMonth=False,
        discountingTermStructure=market.discount_handle(trade.currency),
    )
    return CurrencyAmount(trade.currency, trade.buy_sell.sign() * trade.notional * swap.NPV())


def _ibor_leg(trade: IborIborSwapTrade, index: ql.IborIndex, spread: float) -> ql.Leg:
    conv = trade.convention
    adjustment = conv.business_day_adjustment.to_quantlib()
    schedule = ql.Schedule(
        to_ql_date(trade.start_date),
        to_ql_date(trade.end_date),
        index.tenor(),
        conv.calendar_obj.quantlib,
        adjustment,
        adjustment,
        ql.DateGeneration.Forward,
        conv.end_of_month,
    )
    return ql.IborLeg(
        [1.0],
        schedule,
        index,
        paymentDayCounter=index.dayCounter(),
        paymentConvention=ql.Following,
        spreads=[spread],
    )


def present_value_ibor_ibor_swap(
    trade: IborIborSwapTrade, market: CalibratedCurveGroup
) -> CurrencyAmount:
    """PV of a basis swap; BUY pays the spread index leg plus the quoted spread."""
    conv = trade.convention
    swap = ql.Swap(
        _ibor_leg(trade, market.ibor_index(conv.spread_index), trade.rate),
        _ibor_leg(trade, market.ibor_index(conv.flat_index), 0.0),
    )
    swap.setPricingEngine(ql.DiscountingSwapEngine(market.discount_handle(trade.currency)))
    return CurrencyAmount(trade.currency, trade.buy_sell.sign() * trade.notional * swap.NPV())
