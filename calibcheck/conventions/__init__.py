"""Market conventions: calendars, day counts, indices and trade conventions."""

from .calendars import TARGET, Calendar, get_calendar, parse_tenor, tenor_to_months
from .daycount import (
    ACT_360,
    ACT_365F,
    THIRTY_360E,
    DayCountConvention,
    get_day_count_convention,
    to_ql_date,
    to_py_date,
)
from .indices import (
    EUR_EONIA,
    EUR_ESTR,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    IborIndexConvention,
    OvernightIndexConvention,
    get_ibor_index,
    get_index,
    get_overnight_index,
)
from .instruments import (
    EUR_DEPOSIT_T0,
    EUR_DEPOSIT_T2,
    EUR_EURIBOR_3M_EURIBOR_6M,
    EUR_FIXED_1Y_EONIA_OIS,
    EUR_FIXED_1Y_EURIBOR_3M,
    EUR_FIXED_1Y_EURIBOR_6M,
    FixedIborSwapConvention,
    FixedOvernightSwapConvention,
    IborIborSwapConvention,
    TermDepositConvention,
    get_trade_convention,
)
from .types import BusinessDayAdjustment, BuySell, CalendarType, Frequency

__all__ = [
    "Calendar",
    "TARGET",
    "get_calendar",
    "parse_tenor",
    "tenor_to_months",
    "DayCountConvention",
    "ACT_360",
    "ACT_365F",
    "THIRTY_360E",
    "get_day_count_convention",
    "to_ql_date",
    "to_py_date",
    "IborIndexConvention",
    "OvernightIndexConvention",
    "EUR_EONIA",
    "EUR_ESTR",
    "EUR_EURIBOR_3M",
    "EUR_EURIBOR_6M",
    "get_index",
    "get_ibor_index",
    "get_overnight_index",
    "TermDepositConvention",
    "FixedOvernightSwapConvention",
    "FixedIborSwapConvention",
    "IborIborSwapConvention",
    "EUR_DEPOSIT_T0",
    "EUR_DEPOSIT_T2",
    "EUR_FIXED_1Y_EONIA_OIS",
    "EUR_FIXED_1Y_EURIBOR_3M",
    "EUR_FIXED_1Y_EURIBOR_6M",
    "EUR_EURIBOR_3M_EURIBOR_6M",
    "get_trade_convention",
    "BusinessDayAdjustment",
    "BuySell",
    "CalendarType",
    "Frequency",
]
