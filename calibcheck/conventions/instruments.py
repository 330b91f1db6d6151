"""
Deposit and swap trade conventions used by the calibration nodes.
"""

from dataclasses import dataclass, field
from typing import Dict, Union

from .calendars import Calendar, get_calendar
from .daycount import ACT_360, THIRTY_360E, DayCountConvention
from .indices import (
    EUR_EONIA,
    EUR_EURIBOR_3M,
    EUR_EURIBOR_6M,
    IborIndexConvention,
    OvernightIndexConvention,
)
from .types import BusinessDayAdjustment, CalendarType, Frequency


@dataclass(frozen=True)
class TermDepositConvention:
    """Definition of a deposit/cash instrument convention."""

    name: str
    currency: str
    day_count: DayCountConvention
    settlement_lag_days: int
    business_day_adjustment: BusinessDayAdjustment
    calendar: CalendarType
    _calendar_obj: Calendar = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_calendar_obj", get_calendar(self.calendar.value))

    @property
    def calendar_obj(self) -> Calendar:
        """Get the actual calendar object."""
        return self._calendar_obj


@dataclass(frozen=True)
class FixedOvernightSwapConvention:
    """Fixed vs compounded overnight swap (OIS) convention.

    Both legs pay with ``payment_frequency`` and accrue on the overnight
    index day count.
    """

    name: str
    index: OvernightIndexConvention
    settlement_lag_days: int
    payment_frequency: Frequency = Frequency.ANNUAL


@dataclass(frozen=True)
class FixedIborSwapConvention:
    """Fixed vs IBOR swap convention; the floating leg follows the index."""

    name: str
    index: IborIndexConvention
    fixed_frequency: Frequency
    fixed_day_count: DayCountConvention
    fixed_business_day_adjustment: BusinessDayAdjustment
    calendar: CalendarType
    _calendar_obj: Calendar = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_calendar_obj", get_calendar(self.calendar.value))

    @property
    def calendar_obj(self) -> Calendar:
        """Get the actual calendar object."""
        return self._calendar_obj

    @property
    def settlement_lag_days(self) -> int:
        return self.index.fixing_days


@dataclass(frozen=True)
class IborIborSwapConvention:
    """IBOR vs IBOR basis swap; the quoted spread is paid on ``spread_index``.

    Each leg pays at the frequency of its own index, on a schedule rolled
    forward from the spot date with the swap calendar and adjustment.
    """

    name: str
    spread_index: IborIndexConvention
    flat_index: IborIndexConvention
    business_day_adjustment: BusinessDayAdjustment
    calendar: CalendarType
    end_of_month: bool = False
    _calendar_obj: Calendar = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.spread_index.currency != self.flat_index.currency:
            raise ValueError(f"Basis swap {self.name} mixes currencies")
        object.__setattr__(self, "_calendar_obj", get_calendar(self.calendar.value))

    @property
    def calendar_obj(self) -> Calendar:
        return self._calendar_obj

    @property
    def currency(self) -> str:
        return self.spread_index.currency

    @property
    def settlement_lag_days(self) -> int:
        return self.spread_index.fixing_days


EUR_DEPOSIT_T0 = TermDepositConvention(
    name="EUR-DEPOSIT-T0",
    currency="EUR",
    day_count=ACT_360,
    settlement_lag_days=0,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

EUR_DEPOSIT_T2 = TermDepositConvention(
    name="EUR-DEPOSIT-T2",
    currency="EUR",
    day_count=ACT_360,
    settlement_lag_days=2,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

EUR_FIXED_1Y_EONIA_OIS = FixedOvernightSwapConvention(
    name="EUR-FIXED-1Y-EONIA-OIS",
    index=EUR_EONIA,
    settlement_lag_days=2,
    payment_frequency=Frequency.ANNUAL,
)

EUR_FIXED_1Y_EURIBOR_3M = FixedIborSwapConvention(
    name="EUR-FIXED-1Y-EURIBOR-3M",
    index=EUR_EURIBOR_3M,
    fixed_frequency=Frequency.ANNUAL,
    fixed_day_count=THIRTY_360E,
    fixed_business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

EUR_FIXED_1Y_EURIBOR_6M = FixedIborSwapConvention(
    name="EUR-FIXED-1Y-EURIBOR-6M",
    index=EUR_EURIBOR_6M,
    fixed_frequency=Frequency.ANNUAL,
    fixed_day_count=THIRTY_360E,
    fixed_business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

EUR_EURIBOR_3M_EURIBOR_6M = IborIborSwapConvention(
    name="EUR-EURIBOR-3M-EURIBOR-6M",
    spread_index=EUR_EURIBOR_3M,
    flat_index=EUR_EURIBOR_6M,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    calendar=CalendarType.TARGET,
)

TradeConvention = Union[
    TermDepositConvention,
    FixedOvernightSwapConvention,
    FixedIborSwapConvention,
    IborIborSwapConvention,
]

TRADE_CONVENTIONS: Dict[str, TradeConvention] = {
    convention.name: convention
    for convention in (
        EUR_DEPOSIT_T0,
        EUR_DEPOSIT_T2,
        EUR_FIXED_1Y_EONIA_OIS,
        EUR_FIXED_1Y_EURIBOR_3M,
        EUR_FIXED_1Y_EURIBOR_6M,
        EUR_EURIBOR_3M_EURIBOR_6M,
    )
}


def get_trade_convention(name: str) -> TradeConvention:
    """Get a deposit or swap convention by name."""
    key = name.upper().strip()
    if key not in TRADE_CONVENTIONS:
        raise ValueError(
            f"Unknown trade convention: {name}. "
            f"Available: {list(TRADE_CONVENTIONS.keys())}"
        )
    return TRADE_CONVENTIONS[key]
