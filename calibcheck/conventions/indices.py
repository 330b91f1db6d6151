"""
Rate index conventions and their QuantLib index objects.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Union

import QuantLib as ql

from .calendars import Calendar, get_calendar, parse_tenor
from .daycount import ACT_360, DayCountConvention
from .types import BusinessDayAdjustment, CalendarType

_CURRENCIES = {
    "EUR": ql.EURCurrency,
    "USD": ql.USDCurrency,
    "GBP": ql.GBPCurrency,
}


def to_ql_currency(code: str) -> ql.Currency:
    try:
        return _CURRENCIES[code]()
    except KeyError:
        raise ValueError(f"Unsupported currency: {code}") from None


@dataclass(frozen=True)
class IborIndexConvention:
    """Definition of a term (IBOR) rate index."""

    name: str
    currency: str
    tenor: str
    fixing_days: int
    day_count: DayCountConvention
    business_day_adjustment: BusinessDayAdjustment
    end_of_month: bool
    calendar: CalendarType
    _calendar_obj: Calendar = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_calendar_obj", get_calendar(self.calendar.value))

    @property
    def calendar_obj(self) -> Calendar:
        """Get the actual calendar object."""
        return self._calendar_obj

    def to_quantlib(
        self, forwarding: Optional[ql.YieldTermStructureHandle] = None
    ) -> ql.IborIndex:
        """Create the QuantLib index, optionally linked to a forwarding curve."""
        return ql.IborIndex(
            self.name,
            parse_tenor(self.tenor),
            self.fixing_days,
            to_ql_currency(self.currency),
            self._calendar_obj.quantlib,
            self.business_day_adjustment.to_quantlib(),
            self.end_of_month,
            self.day_count.quantlib,
            forwarding or ql.YieldTermStructureHandle(),
        )


@dataclass(frozen=True)
class OvernightIndexConvention:
    """Definition of an overnight rate index."""

    name: str
    currency: str
    fixing_days: int
    day_count: DayCountConvention
    calendar: CalendarType
    _calendar_obj: Calendar = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_calendar_obj", get_calendar(self.calendar.value))

    @property
    def calendar_obj(self) -> Calendar:
        """Get the actual calendar object."""
        return self._calendar_obj

    def to_quantlib(
        self, forwarding: Optional[ql.YieldTermStructureHandle] = None
    ) -> ql.OvernightIndex:
        """Create the QuantLib overnight index, optionally linked to a curve."""
        return ql.OvernightIndex(
            self.name,
            self.fixing_days,
            to_ql_currency(self.currency),
            self._calendar_obj.quantlib,
            self.day_count.quantlib,
            forwarding or ql.YieldTermStructureHandle(),
        )


IndexConvention = Union[IborIndexConvention, OvernightIndexConvention]


EUR_EONIA = OvernightIndexConvention(
    name="EUR-EONIA",
    currency="EUR",
    fixing_days=0,
    day_count=ACT_360,
    calendar=CalendarType.TARGET,
)

EUR_ESTR = OvernightIndexConvention(
    name="EUR-ESTR",
    currency="EUR",
    fixing_days=0,
    day_count=ACT_360,
    calendar=CalendarType.TARGET,
)

EUR_EURIBOR_3M = IborIndexConvention(
    name="EUR-EURIBOR-3M",
    currency="EUR",
    tenor="3M",
    fixing_days=2,
    day_count=ACT_360,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month=True,
    calendar=CalendarType.TARGET,
)

EUR_EURIBOR_6M = IborIndexConvention(
    name="EUR-EURIBOR-6M",
    currency="EUR",
    tenor="6M",
    fixing_days=2,
    day_count=ACT_360,
    business_day_adjustment=BusinessDayAdjustment.MODIFIED_FOLLOWING,
    end_of_month=True,
    calendar=CalendarType.TARGET,
)

INDICES: Dict[str, IndexConvention] = {
    index.name: index for index in (EUR_EONIA, EUR_ESTR, EUR_EURIBOR_3M, EUR_EURIBOR_6M)
}


def get_index(name: str) -> IndexConvention:
    """Get an index convention by name (e.g. 'EUR-EURIBOR-3M')."""
    key = name.upper().strip()
    if key not in INDICES:
        raise ValueError(f"Unknown index: {name}. Available: {list(INDICES.keys())}")
    return INDICES[key]


def get_ibor_index(name: str) -> IborIndexConvention:
    index = get_index(name)
    if not isinstance(index, IborIndexConvention):
        raise ValueError(f"Index {name} is not an IBOR index")
    return index


def get_overnight_index(name: str) -> OvernightIndexConvention:
    index = get_index(name)
    if not isinstance(index, OvernightIndexConvention):
        raise ValueError(f"Index {name} is not an overnight index")
    return index
