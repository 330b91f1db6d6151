"""
Holiday calendars and tenor arithmetic on top of QuantLib.
"""

import re
from dataclasses import dataclass, field

import QuantLib as ql

from .daycount import DateLike, to_ql_date, to_py_date
from .types import BusinessDayAdjustment

_TENOR_RE = re.compile(r"^(\d+)([DWMY])$")
_TENOR_UNITS = {"D": ql.Days, "W": ql.Weeks, "M": ql.Months, "Y": ql.Years}


def parse_tenor(tenor: str) -> ql.Period:
    """Parse a tenor such as '1D', '2W', '3M', '10Y' or 'ON' into a Period."""
    text = tenor.upper().strip()
    if text == "ON":
        return ql.Period(1, ql.Days)
    match = _TENOR_RE.match(text)
    if match is None:
        raise ValueError(f"Unsupported tenor format: {tenor}")
    return ql.Period(int(match.group(1)), _TENOR_UNITS[match.group(2)])


def tenor_to_months(tenor: str) -> int:
    """Number of months in a month or year tenor."""
    period = parse_tenor(tenor)
    if period.units() == ql.Months:
        return period.length()
    if period.units() == ql.Years:
        return period.length() * 12
    raise ValueError(f"Unsupported tenor: {tenor}")


@dataclass(frozen=True)
class Calendar:
    """Business day calendar backed by a QuantLib calendar."""

    name: str
    quantlib: ql.Calendar = field(compare=False, repr=False)

    def is_business_day(self, dt: DateLike) -> bool:
        return self.quantlib.isBusinessDay(to_ql_date(dt))

    def adjust(
        self,
        dt: DateLike,
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.FOLLOWING,
    ):
        return to_py_date(self.quantlib.adjust(to_ql_date(dt), adjustment.to_quantlib()))

    def add_business_days(self, start_date: DateLike, days: int):
        """Move by a signed number of business days."""
        return to_py_date(self.quantlib.advance(to_ql_date(start_date), days, ql.Days))

    def advance(
        self,
        start_date: DateLike,
        tenor,
        adjustment: BusinessDayAdjustment = BusinessDayAdjustment.MODIFIED_FOLLOWING,
        end_of_month: bool = False,
    ):
        """Add a tenor (string or Period) to a date and roll the result."""
        period = parse_tenor(tenor) if isinstance(tenor, str) else tenor
        moved = self.quantlib.advance(
            to_ql_date(start_date), period, adjustment.to_quantlib(), end_of_month
        )
        return to_py_date(moved)


TARGET = Calendar("TARGET", ql.TARGET())
WEEKENDS_ONLY = Calendar("WEEKEND", ql.WeekendsOnly())

CALENDARS = {
    "TARGET": TARGET,
    "EUTA": TARGET,
    "EUR": TARGET,
    "WEEKEND": WEEKENDS_ONLY,
}


def get_calendar(name: str) -> Calendar:
    key = name.upper().strip()
    if key not in CALENDARS:
        raise ValueError(
            f"Unknown calendar: {name}. Available: {list(CALENDARS.keys())}"
        )
    return CALENDARS[key]
