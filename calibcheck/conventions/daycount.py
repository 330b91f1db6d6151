"""
Day count conventions and date conversions.

Conventions are keyed by the names used in the curve settings files
(``Act/365F``, ``Act/360``, ``30E/360``); lookups are case-insensitive.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Union

import QuantLib as ql

DateLike = Union[date, datetime]


def to_date(dt: DateLike) -> date:
    """Convert datetime to date if needed."""
    return dt.date() if isinstance(dt, datetime) else dt


def to_ql_date(dt: DateLike) -> ql.Date:
    d = to_date(dt)
    return ql.Date(d.day, d.month, d.year)


def to_py_date(ql_date: ql.Date) -> date:
    return date(ql_date.year(), ql_date.month(), ql_date.dayOfMonth())


@dataclass(frozen=True)
class DayCountConvention:
    """Named wrapper around a QuantLib day counter."""

    name: str
    quantlib: ql.DayCounter = field(compare=False, repr=False)

    def year_fraction(self, start: DateLike, end: DateLike) -> float:
        return self.quantlib.yearFraction(to_ql_date(start), to_ql_date(end))

    def day_count(self, start: DateLike, end: DateLike) -> int:
        return self.quantlib.dayCount(to_ql_date(start), to_ql_date(end))

    def __str__(self) -> str:
        return self.name


# Money market and overnight legs
ACT_360 = DayCountConvention("Act/360", ql.Actual360())
# Curve time axis
ACT_365F = DayCountConvention("Act/365F", ql.Actual365Fixed())
# EUR swap fixed legs
THIRTY_360E = DayCountConvention("30E/360", ql.Thirty360(ql.Thirty360.European))
ACT_ACT = DayCountConvention("Act/Act ISDA", ql.ActualActual(ql.ActualActual.ISDA))

_ALIASES = {
    ACT_360: ("ACT/360", "ACTUAL/360"),
    ACT_365F: ("ACT/365F", "ACT/365", "ACTUAL/365F", "ACT/365 FIXED"),
    THIRTY_360E: ("30E/360", "30/360E", "30/360 EUROPEAN"),
    ACT_ACT: ("ACT/ACT", "ACTUAL/ACTUAL", "ACT/ACT ISDA"),
}

DAY_COUNT_CONVENTIONS = {
    alias: convention
    for convention, aliases in _ALIASES.items()
    for alias in aliases
}


def get_day_count_convention(name: str) -> DayCountConvention:
    """Get a day count convention by name."""
    key = name.upper().strip()
    if key not in DAY_COUNT_CONVENTIONS:
        raise ValueError(
            f"Unknown day count convention: {name}. "
            f"Available: {list(DAY_COUNT_CONVENTIONS.keys())}"
        )
    return DAY_COUNT_CONVENTIONS[key]
