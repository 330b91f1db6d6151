"""
Basic types and enums used across the conventions and nodes.
"""

from enum import Enum

import QuantLib as ql


class Frequency(Enum):
    """Payment frequencies."""

    ANNUAL = 12
    SEMIANNUAL = 6
    QUARTERLY = 3
    MONTHLY = 1

    def months(self) -> int:
        return self.value

    def to_quantlib(self) -> int:
        return _QL_FREQUENCIES[self]


_QL_FREQUENCIES = {
    Frequency.ANNUAL: ql.Annual,
    Frequency.SEMIANNUAL: ql.Semiannual,
    Frequency.QUARTERLY: ql.Quarterly,
    Frequency.MONTHLY: ql.Monthly,
}


class BusinessDayAdjustment(Enum):
    """Business day adjustment rules."""

    NO_ADJUSTMENT = "NO_ADJUSTMENT"
    FOLLOWING = "FOLLOWING"
    MODIFIED_FOLLOWING = "MODIFIED_FOLLOWING"
    PRECEDING = "PRECEDING"
    MODIFIED_PRECEDING = "MODIFIED_PRECEDING"

    def to_quantlib(self) -> int:
        return _QL_ADJUSTMENTS[self]


_QL_ADJUSTMENTS = {
    BusinessDayAdjustment.NO_ADJUSTMENT: ql.Unadjusted,
    BusinessDayAdjustment.FOLLOWING: ql.Following,
    BusinessDayAdjustment.MODIFIED_FOLLOWING: ql.ModifiedFollowing,
    BusinessDayAdjustment.PRECEDING: ql.Preceding,
    BusinessDayAdjustment.MODIFIED_PRECEDING: ql.ModifiedPreceding,
}


class CalendarType(Enum):
    """Predefined calendars."""

    TARGET = "TARGET"
    WEEKEND = "WEEKEND"


class BuySell(Enum):
    """Direction of a trade.

    BUY deposits cash, receives the FRA floating rate and pays the fixed
    rate of a swap.
    """

    BUY = 1
    SELL = -1

    def sign(self) -> int:
        return self.value
