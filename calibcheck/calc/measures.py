"""Measures and result columns."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Measure(Enum):
    """Named quantity computed per trade."""

    PRESENT_VALUE = "PresentValue"


@dataclass(frozen=True)
class Column:
    measure: Measure
    name: Optional[str] = None

    @classmethod
    def of(cls, measure: Measure, name: Optional[str] = None) -> "Column":
        return cls(measure=measure, name=name)

    @property
    def header(self) -> str:
        return self.name or self.measure.value
