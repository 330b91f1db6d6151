"""
Curve group definitions: which curves are calibrated together, what each
curve is used for and from which nodes it is built.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterator, Optional, Tuple

from calibcheck.conventions.daycount import ACT_365F, DayCountConvention

from .nodes import CalibrationNode

CurveGroupName = str
CurveName = str


class CurveValueType(Enum):
    """Quantity stored at the curve pillars."""

    DISCOUNT_FACTOR = "DiscountFactor"
    ZERO_RATE = "ZeroRate"


class Interpolator(Enum):
    """Pillar interpolation supported by the calibrator."""

    LINEAR = "Linear"
    LOG_LINEAR = "LogLinear"
    LOG_CUBIC = "LogNaturalCubic"


@dataclass(frozen=True)
class CurveGroupEntry:
    """Role of one curve in a group: discounting currencies and forward indices."""

    curve_name: CurveName
    discount_currencies: FrozenSet[str] = frozenset()
    index_names: FrozenSet[str] = frozenset()

    def merge(self, other: "CurveGroupEntry") -> "CurveGroupEntry":
        if other.curve_name != self.curve_name:
            raise ValueError(
                f"Cannot merge entries for {self.curve_name} and {other.curve_name}"
            )
        return CurveGroupEntry(
            curve_name=self.curve_name,
            discount_currencies=self.discount_currencies | other.discount_currencies,
            index_names=self.index_names | other.index_names,
        )


@dataclass(frozen=True)
class CurveDefinition:
    """Settings and ordered calibration nodes of a single curve."""

    name: CurveName
    nodes: Tuple[CalibrationNode, ...]
    value_type: CurveValueType = CurveValueType.DISCOUNT_FACTOR
    day_count: DayCountConvention = ACT_365F
    interpolator: Interpolator = Interpolator.LOG_LINEAR

    def __post_init__(self):
        object.__setattr__(self, "nodes", tuple(self.nodes))


@dataclass(frozen=True)
class CurveGroupDefinition:
    """Named set of curves calibrated together from a shared instrument set.

    Curve definitions are kept in configuration order; a curve may only
    depend on curves that precede it.
    """

    name: CurveGroupName
    entries: Tuple[CurveGroupEntry, ...]
    curve_definitions: Tuple[CurveDefinition, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "curve_definitions", tuple(self.curve_definitions))
        entry_names = [entry.curve_name for entry in self.entries]
        if len(set(entry_names)) != len(entry_names):
            raise ValueError(f"Curve group {self.name} has duplicate curve entries")
        defined = {defn.name for defn in self.curve_definitions}
        missing = [defn.name for defn in self.curve_definitions if defn.name not in entry_names]
        if missing:
            raise ValueError(f"Curve group {self.name} has no entry for curves {missing}")
        undefined = [name for name in entry_names if name not in defined]
        if undefined:
            raise ValueError(f"Curve group {self.name} has no definition for curves {undefined}")

    def find_entry(self, curve_name: CurveName) -> Optional[CurveGroupEntry]:
        for entry in self.entries:
            if entry.curve_name == curve_name:
                return entry
        return None

    def find_curve_definition(self, curve_name: CurveName) -> Optional[CurveDefinition]:
        for defn in self.curve_definitions:
            if defn.name == curve_name:
                return defn
        return None

    def discount_curve_name(self, currency: str) -> Optional[CurveName]:
        for entry in self.entries:
            if currency in entry.discount_currencies:
                return entry.curve_name
        return None

    def forward_curve_name(self, index_name: str) -> Optional[CurveName]:
        for entry in self.entries:
            if index_name in entry.index_names:
                return entry.curve_name
        return None

    def iter_nodes(self) -> Iterator[CalibrationNode]:
        """Nodes curve by curve, then node by node within each curve."""
        for defn in self.curve_definitions:
            yield from defn.nodes

    @property
    def node_count(self) -> int:
        return sum(len(defn.nodes) for defn in self.curve_definitions)
