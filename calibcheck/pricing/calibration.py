"""
Curve group calibration using QuantLib.

Each curve of a group is bootstrapped from rate helpers built from its
nodes, in configuration order. A curve registered as the discount curve
of a currency is used for discounting by the helpers of every later curve
in that currency; the curve under construction discounts with itself when
it is its own discount curve. Basis swap nodes project their other leg
off a forward curve calibrated earlier in the group.

Index fixings before the valuation date come from the market time series
and are kept on the calibrated group for the pricers.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Mapping, Optional, Protocol

import QuantLib as ql

from calibcheck.conventions.calendars import parse_tenor
from calibcheck.conventions.daycount import to_ql_date
from calibcheck.conventions.indices import (
    IborIndexConvention,
    OvernightIndexConvention,
    to_ql_currency,
)
from calibcheck.curves.definitions import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveGroupEntry,
    CurveValueType,
    Interpolator,
)
from calibcheck.curves.nodes import (
    CalibrationNode,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    IborIborSwapCurveNode,
    MarketDataView,
    TermDepositCurveNode,
)
from calibcheck.errors import CalibrationError, MissingMarketDataError

logger = logging.getLogger(__name__)

_CURVE_CLASSES = {
    (CurveValueType.DISCOUNT_FACTOR, Interpolator.LOG_LINEAR): ql.PiecewiseLogLinearDiscount,
    (CurveValueType.DISCOUNT_FACTOR, Interpolator.LOG_CUBIC): ql.PiecewiseLogCubicDiscount,
    (CurveValueType.ZERO_RATE, Interpolator.LINEAR): ql.PiecewiseLinearZero,
}


def node_currency(node: CalibrationNode) -> str:
    """Currency whose discount curve a node's instrument uses."""
    if isinstance(node, TermDepositCurveNode):
        return node.convention.currency
    if isinstance(node, (IborFixingDepositCurveNode, FraCurveNode)):
        return node.index.currency
    if isinstance(node, (FixedOvernightSwapCurveNode, FixedIborSwapCurveNode)):
        return node.convention.index.currency
    if isinstance(node, IborIborSwapCurveNode):
        return node.convention.currency
    raise CalibrationError(f"Unsupported node type: {type(node).__name__}")


class CalibrationMarket(MarketDataView, Protocol):
    """Quote source that also supplies historical fixings by index name."""

    def time_series(self, key: str) -> Mapping[date, float]:
        ...


@dataclass
class CalibratedCurveGroup:
    """Calibrated QuantLib curves of a group and the roles they play."""

    name: str
    valuation_date: date
    curves: Dict[str, ql.YieldTermStructure] = field(default_factory=dict)
    handles: Dict[str, ql.YieldTermStructureHandle] = field(default_factory=dict)
    discount_curves: Dict[str, str] = field(default_factory=dict)
    forward_curves: Dict[str, str] = field(default_factory=dict)
    fixings: Dict[str, Mapping[date, float]] = field(default_factory=dict)

    def add(self, curve_name: str, curve: ql.YieldTermStructure, entry: CurveGroupEntry) -> None:
        self.curves[curve_name] = curve
        self.handles[curve_name] = ql.YieldTermStructureHandle(curve)
        for currency in entry.discount_currencies:
            self.discount_curves[currency] = curve_name
        for index_name in entry.index_names:
            self.forward_curves[index_name] = curve_name

    def discount_curve(self, currency: str) -> ql.YieldTermStructure:
        return self.curves[self._discount_name(currency)]

    def discount_handle(self, currency: str) -> ql.YieldTermStructureHandle:
        return self.handles[self._discount_name(currency)]

    def forward_handle(self, index_name: str) -> ql.YieldTermStructureHandle:
        try:
            return self.handles[self.forward_curves[index_name]]
        except KeyError:
            raise CalibrationError(
                f"Curve group {self.name} has no forward curve for {index_name}"
            ) from None

    def ibor_index(self, convention: IborIndexConvention) -> ql.IborIndex:
        return convention.to_quantlib(self.forward_handle(convention.name))

    def overnight_index(self, convention: OvernightIndexConvention) -> ql.OvernightIndex:
        return convention.to_quantlib(self.forward_handle(convention.name))

    def historical_fixing(self, index_name: str, fixing_date: date) -> float:
        try:
            return self.fixings[index_name][fixing_date]
        except KeyError:
            raise MissingMarketDataError(f"{index_name} fixing on {fixing_date.isoformat()}") from None

    def ibor_rate(self, convention: IborIndexConvention, fixing_date: date) -> float:
        """Rate of an IBOR index fixing: the recorded fixing if in the past, forecast otherwise."""
        if fixing_date < self.valuation_date:
            return self.historical_fixing(convention.name, fixing_date)
        return self.ibor_index(convention).fixing(to_ql_date(fixing_date))

    def _discount_name(self, currency: str) -> str:
        try:
            return self.discount_curves[currency]
        except KeyError:
            raise CalibrationError(
                f"Curve group {self.name} has no discount curve for {currency}"
            ) from None


@dataclass
class CalibratorConfig:
    """Configuration knobs for the QuantLib calibrator."""

    extrapolation: bool = True


class QuantLibCurveGroupCalibrator:
    """Market data function building a CalibratedCurveGroup from a definition."""

    def __init__(self, config: Optional[CalibratorConfig] = None):
        self.config = config or CalibratorConfig()

    def __call__(self, definition: CurveGroupDefinition, market: CalibrationMarket) -> CalibratedCurveGroup:
        return self.calibrate(definition, market)

    def calibrate(self, definition: CurveGroupDefinition, market: CalibrationMarket) -> CalibratedCurveGroup:
        """
        Calibrate all curves of a group.

        Args:
            definition: Curve group definition
            market: Quotes at the valuation date and historical index fixings

        Returns:
            Calibrated curve group

        Raises:
            CalibrationError: If a curve cannot be built or fails to converge
            MissingMarketDataError: If a node quote is unavailable
        """
        ql_ref_date = self._setup_quantlib_environment(market.valuation_date)
        group = CalibratedCurveGroup(name=definition.name, valuation_date=market.valuation_date)
        for entry in definition.entries:
            for index_name in entry.index_names:
                group.fixings[index_name] = market.time_series(index_name)

        for curve_defn in definition.curve_definitions:
            entry = definition.find_entry(curve_defn.name)
            helpers = [
                self._create_rate_helper(node, market, group, entry)
                for node in curve_defn.nodes
            ]
            if not helpers:
                raise CalibrationError(f"Curve {curve_defn.name} has no calibration nodes")
            curve = self._build_quantlib_curve(ql_ref_date, helpers, curve_defn)
            group.add(curve_defn.name, curve, entry)
            logger.debug(
                "Calibrated curve %s from %d nodes (%s, %s)",
                curve_defn.name, len(helpers), curve_defn.value_type.value, curve_defn.interpolator.value,
            )
        return group

    def _setup_quantlib_environment(self, valuation_date: date) -> ql.Date:
        """Setup QuantLib environment and return reference date."""
        ql_ref_date = to_ql_date(valuation_date)
        ql.Settings.instance().evaluationDate = ql_ref_date
        return ql_ref_date

    def _discounting_handle(
        self, node: CalibrationNode, group: CalibratedCurveGroup, entry: CurveGroupEntry
    ) -> ql.YieldTermStructureHandle:
        currency = node_currency(node)
        if currency in entry.discount_currencies:
            # the curve discounts its own instruments
            return ql.YieldTermStructureHandle()
        if currency not in group.discount_curves:
            raise CalibrationError(
                f"Curve {entry.curve_name} needs the {currency} discount curve, "
                f"which must be calibrated before it"
            )
        return group.discount_handle(currency)

    def _create_rate_helper(
        self,
        node: CalibrationNode,
        market: MarketDataView,
        group: CalibratedCurveGroup,
        entry: CurveGroupEntry,
    ) -> ql.RateHelper:
        """Create the QuantLib rate helper matching a node."""
        quote = ql.QuoteHandle(ql.SimpleQuote(node.rate(market)))

        if isinstance(node, TermDepositCurveNode):
            conv = node.convention
            deposit_index = ql.IborIndex(
                f"{conv.name}-{node.tenor}",
                parse_tenor(node.tenor),
                conv.settlement_lag_days,
                to_ql_currency(conv.currency),
                conv.calendar_obj.quantlib,
                conv.business_day_adjustment.to_quantlib(),
                False,
                conv.day_count.quantlib,
            )
            return ql.DepositRateHelper(quote, deposit_index)

        if isinstance(node, IborFixingDepositCurveNode):
            return ql.DepositRateHelper(quote, node.index.to_quantlib())

        if isinstance(node, FraCurveNode):
            return ql.FraRateHelper(quote, node.months_to_start, node.index.to_quantlib())

        if isinstance(node, FixedOvernightSwapCurveNode):
            conv = node.convention
            return ql.OISRateHelper(
                conv.settlement_lag_days,
                parse_tenor(node.tenor),
                quote,
                conv.index.to_quantlib(),
                self._discounting_handle(node, group, entry),
                False,
                0,
                ql.Following,
                conv.payment_frequency.to_quantlib(),
            )

        if isinstance(node, FixedIborSwapCurveNode):
            conv = node.convention
            return ql.SwapRateHelper(
                quote,
                parse_tenor(node.tenor),
                conv.calendar_obj.quantlib,
                conv.fixed_frequency.to_quantlib(),
                conv.fixed_business_day_adjustment.to_quantlib(),
                conv.fixed_day_count.quantlib,
                conv.index.to_quantlib(),
                ql.QuoteHandle(),
                ql.Period(0, ql.Days),
                self._discounting_handle(node, group, entry),
            )

        if isinstance(node, IborIborSwapCurveNode):
            return self._basis_swap_helper(node, quote, group, entry)

        raise CalibrationError(f"Unsupported node type: {type(node).__name__}")

    def _basis_swap_helper(
        self,
        node: IborIborSwapCurveNode,
        quote: ql.QuoteHandle,
        group: CalibratedCurveGroup,
        entry: CurveGroupEntry,
    ) -> ql.RateHelper:
        """
        Basis swap helper bootstrapping whichever leg's index the curve forecasts.

        The other leg is projected off its already calibrated forward curve.
        """
        conv = node.convention
        if conv.spread_index.name in entry.index_names:
            bootstrap_base, other = True, conv.flat_index
        elif conv.flat_index.name in entry.index_names:
            bootstrap_base, other = False, conv.spread_index
        else:
            raise CalibrationError(
                f"Curve {entry.curve_name} forecasts neither index of basis swap {node.label}"
            )
        if other.name not in group.forward_curves:
            raise CalibrationError(
                f"Curve {entry.curve_name} needs the forward curve of {other.name}, "
                f"which must be calibrated before it"
            )
        if bootstrap_base:
            base_index = conv.spread_index.to_quantlib()
            other_index = group.ibor_index(conv.flat_index)
        else:
            base_index = group.ibor_index(conv.spread_index)
            other_index = conv.flat_index.to_quantlib()
        return ql.IborIborBasisSwapRateHelper(
            quote,
            parse_tenor(node.tenor),
            conv.settlement_lag_days,
            conv.calendar_obj.quantlib,
            conv.business_day_adjustment.to_quantlib(),
            conv.end_of_month,
            base_index,
            other_index,
            self._discounting_handle(node, group, entry),
            bootstrap_base,
        )

    def _build_quantlib_curve(
        self,
        ql_ref_date: ql.Date,
        helpers: List[ql.RateHelper],
        curve_defn: CurveDefinition,
    ) -> ql.YieldTermStructure:
        """Build QuantLib piecewise yield curve and force its bootstrap."""
        key = (curve_defn.value_type, curve_defn.interpolator)
        if key not in _CURVE_CLASSES:
            raise CalibrationError(
                f"Curve {curve_defn.name}: unsupported combination "
                f"{curve_defn.value_type.value}/{curve_defn.interpolator.value}"
            )
        curve_class = _CURVE_CLASSES[key]
        try:
            curve = curve_class(
                ql_ref_date,
                helpers,
                curve_defn.day_count.quantlib,
            )
            if self.config.extrapolation:
                curve.enableExtrapolation()
            curve.discount(curve.maxDate())
        except RuntimeError as e:
            logger.error(
                "Failed to bootstrap curve %s for %s: %s",
                curve_defn.name, ql_ref_date.ISO(), e,
            )
            raise CalibrationError(f"Failed to bootstrap curve {curve_defn.name}: {e}") from e
        return curve
