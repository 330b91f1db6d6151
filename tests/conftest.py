"""Shared pytest fixtures.

Provides:
- valuation_date: the example valuation date (Friday 2015-11-20)
- small_group / small_snapshot: a two-curve EUR group with matching quotes
- fake_components: calculation components whose calibrator and pricers
  need no QuantLib curves, with per-trade PV offsets for perturbation
"""

from datetime import date
from typing import Dict

import pytest

from calibcheck.calc.marketdata import CURVE_GROUP
from calibcheck.calc.measures import Measure
from calibcheck.calc.results import CurrencyAmount
from calibcheck.calc.rules import PricingRules
from calibcheck.conventions import (
    EUR_DEPOSIT_T0,
    EUR_EURIBOR_3M,
    EUR_FIXED_1Y_EONIA_OIS,
    EUR_FIXED_1Y_EURIBOR_3M,
)
from calibcheck.curves import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveGroupEntry,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    TermDepositCurveNode,
)
from calibcheck.market import QuoteId, build_snapshot
from calibcheck.pipeline import CalculationComponents
from calibcheck.trades import Trade

SMALL_GROUP = "EUR-TEST-GROUP"

SMALL_QUOTES = {
    "EUR-DEP-ON": -0.0013,
    "EUR-OIS-6M": -0.0019,
    "EUR-OIS-1Y": -0.0023,
    "EUR-OIS-2Y": -0.0027,
    "EUR-EURIBOR-3M": -0.0009,
    "EUR-FRA3M-3Mx6M": -0.0013,
    "EUR-IRS3M-2Y": -0.0012,
    "EUR-IRS3M-5Y": 0.0019,
}


@pytest.fixture
def valuation_date() -> date:
    return date(2015, 11, 20)


@pytest.fixture
def small_group() -> CurveGroupDefinition:
    q = QuoteId.of
    ois_nodes = (
        TermDepositCurveNode("DEP-ON", q("EUR-DEP-ON"), EUR_DEPOSIT_T0, "1D"),
        FixedOvernightSwapCurveNode("OIS-6M", q("EUR-OIS-6M"), EUR_FIXED_1Y_EONIA_OIS, "6M"),
        FixedOvernightSwapCurveNode("OIS-1Y", q("EUR-OIS-1Y"), EUR_FIXED_1Y_EONIA_OIS, "1Y"),
        FixedOvernightSwapCurveNode("OIS-2Y", q("EUR-OIS-2Y"), EUR_FIXED_1Y_EONIA_OIS, "2Y"),
    )
    fwd_nodes = (
        IborFixingDepositCurveNode("IFD-3M", q("EUR-EURIBOR-3M"), EUR_EURIBOR_3M),
        FraCurveNode("FRA-3x6", q("EUR-FRA3M-3Mx6M"), EUR_EURIBOR_3M, 3),
        FixedIborSwapCurveNode("IRS-2Y", q("EUR-IRS3M-2Y"), EUR_FIXED_1Y_EURIBOR_3M, "2Y"),
        FixedIborSwapCurveNode("IRS-5Y", q("EUR-IRS3M-5Y"), EUR_FIXED_1Y_EURIBOR_3M, "5Y"),
    )
    return CurveGroupDefinition(
        name=SMALL_GROUP,
        entries=(
            CurveGroupEntry(
                "EUR-OIS", discount_currencies=frozenset({"EUR"}), index_names=frozenset({"EUR-EONIA"})
            ),
            CurveGroupEntry("EUR-3M", index_names=frozenset({"EUR-EURIBOR-3M"})),
        ),
        curve_definitions=(
            CurveDefinition("EUR-OIS", ois_nodes),
            CurveDefinition("EUR-3M", fwd_nodes),
        ),
    )


@pytest.fixture
def small_snapshot(valuation_date):
    return build_snapshot(
        valuation_date, {QuoteId.of(ticker): value for ticker, value in SMALL_QUOTES.items()}
    )


class FakeCurveGroup:
    """Stands in for a calibrated group; records what it was built from."""

    def __init__(self, definition, market):
        self.definition = definition
        self.valuation_date = market.valuation_date


class FakeCalibrator:
    def __init__(self, error: Exception = None):
        self.error = error
        self.calls = 0

    def __call__(self, definition, market):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return FakeCurveGroup(definition, market)


def fake_pricing_rules(offsets: Dict[Trade, float] = None) -> PricingRules:
    if offsets is None:
        offsets = {}

    def present_value(trade, market):
        return CurrencyAmount(trade.currency, offsets.get(trade, 0.0))

    return PricingRules.empty().with_function(Trade, Measure.PRESENT_VALUE, present_value)


def make_components(offsets=None, calibrator=None) -> CalculationComponents:
    return CalculationComponents(
        pricing_rules=fake_pricing_rules(offsets),
        market_data_functions={CURVE_GROUP: calibrator or FakeCalibrator()},
    )


@pytest.fixture
def fake_components() -> CalculationComponents:
    return make_components()
