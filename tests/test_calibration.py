"""Calibration of the bundled EUR curve groups with QuantLib."""

from dataclasses import replace
from datetime import date

import pytest

from calibcheck.calc import (
    FeedIdMapping,
    ObservableMarketData,
    ObservableMarketDataFunction,
    TimeSeriesProvider,
)
from calibcheck.curves import CurveGroupDefinition, CurveGroupEntry
from calibcheck.errors import CalibrationError, MissingMarketDataError
from calibcheck.market import build_snapshot
from calibcheck.pipeline import CalibrationCheck, CheckConfig, CheckStatus, extract_trades
from calibcheck.pricing import (
    CalibratedCurveGroup,
    QuantLibCurveGroupCalibrator,
    present_value_fixed_ibor_swap,
    present_value_fra,
    present_value_ibor_ibor_swap,
)
from calibcheck.trades import (
    FixedIborSwapTrade,
    FixedOvernightSwapTrade,
    FraTrade,
    IborIborSwapTrade,
    TermDepositTrade,
)

IRS_GROUP = "EUR-DSCONOIS-EURIBOR3MIRS-EURIBOR6MIRS"
FIXING_DATE = date(2015, 11, 18)
FIXING = -0.0009


def _market(snapshot, fixings=None):
    return ObservableMarketData(
        snapshot,
        FeedIdMapping.identity(),
        ObservableMarketDataFunction.none(),
        TimeSeriesProvider(fixings),
    )


@pytest.fixture(scope="module")
def evaluation():
    with CalibrationCheck(CheckConfig.default()) as check:
        yield check.evaluate()


@pytest.fixture(scope="module")
def calibrated(evaluation):
    market = _market(evaluation.snapshot, {"EUR-EURIBOR-3M": {FIXING_DATE: FIXING}})
    return QuantLibCurveGroupCalibrator()(evaluation.definition, market)


class TestBundledCurveGroup:
    def test_trade_count(self, evaluation) -> None:
        assert len(evaluation.trades) == evaluation.definition.node_count - 2
        assert len(evaluation.trades) == 56
        assert evaluation.results.row_count == 56
        assert evaluation.results.column_count == 1

    def test_every_instrument_reprices_to_zero(self, evaluation) -> None:
        for trade, result in zip(evaluation.trades, evaluation.results.column(0)):
            assert result.is_success, result.failure
            assert result.value.currency == "EUR"
            assert abs(result.value.amount) < 1e-8, (type(trade).__name__, result.value)

    def test_all_trade_kinds_present(self, evaluation) -> None:
        kinds = {type(t) for t in evaluation.trades}
        assert kinds == {
            TermDepositTrade,
            FixedOvernightSwapTrade,
            FraTrade,
            FixedIborSwapTrade,
            IborIborSwapTrade,
        }

    def test_validation_passes(self) -> None:
        with CalibrationCheck(CheckConfig.default()) as check:
            report = check.run()
        assert report.passed
        assert {c.status for c in report.checks} == {CheckStatus.PASSED}

    def test_repeated_runs_are_identical(self, evaluation) -> None:
        with CalibrationCheck(CheckConfig.default().with_overrides(n_threads=3)) as check:
            again = check.evaluate()
        assert again.results == evaluation.results

    def test_shifted_quote_breaks_repricing(self, evaluation, calibrated) -> None:
        trades = extract_trades(evaluation.definition, evaluation.snapshot)

        swap = [t for t in trades if isinstance(t, FixedIborSwapTrade) and t.tenor == "5Y"][-1]
        shifted = replace(swap, rate=swap.rate + 0.0001)
        pv = present_value_fixed_ibor_swap(shifted, calibrated).amount
        # paying a higher fixed rate loses roughly annuity x 1bp
        assert -6e-4 < pv < -4e-4

    def test_shifted_basis_spread_breaks_repricing(self, evaluation, calibrated) -> None:
        trades = extract_trades(evaluation.definition, evaluation.snapshot)

        basis = next(t for t in trades if isinstance(t, IborIborSwapTrade) and t.tenor == "5Y")
        assert abs(present_value_ibor_ibor_swap(basis, calibrated).amount) < 1e-8
        shifted = replace(basis, rate=basis.rate + 0.0001)
        pv = present_value_ibor_ibor_swap(shifted, calibrated).amount
        assert -6e-4 < pv < -4e-4


class TestIrsCurveGroup:
    def test_alternate_group_reprices_to_zero(self) -> None:
        config = CheckConfig.default().with_overrides(curve_group_name=IRS_GROUP)
        with CalibrationCheck(config) as check:
            evaluation = check.evaluate()
            report = check.validate(evaluation)

        assert evaluation.definition.forward_curve_name("EUR-EURIBOR-3M") == "EUR-EURIBOR3M-IRS"
        assert IborIborSwapTrade not in {type(t) for t in evaluation.trades}
        assert report.passed


class TestCalibrator:
    def test_curve_roles(self, calibrated) -> None:
        assert isinstance(calibrated, CalibratedCurveGroup)
        assert calibrated.discount_curves == {"EUR": "EUR-DSCON-OIS"}
        assert calibrated.forward_curves["EUR-EURIBOR-3M"] == "EUR-EURIBOR3M-BS"
        assert calibrated.forward_curves["EUR-EURIBOR-6M"] == "EUR-EURIBOR6M-IRS"
        curve = calibrated.discount_curve("EUR")
        assert curve.discount(curve.referenceDate()) == pytest.approx(1.0)

    def test_missing_discount_curve(self, evaluation) -> None:
        definition = evaluation.definition
        forward_only = CurveGroupDefinition(
            name="FORWARD-ONLY",
            entries=(CurveGroupEntry("EUR-EURIBOR6M-IRS", index_names=frozenset({"EUR-EURIBOR-6M"})),),
            curve_definitions=(definition.find_curve_definition("EUR-EURIBOR6M-IRS"),),
        )
        with pytest.raises(CalibrationError):
            QuantLibCurveGroupCalibrator()(forward_only, _market(evaluation.snapshot))

    def test_basis_curve_needs_other_forward_curve(self, evaluation) -> None:
        definition = evaluation.definition
        without_6m = CurveGroupDefinition(
            name="NO-6M",
            entries=(
                definition.find_entry("EUR-DSCON-OIS"),
                definition.find_entry("EUR-EURIBOR3M-BS"),
            ),
            curve_definitions=(
                definition.find_curve_definition("EUR-DSCON-OIS"),
                definition.find_curve_definition("EUR-EURIBOR3M-BS"),
            ),
        )
        with pytest.raises(CalibrationError, match="forward curve of EUR-EURIBOR-6M"):
            QuantLibCurveGroupCalibrator()(without_6m, _market(evaluation.snapshot))

    def test_missing_quote_fails_every_cell(self, evaluation) -> None:
        values = dict(evaluation.snapshot.values)
        ticker = next(iter(evaluation.definition.iter_nodes())).quote_id
        del values[ticker]
        snapshot = build_snapshot(evaluation.snapshot.valuation_date, values)

        with CalibrationCheck(CheckConfig.default()) as check:
            results = check.orchestrator.compute(
                evaluation.request.trades[1:], evaluation.request.columns, evaluation.request.rules, snapshot
            )
        assert results.row_count == 55
        assert all(r.is_failure for r in results.column(0))


class TestHistoricalFixings:
    def test_fixings_are_kept_per_index(self, calibrated) -> None:
        assert calibrated.fixings["EUR-EURIBOR-3M"][FIXING_DATE] == FIXING
        assert dict(calibrated.fixings["EUR-EONIA"]) == {}

    def test_seasoned_fra_uses_recorded_fixing(self, evaluation, calibrated) -> None:
        fra = next(t for t in evaluation.trades if isinstance(t, FraTrade) and t.index.tenor == "3M")
        seasoned = replace(fra, fixing_date=FIXING_DATE, rate=FIXING)

        assert calibrated.ibor_rate(fra.index, FIXING_DATE) == FIXING
        assert present_value_fra(seasoned, calibrated).amount == pytest.approx(0.0, abs=1e-15)

    def test_missing_past_fixing(self, evaluation, calibrated) -> None:
        fra = next(t for t in evaluation.trades if isinstance(t, FraTrade) and t.index.tenor == "3M")
        seasoned = replace(fra, fixing_date=date(2015, 11, 17))

        with pytest.raises(MissingMarketDataError, match="EUR-EURIBOR-3M fixing on 2015-11-17"):
            present_value_fra(seasoned, calibrated)

    def test_future_fixing_is_forecast(self, evaluation, calibrated) -> None:
        fra = next(t for t in evaluation.trades if isinstance(t, FraTrade) and t.index.tenor == "3M")

        assert calibrated.ibor_rate(fra.index, fra.fixing_date) == pytest.approx(fra.rate, abs=1e-7)
