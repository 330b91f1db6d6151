import pytest

from calibcheck.calc import (
    CurrencyAmount,
    FailureReason,
    MultiCurrencyAmount,
    Result,
    Results,
)
from calibcheck.errors import (
    MalformedRequestError,
    ToleranceViolationError,
    UnexpectedResultTypeError,
    ValidationFailedError,
)
from calibcheck.pipeline import (
    CalculationOrchestrator,
    CheckStatus,
    ResultValidator,
    build_request,
    extract_trades,
)

from conftest import make_components


def _results(*values):
    return Results(len(values), 1, tuple(v if isinstance(v, Result) else Result.success(v) for v in values))


def _trades(n):
    return [object() for _ in range(n)]


class TestSingleCurrency:
    def test_all_within_tolerance_pass(self) -> None:
        report = ResultValidator().validate(
            _trades(3), _results(CurrencyAmount("EUR", 0.0), CurrencyAmount("EUR", 3e-9), CurrencyAmount("EUR", -9.9e-9))
        )
        assert report.passed
        assert report.violations == ()
        assert [c.status for c in report.checks] == [CheckStatus.PASSED] * 3
        assert report.summary() == "Checked PV for all instruments used in the calibration set are near to zero"

    def test_violation_names_trade_type_and_value(self) -> None:
        report = ResultValidator().validate(
            _trades(2), _results(CurrencyAmount("EUR", 0.0), CurrencyAmount("EUR", 1e-6))
        )
        assert not report.passed
        assert len(report.violations) == 1
        violation = report.violations[0]
        assert isinstance(violation, ToleranceViolationError)
        assert violation.index == 1
        assert violation.trade_type == "object"
        assert "PV should be small" in str(violation)
        assert report.checks[1].status is CheckStatus.OUT_OF_TOLERANCE

    def test_tolerance_is_strict(self) -> None:
        report = ResultValidator(tolerance=1e-8).validate(_trades(1), _results(CurrencyAmount("EUR", 1e-8)))
        assert not report.passed

    def test_nan_is_a_violation(self) -> None:
        report = ResultValidator().validate(_trades(1), _results(CurrencyAmount("EUR", float("nan"))))
        assert len(report.violations) == 1

    def test_raise_for_status_lists_everything(self) -> None:
        report = ResultValidator().validate(
            _trades(3),
            _results(
                CurrencyAmount("EUR", 1.0),
                CurrencyAmount("EUR", -2.0),
                Result.failed(FailureReason.CALCULATION_FAILED, "bootstrap failed"),
            ),
        )
        with pytest.raises(ValidationFailedError) as excinfo:
            report.raise_for_status()
        assert len(excinfo.value.violations) == 2
        assert len(excinfo.value.failures) == 1


class TestFailedCells:
    def test_failure_is_not_a_small_value(self) -> None:
        report = ResultValidator().validate(
            _trades(2),
            _results(CurrencyAmount("EUR", 0.0), Result.failed(FailureReason.MISSING_DATA, "no quote")),
        )
        assert not report.passed
        assert report.violations == ()
        assert [c.index for c in report.failures] == [1]
        assert report.checks[1].status is CheckStatus.CALCULATION_FAILED
        assert report.lines[1] == "  |--> PV for object computed: False with failure: MISSING_DATA: no quote"


class TestResultShapes:
    def test_unexpected_type_raises(self) -> None:
        with pytest.raises(UnexpectedResultTypeError) as excinfo:
            ResultValidator().validate(_trades(2), _results(CurrencyAmount("EUR", 0.0), 0.0))
        assert excinfo.value.index == 1

    def test_multi_currency_reported_by_default(self) -> None:
        value = MultiCurrencyAmount.of(CurrencyAmount("EUR", 5.0), CurrencyAmount("USD", 0.0))
        report = ResultValidator().validate(_trades(1), _results(value))

        assert report.passed
        assert report.checks[0].status is CheckStatus.REPORTED
        assert report.lines[0] == "  |--> PV for object computed: True with values: [EUR 5.0, USD 0.0]"

    def test_multi_currency_checked_when_strict(self) -> None:
        value = MultiCurrencyAmount.of(CurrencyAmount("EUR", 5.0), CurrencyAmount("USD", 0.0))
        report = ResultValidator(strict_multi_currency=True).validate(_trades(1), _results(value))

        assert not report.passed
        assert report.checks[0].status is CheckStatus.OUT_OF_TOLERANCE

    def test_rows_must_match_trades(self) -> None:
        with pytest.raises(MalformedRequestError):
            ResultValidator().validate(_trades(2), _results(CurrencyAmount("EUR", 0.0)))


class TestPerturbedCalculation:
    def test_exactly_the_perturbed_instrument_is_flagged(self, small_group, small_snapshot) -> None:
        offsets = {}
        components = make_components(offsets)
        trades = extract_trades(small_group, small_snapshot)
        request = build_request(trades, small_group.name, small_group, components.pricing_rules)

        with CalculationOrchestrator(2, components) as orchestrator:
            clean = orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)
            offsets[trades[4]] = 1e-6
            perturbed = orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)

        validator = ResultValidator()
        assert validator.validate(trades, clean).passed
        report = validator.validate(trades, perturbed)
        assert [v.index for v in report.violations] == [4]
        assert report.violations[0].trade_type == "FraTrade"
        assert report.lines[4] == "  |--> PV for FraTrade computed: True with value: EUR 1e-06 [outside tolerance]"
