import threading
import time

import pytest

from calibcheck.calc import (
    CalculationRules,
    Column,
    FailureReason,
    Measure,
    MarketDataConfig,
    MarketDataRules,
    PricingRules,
)
from calibcheck.errors import CalibrationError, MalformedRequestError
from calibcheck.pipeline import CalculationOrchestrator, build_request, extract_trades
from calibcheck.trades import FraTrade

from conftest import FakeCalibrator, FakeCurveGroup, make_components


def _request(group, snapshot, components):
    trades = extract_trades(group, snapshot)
    return build_request(trades, group.name, group, components.pricing_rules)


class TestCompute:
    @pytest.mark.parametrize("n_threads", [1, 4])
    def test_one_row_per_trade_in_order(self, small_group, small_snapshot, n_threads) -> None:
        offsets = {}
        components = make_components(offsets)
        request = _request(small_group, small_snapshot, components)
        for i, trade in enumerate(request.trades):
            offsets[trade] = float(i)

        with CalculationOrchestrator(n_threads, components) as orchestrator:
            results = orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)

        assert results.row_count == len(request.trades)
        assert [r.value.amount for r in results.column(0)] == [float(i) for i in range(len(request.trades))]
        assert all(r.value.currency == "EUR" for r in results.column(0))

    def test_group_calibrated_once(self, small_group, small_snapshot) -> None:
        calibrator = FakeCalibrator()
        components = make_components(calibrator=calibrator)
        request = _request(small_group, small_snapshot, components)

        with CalculationOrchestrator(2, components) as orchestrator:
            orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)

        assert calibrator.calls == 1

    def test_failed_calibration_fails_every_cell(self, small_group, small_snapshot) -> None:
        components = make_components(calibrator=FakeCalibrator(CalibrationError("no convergence")))
        request = _request(small_group, small_snapshot, components)

        with CalculationOrchestrator(1, components) as orchestrator:
            results = orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)

        assert results.row_count == len(request.trades)
        for result in results.column(0):
            assert result.is_failure
            assert result.failure.reason is FailureReason.CALCULATION_FAILED
            assert "no convergence" in result.failure.message

    def test_pricing_error_fails_only_its_cell(self, small_group, small_snapshot) -> None:
        def price(trade, market):
            assert isinstance(market, FakeCurveGroup)
            if isinstance(trade, FraTrade):
                raise ValueError("FRA pricer broken")
            return 0.0

        components = make_components()
        request = _request(small_group, small_snapshot, components)
        rules = CalculationRules(
            pricing_rules=PricingRules.empty().with_function(object, Measure.PRESENT_VALUE, price),
            market_data_config=request.rules.market_data_config,
            market_data_rules=request.rules.market_data_rules,
        )

        with CalculationOrchestrator(2, components) as orchestrator:
            results = orchestrator.compute(request.trades, request.columns, rules, small_snapshot)

        failed = [i for i, r in enumerate(results.column(0)) if r.is_failure]
        assert failed == [i for i, t in enumerate(request.trades) if isinstance(t, FraTrade)]
        assert results.get(failed[0]).failure.reason is FailureReason.ERROR

    def test_unpriced_trade_type_is_not_applicable(self, small_group, small_snapshot) -> None:
        components = make_components()
        request = _request(small_group, small_snapshot, components)
        rules = CalculationRules(
            pricing_rules=PricingRules.empty(),
            market_data_config=request.rules.market_data_config,
            market_data_rules=request.rules.market_data_rules,
        )

        with CalculationOrchestrator(1, components) as orchestrator:
            results = orchestrator.compute(request.trades, request.columns, rules, small_snapshot)

        assert {r.failure.reason for r in results.column(0)} == {FailureReason.NOT_APPLICABLE}


class TestMalformedRequests:
    def test_no_columns(self, small_group, small_snapshot, fake_components) -> None:
        request = _request(small_group, small_snapshot, fake_components)
        with CalculationOrchestrator(1, fake_components) as orchestrator:
            with pytest.raises(MalformedRequestError):
                orchestrator.compute(request.trades, [], request.rules, small_snapshot)

    def test_group_without_configuration(self, small_group, small_snapshot, fake_components) -> None:
        request = _request(small_group, small_snapshot, fake_components)
        rules = CalculationRules(
            pricing_rules=fake_components.pricing_rules,
            market_data_config=MarketDataConfig(),
            market_data_rules=request.rules.market_data_rules,
        )
        with CalculationOrchestrator(1, fake_components) as orchestrator:
            with pytest.raises(MalformedRequestError):
                orchestrator.compute(request.trades, request.columns, rules, small_snapshot)

    def test_trades_without_market_data_rule(self, small_group, small_snapshot, fake_components) -> None:
        request = _request(small_group, small_snapshot, fake_components)
        rules = CalculationRules(
            pricing_rules=fake_components.pricing_rules,
            market_data_config=request.rules.market_data_config,
            market_data_rules=MarketDataRules.empty(),
        )
        with CalculationOrchestrator(1, fake_components) as orchestrator:
            results = orchestrator.compute(request.trades, [Column.of(Measure.PRESENT_VALUE)], rules, small_snapshot)

        assert all(r.failure.reason is FailureReason.NOT_APPLICABLE for r in results.column(0))


class TestLifecycle:
    def test_context_manager_shuts_down(self, fake_components) -> None:
        with CalculationOrchestrator(2, fake_components) as orchestrator:
            assert not orchestrator.closed
        assert orchestrator.closed

    def test_compute_after_shutdown_raises(self, small_group, small_snapshot, fake_components) -> None:
        request = _request(small_group, small_snapshot, fake_components)
        orchestrator = CalculationOrchestrator(1, fake_components)
        orchestrator.shutdown()
        orchestrator.shutdown()

        with pytest.raises(RuntimeError):
            orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)

    def test_pool_size_must_be_positive(self, fake_components) -> None:
        with pytest.raises(ValueError):
            CalculationOrchestrator(0, fake_components)


class _OverlapRecorder:
    """Calibrator recording how many calibrations run at the same time."""

    def __init__(self):
        self._lock = threading.Lock()
        self.active = 0
        self.max_active = 0

    def __call__(self, definition, market):
        with self._lock:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(0.05)
        with self._lock:
            self.active -= 1
        return FakeCurveGroup(definition, market)


class TestConcurrentRequests:
    def test_requests_from_separate_orchestrators_do_not_overlap(self, small_group, small_snapshot) -> None:
        recorder = _OverlapRecorder()
        components = make_components(calibrator=recorder)
        request = _request(small_group, small_snapshot, components)
        row_counts = []

        def run():
            with CalculationOrchestrator(2, components) as orchestrator:
                results = orchestrator.compute(request.trades, request.columns, request.rules, small_snapshot)
            row_counts.append(results.row_count)

        threads = [threading.Thread(target=run) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert row_counts == [len(request.trades)] * 4
        assert recorder.max_active == 1
