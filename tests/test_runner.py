import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from calibcheck.calc import CalculationRunner, CalculationTask, FailureReason, Result
from calibcheck.errors import MalformedRequestError, MissingMarketDataError
from calibcheck.market import QuoteId


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=4)
    yield pool
    pool.shutdown(wait=True)


def _task(row, column, value, delay=0.0):
    def function():
        time.sleep(delay)
        return Result.success(value)

    return CalculationTask(row, column, function, f"cell {row},{column}")


class TestCalculationRunner:
    def test_results_keep_task_positions(self, executor) -> None:
        # later rows finish first
        tasks = [_task(r, c, (r, c), delay=0.01 * (5 - r)) for r in range(5) for c in range(2)]
        results = CalculationRunner(executor).run(list(reversed(tasks)), 5, 2)

        assert results.row_count == 5
        assert results.column_count == 2
        for r in range(5):
            for c in range(2):
                assert results.get(r, c).value == (r, c)

    def test_failing_cell_does_not_abort(self, executor) -> None:
        def boom():
            raise MissingMarketDataError(QuoteId.of("EUR-OIS-1M"))

        tasks = [_task(0, 0, 1.0), CalculationTask(1, 0, boom), _task(2, 0, 3.0)]
        results = CalculationRunner(executor).run(tasks, 3, 1)

        assert results.get(0).value == 1.0
        assert results.get(2).value == 3.0
        failed = results.get(1)
        assert failed.is_failure
        assert failed.failure.reason is FailureReason.MISSING_DATA
        assert failed.failure.exception_type == "MissingMarketDataError"

    def test_plain_values_are_wrapped(self, executor) -> None:
        results = CalculationRunner(executor).run([CalculationTask(0, 0, lambda: 42)], 1, 1)
        assert results.get(0).is_success
        assert results.get(0).value == 42

    def test_tasks_must_cover_matrix(self, executor) -> None:
        with pytest.raises(MalformedRequestError):
            CalculationRunner(executor).run([_task(0, 0, 1.0)], 2, 1)
        with pytest.raises(MalformedRequestError):
            CalculationRunner(executor).run([_task(0, 0, 1.0), _task(0, 0, 2.0)], 2, 1)

    def test_timeout(self, executor) -> None:
        with pytest.raises(TimeoutError):
            CalculationRunner(executor).run([_task(0, 0, 1.0, delay=0.5)], 1, 1, timeout=0.05)
