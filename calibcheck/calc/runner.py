"""
Calculation runner: executes per-cell tasks on a worker pool.

Cells are independent. Each one is submitted to the executor and the
runner joins on all of them, placing every result at the row and column
of its task, so the matrix order never depends on execution order.
"""

import logging
import time
from concurrent.futures import Executor, Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from calibcheck.errors import MalformedRequestError

from .results import Result, Results

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalculationTask:
    """Computes the cell at (``row``, ``column``)."""

    row: int
    column: int
    function: Callable[[], Result]
    description: str = ""


def execute_task(task: CalculationTask) -> Result:
    """Run one task; an exception becomes a failed result for that cell."""
    try:
        result = task.function()
    except Exception as exc:
        logger.warning(
            "Calculation failed for cell (%d, %d) %s: %s",
            task.row, task.column, task.description, exc,
        )
        return Result.of_exception(exc)
    if not isinstance(result, Result):
        result = Result.success(result)
    return result


class CalculationRunner:
    """Runs calculation tasks on an executor owned by the caller."""

    def __init__(self, executor: Executor):
        self._executor = executor

    @property
    def executor(self) -> Executor:
        return self._executor

    def run(
        self,
        tasks: Sequence[CalculationTask],
        row_count: int,
        column_count: int,
        timeout: Optional[float] = None,
    ) -> Results:
        """Execute all tasks and block until every cell is available.

        Args:
            tasks: One task per cell
            row_count: Number of rows (trades)
            column_count: Number of columns (measures)
            timeout: Optional overall limit in seconds; cells still running
                when it expires are left to finish in the background

        Returns:
            Fully populated results matrix

        Raises:
            MalformedRequestError: If the tasks do not cover the matrix exactly once
            TimeoutError: If ``timeout`` expires first
        """
        self._check_coverage(tasks, row_count, column_count)
        submitted: List[Tuple[CalculationTask, Future]] = [
            (task, self._executor.submit(execute_task, task)) for task in tasks
        ]
        deadline = None if timeout is None else time.monotonic() + timeout

        items: List[Optional[Result]] = [None] * (row_count * column_count)
        for task, future in submitted:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                items[task.row * column_count + task.column] = future.result(timeout=remaining)
            except FutureTimeoutError:
                for _, pending in submitted:
                    pending.cancel()
                raise TimeoutError(
                    f"Calculation of {len(tasks)} cells did not finish within {timeout}s"
                ) from None
        return Results(row_count, column_count, tuple(items))

    @staticmethod
    def _check_coverage(tasks: Sequence[CalculationTask], row_count: int, column_count: int) -> None:
        cells = [(task.row, task.column) for task in tasks]
        expected = {(r, c) for r in range(row_count) for c in range(column_count)}
        if len(cells) != len(expected) or set(cells) != expected:
            raise MalformedRequestError(
                f"{len(cells)} tasks do not cover a {row_count}x{column_count} results matrix"
            )
