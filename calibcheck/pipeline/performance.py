"""
Timing harness repeating the full calibration check cycle.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)


def trial_line(nb_tests: int, n_threads: int, elapsed_ms: float) -> str:
    threads = "1 thread" if n_threads == 1 else f"{n_threads} threads"
    return (
        f"Performance: {nb_tests} config load + curve calibrations + pv check "
        f"({threads}) in {elapsed_ms:.0f} ms"
    )


@dataclass(frozen=True)
class PerformanceReport:
    """Elapsed milliseconds per trial and the checksum of all cycles."""

    trials_ms: Tuple[float, ...]
    nb_tests: int
    n_threads: int
    # sum of row and column counts over all cycles; keeps the work observable
    checksum: int

    @property
    def mean_ms(self) -> float:
        return float(np.mean(self.trials_ms))

    @property
    def min_ms(self) -> float:
        return float(np.min(self.trials_ms))

    @property
    def max_ms(self) -> float:
        return float(np.max(self.trials_ms))

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(trial_line(self.nb_tests, self.n_threads, ms) for ms in self.trials_ms)

    def summary(self) -> str:
        return (
            f"Performance over {len(self.trials_ms)} trials: mean {self.mean_ms:.0f} ms, "
            f"min {self.min_ms:.0f} ms, max {self.max_ms:.0f} ms (checksum {self.checksum})"
        )


class PerformanceHarness:
    """
    Runs ``nb_rep`` timed trials of ``nb_tests`` cycles each.

    ``cycle`` performs one full load, calibrate, price and check pass and
    returns a value derived from its results, which is folded into the
    report checksum.
    """

    def __init__(
        self,
        cycle: Callable[[], int],
        nb_tests: int = 10,
        nb_rep: int = 3,
        n_threads: int = 1,
        on_trial: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        if nb_tests < 1 or nb_rep < 1:
            raise ValueError(f"nb_tests and nb_rep must be at least 1, got {nb_tests}, {nb_rep}")
        self.cycle = cycle
        self.nb_tests = nb_tests
        self.nb_rep = nb_rep
        self.n_threads = n_threads
        self.on_trial = on_trial
        self.clock = clock

    def run(self) -> PerformanceReport:
        trials = []
        checksum = 0
        for rep in range(self.nb_rep):
            start = self.clock()
            for _ in range(self.nb_tests):
                checksum += self.cycle()
            elapsed_ms = max(0.0, (self.clock() - start) * 1000.0)
            trials.append(elapsed_ms)
            logger.debug("Trial %d/%d took %.3f ms", rep + 1, self.nb_rep, elapsed_ms)
            if self.on_trial is not None:
                self.on_trial(trial_line(self.nb_tests, self.n_threads, elapsed_ms))
        return PerformanceReport(tuple(trials), self.nb_tests, self.n_threads, checksum)
