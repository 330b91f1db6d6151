import itertools

import pytest

from calibcheck.pipeline import PerformanceHarness


def _fake_clock(step_seconds):
    ticks = itertools.count()
    return lambda: next(ticks) * step_seconds


class TestPerformanceHarness:
    def test_trials_and_cycles(self) -> None:
        calls = []
        lines = []

        def cycle():
            calls.append(1)
            return 57 + 1

        report = PerformanceHarness(cycle, nb_tests=10, nb_rep=3, on_trial=lines.append).run()

        assert len(calls) == 30
        assert len(report.trials_ms) == 3
        assert all(ms >= 0.0 for ms in report.trials_ms)
        assert report.checksum == 30 * 58
        assert len(lines) == 3
        assert lines == list(report.lines)

    def test_line_format(self) -> None:
        report = PerformanceHarness(lambda: 2, nb_tests=10, nb_rep=2, clock=_fake_clock(0.125)).run()

        assert report.trials_ms == (125.0, 125.0)
        assert report.lines[0] == (
            "Performance: 10 config load + curve calibrations + pv check (1 thread) in 125 ms"
        )
        assert report.mean_ms == 125.0
        assert "checksum 40" in report.summary()

    def test_thread_count_in_line(self) -> None:
        report = PerformanceHarness(lambda: 1, nb_tests=1, nb_rep=1, n_threads=4).run()
        assert "(4 threads)" in report.lines[0]

    def test_cycle_errors_propagate(self) -> None:
        def cycle():
            raise RuntimeError("load failed")

        with pytest.raises(RuntimeError):
            PerformanceHarness(cycle, nb_tests=1, nb_rep=1).run()

    def test_counts_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            PerformanceHarness(lambda: 0, nb_tests=0)
