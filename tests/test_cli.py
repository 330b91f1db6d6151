import pytest

from calibcheck.cli import EXIT_ERROR, EXIT_OK, EXIT_VALIDATION_FAILED, main
from calibcheck.pipeline.validator import PASSED_MESSAGE


class TestMain:
    def test_bundled_check_passes(self, capsys) -> None:
        assert main([]) == EXIT_OK

        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Starting curve calibration: configuration and data loaded from files"
        assert out[1] == "Computed PV for all instruments used in the calibration set"
        assert sum(1 for line in out if line.startswith("  |--> PV for ")) == 56
        assert out[-1] == "Checked PV for all instruments used in the calibration set are near to zero"

    def test_tolerance_breach_fails_validation(self, capsys) -> None:
        assert main(["--tolerance", "1e-300"]) == EXIT_VALIDATION_FAILED

        out = capsys.readouterr().out.splitlines()
        flagged = [line for line in out if line.endswith(" [outside tolerance]")]
        assert flagged
        assert out[-1].startswith(f"PV check failed: {len(flagged)} instrument(s) outside tolerance 1e-300")
        assert out[-1].endswith("0 instrument(s) not computed")
        assert PASSED_MESSAGE not in out

    def test_performance_mode(self, capsys) -> None:
        assert main(["-p", "--nb-tests", "1", "--nb-rep", "2"]) == EXIT_OK

        out = capsys.readouterr().out
        assert out.count("Performance: 1 config load + curve calibrations + pv check (1 thread) in ") == 2

    def test_unknown_group_is_an_error(self, capsys) -> None:
        assert main(["--group", "EUR-NOPE"]) == EXIT_ERROR
        assert "EUR-NOPE" in capsys.readouterr().err

    def test_missing_resources_is_an_error(self, tmp_path, capsys) -> None:
        assert main(["--resources", str(tmp_path)]) == EXIT_ERROR

    def test_invalid_option_value(self, capsys) -> None:
        assert main(["--threads", "0"]) == EXIT_ERROR

    def test_bad_argument_exits(self) -> None:
        with pytest.raises(SystemExit):
            main(["--threads", "many"])
