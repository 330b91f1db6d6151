"""
Command line entry point.

    calibcheck [-p] [--threads N] [--tolerance X] [--resources DIR]
               [--group NAME] [--valuation-date YYYY-MM-DD]
               [--strict-multi-currency] [-v]

Exit codes: 0 when every calibration instrument reprices to zero, 1 when
the check fails, 2 when the inputs or the request are invalid.
"""

import argparse
import logging
import sys
from datetime import date
from typing import List, Optional

from calibcheck.errors import CalibCheckError
from calibcheck.pipeline import CalibrationCheck, CheckConfig, PerformanceHarness

EXIT_OK = 0
EXIT_VALIDATION_FAILED = 1
EXIT_ERROR = 2

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calibcheck",
        description="Calibrate a curve group and check that it reprices its calibration instruments.",
    )
    parser.add_argument(
        "-p", "--performance", action="store_true",
        help="Also time repeated full cycles of the check.",
    )
    parser.add_argument("--threads", type=int, default=None, help="Calculation worker threads.")
    parser.add_argument("--tolerance", type=float, default=None, help="Maximum absolute PV.")
    parser.add_argument(
        "--resources", default=None,
        help="Directory holding curves/*.csv and quotes/*.csv in the bundled layout.",
    )
    parser.add_argument("--group", default=None, help="Curve group to calibrate.")
    parser.add_argument(
        "--valuation-date", type=date.fromisoformat, default=None, help="Valuation date (ISO)."
    )
    parser.add_argument(
        "--strict-multi-currency", action="store_true", default=None,
        help="Also require multi-currency PVs to be near zero in every currency.",
    )
    parser.add_argument("--nb-tests", type=int, default=None, help="Cycles per timed trial.")
    parser.add_argument("--nb-rep", type=int, default=None, help="Number of timed trials.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging.")
    return parser


def config_from_args(args: argparse.Namespace) -> CheckConfig:
    config = CheckConfig.from_env()
    if args.resources:
        config = config.with_resource_dir(args.resources)
    return config.with_overrides(
        valuation_date=args.valuation_date,
        curve_group_name=args.group,
        tolerance=args.tolerance,
        n_threads=args.threads,
        strict_multi_currency=args.strict_multi_currency,
        nb_tests=args.nb_tests,
        nb_rep=args.nb_rep,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    try:
        with CalibrationCheck(config) as check:
            print("Starting curve calibration: configuration and data loaded from files")
            evaluation = check.evaluate()
            print("Computed PV for all instruments used in the calibration set")
            report = check.validate(evaluation)
            for line in report.lines:
                print(line)
            print(report.summary())

            if args.performance:
                harness = PerformanceHarness(
                    check.cycle,
                    nb_tests=config.nb_tests,
                    nb_rep=config.nb_rep,
                    n_threads=config.n_threads,
                    on_trial=print,
                )
                perf = harness.run()
                print(perf.summary())
    except (CalibCheckError, TimeoutError) as e:
        logger.error("Calibration check aborted: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_OK if report.passed else EXIT_VALIDATION_FAILED


if __name__ == "__main__":
    sys.exit(main())
