"""
Run configuration for the calibration check.

A single immutable ``CheckConfig`` replaces process-wide constants, so that
independent runs (tests, embedded services) can use different fixtures.
"""

import os
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Mapping, Optional, Union

RESOURCES_DIR = Path(__file__).resolve().parent.parent / "resources" / "example-calibration"

DEFAULT_VALUATION_DATE = date(2015, 11, 20)
DEFAULT_CURVE_GROUP = "EUR-DSCONOIS-EURIBOR3MBS-EURIBOR6MIRS"
DEFAULT_TOLERANCE = 1e-8

GROUPS_FILE = "curves/groups-eur.csv"
SETTINGS_FILE = "curves/settings-eur.csv"
CALIBRATIONS_FILE = "curves/calibrations-eur.csv"
QUOTES_FILE = "quotes/quotes-eur.csv"

ENV_PREFIX = "CALIBCHECK_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class CheckConfig:
    """Inputs and knobs of one calibration check run.

    Checks with different configurations may run in the same process at
    once; their calculations take turns because QuantLib's evaluation date
    is process-wide.
    """

    valuation_date: date = DEFAULT_VALUATION_DATE
    curve_group_name: str = DEFAULT_CURVE_GROUP
    groups_path: Path = RESOURCES_DIR / GROUPS_FILE
    settings_path: Path = RESOURCES_DIR / SETTINGS_FILE
    calibrations_path: Path = RESOURCES_DIR / CALIBRATIONS_FILE
    quotes_path: Path = RESOURCES_DIR / QUOTES_FILE
    tolerance: float = DEFAULT_TOLERANCE
    n_threads: int = 1
    strict_multi_currency: bool = False
    nb_tests: int = 10
    nb_rep: int = 3
    # Seconds; None waits for every cell
    timeout: Optional[float] = None

    def __post_init__(self):
        for name in ("groups_path", "settings_path", "calibrations_path", "quotes_path"):
            object.__setattr__(self, name, Path(getattr(self, name)))
        if not self.curve_group_name:
            raise ValueError("curve_group_name must not be empty")
        if not self.tolerance > 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.n_threads < 1:
            raise ValueError(f"n_threads must be at least 1, got {self.n_threads}")
        if self.nb_tests < 1 or self.nb_rep < 1:
            raise ValueError(f"nb_tests and nb_rep must be at least 1, got {self.nb_tests}, {self.nb_rep}")
        if self.timeout is not None and not self.timeout > 0:
            raise ValueError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def default(cls) -> "CheckConfig":
        """Configuration pointing at the bundled EUR example data."""
        return cls()

    def with_resource_dir(self, resource_dir: Union[str, Path]) -> "CheckConfig":
        """Same configuration reading the standard file layout under ``resource_dir``."""
        root = Path(resource_dir)
        return replace(
            self,
            groups_path=root / GROUPS_FILE,
            settings_path=root / SETTINGS_FILE,
            calibrations_path=root / CALIBRATIONS_FILE,
            quotes_path=root / QUOTES_FILE,
        )

    def with_overrides(self, **changes) -> "CheckConfig":
        """Copy with the given fields replaced; ``None`` values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "CheckConfig":
        """
        Build a configuration from ``CALIBCHECK_*`` environment variables.

        Recognised variables: VALUATION_DATE (ISO date), CURVE_GROUP,
        RESOURCES (directory), TOLERANCE, THREADS, STRICT_MULTI_CURRENCY,
        TIMEOUT. Unset variables keep their defaults.

        Raises:
            ValueError: If a variable cannot be parsed
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> Optional[str]:
            return env.get(ENV_PREFIX + name)

        config = cls.default()
        resources = get("RESOURCES")
        if resources:
            config = config.with_resource_dir(resources)

        valuation_date = get("VALUATION_DATE")
        tolerance = get("TOLERANCE")
        threads = get("THREADS")
        timeout = get("TIMEOUT")
        return config.with_overrides(
            valuation_date=date.fromisoformat(valuation_date) if valuation_date else None,
            curve_group_name=get("CURVE_GROUP") or None,
            tolerance=float(tolerance) if tolerance else None,
            n_threads=int(threads) if threads else None,
            strict_multi_currency=_parse_bool(get("STRICT_MULTI_CURRENCY")),
            timeout=float(timeout) if timeout else None,
        )


def _parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    text = value.strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")
