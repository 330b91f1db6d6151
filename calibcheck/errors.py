"""Exception hierarchy for the calibration check."""

from typing import Iterable, Optional, Sequence


class CalibCheckError(Exception):
    """Base class for all errors raised by calibcheck."""


class ConfigNotFoundError(CalibCheckError, LookupError):
    """Requested curve group is not among the loaded definitions."""

    def __init__(self, name: str, available: Iterable[str] = ()):
        self.name = name
        self.available = tuple(sorted(str(a) for a in available))
        super().__init__(
            f"Curve group '{name}' not found. Available: {list(self.available)}"
        )


class ConfigFormatError(CalibCheckError, ValueError):
    """A configuration or quotes file could not be interpreted."""

    def __init__(self, source: str, message: str, row: Optional[int] = None):
        self.source = source
        self.row = row
        location = f"{source}, row {row}" if row is not None else source
        super().__init__(f"{location}: {message}")


class MissingMarketDataError(CalibCheckError, KeyError):
    """A quote required by a node or a pricer is absent from the snapshot."""

    def __init__(self, quote_id):
        self.quote_id = quote_id
        super().__init__(f"No market data for {quote_id}")

    def __str__(self) -> str:
        return self.args[0]


class CalibrationError(CalibCheckError):
    """The external engine failed to calibrate a curve group."""


class MalformedRequestError(CalibCheckError, ValueError):
    """A calculation request or its results are structurally invalid."""


class UnexpectedResultTypeError(CalibCheckError, TypeError):
    """A computed value is neither a currency amount nor a multi-currency amount."""

    def __init__(self, index: int, trade_type: str, value):
        self.index = index
        self.trade_type = trade_type
        self.value = value
        super().__init__(
            f"Result {index} for {trade_type} has unexpected type "
            f"{type(value).__name__}: {value!r}"
        )


class ToleranceViolationError(CalibCheckError):
    """A present value that should be zero exceeds the tolerance."""

    def __init__(self, index: int, trade_type: str, value, tolerance: float):
        self.index = index
        self.trade_type = trade_type
        self.value = value
        self.tolerance = tolerance
        super().__init__(
            f"PV should be small: {trade_type} (row {index}) has value {value}, "
            f"tolerance {tolerance:g}"
        )


class ValidationFailedError(CalibCheckError):
    """Raised by a validation report holding violations or failed cells."""

    def __init__(self, violations: Sequence[ToleranceViolationError], failures: Sequence[str]):
        self.violations = tuple(violations)
        self.failures = tuple(failures)
        lines = [str(v) for v in self.violations] + list(self.failures)
        super().__init__(
            f"{len(self.violations)} tolerance violation(s), "
            f"{len(self.failures)} failed calculation(s):\n  " + "\n  ".join(lines)
        )
