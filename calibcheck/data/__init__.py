"""Loaders for calibration configuration and market quotes."""

from .loaders import (
    CALIBRATIONS_COLUMNS,
    GROUPS_COLUMNS,
    QUOTES_COLUMNS,
    SETTINGS_COLUMNS,
    QuotesCsvLoader,
    RatesCalibrationCsvLoader,
    read_csv_table,
)

__all__ = [
    "QuotesCsvLoader",
    "RatesCalibrationCsvLoader",
    "read_csv_table",
    "QUOTES_COLUMNS",
    "GROUPS_COLUMNS",
    "SETTINGS_COLUMNS",
    "CALIBRATIONS_COLUMNS",
]
