"""
CSV loaders for quotes and rates curve calibration configuration.

Files are read with pandas as plain strings and converted row by row, so
that every conversion error can be reported with its file and record.

Groups file::

    Group Name,Curve Type,Reference,Curve Name
    EUR-DSCONOIS-EURIBOR3MBS-EURIBOR6MIRS,Discount,EUR,EUR-DSCON-OIS

Settings file::

    Curve Name,Value Type,Day Count,Interpolator
    EUR-DSCON-OIS,DiscountFactor,Act/365F,LogNaturalCubic

Calibrations file::

    Curve Name,Label,Symbology,Ticker,Field Name,Type,Convention,Time
    EUR-DSCON-OIS,OIS1M,OG-Ticker,EUR-OIS-1M,MarketValue,OIS,EUR-FIXED-1Y-EONIA-OIS,1M

Quotes file::

    Valuation Date,Symbology,Ticker,Field Name,Value
    2015-11-20,OG-Ticker,EUR-OIS-1M,MarketValue,-0.0025
"""

import logging
import re
from collections import OrderedDict
from datetime import date
from pathlib import Path
from typing import Dict, List, Sequence, Tuple, Union

import pandas as pd

from calibcheck.conventions.calendars import parse_tenor, tenor_to_months
from calibcheck.conventions.daycount import get_day_count_convention, to_date
from calibcheck.conventions.indices import get_ibor_index
from calibcheck.conventions.instruments import (
    FixedIborSwapConvention,
    FixedOvernightSwapConvention,
    IborIborSwapConvention,
    TermDepositConvention,
    get_trade_convention,
)
from calibcheck.curves.definitions import (
    CurveDefinition,
    CurveGroupDefinition,
    CurveGroupEntry,
    CurveValueType,
    Interpolator,
)
from calibcheck.curves.nodes import (
    CalibrationNode,
    FixedIborSwapCurveNode,
    FixedOvernightSwapCurveNode,
    FraCurveNode,
    IborFixingDepositCurveNode,
    IborIborSwapCurveNode,
    NodeType,
    TermDepositCurveNode,
)
from calibcheck.errors import ConfigFormatError
from calibcheck.market.quotes import QuoteId

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

QUOTES_COLUMNS = ("Valuation Date", "Symbology", "Ticker", "Field Name", "Value")
GROUPS_COLUMNS = ("Group Name", "Curve Type", "Reference", "Curve Name")
SETTINGS_COLUMNS = ("Curve Name", "Value Type", "Day Count", "Interpolator")
CALIBRATIONS_COLUMNS = (
    "Curve Name", "Label", "Symbology", "Ticker", "Field Name", "Type", "Convention", "Time",
)

_FRA_TIME = re.compile(r"^\s*(\d+)M\s*[xX]\s*(\d+)M\s*$")


def read_csv_table(path: PathLike, columns: Sequence[str]) -> pd.DataFrame:
    """Read a CSV file as strings and check it has the expected columns."""
    source = str(path)
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            comment="#",
            skipinitialspace=True,
        )
    except FileNotFoundError:
        raise ConfigFormatError(source, "file not found") from None
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ConfigFormatError(source, f"unreadable CSV: {e}") from e

    df.columns = [str(c).strip() for c in df.columns]
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise ConfigFormatError(source, f"missing columns {missing}")
    df = df[list(columns)]
    return df.apply(lambda col: col.str.strip())


class QuotesCsvLoader:
    """Loads market quotes for one valuation date."""

    @staticmethod
    def load(valuation_date: date, *paths: PathLike) -> Dict[QuoteId, float]:
        """
        Load the quotes of ``valuation_date`` from one or more files.

        Rows for other dates are skipped. Later rows win over earlier ones.

        Raises:
            ConfigFormatError: On a missing file, column, date or value
        """
        valuation_date = to_date(valuation_date)
        quotes: Dict[QuoteId, float] = {}
        for path in paths:
            df = read_csv_table(path, QUOTES_COLUMNS)
            dates = pd.to_datetime(df["Valuation Date"], format="%Y-%m-%d", errors="coerce")
            for row, (dt, record) in enumerate(zip(dates, df.itertuples(index=False)), start=1):
                if pd.isna(dt):
                    raise ConfigFormatError(str(path), f"invalid date {record[0]!r}", row)
                if dt.date() != valuation_date:
                    continue
                try:
                    value = float(record[4])
                except ValueError:
                    raise ConfigFormatError(str(path), f"invalid value {record[4]!r}", row) from None
                quotes[QuoteId(scheme=record[1], ticker=record[2], field=record[3])] = value
        logger.debug("Loaded %d quotes for %s", len(quotes), valuation_date)
        return quotes


class RatesCalibrationCsvLoader:
    """Loads curve group definitions from groups, settings and calibrations files."""

    @classmethod
    def load(
        cls, groups: PathLike, settings: PathLike, calibrations: PathLike
    ) -> List[CurveGroupDefinition]:
        """
        Load all curve groups.

        Curves are calibrated in the order they first appear in the groups
        file, so the discount curve of a currency should be listed first.

        Raises:
            ConfigFormatError: On malformed rows or inconsistent files
        """
        curve_settings = cls._load_settings(settings)
        curve_nodes = cls._load_nodes(calibrations)
        group_entries = cls._load_groups(groups)

        definitions = []
        for group_name, entries in group_entries.items():
            curves = []
            for curve_name in entries:
                if curve_name not in curve_settings:
                    raise ConfigFormatError(str(settings), f"no settings for curve {curve_name}")
                if not curve_nodes.get(curve_name):
                    raise ConfigFormatError(str(calibrations), f"no nodes for curve {curve_name}")
                value_type, day_count, interpolator = curve_settings[curve_name]
                curves.append(
                    CurveDefinition(
                        name=curve_name,
                        nodes=tuple(curve_nodes[curve_name]),
                        value_type=value_type,
                        day_count=day_count,
                        interpolator=interpolator,
                    )
                )
            try:
                definitions.append(
                    CurveGroupDefinition(
                        name=group_name,
                        entries=tuple(entries.values()),
                        curve_definitions=tuple(curves),
                    )
                )
            except ValueError as e:
                raise ConfigFormatError(str(groups), str(e)) from e
            logger.debug("Loaded curve group %s with %d curves", group_name, len(curves))
        return definitions

    @staticmethod
    def _load_groups(path: PathLike) -> "OrderedDict[str, OrderedDict[str, CurveGroupEntry]]":
        df = read_csv_table(path, GROUPS_COLUMNS)
        groups: "OrderedDict[str, OrderedDict[str, CurveGroupEntry]]" = OrderedDict()
        for row, (group_name, curve_type, reference, curve_name) in enumerate(
            df.itertuples(index=False), start=1
        ):
            kind = curve_type.lower()
            if kind == "discount":
                entry = CurveGroupEntry(curve_name, discount_currencies=frozenset([reference.upper()]))
            elif kind == "forward":
                entry = CurveGroupEntry(curve_name, index_names=frozenset([reference.upper()]))
            else:
                raise ConfigFormatError(str(path), f"unknown curve type {curve_type!r}", row)
            entries = groups.setdefault(group_name, OrderedDict())
            entries[curve_name] = entries[curve_name].merge(entry) if curve_name in entries else entry
        return groups

    @staticmethod
    def _load_settings(path: PathLike) -> Dict[str, Tuple]:
        df = read_csv_table(path, SETTINGS_COLUMNS)
        settings = {}
        for row, (curve_name, value_type, day_count, interpolator) in enumerate(
            df.itertuples(index=False), start=1
        ):
            try:
                settings[curve_name] = (
                    CurveValueType(value_type),
                    get_day_count_convention(day_count),
                    Interpolator(interpolator),
                )
            except ValueError as e:
                raise ConfigFormatError(str(path), str(e), row) from e
        return settings

    @classmethod
    def _load_nodes(cls, path: PathLike) -> Dict[str, List[CalibrationNode]]:
        df = read_csv_table(path, CALIBRATIONS_COLUMNS)
        nodes: Dict[str, List[CalibrationNode]] = OrderedDict()
        for row, record in enumerate(df.itertuples(index=False), start=1):
            curve_name, label, scheme, ticker, field, node_type, convention, time = record
            try:
                node = cls._create_node(
                    NodeType(node_type.upper()),
                    label,
                    QuoteId(scheme=scheme, ticker=ticker, field=field or "MarketValue"),
                    convention,
                    time,
                )
            except ValueError as e:
                raise ConfigFormatError(str(path), str(e), row) from e
            nodes.setdefault(curve_name, []).append(node)
        return nodes

    @staticmethod
    def _create_node(
        node_type: NodeType, label: str, quote_id: QuoteId, convention: str, time: str
    ) -> CalibrationNode:
        if node_type is NodeType.IBOR_FIXING_DEPOSIT:
            return IborFixingDepositCurveNode(label, quote_id, get_ibor_index(convention))

        if node_type is NodeType.FRA:
            index = get_ibor_index(convention)
            match = _FRA_TIME.match(time)
            if not match:
                raise ValueError(f"invalid FRA period {time!r}, expected e.g. '3M x 6M'")
            start, end = int(match.group(1)), int(match.group(2))
            if end - start != tenor_to_months(index.tenor):
                raise ValueError(f"FRA period {time!r} does not match index tenor {index.tenor}")
            return FraCurveNode(label, quote_id, index, start)

        trade_convention = get_trade_convention(convention)
        tenor = time.upper()
        parse_tenor(tenor)
        expected = {
            NodeType.TERM_DEPOSIT: TermDepositConvention,
            NodeType.FIXED_OVERNIGHT_SWAP: FixedOvernightSwapConvention,
            NodeType.FIXED_IBOR_SWAP: FixedIborSwapConvention,
            NodeType.IBOR_IBOR_SWAP: IborIborSwapConvention,
        }[node_type]
        if not isinstance(trade_convention, expected):
            raise ValueError(f"convention {convention} cannot be used for {node_type.value} nodes")
        if node_type is NodeType.TERM_DEPOSIT:
            return TermDepositCurveNode(label, quote_id, trade_convention, tenor)
        if node_type is NodeType.FIXED_OVERNIGHT_SWAP:
            return FixedOvernightSwapCurveNode(label, quote_id, trade_convention, tenor)
        if node_type is NodeType.IBOR_IBOR_SWAP:
            return IborIborSwapCurveNode(label, quote_id, trade_convention, tenor)
        return FixedIborSwapCurveNode(label, quote_id, trade_convention, tenor)
