"""
Trade extraction from a curve group definition.

Every node that stands for a real market instrument yields the trade it
was calibrated to; fixing deposits only pin the index fixing and have no
trade to reprice.
"""

import logging
from typing import Tuple

from calibcheck.curves.definitions import CurveGroupDefinition
from calibcheck.curves.nodes import CalibrationNode
from calibcheck.market.snapshot import MarketSnapshot
from calibcheck.trades import Trade

logger = logging.getLogger(__name__)


def is_extractable(node: CalibrationNode) -> bool:
    return node.node_type.is_tradable


def count_nodes(definition: CurveGroupDefinition) -> int:
    return definition.node_count


def excluded_nodes(definition: CurveGroupDefinition) -> Tuple[CalibrationNode, ...]:
    """Nodes skipped by ``extract_trades``, in definition order."""
    return tuple(node for node in definition.iter_nodes() if not is_extractable(node))


def extract_trades(definition: CurveGroupDefinition, snapshot: MarketSnapshot) -> Tuple[Trade, ...]:
    """
    Synthesise the trades of all tradable nodes.

    Args:
        definition: Curve group whose nodes are walked curve by curve
        snapshot: Quotes supplying each trade's fixed rate

    Returns:
        Trades in node order

    Raises:
        MissingMarketDataError: If a node's quote is absent from the snapshot
    """
    trades = tuple(
        node.trade(snapshot.valuation_date, snapshot)
        for node in definition.iter_nodes()
        if is_extractable(node)
    )
    logger.debug(
        "Extracted %d trades from %d nodes of curve group %s",
        len(trades), count_nodes(definition), definition.name,
    )
    return trades
