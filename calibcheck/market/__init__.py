"""Market quotes and snapshots."""

from .quotes import DEFAULT_FIELD, DEFAULT_SCHEME, QuoteId
from .snapshot import MarketSnapshot, MarketSnapshotBuilder, build_snapshot

__all__ = [
    "QuoteId",
    "DEFAULT_FIELD",
    "DEFAULT_SCHEME",
    "MarketSnapshot",
    "MarketSnapshotBuilder",
    "build_snapshot",
]
