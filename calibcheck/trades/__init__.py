"""Calibration trades."""

from .trades import (
    FixedIborSwapTrade,
    FixedOvernightSwapTrade,
    FraTrade,
    IborFixingDepositTrade,
    IborIborSwapTrade,
    TermDepositTrade,
    Trade,
)

__all__ = [
    "Trade",
    "TermDepositTrade",
    "IborFixingDepositTrade",
    "FraTrade",
    "FixedOvernightSwapTrade",
    "FixedIborSwapTrade",
    "IborIborSwapTrade",
]
