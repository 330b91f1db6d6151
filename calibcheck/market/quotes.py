"""
Market quote identifiers.
"""

from dataclasses import dataclass

DEFAULT_FIELD = "MarketValue"
DEFAULT_SCHEME = "OG-Ticker"


@dataclass(frozen=True, order=True)
class QuoteId:
    """Key of a single market quote, e.g. ``OG-Ticker~EUR-OIS-1M/MarketValue``."""

    scheme: str
    ticker: str
    field: str = DEFAULT_FIELD

    @classmethod
    def of(cls, ticker: str, scheme: str = DEFAULT_SCHEME, field: str = DEFAULT_FIELD) -> "QuoteId":
        return cls(scheme=scheme, ticker=ticker, field=field)

    @classmethod
    def parse(cls, text: str) -> "QuoteId":
        """Parse the ``scheme~ticker[/field]`` form produced by ``str()``."""
        key, _, field = text.partition("/")
        scheme, sep, ticker = key.partition("~")
        if not sep or not scheme or not ticker:
            raise ValueError(f"Invalid quote id: {text!r}")
        return cls(scheme=scheme, ticker=ticker, field=field or DEFAULT_FIELD)

    def __str__(self) -> str:
        return f"{self.scheme}~{self.ticker}/{self.field}"
