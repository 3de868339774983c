"""Containers for market data tickers and quotes."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import total_ordering
from typing import ClassVar, Optional

from finstore.currency import Currency
from finstore.errors import DataItem


@dataclass(kw_only=True)
class Ticker(DataItem):
    """A market data source symbol for an asset."""

    _item_kind: ClassVar[str] = "ticker"

    id: Optional[int] = None
    asset: int
    name: str
    currency: Currency
    source: str
    priority: int
    factor: float
    tz: Optional[str] = None
    cal: Optional[str] = None


@total_ordering
@dataclass(kw_only=True, eq=False)
class Quote(DataItem):
    """A price observation; compared and ordered by time, then ticker."""

    _item_kind: ClassVar[str] = "quote"

    id: Optional[int] = None
    ticker: int
    price: float
    time: datetime
    volume: Optional[float] = None

    def _key(self) -> tuple[datetime, int]:
        return (self.time, self.ticker)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quote):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: "Quote") -> bool:
        if not isinstance(other, Quote):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())