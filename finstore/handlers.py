"""Abstract interfaces of stores for assets, quotes, transactions and objects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Optional, TypeVar

from finstore.asset import Asset
from finstore.currency import Currency
from finstore.errors import DataError
from finstore.quote import Quote, Ticker
from finstore.transaction import Transaction

T = TypeVar("T")


class AssetHandler(ABC):
    """Store of asset data."""

    @abstractmethod
    async def insert_asset(self, asset: Asset) -> int:
        """Store a new asset and return its id."""

    async def insert_asset_if_new(self, asset: Asset, rename_asset: bool) -> int:
        """Return the id of a matching asset, inserting it if there is none.

        If the insert fails and rename_asset is set, retry with " (NEW)" appended
        to the name.
        """
        existing = await self.get_asset_id(asset)
        if existing is not None:
            return existing
        try:
            return await self.insert_asset(asset)
        except DataError:
            if not rename_asset:
                raise
            renamed = Asset(
                id=None,
                name=f"{asset.name} (NEW)",
                wkn=asset.wkn,
                isin=asset.isin,
                note=asset.note,
            )
            return await self.insert_asset(renamed)

    @abstractmethod
    async def get_asset_id(self, asset: Asset) -> Optional[int]:
        """Look up an asset by ISIN, else WKN, else name."""

    @abstractmethod
    async def get_asset_by_id(self, id: int) -> Asset:
        ...

    @abstractmethod
    async def get_asset_by_isin(self, isin: str) -> Asset:
        ...

    @abstractmethod
    async def get_all_assets(self) -> list[Asset]:
        """Return all assets ordered by name."""

    @abstractmethod
    async def update_asset(self, asset: Asset) -> None:
        ...

    @abstractmethod
    async def delete_asset(self, id: int) -> None:
        ...

    @abstractmethod
    async def get_all_currencies(self) -> list[Currency]:
        """Return assets with a three letter name and neither ISIN nor WKN as currencies."""


class QuoteHandler(AssetHandler):
    """Store of tickers and market quotes."""

    @abstractmethod
    async def insert_ticker(self, ticker: Ticker) -> int:
        ...

    @abstractmethod
    async def get_ticker_id(self, ticker: str) -> Optional[int]:
        ...

    async def insert_if_new_ticker(self, ticker: Ticker) -> int:
        """Return the id of the ticker with this name, inserting it if there is none."""
        existing = await self.get_ticker_id(ticker.name)
        if existing is not None:
            return existing
        return await self.insert_ticker(ticker)

    @abstractmethod
    async def get_ticker_by_id(self, id: int) -> Ticker:
        ...

    @abstractmethod
    async def get_all_ticker(self) -> list[Ticker]:
        ...

    @abstractmethod
    async def get_all_ticker_for_source(self, source: str) -> list[Ticker]:
        ...

    @abstractmethod
    async def get_all_ticker_for_asset(self, asset_id: int) -> list[Ticker]:
        """Return all tickers that belong to the given asset."""

    @abstractmethod
    async def update_ticker(self, ticker: Ticker) -> None:
        ...

    @abstractmethod
    async def delete_ticker(self, id: int) -> None:
        ...

    @abstractmethod
    async def insert_quote(self, quote: Quote) -> int:
        ...

    @abstractmethod
    async def get_last_quote_before(
        self, asset_name: str, time: datetime
    ) -> tuple[Quote, Currency]:
        """Return the latest quote on or before time for the named asset."""

    @abstractmethod
    async def get_last_quote_before_by_id(
        self, asset_id: int, time: datetime
    ) -> tuple[Quote, Currency]:
        """Return the latest quote on or before time for the asset with this id."""

    @abstractmethod
    async def get_all_quotes_for_ticker(self, ticker_id: int) -> list[Quote]:
        ...

    @abstractmethod
    async def update_quote(self, quote: Quote) -> None:
        ...

    @abstractmethod
    async def delete_quote(self, id: int) -> None:
        ...

    @abstractmethod
    async def remove_duplicates(self) -> None:
        """Delete quotes repeating ticker, time and price of an earlier one."""

    @abstractmethod
    async def get_rounding_digits(self, currency: Currency) -> int:
        """Return the rounding digits of a currency; 2 if none are stored. Never raises."""

    @abstractmethod
    async def set_rounding_digits(self, currency: Currency, digits: int) -> None:
        ...


class TransactionHandler(AssetHandler):
    """Store of transactions."""

    @abstractmethod
    async def insert_transaction(self, transaction: Transaction) -> int:
        ...

    @abstractmethod
    async def get_transaction_by_id(self, id: int) -> Transaction:
        ...

    @abstractmethod
    async def get_all_transactions(self) -> list[Transaction]:
        ...

    @abstractmethod
    async def update_transaction(self, transaction: Transaction) -> None:
        ...

    @abstractmethod
    async def delete_transaction(self, id: int) -> None:
        ...


class ObjectHandler(ABC):
    """Store of arbitrary JSON-serialisable objects under a string name."""

    @abstractmethod
    async def store_object(self, name: str, object_type: str, obj: Any) -> None:
        """Serialise obj to JSON and store it under name."""

    @abstractmethod
    async def get_object(self, name: str, factory: Callable[[Any], T]) -> T:
        """Load the JSON stored under name and build the result with factory."""