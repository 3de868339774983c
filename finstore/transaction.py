"""Basic transaction types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Optional

from finstore.cash_flow import CashFlow
from finstore.errors import DataItem


class TransactionType:
    """Base class of the kinds of transaction."""


@dataclass(frozen=True)
class Cash(TransactionType):
    pass


@dataclass(frozen=True)
class AssetTrade(TransactionType):
    asset_id: int
    position: float


@dataclass(frozen=True)
class Dividend(TransactionType):
    asset_id: int


@dataclass(frozen=True)
class Interest(TransactionType):
    asset_id: int


@dataclass(frozen=True)
class Tax(TransactionType):
    transaction_ref: Optional[int] = None


@dataclass(frozen=True)
class Fee(TransactionType):
    transaction_ref: Optional[int] = None


@dataclass
class Transaction(DataItem):
    """A transaction; its id is None until it has been stored."""

    _item_kind: ClassVar[str] = "transaction"

    transaction_type: TransactionType
    cash_flow: CashFlow
    note: Optional[str] = None
    id: Optional[int] = None

    def assign_asset_id(self, asset_id: int) -> None:
        """Set the asset id for transaction kinds that refer to an asset."""
        if isinstance(self.transaction_type, (AssetTrade, Dividend, Interest)):
            self.transaction_type = replace(self.transaction_type, asset_id=asset_id)

    def assign_transaction_ref(self, trans_ref: int) -> None:
        """Set the related transaction for taxes and fees."""
        if isinstance(self.transaction_type, (Tax, Fee)):
            self.transaction_type = replace(self.transaction_type, transaction_ref=trans_ref)