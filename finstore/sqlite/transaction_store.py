"""Transaction store backed by SQLite."""

from __future__ import annotations

import sqlite3
import time
from dataclasses import dataclass
from datetime import date
from typing import Any, Optional, Sequence

from finstore.cash_flow import CashFlow
from finstore.currency import Currency, CurrencyError
from finstore.errors import DataAccessFailure, DataError, InsertFailed, InvalidTransaction, NotFound
from finstore.handlers import TransactionHandler
from finstore.sqlite.asset_store import SqliteAssetHandler
from finstore.transaction import (
    AssetTrade,
    Cash,
    Dividend,
    Fee,
    Interest,
    Tax,
    Transaction,
    TransactionType,
)

CASH = "c"
ASSET = "a"
DIVIDEND = "d"
INTEREST = "i"
TAX = "t"
FEE = "f"

_SELECT_COLUMNS = (
    "trans_type, asset_id, cash_amount, cash_currency, cash_date, "
    "related_trans, position, note"
)


@dataclass
class RawTransaction:
    """A transaction as it is laid out in the `transactions` table."""

    trans_type: str
    cash_amount: float
    cash_currency: str
    cash_date: date
    id: Optional[int] = None
    asset: Optional[int] = None
    related_trans: Optional[int] = None
    position: Optional[float] = None
    note: Optional[str] = None

    def _require_asset(self) -> int:
        if self.asset is None:
            raise InvalidTransaction("missing asset id")
        return self.asset

    def _transaction_type(self) -> TransactionType:
        kind = self.trans_type
        if kind == CASH:
            return Cash()
        if kind == ASSET:
            asset_id = self._require_asset()
            if self.position is None:
                raise InvalidTransaction("missing position value")
            return AssetTrade(asset_id=asset_id, position=self.position)
        if kind == DIVIDEND:
            return Dividend(asset_id=self._require_asset())
        if kind == INTEREST:
            return Interest(asset_id=self._require_asset())
        if kind == TAX:
            return Tax(transaction_ref=self.related_trans)
        if kind == FEE:
            return Fee(transaction_ref=self.related_trans)
        raise InvalidTransaction(kind)

    def to_transaction(self) -> Transaction:
        """Build the transaction; raises InsertFailed or InvalidTransaction on bad data."""
        try:
            currency = Currency.from_str(self.cash_currency)
        except CurrencyError as exc:
            raise InsertFailed(str(exc)) from exc
        cash_flow = CashFlow.from_amount(self.cash_amount, currency, self.cash_date)
        return Transaction(
            transaction_type=self._transaction_type(),
            cash_flow=cash_flow,
            note=self.note,
            id=self.id,
        )

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "RawTransaction":
        raw = cls(
            trans_type="",
            cash_amount=transaction.cash_flow.amount.amount,
            cash_currency=str(transaction.cash_flow.amount.currency),
            cash_date=transaction.cash_flow.date,
            id=transaction.id,
            note=transaction.note,
        )
        match transaction.transaction_type:
            case Cash():
                raw.trans_type = CASH
            case AssetTrade(asset_id=asset_id, position=position):
                raw.trans_type = ASSET
                raw.asset = asset_id
                raw.position = position
            case Dividend(asset_id=asset_id):
                raw.trans_type = DIVIDEND
                raw.asset = asset_id
            case Interest(asset_id=asset_id):
                raw.trans_type = INTEREST
                raw.asset = asset_id
            case Tax(transaction_ref=ref):
                raw.trans_type = TAX
                raw.related_trans = ref
            case Fee(transaction_ref=ref):
                raw.trans_type = FEE
                raw.related_trans = ref
            case other:
                raise InvalidTransaction(type(other).__name__)
        return raw

    def _params(self) -> tuple[Any, ...]:
        return (
            self.trans_type,
            self.asset,
            self.cash_amount,
            self.cash_currency,
            self.cash_date.isoformat(),
            self.related_trans,
            self.position,
            self.note,
        )


def _raw_from_row(id: int, row: Sequence[Any]) -> RawTransaction:
    trans_type, asset, amount, currency, cash_date, related, position, note = row
    return RawTransaction(
        id=id,
        trans_type=trans_type,
        asset=asset,
        cash_amount=amount,
        cash_currency=currency,
        cash_date=date.fromisoformat(cash_date),
        related_trans=related,
        position=position,
        note=note,
    )


class SqliteTransactionHandler(SqliteAssetHandler, TransactionHandler):
    """Stores transactions in the `transactions` table."""

    async def insert_transaction(self, transaction: Transaction) -> int:
        """Insert the transaction and return its id, found again by its time stamp.

        A failing insert is not reported by itself; the lookup afterwards decides.
        """
        raw = RawTransaction.from_transaction(transaction)
        time_stamp = time.time_ns()
        try:
            await self._write(
                "INSERT INTO transactions (trans_type, asset_id, cash_amount, "
                "cash_currency, cash_date, related_trans, position, note, time_stamp) "
                "VALUES (?1, ?2, ?3, ?4, ?5, ?6, ?7, ?8, ?9)",
                (*raw._params(), time_stamp),
            )
        except sqlite3.Error:
            pass
        try:
            row = await self._fetch_one(
                "SELECT id FROM transactions WHERE trans_type=? AND cash_amount=? "
                "AND cash_currency=? AND cash_date=? AND time_stamp=?",
                (
                    raw.trans_type,
                    raw.cash_amount,
                    raw.cash_currency,
                    raw.cash_date.isoformat(),
                    time_stamp,
                ),
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        return row[0]

    async def get_transaction_by_id(self, id: int) -> Transaction:
        try:
            row = await self._fetch_one(
                f"SELECT {_SELECT_COLUMNS} FROM transactions WHERE id=?1", (id,)
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        try:
            raw = _raw_from_row(id, row)
        except (TypeError, ValueError) as exc:
            raise DataAccessFailure(str(exc)) from exc
        return raw.to_transaction()

    async def get_all_transactions(self) -> list[Transaction]:
        """Return all transactions; rows that cannot be read are skipped."""
        try:
            rows = await self._fetch_all(f"SELECT id, {_SELECT_COLUMNS} FROM transactions")
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        transactions = []
        for trans_id, *values in rows:
            try:
                transactions.append(_raw_from_row(trans_id, values).to_transaction())
            except (TypeError, ValueError, DataError):
                continue
        return transactions

    async def update_transaction(self, transaction: Transaction) -> None:
        if transaction.id is None:
            raise NotFound("not yet stored to database")
        raw = RawTransaction.from_transaction(transaction)
        try:
            await self._write(
                "UPDATE transactions SET trans_type=?2, asset_id=?3, cash_amount=?4, "
                "cash_currency=?5, cash_date=?6, related_trans=?7, position=?8, "
                "note=?9, time_stamp=?10 WHERE id=?1",
                (raw.id, *raw._params(), time.time_ns()),
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def delete_transaction(self, id: int) -> None:
        try:
            await self._write("DELETE FROM transactions WHERE id=?", (id,))
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc