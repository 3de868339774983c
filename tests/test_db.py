from datetime import date

import pytest

from finstore.asset import Asset
from finstore.cash_flow import CashFlow
from finstore.currency import Currency
from finstore.date_time_helper import make_time
from finstore.quote import Quote, Ticker
from finstore.sqlite.base import SqliteError
from finstore.sqlite.db import SqliteDBPool
from finstore.transaction import Dividend, Transaction


@pytest.mark.asyncio
async def test_file_create_insert_query():
    pool = SqliteDBPool.in_memory()
    async with await pool.get_connection() as db:
        await db.clean()
        assert await db.get_all_assets() == []
        assert await db.get_all_transactions() == []


@pytest.mark.asyncio
async def test_all_stores_on_one_connection():
    pool = SqliteDBPool.in_memory()
    async with await pool.get_connection() as db:
        await db.clean()
        eur = Currency.from_str("EUR")
        asset_id = await db.insert_asset(Asset(name="asset A", isin="123456789012"))
        assert asset_id == 1

        ticker_id = await db.insert_ticker(
            Ticker(asset=asset_id, name="A", currency=eur, source="s1", priority=1, factor=1.0)
        )
        time = make_time(2021, 12, 6, 19, 0, 0)
        await db.insert_quote(Quote(ticker=ticker_id, price=1.5, time=time))
        quote, currency = await db.get_last_quote_before_by_id(
            asset_id, make_time(2021, 12, 6, 19, 1, 0)
        )
        assert quote.price == 1.5
        assert currency == eur

        trans_id = await db.insert_transaction(
            Transaction(Dividend(asset_id=asset_id), CashFlow.from_amount(6.0, eur, date(2020, 12, 2)))
        )
        stored = await db.get_transaction_by_id(trans_id)
        assert stored.transaction_type == Dividend(asset_id=asset_id)

        await db.store_object("first_struct", "testdata", {"text": "hello", "number": 10})
        assert await db.get_object("first_struct", dict) == {"text": "hello", "number": 10}


@pytest.mark.asyncio
async def test_file_database_persists(tmp_path):
    pool = SqliteDBPool.open(tmp_path / "finance.db")
    async with await pool.get_connection() as db:
        await db.clean()
        await db.insert_asset(Asset(name="kept", wkn="A1B2C3"))
    async with await pool.get_connection() as db:
        names = [asset.name for asset in await db.get_all_assets()]
    assert names == ["kept"]


@pytest.mark.asyncio
async def test_open_missing_directory_fails(tmp_path):
    pool = SqliteDBPool.open(tmp_path / "missing" / "finance.db")
    with pytest.raises(SqliteError):
        await pool.get_connection()