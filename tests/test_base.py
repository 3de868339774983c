import sqlite3

import pytest

from finstore.sqlite.base import SqliteBase


def _table_names(path):
    with sqlite3.connect(path) as conn:
        rows = conn.execute("SELECT name FROM sqlite_master WHERE type='table'").fetchall()
    return {row[0] for row in rows}


@pytest.mark.asyncio
async def test_in_memory_clean_creates_tables():
    async with await SqliteBase.connect(":memory:") as db:
        await db.clean()
        rows = await db._fetch_all("SELECT name FROM sqlite_master WHERE type='table'")
    names = {row[0] for row in rows}
    assert {"assets", "transactions", "ticker", "quotes", "rounding_digits", "objects"} <= names


@pytest.mark.asyncio
async def test_init_creates_tables_in_file(tmp_path):
    path = tmp_path / "store.db"
    db = await SqliteBase.connect(path)
    await db.init()
    await db.close()
    assert _table_names(path) == {
        "assets",
        "transactions",
        "ticker",
        "quotes",
        "rounding_digits",
        "objects",
    }


@pytest.mark.asyncio
async def test_clean_removes_data_but_keeps_objects(tmp_path):
    path = tmp_path / "store.db"
    db = await SqliteBase.connect(path)
    await db.init()
    await db.close()

    with sqlite3.connect(path) as conn:
        conn.execute("INSERT INTO assets (name) VALUES ('EUR')")
        conn.execute(
            "INSERT INTO objects (name, type, object) VALUES ('cal', 'calendar', '{}')"
        )

    async with await SqliteBase.connect(path) as db:
        await db.clean()

    with sqlite3.connect(path) as conn:
        assets = conn.execute("SELECT COUNT(*) FROM assets").fetchone()[0]
        objects = conn.execute("SELECT name FROM objects").fetchall()
    assert assets == 0
    assert objects == [("cal",)]


@pytest.mark.asyncio
async def test_init_is_idempotent(tmp_path):
    path = tmp_path / "store.db"
    async with await SqliteBase.connect(path) as db:
        await db.init()
        await db.init()
    assert "assets" in _table_names(path)