"""Connection to an SQLite database and creation of the tables the stores use."""

from __future__ import annotations

import os
import sqlite3
from typing import Any, Iterable, Optional, Union

import aiosqlite

PathLike = Union[str, "os.PathLike[str]"]

_DROP_STATEMENTS = (
    "DROP TABLE IF EXISTS transactions",
    "DROP TABLE IF EXISTS quotes",
    "DROP TABLE IF EXISTS ticker",
    "DROP TABLE IF EXISTS assets",
    "DROP TABLE IF EXISTS rounding_digits",
)

_CREATE_STATEMENTS = (
    """CREATE TABLE IF NOT EXISTS assets (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        wkn TEXT UNIQUE,
        isin TEXT UNIQUE,
        note TEXT)""",
    """CREATE TABLE IF NOT EXISTS transactions (
        id INTEGER PRIMARY KEY,
        trans_type TEXT NOT NULL,
        asset_id INTEGER,
        cash_amount REAL NOT NULL,
        cash_currency TEXT NOT NULL,
        cash_date TEXT NOT NULL,
        related_trans INTEGER,
        position REAL,
        note TEXT,
        time_stamp INTEGER NOT NULL,
        FOREIGN KEY(asset_id) REFERENCES assets(id),
        FOREIGN KEY(related_trans) REFERENCES transactions(id))""",
    """CREATE TABLE IF NOT EXISTS ticker (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL,
        asset_id INTEGER NOT NULL,
        source TEXT NOT NULL,
        priority INTEGER NOT NULL,
        currency TEXT NOT NULL,
        factor REAL NOT NULL DEFAULT 1.0,
        tz TEXT,
        cal TEXT,
        FOREIGN KEY(asset_id) REFERENCES assets(id))""",
    """CREATE TABLE IF NOT EXISTS quotes (
        id INTEGER PRIMARY KEY,
        ticker_id INTEGER NOT NULL,
        price REAL NOT NULL,
        time TEXT NOT NULL,
        volume REAL,
        FOREIGN KEY(ticker_id) REFERENCES ticker(id))""",
    """CREATE TABLE IF NOT EXISTS rounding_digits (
        id INTEGER PRIMARY KEY,
        currency TEXT NOT NULL UNIQUE,
        digits INT NOT NULL)""",
    """CREATE TABLE IF NOT EXISTS objects (
        id INTEGER PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        type TEXT NOT NULL,
        object TEXT NOT NULL)""",
)


class SqliteError(Exception):
    """Failure while opening or setting up an SQLite database."""


class SqliteBase:
    """An open SQLite connection shared by the SQLite stores."""

    def __init__(self, connection: aiosqlite.Connection) -> None:
        self._conn = connection

    @classmethod
    async def connect(cls, path: PathLike = ":memory:") -> "SqliteBase":
        """Open the database at path (":memory:" for an in-memory database)."""
        try:
            connection = await aiosqlite.connect(path)
        except sqlite3.Error as exc:
            raise SqliteError("Failed to open database") from exc
        return cls(connection)

    async def close(self) -> None:
        await self._conn.close()

    async def __aenter__(self) -> "SqliteBase":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def clean(self) -> None:
        """Drop the data tables (stored objects are kept) and create them anew."""
        await self._run_statements(_DROP_STATEMENTS)
        await self.init()

    async def init(self) -> None:
        """Create any missing tables."""
        await self._run_statements(_CREATE_STATEMENTS)

    async def _run_statements(self, statements: Iterable[str]) -> None:
        try:
            for statement in statements:
                await self._conn.execute(statement)
            await self._conn.commit()
        except (sqlite3.Error, ValueError) as exc:
            raise SqliteError("Failed to execute SQL statement") from exc

    async def _write(self, sql: str, params: Iterable[Any] = ()) -> None:
        try:
            await self._conn.execute(sql, tuple(params))
        except sqlite3.Error:
            await self._conn.rollback()
            raise
        await self._conn.commit()

    async def _fetch_one(self, sql: str, params: Iterable[Any] = ()) -> Optional[sqlite3.Row]:
        async with self._conn.execute(sql, tuple(params)) as cursor:
            return await cursor.fetchone()

    async def _fetch_all(self, sql: str, params: Iterable[Any] = ()) -> list[Any]:
        async with self._conn.execute(sql, tuple(params)) as cursor:
            return list(await cursor.fetchall())