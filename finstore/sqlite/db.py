"""SQLite database offering every store, and a pool handing out connections."""

from __future__ import annotations

from typing import cast

from finstore.sqlite.base import PathLike
from finstore.sqlite.object_store import SqliteObjectHandler
from finstore.sqlite.quote_store import SqliteQuoteHandler
from finstore.sqlite.transaction_store import SqliteTransactionHandler


class SqliteDB(SqliteQuoteHandler, SqliteTransactionHandler, SqliteObjectHandler):
    """Connection to an SQLite database storing assets, quotes, transactions and objects."""


class SqliteDBPool:
    """Hands out connections to one SQLite database.

    Each connection to an in-memory database sees a database of its own.
    """

    def __init__(self, path: PathLike) -> None:
        self.path = path

    @classmethod
    def in_memory(cls) -> "SqliteDBPool":
        """Pool for an in-memory database."""
        return cls(":memory:")

    @classmethod
    def open(cls, path: PathLike) -> "SqliteDBPool":
        """Pool for a file based database."""
        return cls(path)

    async def get_connection(self) -> SqliteDB:
        """Open a new connection; raises SqliteError if the database cannot be opened."""
        return cast(SqliteDB, await SqliteDB.connect(self.path))