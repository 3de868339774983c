"""Store of JSON-serialised objects backed by SQLite."""

from __future__ import annotations

import dataclasses
import json
import sqlite3
from typing import Any, Callable, TypeVar

from finstore.errors import DataAccessFailure, InsertFailed
from finstore.handlers import ObjectHandler
from finstore.sqlite.base import SqliteBase

T = TypeVar("T")


def _json_default(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    raise TypeError(f"object of type {type(value).__name__} is not JSON serializable")


class SqliteObjectHandler(SqliteBase, ObjectHandler):
    """Stores objects as JSON text in the `objects` table."""

    async def store_object(self, name: str, object_type: str, obj: Any) -> None:
        """Serialise obj (dataclasses included) and store it under a new name."""
        try:
            text = json.dumps(obj, default=_json_default)
        except (TypeError, ValueError) as exc:
            raise InsertFailed(str(exc)) from exc
        try:
            await self._write(
                "INSERT INTO objects (name, type, object) VALUES (?, ?, ?)",
                (name, object_type, text),
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def get_object(self, name: str, factory: Callable[[Any], T]) -> T:
        try:
            row = await self._fetch_one("SELECT object FROM objects WHERE name=?", (name,))
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        try:
            return factory(json.loads(row[0]))
        except (TypeError, ValueError, KeyError) as exc:
            raise DataAccessFailure("Failed to deserialize string to object") from exc