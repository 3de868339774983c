"""Errors raised by data handlers and the identity rules shared by stored items."""

from __future__ import annotations

from typing import ClassVar, Optional


class DataError(Exception):
    """Base class of all errors raised while accessing stored data."""

    prefix: ClassVar[str] = ""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.prefix}: {self.message}"
        return self.message


class DataAccessFailure(DataError):
    prefix = "connection to database failed"


class NotFound(DataError):
    prefix = "could not found request object in database"


class UpdateFailed(DataError):
    prefix = "update of object in database failed"


class DeleteFailed(DataError):
    prefix = "removing object from database failed"


class InsertFailed(DataError):
    prefix = "inserting object to database failed"


class InvalidTransaction(DataError):
    prefix = "invalid transaction type"


class DataItem:
    """Mixin for items that receive their id once they have been stored."""

    _item_kind: ClassVar[str] = "item"
    id: Optional[int]

    def require_id(self) -> int:
        """Return the id, or raise if the item has not been stored yet."""
        if self.id is None:
            raise DataAccessFailure(f"tried to get id of temporary {self._item_kind}")
        return self.id

    def assign_id(self, id: int) -> None:
        """Set the id, or raise if an id has already been assigned."""
        if self.id is not None:
            raise DataAccessFailure(f"tried to change valid {self._item_kind} id")
        self.id = id