"""Containers for basic asset data."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Optional

from finstore.errors import DataItem


@dataclass
class AssetCategory:
    id: int
    name: str


@dataclass
class Asset(DataItem):
    """An asset identified by name and, optionally, WKN and ISIN."""

    _item_kind: ClassVar[str] = "asset"

    id: Optional[int] = None
    name: str = ""
    wkn: Optional[str] = None
    isin: Optional[str] = None
    note: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Asset":
        return cls(
            id=data.get("id"),
            name=data["name"],
            wkn=data.get("wkn"),
            isin=data.get("isin"),
            note=data.get("note"),
        )