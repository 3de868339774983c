"""Asset store backed by SQLite."""

from __future__ import annotations

import sqlite3
from typing import Optional

from finstore.asset import Asset
from finstore.currency import Currency, CurrencyError
from finstore.errors import DataAccessFailure, NotFound
from finstore.handlers import AssetHandler
from finstore.sqlite.base import SqliteBase


class SqliteAssetHandler(SqliteBase, AssetHandler):
    """Stores assets in the `assets` table."""

    async def insert_asset(self, asset: Asset) -> int:
        """Insert the asset and return the id of the asset stored under its name.

        A failing insert is not reported by itself: if an asset of that name
        already exists, its id is returned.
        """
        try:
            await self._write(
                "INSERT INTO assets (name, wkn, isin, note) VALUES (?, ?, ?, ?)",
                (asset.name, asset.wkn, asset.isin, asset.note),
            )
        except sqlite3.Error:
            pass
        try:
            row = await self._fetch_one("SELECT id FROM assets WHERE name=?", (asset.name,))
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        return row[0]

    async def insert_asset_if_new(self, asset: Asset, rename_asset: bool) -> int:
        return await super().insert_asset_if_new(asset, rename_asset)

    async def get_asset_id(self, asset: Asset) -> Optional[int]:
        if asset.isin is not None:
            query, key = "SELECT id FROM assets WHERE isin=?", asset.isin
        elif asset.wkn is not None:
            query, key = "SELECT id FROM assets WHERE wkn=?", asset.wkn
        else:
            query, key = "SELECT id FROM assets WHERE name=?", asset.name
        try:
            row = await self._fetch_one(query, (key,))
        except sqlite3.Error:
            return None
        return None if row is None else row[0]

    async def get_asset_by_id(self, id: int) -> Asset:
        try:
            row = await self._fetch_one(
                "SELECT name, wkn, isin, note FROM assets WHERE id=?", (id,)
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        name, wkn, isin, note = row
        return Asset(id=id, name=name, wkn=wkn, isin=isin, note=note)

    async def get_asset_by_isin(self, isin: str) -> Asset:
        try:
            row = await self._fetch_one(
                "SELECT id, name, wkn, note FROM assets WHERE isin=?", (isin,)
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        asset_id, name, wkn, note = row
        return Asset(id=asset_id, name=name, wkn=wkn, isin=isin, note=note)

    async def get_all_assets(self) -> list[Asset]:
        try:
            rows = await self._fetch_all(
                "SELECT id, name, wkn, isin, note FROM assets ORDER BY name"
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        return [
            Asset(id=asset_id, name=name, wkn=wkn, isin=isin, note=note)
            for asset_id, name, wkn, isin, note in rows
        ]

    async def update_asset(self, asset: Asset) -> None:
        if asset.id is None:
            raise NotFound("not yet stored to database")
        try:
            await self._write(
                "UPDATE assets SET name=?2, wkn=?3, isin=?4, note=?5 WHERE id=?1",
                (asset.id, asset.name, asset.wkn, asset.isin, asset.note),
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def delete_asset(self, id: int) -> None:
        try:
            await self._write("DELETE FROM assets WHERE id=?", (id,))
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def get_all_currencies(self) -> list[Currency]:
        """Return currencies from assets with a three letter name and no ISIN or WKN.

        Names that are not valid currency codes are skipped.
        """
        try:
            rows = await self._fetch_all(
                "SELECT name FROM assets WHERE isin IS NULL AND wkn IS NULL "
                "AND length(name)=3 ORDER BY name"
            )
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        currencies = []
        for (name,) in rows:
            try:
                currencies.append(Currency.from_str(name))
            except CurrencyError:
                continue
        return currencies