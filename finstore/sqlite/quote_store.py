"""Ticker and quote store backed by SQLite."""

from __future__ import annotations

import sqlite3
from datetime import datetime
from typing import Any, Optional, Sequence

from finstore.currency import Currency, CurrencyError
from finstore.errors import DataAccessFailure, NotFound
from finstore.handlers import QuoteHandler
from finstore.quote import Quote, Ticker
from finstore.sqlite.asset_store import SqliteAssetHandler

_DEFAULT_ROUNDING_DIGITS = 2

_LAST_QUOTE_BY_NAME = (
    "SELECT q.id, q.ticker_id, q.price, q.time, q.volume, t.currency, t.priority "
    "FROM quotes q, ticker t, assets a "
    "WHERE a.name=? AND t.asset_id=a.id AND t.id=q.ticker_id AND q.time<=? "
    "ORDER BY q.time DESC, t.priority ASC LIMIT 1"
)

_LAST_QUOTE_BY_ID = (
    "SELECT q.id, q.ticker_id, q.price, q.time, q.volume, t.currency, t.priority "
    "FROM quotes q, ticker t "
    "WHERE t.asset_id=?1 AND t.id=q.ticker_id AND q.time<=?2 "
    "ORDER BY q.time DESC, t.priority ASC LIMIT 1"
)

_REMOVE_DUPLICATES = (
    "DELETE FROM quotes WHERE id IN "
    "(SELECT q2.id FROM quotes q1, quotes q2 "
    "WHERE q1.id < q2.id AND q1.ticker_id = q2.ticker_id "
    "AND q1.time = q2.time AND q1.price = q2.price)"
)


def _to_db_time(time: datetime) -> str:
    """Format a time as local time text that sorts chronologically."""
    return time.astimezone().isoformat(sep=" ", timespec="microseconds")


def _from_db_time(text: str) -> datetime:
    return datetime.fromisoformat(text).astimezone()


def _ticker_from_values(
    *,
    id: int,
    name: str,
    asset: int,
    source: str,
    priority: int,
    currency: str,
    factor: float,
    tz: Optional[str],
    cal: Optional[str],
) -> Ticker:
    return Ticker(
        id=id,
        name=name,
        asset=asset,
        source=source,
        priority=priority,
        currency=Currency.from_str(currency),
        factor=factor,
        tz=tz,
        cal=cal,
    )


def _quote_with_currency(row: Sequence[Any]) -> tuple[Quote, Currency]:
    quote_id, ticker_id, price, time, volume, currency, _priority = row
    quote = Quote(
        id=quote_id,
        ticker=ticker_id,
        price=price,
        time=_from_db_time(time),
        volume=volume,
    )
    return quote, Currency.from_str(currency)


class SqliteQuoteHandler(SqliteAssetHandler, QuoteHandler):
    """Stores tickers, quotes and rounding conventions alongside assets."""

    async def _fetch_one_or_fail(self, sql: str, params: Sequence[Any]) -> Sequence[Any]:
        try:
            row = await self._fetch_one(sql, params)
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc
        if row is None:
            raise DataAccessFailure("Query returned no rows")
        return row

    async def _fetch_all_or_fail(self, sql: str, params: Sequence[Any] = ()) -> list[Any]:
        try:
            return await self._fetch_all(sql, params)
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def _write_or_fail(self, sql: str, params: Sequence[Any]) -> None:
        try:
            await self._write(sql, params)
        except sqlite3.Error as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def insert_ticker(self, ticker: Ticker) -> int:
        """Insert the ticker and return the id of the ticker with its name and source.

        A failing insert is not reported by itself; the lookup afterwards decides.
        """
        try:
            await self._write(
                "INSERT INTO ticker (name, asset_id, source, priority, currency, factor, tz, cal) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    ticker.name,
                    ticker.asset,
                    ticker.source,
                    ticker.priority,
                    str(ticker.currency),
                    ticker.factor,
                    ticker.tz,
                    ticker.cal,
                ),
            )
        except sqlite3.Error:
            pass
        row = await self._fetch_one_or_fail(
            "SELECT id FROM ticker WHERE name=? AND source=?", (ticker.name, ticker.source)
        )
        return row[0]

    async def get_ticker_id(self, ticker: str) -> Optional[int]:
        try:
            row = await self._fetch_one("SELECT id FROM ticker WHERE name=?", (ticker,))
        except sqlite3.Error:
            return None
        return None if row is None else row[0]

    async def insert_if_new_ticker(self, ticker: Ticker) -> int:
        return await super().insert_if_new_ticker(ticker)

    async def get_ticker_by_id(self, id: int) -> Ticker:
        name, asset, source, priority, currency, factor, tz, cal = await self._fetch_one_or_fail(
            "SELECT name, asset_id, source, priority, currency, factor, tz, cal "
            "FROM ticker WHERE id=?",
            (id,),
        )
        try:
            return _ticker_from_values(
                id=id, name=name, asset=asset, source=source, priority=priority,
                currency=currency, factor=factor, tz=tz, cal=cal,
            )
        except CurrencyError as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def get_all_ticker(self) -> list[Ticker]:
        """Return all tickers; rows with a malformed currency are skipped."""
        rows = await self._fetch_all_or_fail(
            "SELECT id, name, asset_id, priority, source, currency, factor, tz, cal FROM ticker"
        )
        tickers = []
        for ticker_id, name, asset, priority, source, currency, factor, tz, cal in rows:
            try:
                tickers.append(_ticker_from_values(
                    id=ticker_id, name=name, asset=asset, source=source, priority=priority,
                    currency=currency, factor=factor, tz=tz, cal=cal,
                ))
            except CurrencyError:
                continue
        return tickers

    async def get_all_ticker_for_source(self, source: str) -> list[Ticker]:
        rows = await self._fetch_all_or_fail(
            "SELECT id, name, asset_id, priority, currency, factor, tz, cal "
            "FROM ticker WHERE source=?",
            (source,),
        )
        tickers = []
        for ticker_id, name, asset, priority, currency, factor, tz, cal in rows:
            try:
                tickers.append(_ticker_from_values(
                    id=ticker_id, name=name, asset=asset, source=source, priority=priority,
                    currency=currency, factor=factor, tz=tz, cal=cal,
                ))
            except CurrencyError:
                continue
        return tickers

    async def get_all_ticker_for_asset(self, asset_id: int) -> list[Ticker]:
        rows = await self._fetch_all_or_fail(
            "SELECT id, name, source, priority, currency, factor, tz, cal "
            "FROM ticker WHERE asset_id=?",
            (asset_id,),
        )
        tickers = []
        for ticker_id, name, source, priority, currency, factor, tz, cal in rows:
            try:
                tickers.append(_ticker_from_values(
                    id=ticker_id, name=name, asset=asset_id, source=source, priority=priority,
                    currency=currency, factor=factor, tz=tz, cal=cal,
                ))
            except CurrencyError:
                continue
        return tickers

    async def update_ticker(self, ticker: Ticker) -> None:
        if ticker.id is None:
            raise NotFound("not yet stored to database")
        await self._write_or_fail(
            "UPDATE ticker SET name=?2, asset_id=?3, source=?4, priority=?5, "
            "currency=?6, factor=?7, tz=?8, cal=?9 WHERE id=?1",
            (
                ticker.id,
                ticker.name,
                ticker.asset,
                ticker.source,
                ticker.priority,
                str(ticker.currency),
                ticker.factor,
                ticker.tz,
                ticker.cal,
            ),
        )

    async def delete_ticker(self, id: int) -> None:
        await self._write_or_fail("DELETE FROM ticker WHERE id=?", (id,))

    async def insert_quote(self, quote: Quote) -> int:
        """Insert the quote and return the id of the first quote with its ticker and time."""
        time = _to_db_time(quote.time)
        try:
            await self._write(
                "INSERT INTO quotes (ticker_id, price, time, volume) VALUES (?, ?, ?, ?)",
                (quote.ticker, quote.price, time, quote.volume),
            )
        except sqlite3.Error:
            pass
        row = await self._fetch_one_or_fail(
            "SELECT id FROM quotes WHERE ticker_id=? AND time=?", (quote.ticker, time)
        )
        return row[0]

    async def _last_quote(self, sql: str, key: Any, time: datetime) -> tuple[Quote, Currency]:
        row = await self._fetch_one_or_fail(sql, (key, _to_db_time(time)))
        try:
            return _quote_with_currency(row)
        except (CurrencyError, ValueError) as exc:
            raise DataAccessFailure(str(exc)) from exc

    async def get_last_quote_before(
        self, asset_name: str, time: datetime
    ) -> tuple[Quote, Currency]:
        return await self._last_quote(_LAST_QUOTE_BY_NAME, asset_name, time)

    async def get_last_quote_before_by_id(
        self, asset_id: int, time: datetime
    ) -> tuple[Quote, Currency]:
        return await self._last_quote(_LAST_QUOTE_BY_ID, asset_id, time)

    async def get_all_quotes_for_ticker(self, ticker_id: int) -> list[Quote]:
        """Return the ticker's quotes in ascending time; unreadable rows are skipped."""
        rows = await self._fetch_all_or_fail(
            "SELECT id, price, time, volume FROM quotes WHERE ticker_id=?1 ORDER BY time ASC",
            (ticker_id,),
        )
        quotes = []
        for quote_id, price, time, volume in rows:
            try:
                parsed = _from_db_time(time)
            except (TypeError, ValueError):
                continue
            quotes.append(
                Quote(id=quote_id, ticker=ticker_id, price=price, time=parsed, volume=volume)
            )
        return quotes

    async def update_quote(self, quote: Quote) -> None:
        if quote.id is None:
            raise NotFound("not yet stored to database")
        await self._write_or_fail(
            "UPDATE quotes SET ticker_id=?2, price=?3, time=?4, volume=?5 WHERE id=?1",
            (quote.id, quote.ticker, quote.price, _to_db_time(quote.time), quote.volume),
        )

    async def delete_quote(self, id: int) -> None:
        await self._write_or_fail("DELETE FROM quotes WHERE id=?1", (id,))

    async def remove_duplicates(self) -> None:
        try:
            await self._write(_REMOVE_DUPLICATES)
        except sqlite3.Error:
            pass

    async def get_rounding_digits(self, currency: Currency) -> int:
        try:
            row = await self._fetch_one(
                "SELECT digits FROM rounding_digits WHERE currency=?1", (str(currency),)
            )
        except sqlite3.Error:
            return _DEFAULT_ROUNDING_DIGITS
        return _DEFAULT_ROUNDING_DIGITS if row is None else row[0]

    async def set_rounding_digits(self, currency: Currency, digits: int) -> None:
        """Store digits for a currency; an existing entry is left as it is."""
        try:
            await self._write(
                "INSERT INTO rounding_digits (currency, digits) VALUES (?1, ?2)",
                (str(currency), digits),
            )
        except sqlite3.Error:
            pass