# finstore

An asynchronous data layer for investment bookkeeping. It covers assets,
market data tickers, price quotes, cash flows and transactions. Storage is
in SQLite through `aiosqlite`.

## Installation

```
pip install .
```

The `test` extra installs `pytest` and `pytest-asyncio`:

```
pip install ".[test]"
```

## Core types

- `finstore.currency.Currency` is a three-letter ISO code. Parse it with
  `Currency.from_str("eur")`, which ignores case. A code of the wrong length
  raises `InvalidLength`. A code with characters other than ASCII letters
  raises `InvalidCharacter`. Both are subclasses of `CurrencyError`. JPY and
  TRL round to 0 digits and all other codes round to 2. `to_json()` and
  `from_json()` write and read the code as a JSON string.
- `finstore.currency.CurrencyConverter` is an abstract class. Implement its
  async `fx_rate(foreign_currency, domestic_currency, time)` to provide
  exchange rates.
- `finstore.cash_flow.CashAmount` is an amount in a currency. These methods
  change the amount in place:
  - `add`, `sub`, `add_opt` and `sub_opt` are async.
  - When the currencies differ, they convert with a `CurrencyConverter`.
  - They can then round to the currency's digits.

  `round(digits)` and `round_by_convention(mapping)` each return a rounded
  copy.
- `finstore.cash_flow.CashFlow` is an amount on a date:
  - `CashFlow.from_amount(amount, currency, date)` builds one.
  - `aggregatable()` compares two flows.
  - `fuzzy_cash_flows_cmp_eq()` also compares two flows.
- `finstore.asset.Asset`, `finstore.quote.Ticker` and `finstore.quote.Quote`
  describe securities, their market data sources and their prices. Quotes
  compare and sort by time, then by ticker.
- `finstore.transaction.Transaction` holds a transaction kind, which is one of:
  - `Cash`
  - `AssetTrade`
  - `Dividend`
  - `Interest`
  - `Tax`
  - `Fee`

  `assign_asset_id()` and `assign_transaction_ref()` fill in references where
  the kind has them.

Stored items get their id once. `require_id()` raises when an item has no id
yet. `assign_id()` raises when the item already has one.

When a storage operation fails, it raises a subclass of
`finstore.errors.DataError`:

- `DataAccessFailure`
- `NotFound`
- `UpdateFailed`
- `DeleteFailed`
- `InsertFailed`
- `InvalidTransaction`

## Using the SQLite store

```python
import asyncio

from finstore.asset import Asset
from finstore.sqlite.db import SqliteDBPool


async def main():
    pool = SqliteDBPool.in_memory()
    async with await pool.get_connection() as db:
        await db.clean()
        asset_id = await db.insert_asset(
            Asset(id=None, name="A asset", isin="123456789012", wkn="A1B2C3")
        )
        asset = await db.get_asset_by_id(asset_id)
        print(asset.name)


asyncio.run(main())
```

### Pools and connections

- `SqliteDBPool.open(path)` gives a pool for a database held in a file.
- Each connection from `get_connection()` is a new `SqliteDB`, and closing it
  closes the connection.
- With `in_memory()`, every connection sees a database of its own.

### Creating tables

- `init()` creates any missing tables.
- `clean()` drops the asset, ticker, quote, transaction and rounding tables,
  then creates them again. Stored objects are kept.

### What a `SqliteDB` stores

`SqliteDB` implements the abstract handlers in `finstore.handlers`:

- **Assets** (`AssetHandler`): insert, look up by id, ISIN, WKN or name,
  update, delete. `get_all_currencies()` lists assets that have a three-letter
  name and neither ISIN nor WKN.
- **Tickers and quotes** (`QuoteHandler`):
  - Quote lookup: `get_last_quote_before()` and `get_last_quote_before_by_id()`
    find the latest quote up to a given time.
  - Duplicates: `remove_duplicates()` deletes repeated quotes.
  - Rounding digits per currency: `get_rounding_digits()` returns 2 when none
    are stored.
- **Transactions** (`TransactionHandler`).
- **Objects** (`ObjectHandler`): `store_object(name, object_type, obj)`
  serialises plain values and dataclasses to JSON.
  `get_object(name, factory)` loads the JSON and passes it to `factory`.

## Date and time helpers

`finstore.date_time_helper` builds local, time-zone-aware datetimes from
dates, strings and UNIX timestamps. It provides:

- `naive_date_to_date_time`
- `unix_to_date_time`
- `date_time_from_str`
- `date_time_from_str_standard`
- `date_time_from_str_american`
- `date_from_str`
- `to_time`
- `make_time`

`make_time` returns `None` when the local time is ambiguous or does not exist.

## What it does not do

- There is no command-line program.
- There is no server.
- SQLite is the only storage backend.
- The package does not fetch market data.
- No `CurrencyConverter` implementation is included.