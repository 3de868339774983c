"""Data model and asynchronous SQLite storage for assets, tickers, quotes, cash flows and transactions."""

__version__ = "0.1.0"