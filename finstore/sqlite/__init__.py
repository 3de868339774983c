"""SQLite storage for assets, tickers, quotes, transactions and JSON objects."""