[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "finstore"
version = "0.1.0"
description = "Data model and asynchronous SQLite storage for assets, tickers, market quotes and transactions"
requires-python = ">=3.10"
dependencies = [
    "aiosqlite",
]
keywords = ["finance", "portfolio", "quotes", "transactions", "sqlite", "asyncio"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Financial and Insurance Industry",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Framework :: AsyncIO",
    "Topic :: Database",
    "Topic :: Office/Business :: Financial :: Investment",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["finstore"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
