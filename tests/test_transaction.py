from datetime import date

import pytest

from finstore.cash_flow import CashFlow
from finstore.currency import Currency
from finstore.errors import DataAccessFailure
from finstore.transaction import (
    AssetTrade,
    Cash,
    Dividend,
    Fee,
    Interest,
    Tax,
    Transaction,
)

EUR = Currency.from_str("EUR")


def make(kind):
    return Transaction(kind, CashFlow.from_amount(-100.0, EUR, date(2020, 12, 2)))


def test_assign_asset_id_keeps_position():
    t = make(AssetTrade(asset_id=1, position=100.0))
    t.assign_asset_id(7)
    assert t.transaction_type == AssetTrade(asset_id=7, position=100.0)


@pytest.mark.parametrize("kind", [Dividend, Interest])
def test_assign_asset_id_income(kind):
    t = make(kind(asset_id=1))
    t.assign_asset_id(3)
    assert t.transaction_type == kind(asset_id=3)


@pytest.mark.parametrize("kind", [Cash(), Tax(None), Fee(2)])
def test_assign_asset_id_ignored(kind):
    t = make(kind)
    t.assign_asset_id(9)
    assert t.transaction_type == kind


@pytest.mark.parametrize("kind", [Tax, Fee])
def test_assign_transaction_ref(kind):
    t = make(kind())
    t.assign_transaction_ref(5)
    assert t.transaction_type == kind(transaction_ref=5)


def test_assign_transaction_ref_ignored():
    t = make(Dividend(asset_id=1))
    t.assign_transaction_ref(5)
    assert t.transaction_type == Dividend(asset_id=1)


def test_id_rules():
    t = make(Cash())
    with pytest.raises(DataAccessFailure, match="temporary transaction"):
        t.require_id()
    t.assign_id(4)
    assert t.require_id() == 4
    with pytest.raises(DataAccessFailure, match="valid transaction id"):
        t.assign_id(5)