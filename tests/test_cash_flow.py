import math
from datetime import date, datetime

import pytest

from finstore.cash_flow import CashAmount, CashFlow, round2digits
from finstore.currency import Currency, CurrencyConverter

EUR = Currency.from_str("EUR")
USD = Currency.from_str("USD")
JPY = Currency.from_str("JPY")
WHEN = datetime(2021, 6, 1, 12, 0, 0)


class FixedConverter(CurrencyConverter):
    def __init__(self, rate):
        self.rate = rate
        self.calls = []

    async def fx_rate(self, foreign_currency, domestic_currency, time):
        self.calls.append((foreign_currency, domestic_currency, time))
        return self.rate


def test_round_half_away_from_zero():
    assert round2digits(2.5, 0) == 3.0
    assert round2digits(-2.5, 0) == -round2digits(2.5, 0)


def test_round_to_digits():
    assert round2digits(1.23456, 2) == 1.23


def test_round_keeps_already_rounded():
    assert round2digits(1.25, 2) == 1.25
    assert math.isnan(round2digits(float("nan"), 2))


@pytest.mark.asyncio
async def test_add_same_currency_skips_converter():
    conv = FixedConverter(2.0)
    amount = CashAmount(10.0, EUR)
    result = await amount.add(CashAmount(1.5, EUR), WHEN, conv, True)
    assert result is amount
    assert conv.calls == []
    await amount.sub(CashAmount(1.5, EUR), WHEN, conv, True)
    assert amount.amount == 10.0


@pytest.mark.asyncio
async def test_add_then_sub_foreign_round_trip():
    conv = FixedConverter(2.0)
    amount = CashAmount(10.0, EUR)
    await amount.add(CashAmount(1.5, USD), WHEN, conv, False)
    assert amount.amount > 10.0
    assert conv.calls == [(USD, EUR, WHEN)]
    await amount.sub(CashAmount(1.5, USD), WHEN, conv, False)
    assert amount.amount == pytest.approx(10.0)


@pytest.mark.asyncio
async def test_conversion_rounds_by_currency():
    conv = FixedConverter(1.23456)
    amount = CashAmount(0.0, JPY)
    await amount.add(CashAmount(7.0, USD), WHEN, conv, True)
    assert amount.amount == float(int(amount.amount))
    eur_amount = CashAmount(0.0, EUR)
    await eur_amount.add(CashAmount(7.0, USD), WHEN, conv, True)
    assert eur_amount.amount == round2digits(eur_amount.amount, 2)


@pytest.mark.asyncio
async def test_optional_none_leaves_amount():
    conv = FixedConverter(2.0)
    amount = CashAmount(4.0, EUR)
    assert (await amount.add_opt(None, WHEN, conv, True)).amount == 4.0
    assert (await amount.sub_opt(None, WHEN, conv, True)).amount == 4.0
    await amount.sub_opt(CashAmount(4.0, EUR), WHEN, conv, True)
    assert amount.amount == 0.0


def test_round_by_convention():
    amount = CashAmount(1.23456, EUR)
    assert amount.round_by_convention({"EUR": 3}) == amount.round(3)
    assert amount.round_by_convention({"USD": 4}) == amount.round(2)


def test_display_and_negation():
    amount = CashAmount(1.5, EUR)
    assert str(amount) == "          1.5000 EUR"
    assert -(-amount) == amount
    assert (-amount).amount == -1.5


def test_cash_flow_compare():
    day = date(2020, 12, 2)
    cf = CashFlow.from_amount(100.0, EUR, day)
    near = CashFlow.from_amount(100.005, EUR, day)
    assert cf.aggregatable(near)
    assert cf.fuzzy_cash_flows_cmp_eq(near, 0.01)
    assert not cf.fuzzy_cash_flows_cmp_eq(near, 0.001)
    assert not cf.fuzzy_cash_flows_cmp_eq(CashFlow.from_amount(100.0, USD, day), 1.0)
    assert not cf.fuzzy_cash_flows_cmp_eq(
        CashFlow.from_amount(100.0, EUR, date(2020, 12, 1)), 1.0
    )
    nan_cf = CashFlow.from_amount(float("nan"), EUR, day)
    assert not nan_cf.fuzzy_cash_flows_cmp_eq(nan_cf, 1.0)


def test_cash_flow_display_and_negation():
    day = date(2020, 12, 2)
    cf = CashFlow.from_amount(1.5, EUR, day)
    assert str(cf) == f"2020-12-02 {cf.amount}"
    neg = -cf
    assert neg.date == day
    assert neg.amount == -cf.amount