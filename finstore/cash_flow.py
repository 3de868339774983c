"""Amounts of money in a currency and dated cash flows."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from finstore.currency import Currency, CurrencyConverter


def round2digits(x: float, digits: int) -> float:
    """Round to the given number of decimals, half-way cases away from zero."""
    scale = 10.0**digits
    scaled = x * scale
    if math.isnan(scaled) or math.isinf(scaled):
        return scaled / scale
    magnitude = abs(scaled)
    whole = math.floor(magnitude)
    if magnitude - whole >= 0.5:
        whole += 1
    return math.copysign(whole, scaled) / scale


@dataclass
class CashAmount:
    """An amount of money in some currency."""

    amount: float
    currency: Currency

    async def _shift(
        self,
        cash_amount: CashAmount,
        sign: float,
        time: datetime,
        currency_converter: CurrencyConverter,
        with_rounding: bool,
    ) -> CashAmount:
        if self.currency == cash_amount.currency:
            self.amount += sign * cash_amount.amount
        else:
            fx_rate = await currency_converter.fx_rate(
                cash_amount.currency, self.currency, time
            )
            self.amount += sign * fx_rate * cash_amount.amount
            if with_rounding:
                self.amount = round2digits(self.amount, self.currency.rounding_digits)
        return self

    async def add(
        self,
        cash_amount: CashAmount,
        time: datetime,
        currency_converter: CurrencyConverter,
        with_rounding: bool = False,
    ) -> CashAmount:
        """Add another amount in place, converting its currency if needed."""
        return await self._shift(cash_amount, 1.0, time, currency_converter, with_rounding)

    async def add_opt(
        self,
        cash_amount: Optional[CashAmount],
        time: datetime,
        currency_converter: CurrencyConverter,
        with_rounding: bool = False,
    ) -> CashAmount:
        """Add an amount if one is given; otherwise leave this one unchanged."""
        if cash_amount is None:
            return self
        return await self.add(cash_amount, time, currency_converter, with_rounding)

    async def sub(
        self,
        cash_amount: CashAmount,
        time: datetime,
        currency_converter: CurrencyConverter,
        with_rounding: bool = False,
    ) -> CashAmount:
        """Subtract another amount in place, converting its currency if needed."""
        return await self._shift(cash_amount, -1.0, time, currency_converter, with_rounding)

    async def sub_opt(
        self,
        cash_amount: Optional[CashAmount],
        time: datetime,
        currency_converter: CurrencyConverter,
        with_rounding: bool = False,
    ) -> CashAmount:
        """Subtract an amount if one is given; otherwise leave this one unchanged."""
        if cash_amount is None:
            return self
        return await self.sub(cash_amount, time, currency_converter, with_rounding)

    def round(self, digits: int) -> CashAmount:
        """Return a copy rounded to the given number of decimals."""
        return CashAmount(round2digits(self.amount, digits), self.currency)

    def round_by_convention(self, rounding_conventions: Mapping[str, int]) -> CashAmount:
        """Round with the digits given for this currency, or two decimals if none are."""
        return self.round(rounding_conventions.get(str(self.currency), 2))

    def __str__(self) -> str:
        return f"{self.amount:16.4f} {self.currency}"

    def __neg__(self) -> CashAmount:
        return CashAmount(-self.amount, self.currency)


@dataclass
class CashFlow:
    """A single cash flow: an amount paid on a date."""

    amount: CashAmount
    date: date

    @classmethod
    def from_amount(cls, amount: float, currency: Currency, date: date) -> CashFlow:
        return cls(CashAmount(amount, currency), date)

    def aggregatable(self, cf: CashFlow) -> bool:
        """Whether both flows share currency and date."""
        return self.amount.currency == cf.amount.currency and self.date == cf.date

    def fuzzy_cash_flows_cmp_eq(self, cf: CashFlow, tol: float) -> bool:
        """Compare for equality within an absolute tolerance."""
        return (
            self.aggregatable(cf)
            and not math.isnan(self.amount.amount)
            and not math.isnan(cf.amount.amount)
            and abs(self.amount.amount - cf.amount.amount) <= tol
        )

    def __str__(self) -> str:
        return f"{self.date.isoformat()} {self.amount}"

    def __neg__(self) -> CashFlow:
        return CashFlow(-self.amount, self.date)