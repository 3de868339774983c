"""Currency codes and the interface for currency conversion."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar


class CurrencyError(Exception):
    """Base class of errors related to currencies."""

    default_message: ClassVar[str] = "currency error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidLength(CurrencyError):
    default_message = "currency codes must consist of exactly three characters"


class InvalidCharacter(CurrencyError):
    default_message = "currency codes must contain only alphabetic ASCII characters"


class DeserializationFailed(CurrencyError):
    default_message = "currency deserialization failed"


class ConversionFailed(CurrencyError):
    default_message = "currency conversion failed"


# Currencies quoted without decimals; all others round to two digits.
_NO_DECIMAL_CURRENCIES = frozenset({"JPY", "TRL"})


@dataclass(frozen=True)
class Currency:
    """A three letter ISO currency code with its rounding convention."""

    iso_code: str
    rounding_digits: int = 2

    def __str__(self) -> str:
        return self.iso_code

    @classmethod
    def from_str(cls, text: str) -> "Currency":
        """Parse a currency code, ignoring case."""
        rounding_digits = 0 if text in _NO_DECIMAL_CURRENCIES else 2
        letters: list[str] = []
        for char in text:
            if len(letters) >= 3:
                raise InvalidLength()
            if "a" <= char <= "z":
                char = char.upper()
            if char.isascii() and char.isalpha():
                letters.append(char)
            else:
                raise InvalidCharacter()
        if len(letters) != 3:
            raise InvalidLength()
        return cls("".join(letters), rounding_digits)

    def to_json(self) -> str:
        """Serialise as a JSON string."""
        return json.dumps(self.iso_code)

    @classmethod
    def from_json(cls, data: str) -> "Currency":
        """Read a currency from a JSON string."""
        try:
            value = json.loads(data)
        except (json.JSONDecodeError, TypeError) as exc:
            raise DeserializationFailed() from exc
        if not isinstance(value, str):
            raise DeserializationFailed()
        try:
            return cls.from_str(value)
        except CurrencyError as exc:
            raise DeserializationFailed() from exc


class CurrencyConverter(ABC):
    """Source of FX rates for currency conversion."""

    @abstractmethod
    async def fx_rate(
        self,
        foreign_currency: Currency,
        domestic_currency: Currency,
        time: datetime,
    ) -> float:
        """Return the price of one unit of foreign currency in domestic currency."""