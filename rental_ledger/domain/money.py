"""Typed money value normalized once at the data-access boundary"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Union
from rental_ledger.domain.exceptions import InvalidMoneyError

MINOR_PER_MAJOR = 100

Amount = Union[int, float, str, Decimal, None]


class CurrencyUnit(str, Enum):
    """Unit a raw amount arrives in"""

    MINOR = "minor"  # kuruş / cents
    MAJOR = "major"  # lira / dollars


def _parse_decimal(raw: Amount) -> Decimal:
    """
    Parse a raw amount into a Decimal.

    Strings may use either "1234.56" or the back office's "1.234,56" form.
    None and empty strings are zero.
    """
    if raw is None:
        return Decimal(0)
    if isinstance(raw, Decimal):
        return raw
    if isinstance(raw, bool):
        raise InvalidMoneyError(f"Invalid amount: {raw!r}")
    if isinstance(raw, int):
        return Decimal(raw)
    if isinstance(raw, float):
        return Decimal(str(raw))

    text = raw.strip().replace(" ", "")
    if not text:
        return Decimal(0)
    if "," in text:
        # Comma is the decimal separator, dots are thousands separators
        text = text.replace(".", "").replace(",", ".")
    try:
        return Decimal(text)
    except InvalidOperation as e:
        raise InvalidMoneyError(f"Invalid amount: {raw!r}") from e


@dataclass(frozen=True)
class Money:
    """Amount tagged with the unit it was delivered in"""

    amount: Amount
    unit: CurrencyUnit = CurrencyUnit.MINOR

    @classmethod
    def minor(cls, amount: Amount) -> "Money":
        return cls(amount, CurrencyUnit.MINOR)

    @classmethod
    def major(cls, amount: Amount) -> "Money":
        return cls(amount, CurrencyUnit.MAJOR)

    def to_minor(self) -> int:
        """
        Convert to integer minor units.

        MAJOR amounts are scaled by 100 and rounded half-up; MINOR amounts
        must already be whole numbers. Negative amounts pass through unchanged.

        Example:
            Money.major("1.234,56").to_minor() → 123456
        """
        value = _parse_decimal(self.amount)
        if CurrencyUnit(self.unit) is CurrencyUnit.MAJOR:
            value = value * MINOR_PER_MAJOR
            return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))

        if value != value.to_integral_value():
            raise InvalidMoneyError(f"Minor-unit amount must be whole: {self.amount!r}")
        return int(value)


def to_minor(amount: Amount, unit: CurrencyUnit | str = CurrencyUnit.MINOR) -> int:
    """Shorthand for Money(amount, unit).to_minor()"""
    return Money(amount, CurrencyUnit(unit)).to_minor()


def major_to_minor(amount: Amount) -> int:
    """Threshold helper: major-unit constant to minor units"""
    return Money.major(amount).to_minor()
