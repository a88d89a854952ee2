"""Unit tests for money normalization at the data boundary"""

import pytest
from decimal import Decimal
from rental_ledger.domain.exceptions import InvalidMoneyError
from rental_ledger.domain.money import CurrencyUnit, Money, major_to_minor, to_minor


def test_major_units_scale_to_minor():
    assert Money.major(1234.56).to_minor() == 123456
    assert Money.major(15_000).to_minor() == 1_500_000
    assert Money.major(Decimal("0.005")).to_minor() == 1  # half-up


def test_major_float_does_not_drift():
    """Test 0.29 × 100 lands on 29, not 28"""
    assert Money.major(0.29).to_minor() == 29


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.234,56", 123456),
        ("1234.56", 123456),
        ("1 234,56", 123456),
        ("500", 50000),
    ],
)
def test_major_strings_in_both_formats(raw, expected):
    assert Money.major(raw).to_minor() == expected


def test_minor_units_pass_through():
    assert Money.minor(123456).to_minor() == 123456
    assert to_minor("250", CurrencyUnit.MINOR) == 250
    assert to_minor(-300) == -300  # negatives are not rejected


def test_missing_amount_is_zero():
    assert Money.minor(None).to_minor() == 0
    assert Money.major("").to_minor() == 0


def test_fractional_minor_units_are_rejected():
    with pytest.raises(InvalidMoneyError):
        Money.minor(10.5).to_minor()


def test_garbage_is_rejected():
    with pytest.raises(InvalidMoneyError):
        Money.major("abc").to_minor()


def test_unit_accepts_string_value():
    assert to_minor(12.5, "major") == 1250
    assert major_to_minor(5_000) == 500_000
