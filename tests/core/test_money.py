"""Money - display rendering of minor units.

Tests:
    - from_minor returns two-decimal Decimals
    - format_currency groups thousands and keeps the sign in front
"""

from decimal import Decimal

from shopledger.core.money import format_currency, from_minor


def test_from_minor_returns_two_decimals():
    assert from_minor(1234) == Decimal("12.34")
    assert from_minor(5) == Decimal("0.05")
    assert str(from_minor(100)) == "1.00"


def test_format_currency():
    assert format_currency(123450) == "LKR 1,234.50"
    assert format_currency(-500) == "-LKR 5.00"
    assert format_currency(0, "USD") == "USD 0.00"
