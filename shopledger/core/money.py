"""Money - rendering integer minor units for people.

Invariants:
    - Stored amounts are ints of minor units (amount × 100); floats never enter
    - Display conversion goes through Decimal, so 1234 renders as exactly 12.34
"""

from decimal import Decimal

from shopledger.core.domain_types import MinorUnits

_HUNDRED = Decimal(100)


def from_minor(minor: MinorUnits) -> Decimal:
    """Convert minor units to a two-decimal display amount."""
    return (Decimal(minor) / _HUNDRED).quantize(Decimal("0.01"))


def format_currency(minor: MinorUnits, currency: str = "LKR") -> str:
    """Render minor units as e.g. 'LKR 1,234.50' (negatives as '-LKR 5.00')."""
    amount = from_minor(abs(minor))
    sign = "-" if minor < 0 else ""
    return f"{sign}{currency} {amount:,.2f}"
