"""Profit Sharing - percentage validation and exact three-way profit split.

Invariants:
    - Each share is within [0, 100] and the three shares sum to 100 (± 0.01)
    - split_profit returns integer shares that sum exactly to the total
    - Every share is >= 0: partner shares are rounded half-up but capped by what is
      still unallocated, and the business share takes the remainder

Design Decisions:
    - Remainder goes to the business account so that rounding never creates
      or destroys money across the three destination accounts
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP

from shopledger.core.domain_types import MinorUnits, Percentage
from shopledger.core.errors import ProfitShareConfigError

SHARE_TOLERANCE = 0.01
DEFAULT_PARTNER_ONE_SHARE = 33.33
DEFAULT_PARTNER_TWO_SHARE = 33.33
DEFAULT_BUSINESS_SHARE = 33.34


@dataclass(frozen=True)
class ProfitShares:
    """Percentages of net profit per stakeholder."""
    partner_one: Percentage = DEFAULT_PARTNER_ONE_SHARE
    partner_two: Percentage = DEFAULT_PARTNER_TWO_SHARE
    business: Percentage = DEFAULT_BUSINESS_SHARE

    @property
    def total(self) -> float:
        return self.partner_one + self.partner_two + self.business

    def as_roles(self) -> tuple[tuple[str, Percentage], ...]:
        return (
            ("partner_one", self.partner_one),
            ("partner_two", self.partner_two),
            ("business", self.business),
        )

    @classmethod
    def from_setting(cls, value: dict | None) -> "ProfitShares":
        """Build from the stored setting, falling back to defaults per key."""
        value = value or {}
        return cls(
            partner_one=float(value.get("partner_one_share", DEFAULT_PARTNER_ONE_SHARE)),
            partner_two=float(value.get("partner_two_share", DEFAULT_PARTNER_TWO_SHARE)),
            business=float(value.get("business_share", DEFAULT_BUSINESS_SHARE)),
        )

    def to_setting(self) -> dict:
        return {
            "partner_one_share": self.partner_one,
            "partner_two_share": self.partner_two,
            "business_share": self.business,
        }


@dataclass(frozen=True)
class ProfitSplit:
    total: MinorUnits
    partner_one: MinorUnits
    partner_two: MinorUnits
    business: MinorUnits

    def shares(self) -> tuple[MinorUnits, MinorUnits, MinorUnits]:
        return (self.partner_one, self.partner_two, self.business)


def validate_profit_shares(shares: ProfitShares) -> None:
    for name, value in shares.as_roles():
        if value < 0 or value > 100:
            raise ProfitShareConfigError(
                f"{name} share must be between 0 and 100 (got {value})",
            )
    if abs(shares.total - 100) >= SHARE_TOLERANCE:
        raise ProfitShareConfigError(
            f"Total profit share must equal 100% (got {shares.total:.2f}%)",
        )


def _portion(total_minor: MinorUnits, percent: Percentage) -> int:
    raw = Decimal(total_minor) * Decimal(str(percent)) / Decimal(100)
    return int(raw.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def split_profit(total_minor: MinorUnits, shares: ProfitShares) -> ProfitSplit:
    """Split total_minor across the three stakeholders. Pure.

    With 50/50/0 and an odd total both partners round up to more than the
    total between them; the cap hands the second partner only what is left.
    """
    if total_minor < 0:
        raise ProfitShareConfigError(f"Cannot split a negative profit ({total_minor})")
    partner_one = min(_portion(total_minor, shares.partner_one), total_minor)
    partner_two = min(_portion(total_minor, shares.partner_two), total_minor - partner_one)
    return ProfitSplit(
        total=total_minor,
        partner_one=partner_one,
        partner_two=partner_two,
        business=total_minor - partner_one - partner_two,
    )
