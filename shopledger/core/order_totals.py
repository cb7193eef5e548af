"""Order Totals - pure validation and arithmetic for order line items.

Invariants:
    - An order has at least one item; every item has a name and quantity > 0
    - Unit price, labor and material costs are never negative
    - total_amount = Σ(unit_price × qty) − discount, and must be > 0
    - net_profit = total_amount − labor − shipping − other (material tracked, not deducted)
    - remaining_payment = total_amount − paid

Design Decisions:
    - Items accepted through LineItemLike Protocol: pydantic request items and ORM
      OrderItem rows both satisfy it, no conversion layer needed
    - Validation returns the first failing rule as BusinessValidationError with a
      1-based item position, matching what the order form shows
"""

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence

from shopledger.core.domain_types import OrderPlatform, PaymentStatus
from shopledger.core.errors import (
    BusinessValidationError, NegativeProfitNotAcknowledgedError,
)


class LineItemLike(Protocol):
    item_name: str
    quantity: int
    unit_price_minor: int
    labor_cost_minor: int
    material_cost_minor: int


@dataclass(frozen=True)
class OrderTotals:
    """Derived order amounts, all in minor units."""
    total_amount: int
    total_labor_cost: int
    total_material_cost: int
    net_profit: int
    remaining_payment: int


def validate_order_items(items: Sequence[LineItemLike]) -> None:
    """Raise BusinessValidationError for the first invalid item."""
    if not items:
        raise BusinessValidationError(
            "Order must contain at least one product", field="items",
        )
    for position, item in enumerate(items, start=1):
        if not (item.item_name or "").strip():
            raise BusinessValidationError(
                f"Product {position} must have a name", field="items",
            )
        if item.quantity <= 0:
            raise BusinessValidationError(
                f"Product {position} must have quantity greater than 0",
                field="items",
            )
        if item.unit_price_minor < 0:
            raise BusinessValidationError(
                f"Product {position} cannot have negative unit price",
                field="items",
            )
        if item.labor_cost_minor < 0 or item.material_cost_minor < 0:
            raise BusinessValidationError(
                f"Product {position} cannot have negative costs", field="items",
            )


def _line_sum(items: Iterable[LineItemLike], attr: str) -> int:
    return sum(getattr(item, attr) * item.quantity for item in items)


def compute_order_totals(
    items: Sequence[LineItemLike],
    shipping_cost_minor: int = 0,
    other_cost_minor: int = 0,
    paid_amount_minor: int = 0,
    discount_minor: int = 0,
) -> OrderTotals:
    """Compute order amounts from items and order-level costs. Pure."""
    total_amount = _line_sum(items, "unit_price_minor") - discount_minor
    labor = _line_sum(items, "labor_cost_minor")
    material = _line_sum(items, "material_cost_minor")
    return OrderTotals(
        total_amount=total_amount,
        total_labor_cost=labor,
        total_material_cost=material,
        net_profit=total_amount - labor - shipping_cost_minor - other_cost_minor,
        remaining_payment=total_amount - paid_amount_minor,
    )


def validate_order_amounts(
    totals: OrderTotals,
    paid_amount_minor: int,
    allow_negative_profit: bool = False,
    currency: str = "LKR",
) -> None:
    """Check totals against order-level rules.

    Negative net profit is accepted only when the caller sets
    allow_negative_profit; otherwise NegativeProfitNotAcknowledgedError is raised.
    """
    if totals.total_amount <= 0:
        raise BusinessValidationError(
            "Order total must be greater than 0", field="items",
        )
    if paid_amount_minor < 0:
        raise BusinessValidationError(
            "Paid amount cannot be negative", field="paid_amount_minor",
        )
    if totals.net_profit < 0 and not allow_negative_profit:
        raise NegativeProfitNotAcknowledgedError(totals.net_profit, currency)


def default_payment_status(platform: OrderPlatform) -> PaymentStatus:
    """Local orders start with an advance; online orders are paid in full."""
    if platform == OrderPlatform.LOCAL:
        return PaymentStatus.ADVANCE
    return PaymentStatus.FULL
