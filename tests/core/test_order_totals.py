"""Order Totals - item validation, derived amounts and order-level rules.

Invariants:
    - total = Σ(price × qty) − discount
    - net profit deducts labor, shipping and other costs but not material
    - Negative profit needs explicit acknowledgement

Tests:
    - First failing item is reported with its 1-based position
    - Totals arithmetic including discount and remaining payment
    - Default payment status by platform
"""

from dataclasses import dataclass

import pytest

from shopledger.core.domain_types import OrderPlatform, PaymentStatus
from shopledger.core.errors import (
    BusinessValidationError, NegativeProfitNotAcknowledgedError,
)
from shopledger.core.order_totals import (
    compute_order_totals, default_payment_status, validate_order_amounts,
    validate_order_items,
)


@dataclass
class Item:
    item_name: str = "Teak Chair"
    quantity: int = 1
    unit_price_minor: int = 10_000
    labor_cost_minor: int = 2_000
    material_cost_minor: int = 1_500


def test_empty_order_rejected():
    with pytest.raises(BusinessValidationError, match="at least one product"):
        validate_order_items([])


def test_item_without_name_reports_position():
    with pytest.raises(BusinessValidationError, match="Product 2 must have a name"):
        validate_order_items([Item(), Item(item_name="  ")])


def test_item_with_zero_quantity_rejected():
    with pytest.raises(BusinessValidationError, match="quantity greater than 0"):
        validate_order_items([Item(quantity=0)])


def test_negative_price_rejected():
    with pytest.raises(BusinessValidationError, match="negative unit price"):
        validate_order_items([Item(unit_price_minor=-1)])


def test_negative_costs_rejected():
    with pytest.raises(BusinessValidationError, match="negative costs"):
        validate_order_items([Item(material_cost_minor=-5)])


def test_totals_with_discount_and_costs():
    items = [Item(quantity=2), Item(unit_price_minor=5_000, labor_cost_minor=500, quantity=3)]
    totals = compute_order_totals(
        items, shipping_cost_minor=1_000, other_cost_minor=500,
        paid_amount_minor=10_000, discount_minor=2_000,
    )
    assert totals.total_amount == 20_000 + 15_000 - 2_000
    assert totals.total_labor_cost == 4_000 + 1_500
    assert totals.total_material_cost == 3_000 + 4_500
    assert totals.net_profit == 33_000 - 5_500 - 1_000 - 500
    assert totals.remaining_payment == 23_000


def test_material_cost_not_deducted_from_profit():
    totals = compute_order_totals([Item(material_cost_minor=9_000, labor_cost_minor=0)])
    assert totals.net_profit == 10_000


def test_zero_total_rejected():
    totals = compute_order_totals([Item(unit_price_minor=1_000)], discount_minor=1_000)
    with pytest.raises(BusinessValidationError, match="greater than 0"):
        validate_order_amounts(totals, 0)


def test_negative_paid_amount_rejected():
    totals = compute_order_totals([Item()])
    with pytest.raises(BusinessValidationError, match="Paid amount"):
        validate_order_amounts(totals, -1)


def test_negative_profit_requires_acknowledgement():
    totals = compute_order_totals([Item(labor_cost_minor=12_000)])
    with pytest.raises(NegativeProfitNotAcknowledgedError) as exc:
        validate_order_amounts(totals, 0)
    assert exc.value.net_profit_minor == -2_000
    assert exc.value.http_status == 400

    validate_order_amounts(totals, 0, allow_negative_profit=True)


def test_default_payment_status_by_platform():
    assert default_payment_status(OrderPlatform.LOCAL) == PaymentStatus.ADVANCE
    assert default_payment_status(OrderPlatform.ETSY) == PaymentStatus.FULL
    assert default_payment_status(OrderPlatform.WEBSITE) == PaymentStatus.FULL
