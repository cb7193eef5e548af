"""Order Schemas - request/response models for order endpoints.

Invariants:
    - Money fields are integer minor units
    - Item-level business rules (name, quantity, prices) are checked by
      core.order_totals so the messages match the order form
    - Order-level costs cannot be negative

Design Decisions:
    - OrderUpdate is a full replacement of the order and its items, like the
      order form that resubmits everything
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.domain_types import (
    OrderPlatform, OrderPriority, OrderStatus, PaymentStatus,
)


class OrderItemIn(BaseModel):
    """One line of an order as submitted."""
    product_id: UUID | None = None
    item_name: str = Field("", max_length=200)
    description: str | None = Field(None, max_length=2000)
    quantity: int = 1
    unit_price_minor: int = 0
    labor_cost_minor: int = 0
    material_cost_minor: int = 0
    assigned_worker_id: UUID | None = None

    @field_validator("item_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class OrderCreate(BaseModel):
    customer_id: UUID
    order_date: date = Field(default_factory=date.today)
    delivery_date: date | None = None
    status: OrderStatus = OrderStatus.DRAFT
    platform: OrderPlatform = OrderPlatform.LOCAL
    priority: OrderPriority = OrderPriority.NORMAL
    shipping_cost_minor: int = Field(0, ge=0)
    other_cost_minor: int = Field(0, ge=0)
    discount_minor: int = Field(0, ge=0)
    paid_amount_minor: int = 0
    payment_status: PaymentStatus | None = None
    payment_notes: str | None = Field(None, max_length=2000)
    notes: str | None = Field(None, max_length=5000)
    assigned_worker_id: UUID | None = None
    allow_negative_profit: bool = False
    items: list[OrderItemIn] = Field(default_factory=list)


class OrderUpdate(OrderCreate):
    """Full replacement of an existing order."""


class OrderItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID | None
    item_name: str
    description: str | None
    quantity: int
    unit_price_minor: int
    labor_cost_minor: int
    material_cost_minor: int
    assigned_worker_id: UUID | None
    is_completed: bool


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    order_number: str
    customer_id: UUID
    customer_name: str | None = None
    order_date: date
    delivery_date: date | None
    status: OrderStatus
    platform: OrderPlatform
    priority: OrderPriority
    total_amount_minor: int
    total_labor_cost_minor: int
    total_material_cost_minor: int
    shipping_cost_minor: int
    other_cost_minor: int
    discount_minor: int
    paid_amount_minor: int
    payment_status: PaymentStatus
    payment_notes: str | None
    notes: str | None
    assigned_worker_id: UUID | None
    net_profit_minor: int
    remaining_payment_minor: int
    is_active: bool
    created_at: datetime
    items: list[OrderItemResponse] = Field(default_factory=list)


class OrderDeleteSummary(BaseModel):
    """What the delete cascade removed or restored."""
    order_id: UUID
    order_number: str
    transactions_reversed: int
    distributions_deleted: int
    payment_records_deleted: int
    items_deleted: int
    units_restocked: int
