"""Order ORM - the aggregate whose writes cascade into stock, payroll and the ledger.

Invariants:
    - order_number unique, formatted {PREFIX}-{YYYY}-{NNNN}
    - Totals are derived by core.order_totals and stored denormalized
    - Deleting an order is a soft delete (is_active=False) after the cascade
      has removed its items, payment records, distribution and transactions

Design Decisions:
    - No ORM relationships to items: services query OrderItem explicitly so
      bulk deletes never leave a stale loaded collection behind
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger, Boolean, Date, DateTime, ForeignKey, String, Text, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.domain_types import (
    OrderPlatform, OrderPriority, OrderStatus, PaymentStatus,
)
from shopledger.db.base import Base, utcnow


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    order_number: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id"), nullable=False, index=True,
    )
    order_date: Mapped[date] = mapped_column(Date, nullable=False)
    delivery_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.DRAFT.value,
    )
    platform: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderPlatform.LOCAL.value,
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderPriority.NORMAL.value,
    )
    total_amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    total_labor_cost_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    total_material_cost_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    shipping_cost_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    other_cost_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    discount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    paid_amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.PENDING.value,
    )
    payment_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    assigned_worker_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("workers.id"), nullable=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )

    @property
    def net_profit_minor(self) -> int:
        return (
            self.total_amount_minor - self.total_labor_cost_minor
            - self.shipping_cost_minor - self.other_cost_minor
        )

    @property
    def remaining_payment_minor(self) -> int:
        return self.total_amount_minor - self.paid_amount_minor
