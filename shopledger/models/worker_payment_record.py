"""WorkerPaymentRecord ORM - labor a worker is owed for one order item.

Invariants:
    - total_labor_cost_minor == quantity × labor_cost_per_item_minor
    - Records are recreated whenever their order's items are replaced
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.domain_types import WorkerPaymentStatus
from shopledger.db.base import Base, utcnow


class WorkerPaymentRecord(Base):
    __tablename__ = "worker_payment_records"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    worker_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workers.id"), nullable=False, index=True,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id"), nullable=False, index=True,
    )
    order_item_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("order_items.id", ondelete="SET NULL"), nullable=True,
    )
    product_name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    labor_cost_per_item_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    total_labor_cost_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    advance_payment_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    remaining_balance_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=WorkerPaymentStatus.PENDING.value,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
