"""InventoryBatch ORM - a production run of a product and the labor it cost.

Invariants:
    - quantity > 0
    - total_labor_cost_minor == quantity × labor_cost_per_item_minor
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.db.base import Base, utcnow


class InventoryBatch(Base):
    __tablename__ = "inventory_batches"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False, index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    labor_cost_per_item_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    total_labor_cost_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
