"""Inventory ORM - stock level of one product in one warehouse.

Invariants:
    - stock_quantity may go negative (orders are accepted beyond stock on hand)
    - (product_id, warehouse_id) is unique
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    BigInteger, DateTime, ForeignKey, Integer, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.db.base import Base, utcnow


class Inventory(Base):
    __tablename__ = "inventory"
    __table_args__ = (
        UniqueConstraint("product_id", "warehouse_id", name="uq_inventory_product_warehouse"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    product_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("products.id"), nullable=False, index=True,
    )
    warehouse_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("warehouses.id"), nullable=False,
    )
    stock_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_cost_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    minimum_stock_level: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
