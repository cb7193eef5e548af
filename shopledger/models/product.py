"""Product ORM - catalog entries with standard price and per-unit costs.

Invariants:
    - Prices and costs are minor units, never negative
    - Deleting a product is a soft delete (is_active=False): order items keep
      pointing at it
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.db.base import Base, utcnow


class Product(Base):
    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    product_code: Mapped[str | None] = mapped_column(String(60), nullable=True)
    category_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("product_categories.id"), nullable=True,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_custom: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    standard_price_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    labor_cost_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    material_cost_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
