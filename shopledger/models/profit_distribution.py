"""ProfitDistribution ORM - the three-way split of one order's net profit.

Invariants:
    - order_id unique: at most one distribution per order
    - partner_one + partner_two + business shares == total_profit_minor
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger, Boolean, Date, DateTime, ForeignKey, Text, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.db.base import Base, utcnow


class ProfitDistribution(Base):
    __tablename__ = "profit_distributions"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("orders.id"), nullable=False, unique=True,
    )
    total_profit_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    partner_one_share_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    partner_two_share_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    business_share_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    distribution_date: Mapped[date] = mapped_column(Date, nullable=False)
    is_distributed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
