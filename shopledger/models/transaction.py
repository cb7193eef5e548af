"""Transaction ORM - one money movement between accounts.

Invariants:
    - amount_minor > 0 (direction comes from transaction_type, never the sign)
    - income has to_account_id; expense has from_account_id; transfer has both
    - reference_type="profit_share" rows point at a ProfitDistribution and are
      only removed together with their order

Design Decisions:
    - reference_id is an untyped UUID: it points at an order or a distribution
      depending on reference_type, so no foreign key
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    BigInteger, CheckConstraint, Date, DateTime, ForeignKey, String, Text, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.domain_types import PaymentMethod
from shopledger.db.base import Base, utcnow


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount_minor > 0", name="ck_transactions_amount_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    transaction_number: Mapped[str] = mapped_column(
        String(30), nullable=False, unique=True,
    )
    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(20), nullable=False)
    from_account_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("accounts.id"), nullable=True, index=True,
    )
    to_account_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("accounts.id"), nullable=True, index=True,
    )
    amount_minor: Mapped[int] = mapped_column(BigInteger, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str | None] = mapped_column(String(60), nullable=True)
    reference_type: Mapped[str | None] = mapped_column(String(30), nullable=True)
    reference_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True,
    )
    payment_method: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentMethod.CASH.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
