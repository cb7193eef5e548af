"""Account ORM - money holders whose balances move with every transaction.

Invariants:
    - balance_minor == opening_balance_minor + Σ signed transaction effects
    - profit_role is unique when set: one account per profit-share stakeholder
    - Balances only change through relative UPDATEs issued by LedgerService

Design Decisions:
    - opening_balance_minor stored separately so reconciliation can recompute
      balances without guessing the starting point
"""

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.domain_types import AccountType
from shopledger.db.base import Base, utcnow


class Account(Base):
    __tablename__ = "accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    account_name: Mapped[str] = mapped_column(String(120), nullable=False)
    account_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AccountType.BUSINESS.value,
    )
    owner_name: Mapped[str] = mapped_column(String(120), nullable=False, default="")
    opening_balance_minor: Mapped[int] = mapped_column(
        BigInteger, nullable=False, default=0,
    )
    balance_minor: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    profit_role: Mapped[str | None] = mapped_column(
        String(20), nullable=True, unique=True,
    )
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
