"""WorkerDailyWork ORM - one attendance mark per worker per day."""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    Date, DateTime, Float, ForeignKey, String, Text, UniqueConstraint, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from shopledger.core.domain_types import AttendanceType
from shopledger.db.base import Base, utcnow


class WorkerDailyWork(Base):
    __tablename__ = "worker_daily_work"
    __table_args__ = (
        UniqueConstraint("worker_id", "work_date", name="uq_daily_work_worker_date"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4,
    )
    worker_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("workers.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    work_date: Mapped[date] = mapped_column(Date, nullable=False)
    attendance_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AttendanceType.FULL_DAY.value,
    )
    hours_worked: Mapped[float] = mapped_column(Float, nullable=False, default=8.0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow,
    )
