"""Payroll Service - workers, daily attendance, standalone payments and labor cost reporting.

Invariants:
    - One WorkerDailyWork row per (worker, date); marking again overwrites it
    - hours_worked always follows the attendance type (8 / 4 / 0)
    - Deleting a worker is a soft delete; their history stays for reporting
    - Standalone payments are positive amounts
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.config import get_settings
from shopledger.core.attendance import MonthlyAttendance, hours_for_attendance, summarize_month
from shopledger.core.domain_types import AttendanceType, StandalonePaymentType, WorkerId
from shopledger.core.errors import BusinessValidationError, ResourceNotFoundError
from shopledger.core.labor import (
    LaborCostRow, LaborEntry, PayrollSummary, build_labor_cost_rows, summarize_payroll,
)
from shopledger.models.inventory_batch import InventoryBatch
from shopledger.models.product import Product
from shopledger.models.standalone_payment import StandalonePayment
from shopledger.models.worker import Worker
from shopledger.models.worker_daily_work import WorkerDailyWork
from shopledger.models.worker_payment_record import WorkerPaymentRecord

logger = logging.getLogger(__name__)

_WORKER_FIELDS = ("name", "phone", "email", "address", "hourly_rate_minor", "hire_date")


@dataclass
class WorksheetRow:
    worker: Worker
    attendance: MonthlyAttendance


class PayrollService:

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Workers ─────────────────────────────────────────────────

    async def list_workers(self, include_inactive: bool = False) -> list[Worker]:
        query = select(Worker).order_by(Worker.name)
        if not include_inactive:
            query = query.where(Worker.is_active.is_(True))
        return list((await self.db.execute(query)).scalars().all())

    async def get_worker(self, worker_id: WorkerId) -> Worker:
        worker = await self.db.get(Worker, worker_id)
        if worker is None:
            raise ResourceNotFoundError("Worker", str(worker_id))
        return worker

    async def create_worker(self, fields: dict) -> Worker:
        values = {k: v for k, v in fields.items() if k in _WORKER_FIELDS and v is not None}
        values.setdefault("hourly_rate_minor", get_settings().default_hourly_rate_minor)
        worker = Worker(is_active=True, **values)
        self.db.add(worker)
        await self.db.flush()
        logger.info(f"Added worker '{worker.name}'", extra={"worker_id": worker.id})
        return worker

    async def update_worker(self, worker_id: WorkerId, fields: dict) -> Worker:
        worker = await self.get_worker(worker_id)
        for key, value in fields.items():
            if key in _WORKER_FIELDS and value is not None:
                setattr(worker, key, value)
        await self.db.flush()
        return worker

    async def deactivate_worker(self, worker_id: WorkerId) -> Worker:
        worker = await self.get_worker(worker_id)
        worker.is_active = False
        await self.db.flush()
        logger.info(f"Deactivated worker '{worker.name}'", extra={"worker_id": worker.id})
        return worker

    # ─── Attendance ──────────────────────────────────────────────

    async def mark_attendance(
        self,
        worker_id: WorkerId,
        work_date: date,
        attendance_type: AttendanceType,
        notes: str | None = None,
    ) -> WorkerDailyWork:
        """Insert or overwrite the worker's attendance for work_date."""
        await self.get_worker(worker_id)
        attendance_type = AttendanceType(attendance_type)
        result = await self.db.execute(
            select(WorkerDailyWork)
            .where(WorkerDailyWork.worker_id == worker_id)
            .where(WorkerDailyWork.work_date == work_date)
        )
        record = result.scalar_one_or_none()
        if record is None:
            record = WorkerDailyWork(worker_id=worker_id, work_date=work_date)
            self.db.add(record)
        record.attendance_type = attendance_type.value
        record.hours_worked = hours_for_attendance(attendance_type)
        record.notes = notes
        await self.db.flush()
        return record

    async def update_workday(
        self,
        workday_id: uuid.UUID,
        attendance_type: AttendanceType,
        notes: str | None = None,
    ) -> WorkerDailyWork:
        record = await self._require_workday(workday_id)
        attendance_type = AttendanceType(attendance_type)
        record.attendance_type = attendance_type.value
        record.hours_worked = hours_for_attendance(attendance_type)
        record.notes = notes
        await self.db.flush()
        return record

    async def delete_workday(self, workday_id: uuid.UUID) -> None:
        record = await self._require_workday(workday_id)
        await self.db.delete(record)
        await self.db.flush()

    async def list_attendance(
        self, worker_id: WorkerId | None = None, limit: int = 200,
    ) -> list[WorkerDailyWork]:
        query = select(WorkerDailyWork).order_by(WorkerDailyWork.work_date.desc())
        if worker_id:
            query = query.where(WorkerDailyWork.worker_id == worker_id)
        return list((await self.db.execute(query.limit(limit))).scalars().all())

    async def monthly_worksheet(self, year: int, month: int) -> list[WorksheetRow]:
        """Attendance counts for every active worker in one month."""
        if not 1 <= month <= 12:
            raise BusinessValidationError("Month must be between 1 and 12", field="month")
        workers = await self.list_workers()
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        records = (
            await self.db.execute(
                select(WorkerDailyWork)
                .where(WorkerDailyWork.work_date >= start)
                .where(WorkerDailyWork.work_date < end)
            )
        ).scalars().all()
        summary = summarize_month([w.id for w in workers], records, year, month)
        return [WorksheetRow(worker=w, attendance=summary[w.id]) for w in workers]

    # ─── Payments ────────────────────────────────────────────────

    async def record_payment(
        self,
        worker_id: WorkerId,
        amount_minor: int,
        payment_type: StandalonePaymentType,
        notes: str | None = None,
        payment_date: date | None = None,
    ) -> StandalonePayment:
        await self.get_worker(worker_id)
        if amount_minor <= 0:
            raise BusinessValidationError(
                "Payment amount must be greater than 0", field="amount_minor",
            )
        payment = StandalonePayment(
            worker_id=worker_id,
            amount_minor=amount_minor,
            payment_type=StandalonePaymentType(payment_type).value,
            payment_date=payment_date or date.today(),
            notes=notes,
        )
        self.db.add(payment)
        await self.db.flush()
        logger.info(
            f"Recorded {payment.payment_type} payment of {amount_minor}",
            extra={"worker_id": worker_id},
        )
        return payment

    async def list_payments(
        self, worker_id: WorkerId | None = None,
    ) -> list[StandalonePayment]:
        query = select(StandalonePayment).order_by(StandalonePayment.payment_date.desc())
        if worker_id:
            query = query.where(StandalonePayment.worker_id == worker_id)
        return list((await self.db.execute(query)).scalars().all())

    # ─── Reporting ───────────────────────────────────────────────

    async def labor_cost_rows(self) -> list[LaborCostRow]:
        batches, records = await self._labor_sources()
        return build_labor_cost_rows(batches, records)

    async def payroll_summary(self) -> PayrollSummary:
        batches, records = await self._labor_sources()
        payments = (await self.db.execute(select(StandalonePayment))).scalars().all()
        return summarize_payroll(batches, records, payments)

    async def _labor_sources(self) -> tuple[list[LaborEntry], list[WorkerPaymentRecord]]:
        result = await self.db.execute(
            select(InventoryBatch, Product.name)
            .outerjoin(Product, Product.id == InventoryBatch.product_id)
        )
        batches = [
            LaborEntry(
                product_name=name or "Unknown Product",
                quantity=batch.quantity,
                labor_cost_per_item_minor=batch.labor_cost_per_item_minor,
                total_labor_cost_minor=batch.total_labor_cost_minor,
                created_at=batch.created_at,
            )
            for batch, name in result.all()
        ]
        records = (await self.db.execute(select(WorkerPaymentRecord))).scalars().all()
        return batches, list(records)

    async def _require_workday(self, workday_id: uuid.UUID) -> WorkerDailyWork:
        record = await self.db.get(WorkerDailyWork, workday_id)
        if record is None:
            raise ResourceNotFoundError("WorkerDailyWork", str(workday_id))
        return record
