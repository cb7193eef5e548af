"""Worker Routes - workers, attendance, standalone payments and payroll reports."""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.infrastructure.database import get_db
from shopledger.schemas.worker import (
    AttendanceMark, AttendanceResponse, AttendanceUpdate, LaborCostRowResponse,
    PaymentCreate, PaymentResponse, PayrollSummaryResponse, WorkerCreate,
    WorkerResponse, WorkerUpdate, WorksheetRowResponse,
)
from shopledger.services.payroll import PayrollService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/workers", tags=["workers"])


# ─── Reports (declared before /{worker_id} routes) ──────────────

@router.get("/payroll/summary", response_model=PayrollSummaryResponse)
async def payroll_summary(db: AsyncSession = Depends(get_db)):
    summary = await PayrollService(db).payroll_summary()
    return PayrollSummaryResponse(
        total_labor_cost_minor=summary.total_labor_cost_minor,
        total_payments_minor=summary.total_payments_minor,
        remaining_balance_minor=summary.remaining_balance_minor,
    )


@router.get("/labor-costs", response_model=list[LaborCostRowResponse])
async def labor_costs(db: AsyncSession = Depends(get_db)):
    """Inventory batches and order payment records, newest first."""
    return await PayrollService(db).labor_cost_rows()


@router.get("/worksheet", response_model=list[WorksheetRowResponse])
async def monthly_worksheet(
    year: int | None = Query(None, ge=2000, le=2100),
    month: int | None = Query(None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
):
    """Attendance counts per active worker; defaults to the current month."""
    today = date.today()
    rows = await PayrollService(db).monthly_worksheet(year or today.year, month or today.month)
    return [
        WorksheetRowResponse(
            worker_id=row.worker.id,
            worker_name=row.worker.name,
            phone=row.worker.phone,
            full_days=row.attendance.full_days,
            half_days=row.attendance.half_days,
            leaves=row.attendance.leaves,
            total_working_days=row.attendance.total_working_days,
        )
        for row in rows
    ]


@router.get("/attendance", response_model=list[AttendanceResponse])
async def list_attendance(
    worker_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await PayrollService(db).list_attendance(worker_id)


@router.put("/attendance/{workday_id}", response_model=AttendanceResponse)
async def update_attendance(
    workday_id: UUID, body: AttendanceUpdate, db: AsyncSession = Depends(get_db),
):
    record = await PayrollService(db).update_workday(
        workday_id, body.attendance_type, body.notes,
    )
    await db.commit()
    return record


@router.delete("/attendance/{workday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_attendance(workday_id: UUID, db: AsyncSession = Depends(get_db)):
    await PayrollService(db).delete_workday(workday_id)
    await db.commit()


@router.get("/payments", response_model=list[PaymentResponse])
async def list_payments(
    worker_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    return await PayrollService(db).list_payments(worker_id)


# ─── Workers ────────────────────────────────────────────────────

@router.get("", response_model=list[WorkerResponse])
async def list_workers(
    include_inactive: bool = Query(False), db: AsyncSession = Depends(get_db),
):
    return await PayrollService(db).list_workers(include_inactive)


@router.post("", response_model=WorkerResponse, status_code=status.HTTP_201_CREATED)
async def create_worker(body: WorkerCreate, db: AsyncSession = Depends(get_db)):
    worker = await PayrollService(db).create_worker(body.model_dump())
    await db.commit()
    await db.refresh(worker)
    return worker


@router.get("/{worker_id}", response_model=WorkerResponse)
async def get_worker(worker_id: UUID, db: AsyncSession = Depends(get_db)):
    return await PayrollService(db).get_worker(worker_id)


@router.put("/{worker_id}", response_model=WorkerResponse)
async def update_worker(
    worker_id: UUID, body: WorkerUpdate, db: AsyncSession = Depends(get_db),
):
    worker = await PayrollService(db).update_worker(
        worker_id, body.model_dump(exclude_unset=True),
    )
    await db.commit()
    await db.refresh(worker)
    return worker


@router.delete("/{worker_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_worker(worker_id: UUID, db: AsyncSession = Depends(get_db)):
    """Soft delete: attendance and payment history stay."""
    await PayrollService(db).deactivate_worker(worker_id)
    await db.commit()


@router.post(
    "/{worker_id}/attendance", response_model=AttendanceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def mark_attendance(
    worker_id: UUID, body: AttendanceMark, db: AsyncSession = Depends(get_db),
):
    """Mark (or overwrite) attendance for one day."""
    record = await PayrollService(db).mark_attendance(
        worker_id, body.work_date, body.attendance_type, body.notes,
    )
    await db.commit()
    return record


@router.post(
    "/{worker_id}/payments", response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_payment(
    worker_id: UUID, body: PaymentCreate, db: AsyncSession = Depends(get_db),
):
    payment = await PayrollService(db).record_payment(
        worker_id, body.amount_minor, body.payment_type, body.notes, body.payment_date,
    )
    await db.commit()
    await db.refresh(payment)
    return payment
