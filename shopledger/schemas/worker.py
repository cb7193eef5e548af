"""Worker Schemas - workers, attendance, standalone payments and payroll reports."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.domain_types import AttendanceType, StandalonePaymentType


class WorkerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=40)
    email: str | None = Field(None, max_length=200)
    address: str | None = Field(None, max_length=1000)
    hourly_rate_minor: int | None = Field(None, ge=0)
    hire_date: date | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class WorkerUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=200)
    phone: str | None = Field(None, max_length=40)
    email: str | None = Field(None, max_length=200)
    address: str | None = Field(None, max_length=1000)
    hourly_rate_minor: int | None = Field(None, ge=0)
    hire_date: date | None = None


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    phone: str | None
    email: str | None
    address: str | None
    hourly_rate_minor: int
    total_earned_minor: int
    total_advances_minor: int
    current_balance_minor: int
    hire_date: date
    is_active: bool


class AttendanceMark(BaseModel):
    work_date: date = Field(default_factory=date.today)
    attendance_type: AttendanceType = AttendanceType.FULL_DAY
    notes: str | None = Field(None, max_length=2000)


class AttendanceUpdate(BaseModel):
    attendance_type: AttendanceType
    notes: str | None = Field(None, max_length=2000)


class AttendanceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    worker_id: UUID
    work_date: date
    attendance_type: AttendanceType
    hours_worked: float
    notes: str | None


class PaymentCreate(BaseModel):
    amount_minor: int = Field(gt=0)
    payment_type: StandalonePaymentType = StandalonePaymentType.ADVANCE
    payment_date: date | None = None
    notes: str | None = Field(None, max_length=2000)


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    worker_id: UUID
    amount_minor: int
    payment_type: StandalonePaymentType
    payment_date: date
    notes: str | None
    created_at: datetime


class PayrollSummaryResponse(BaseModel):
    total_labor_cost_minor: int
    total_payments_minor: int
    remaining_balance_minor: int


class LaborCostRowResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    created_at: datetime
    source: str
    product_name: str
    quantity: int
    cost_per_item_minor: int
    total_cost_minor: int


class WorksheetRowResponse(BaseModel):
    worker_id: UUID
    worker_name: str
    phone: str | None
    full_days: int
    half_days: int
    leaves: int
    total_working_days: float
