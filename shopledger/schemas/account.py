"""Account Schemas - account creation, rename and reconciliation reports."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shopledger.core.domain_types import AccountType, ProfitRole


class AccountCreate(BaseModel):
    account_name: str = Field(min_length=1, max_length=120)
    account_type: AccountType = AccountType.BUSINESS
    owner_name: str = Field("", max_length=120)
    opening_balance_minor: int = 0
    profit_role: ProfitRole | None = None

    @field_validator("account_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("account_name cannot be empty or whitespace")
        return v


class AccountUpdate(BaseModel):
    """Balances are not editable here; they move only through transactions."""
    account_name: str | None = Field(None, min_length=1, max_length=120)
    owner_name: str | None = Field(None, max_length=120)
    account_type: AccountType | None = None
    profit_role: ProfitRole | None = None
    is_active: bool | None = None


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    account_name: str
    account_type: AccountType
    owner_name: str
    opening_balance_minor: int
    balance_minor: int
    profit_role: ProfitRole | None
    is_active: bool
    created_at: datetime


class BalanceDriftResponse(BaseModel):
    account_id: UUID
    account_name: str | None = None
    stored_minor: int
    expected_minor: int
    difference_minor: int


class ReconcileResponse(BaseModel):
    applied: bool
    accounts_checked: int
    drift: list[BalanceDriftResponse]
