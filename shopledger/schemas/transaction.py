"""Transaction Schemas - manual transactions and their listing.

Invariants:
    - amount_minor > 0; direction comes from transaction_type
    - Account presence per type is cross-validated here for a fast 400 and
      again by core.ledger inside the service
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shopledger.core.domain_types import PaymentMethod, TransactionType


class TransactionCreate(BaseModel):
    transaction_type: TransactionType
    amount_minor: int = Field(gt=0)
    from_account_id: UUID | None = None
    to_account_id: UUID | None = None
    transaction_date: date = Field(default_factory=date.today)
    description: str | None = Field(None, max_length=2000)
    category: str | None = Field(None, max_length=60)
    payment_method: PaymentMethod = PaymentMethod.CASH

    @model_validator(mode="after")
    def validate_accounts(self):
        if self.transaction_type == TransactionType.INCOME and not self.to_account_id:
            raise ValueError("income requires to_account_id")
        if self.transaction_type == TransactionType.EXPENSE and not self.from_account_id:
            raise ValueError("expense requires from_account_id")
        if self.transaction_type == TransactionType.TRANSFER:
            if not (self.from_account_id and self.to_account_id):
                raise ValueError("transfer requires from_account_id and to_account_id")
            if self.from_account_id == self.to_account_id:
                raise ValueError("transfer accounts must be different")
        return self


class TransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    transaction_number: str
    transaction_date: date
    transaction_type: TransactionType
    from_account_id: UUID | None
    to_account_id: UUID | None
    from_account_name: str | None = None
    to_account_name: str | None = None
    amount_minor: int
    description: str | None
    category: str | None
    reference_type: str | None
    reference_id: UUID | None
    payment_method: PaymentMethod
    created_at: datetime
