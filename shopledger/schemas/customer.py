"""Customer Schemas - create/update with light normalization of contact fields."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    address: str | None = Field(None, max_length=1000)
    city: str | None = Field(None, max_length=120)
    country: str | None = Field(None, max_length=120)
    phone: str | None = Field(None, max_length=40)
    email: str | None = Field(None, max_length=200)
    tags: list[str] = Field(default_factory=list)
    notes: str | None = Field(None, max_length=5000)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return [t.strip() for t in v if t and t.strip()]


class CustomerUpdate(CustomerCreate):
    pass


class CustomerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    address: str | None
    city: str | None
    country: str | None
    phone: str | None
    email: str | None
    tags: list[str]
    total_spent_minor: int
    is_repeat_customer: bool
    notes: str | None
    is_active: bool
    created_at: datetime
