"""Product Schemas - catalog products and their categories."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    description: str | None = Field(None, max_length=2000)
    parent_category_id: UUID | None = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    description: str | None
    parent_category_id: UUID | None
    is_active: bool


class ProductCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    product_code: str | None = Field(None, max_length=60)
    category_id: UUID | None = None
    description: str | None = Field(None, max_length=5000)
    is_custom: bool = False
    standard_price_minor: int = Field(0, ge=0)
    labor_cost_minor: int = Field(0, ge=0)
    material_cost_minor: int = Field(0, ge=0)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ProductUpdate(ProductCreate):
    pass


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    product_code: str | None
    category_id: UUID | None
    category_name: str | None = None
    description: str | None
    is_custom: bool
    standard_price_minor: int
    labor_cost_minor: int
    material_cost_minor: int
    is_active: bool
    created_at: datetime
