"""Inventory Schemas - stock rows, manual adjustments, movements and batches."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from shopledger.core.domain_types import MovementType


class InventoryRowResponse(BaseModel):
    id: UUID
    product_id: UUID
    product_name: str
    warehouse_id: UUID
    warehouse_name: str
    stock_quantity: int
    average_cost_minor: int
    minimum_stock_level: int
    is_low_stock: bool


class StockAdjustment(BaseModel):
    product_id: UUID
    warehouse_id: UUID | None = None
    quantity_delta: int
    movement_type: MovementType = MovementType.ADJUSTMENT
    unit_cost_minor: int | None = Field(None, ge=0)
    notes: str | None = Field(None, max_length=2000)

    @model_validator(mode="after")
    def validate_delta(self):
        if self.quantity_delta == 0:
            raise ValueError("quantity_delta cannot be 0")
        return self


class StockMovementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    warehouse_id: UUID
    movement_type: MovementType
    quantity: int
    unit_cost_minor: int
    reference_type: str | None
    reference_id: UUID | None
    movement_date: datetime
    notes: str | None


class BatchCreate(BaseModel):
    product_id: UUID
    quantity: int = Field(gt=0)
    labor_cost_per_item_minor: int = Field(0, ge=0)
    notes: str | None = Field(None, max_length=2000)


class BatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    product_id: UUID
    product_name: str | None = None
    quantity: int
    labor_cost_per_item_minor: int
    total_labor_cost_minor: int
    notes: str | None
    created_at: datetime
