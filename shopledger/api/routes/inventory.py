"""Inventory Routes - stock rows, manual adjustments, movements and production batches."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.infrastructure.database import get_db
from shopledger.schemas.inventory import (
    BatchCreate, BatchResponse, InventoryRowResponse, StockAdjustment,
    StockMovementResponse,
)
from shopledger.services.inventory import InventoryService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.get("", response_model=list[InventoryRowResponse])
async def list_inventory(db: AsyncSession = Depends(get_db)):
    return await InventoryService(db).list_inventory()


@router.post("/adjust", response_model=InventoryRowResponse)
async def adjust_stock(body: StockAdjustment, db: AsyncSession = Depends(get_db)):
    """Receive, issue or adjust stock by hand."""
    service = InventoryService(db)
    row = await service.adjust_stock(
        product_id=body.product_id,
        quantity_delta=body.quantity_delta,
        movement_type=body.movement_type,
        warehouse_id=body.warehouse_id,
        unit_cost_minor=body.unit_cost_minor,
        notes=body.notes,
    )
    await db.commit()
    rows = await service.list_inventory()
    return next(r for r in rows if r["id"] == row.id)


@router.get("/movements", response_model=list[StockMovementResponse])
async def list_movements(
    product_id: UUID | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
):
    return await InventoryService(db).list_movements(product_id, limit)


# ─── Batches ────────────────────────────────────────────────────

@router.get("/batches", response_model=list[BatchResponse])
async def list_batches(db: AsyncSession = Depends(get_db)):
    responses = []
    for batch, product_name in await InventoryService(db).list_batches():
        resp = BatchResponse.model_validate(batch)
        resp.product_name = product_name
        responses.append(resp)
    return responses


@router.post(
    "/batches", response_model=BatchResponse, status_code=status.HTTP_201_CREATED,
)
async def create_batch(body: BatchCreate, db: AsyncSession = Depends(get_db)):
    batch = await InventoryService(db).create_batch(
        body.product_id, body.quantity, body.labor_cost_per_item_minor, body.notes,
    )
    await db.commit()
    await db.refresh(batch)
    return batch


@router.put("/batches/{batch_id}", response_model=BatchResponse)
async def update_batch(
    batch_id: UUID, body: BatchCreate, db: AsyncSession = Depends(get_db),
):
    batch = await InventoryService(db).update_batch(
        batch_id, body.product_id, body.quantity,
        body.labor_cost_per_item_minor, body.notes,
    )
    await db.commit()
    await db.refresh(batch)
    return batch


@router.delete("/batches/{batch_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_batch(batch_id: UUID, db: AsyncSession = Depends(get_db)):
    await InventoryService(db).delete_batch(batch_id)
    await db.commit()
