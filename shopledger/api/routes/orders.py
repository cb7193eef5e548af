"""Order Routes - thin HTTP layer over the order cascade.

Invariants:
    - Each mutating request commits exactly once, after the whole cascade succeeded
    - A domain error anywhere in the cascade leaves nothing written
    - Deleted (inactive) orders answer 404
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.domain_types import OrderStatus
from shopledger.infrastructure.database import get_db
from shopledger.schemas.order import (
    OrderCreate, OrderDeleteSummary, OrderItemResponse, OrderResponse, OrderUpdate,
)
from shopledger.services.orders import OrderDetail, OrderService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


def _to_response(detail: OrderDetail) -> OrderResponse:
    resp = OrderResponse.model_validate(detail.order)
    resp.customer_name = detail.customer_name
    resp.items = [OrderItemResponse.model_validate(i) for i in detail.items]
    return resp


@router.get("")
async def list_orders(
    status_filter: OrderStatus | None = Query(None, alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """List active orders with pagination."""
    rows = await OrderService(db).list_orders(status_filter, limit, offset)
    orders = []
    for order, customer_name in rows:
        resp = OrderResponse.model_validate(order)
        resp.customer_name = customer_name or "Unknown"
        orders.append(resp)
    return {
        "orders": orders,
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: UUID, db: AsyncSession = Depends(get_db)):
    return _to_response(await OrderService(db).get_order(order_id))


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(body: OrderCreate, db: AsyncSession = Depends(get_db)):
    detail = await OrderService(db).create_order(body)
    await db.commit()
    return _to_response(detail)


@router.put("/{order_id}", response_model=OrderResponse)
async def update_order(
    order_id: UUID, body: OrderUpdate, db: AsyncSession = Depends(get_db),
):
    detail = await OrderService(db).update_order(order_id, body)
    await db.commit()
    return _to_response(detail)


@router.delete("/{order_id}", response_model=OrderDeleteSummary)
async def delete_order(order_id: UUID, db: AsyncSession = Depends(get_db)):
    """Reverse the order's ledger effects, restock it, and soft-delete it."""
    summary = await OrderService(db).delete_order(order_id)
    await db.commit()
    return OrderDeleteSummary(**summary)
