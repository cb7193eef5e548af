"""Customer Routes - CRUD with soft delete."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import ResourceNotFoundError
from shopledger.infrastructure.database import get_db
from shopledger.models.customer import Customer
from shopledger.schemas.customer import CustomerCreate, CustomerResponse, CustomerUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/customers", tags=["customers"])


async def get_customer_or_404(customer_id: UUID, db: AsyncSession) -> Customer:
    customer = await db.get(Customer, customer_id)
    if customer is None or not customer.is_active:
        raise ResourceNotFoundError("Customer", str(customer_id))
    return customer


@router.get("", response_model=list[CustomerResponse])
async def list_customers(
    search: str | None = Query(None, max_length=200),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    query = select(Customer).where(Customer.is_active.is_(True)).order_by(Customer.name)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.where(or_(
            Customer.name.ilike(pattern),
            Customer.phone.ilike(pattern),
            Customer.email.ilike(pattern),
        ))
    result = await db.execute(query.limit(limit).offset(offset))
    return result.scalars().all()


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(customer_id: UUID, db: AsyncSession = Depends(get_db)):
    return await get_customer_or_404(customer_id, db)


@router.post("", response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(body: CustomerCreate, db: AsyncSession = Depends(get_db)):
    customer = Customer(**body.model_dump(), is_active=True)
    db.add(customer)
    await db.commit()
    await db.refresh(customer)
    return customer


@router.put("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: UUID, body: CustomerUpdate, db: AsyncSession = Depends(get_db),
):
    customer = await get_customer_or_404(customer_id, db)
    for key, value in body.model_dump().items():
        setattr(customer, key, value)
    await db.commit()
    await db.refresh(customer)
    return customer


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(customer_id: UUID, db: AsyncSession = Depends(get_db)):
    """Soft delete: orders keep referencing the customer."""
    customer = await get_customer_or_404(customer_id, db)
    customer.is_active = False
    await db.commit()
    logger.info(f"Deactivated customer '{customer.name}'")
