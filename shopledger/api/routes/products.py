"""Product Routes - catalog CRUD with soft delete."""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import ResourceNotFoundError
from shopledger.infrastructure.database import get_db
from shopledger.models.product import Product
from shopledger.models.product_category import ProductCategory
from shopledger.schemas.product import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/products", tags=["products"])


async def _get_product_or_404(product_id: UUID, db: AsyncSession) -> Product:
    product = await db.get(Product, product_id)
    if product is None or not product.is_active:
        raise ResourceNotFoundError("Product", str(product_id))
    return product


async def _require_category(category_id: UUID | None, db: AsyncSession) -> None:
    if category_id and await db.get(ProductCategory, category_id) is None:
        raise ResourceNotFoundError("ProductCategory", str(category_id))


@router.get("", response_model=list[ProductResponse])
async def list_products(
    category_id: UUID | None = Query(None),
    db: AsyncSession = Depends(get_db),
):
    query = (
        select(Product, ProductCategory.name)
        .outerjoin(ProductCategory, ProductCategory.id == Product.category_id)
        .where(Product.is_active.is_(True))
        .order_by(Product.name)
    )
    if category_id:
        query = query.where(Product.category_id == category_id)
    rows = (await db.execute(query)).all()
    responses = []
    for product, category_name in rows:
        resp = ProductResponse.model_validate(product)
        resp.category_name = category_name
        responses.append(resp)
    return responses


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: UUID, db: AsyncSession = Depends(get_db)):
    return await _get_product_or_404(product_id, db)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(body: ProductCreate, db: AsyncSession = Depends(get_db)):
    await _require_category(body.category_id, db)
    product = Product(**body.model_dump(), is_active=True)
    db.add(product)
    await db.commit()
    await db.refresh(product)
    logger.info(f"Created product '{product.name}'", extra={"product_id": product.id})
    return product


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: UUID, body: ProductUpdate, db: AsyncSession = Depends(get_db),
):
    product = await _get_product_or_404(product_id, db)
    await _require_category(body.category_id, db)
    for key, value in body.model_dump().items():
        setattr(product, key, value)
    await db.commit()
    await db.refresh(product)
    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: UUID, db: AsyncSession = Depends(get_db)):
    """Soft delete: existing order items keep their product reference."""
    product = await _get_product_or_404(product_id, db)
    product.is_active = False
    await db.commit()
