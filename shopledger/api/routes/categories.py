"""Category Routes - product categories with soft delete."""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from shopledger.core.errors import ResourceNotFoundError
from shopledger.infrastructure.database import get_db
from shopledger.models.product_category import ProductCategory
from shopledger.schemas.product import CategoryCreate, CategoryResponse

router = APIRouter(prefix="/api/v1/categories", tags=["categories"])


async def _get_category_or_404(category_id: UUID, db: AsyncSession) -> ProductCategory:
    category = await db.get(ProductCategory, category_id)
    if category is None or not category.is_active:
        raise ResourceNotFoundError("ProductCategory", str(category_id))
    return category


@router.get("", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(ProductCategory)
        .where(ProductCategory.is_active.is_(True))
        .order_by(ProductCategory.name)
    )
    return result.scalars().all()


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, db: AsyncSession = Depends(get_db)):
    if body.parent_category_id:
        await _get_category_or_404(body.parent_category_id, db)
    category = ProductCategory(**body.model_dump(), is_active=True)
    db.add(category)
    await db.commit()
    await db.refresh(category)
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID, body: CategoryCreate, db: AsyncSession = Depends(get_db),
):
    category = await _get_category_or_404(category_id, db)
    for key, value in body.model_dump().items():
        setattr(category, key, value)
    await db.commit()
    await db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: UUID, db: AsyncSession = Depends(get_db)):
    category = await _get_category_or_404(category_id, db)
    category.is_active = False
    await db.commit()
