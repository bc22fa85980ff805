# runi/api/v1/product_categories.py
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from runi.api.deps.authz import optional_permission, require_permission
from runi.core.errors import Conflict, NotFound
from runi.core.permissions import PermissionKey
from runi.db.session import get_db
from runi.models.product_category import ProductCategory
from runi.schemas.product_category import ProductCategoryIn, ProductCategoryOut

router = APIRouter(prefix="/product-categories", tags=["product-categories"])


async def _get_category(db: AsyncSession, owner_id: uuid.UUID, category_id: uuid.UUID) -> ProductCategory:
    stmt = select(ProductCategory).where(
        ProductCategory.id == category_id,
        ProductCategory.owner_id == owner_id,
    )
    category = (await db.execute(stmt)).scalar_one_or_none()
    if category is None:
        raise NotFound("Category not found")
    return category


async def _ensure_name_free(
    db: AsyncSession,
    owner_id: uuid.UUID,
    category_name: str,
    exclude_id: Optional[uuid.UUID] = None,
) -> None:
    stmt = select(ProductCategory.id).where(
        ProductCategory.owner_id == owner_id,
        ProductCategory.category_name == category_name,
    )
    if exclude_id is not None:
        stmt = stmt.where(ProductCategory.id != exclude_id)
    if (await db.execute(stmt)).first() is not None:
        raise Conflict("Category already exists")


@router.get("", response_model=List[ProductCategoryOut])
async def list_categories(
    db: AsyncSession = Depends(get_db),
    owner_id: Optional[uuid.UUID] = Depends(optional_permission(PermissionKey.PRODUCT_CATEGORIES_VIEW)),
):
    # no identity or no view grant -> nothing to show
    if owner_id is None:
        return []

    stmt = (
        select(ProductCategory)
        .where(ProductCategory.owner_id == owner_id)
        .order_by(ProductCategory.category_name)
    )
    return (await db.execute(stmt)).scalars().all()


@router.post("", response_model=ProductCategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: ProductCategoryIn,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_permission(PermissionKey.PRODUCT_CATEGORIES_CREATE)),
):
    await _ensure_name_free(db, owner_id, payload.category_name)

    category = ProductCategory(owner_id=owner_id, category_name=payload.category_name)
    db.add(category)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Category already exists")
    await db.refresh(category)
    return category


@router.patch("/{category_id}", response_model=ProductCategoryOut)
async def update_category(
    category_id: uuid.UUID,
    payload: ProductCategoryIn,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_permission(PermissionKey.PRODUCT_CATEGORIES_EDIT)),
):
    category = await _get_category(db, owner_id, category_id)
    await _ensure_name_free(db, owner_id, payload.category_name, exclude_id=category.id)

    category.category_name = payload.category_name
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise Conflict("Category already exists")
    await db.refresh(category)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(
    category_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_permission(PermissionKey.PRODUCT_CATEGORIES_DELETE)),
) -> None:
    category = await _get_category(db, owner_id, category_id)
    await db.delete(category)
    await db.commit()
