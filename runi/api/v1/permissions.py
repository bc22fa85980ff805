# runi/api/v1/permissions.py
from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from runi.api.deps.authz import get_caller_context
from runi.core.errors import Unauthenticated
from runi.core.identity import CallerContext, authenticate
from runi.crud.permission import list_permissions
from runi.db.session import get_db
from runi.schemas.permission import PermissionOut

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.get("", response_model=List[PermissionOut])
async def list_permission_catalog(
    db: AsyncSession = Depends(get_db),
    ctx: CallerContext = Depends(get_caller_context),
):
    """
    The permission catalog, for building the owner's grant grid and the
    staff menus. Callers without any identity get an empty list.
    """
    try:
        await authenticate(db, ctx)
    except Unauthenticated:
        return []
    return await list_permissions(db)
