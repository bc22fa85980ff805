from __future__ import annotations

import uuid
from typing import Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from runi.core.authorization import authorize, authorize_or_none
from runi.core.config import settings
from runi.core.errors import PermissionDenied, Unauthenticated
from runi.core.identity import CallerContext, StaffIdentity, authenticate, current_owner_id
from runi.core.permissions import PermissionKey
from runi.core.security import bearer_scheme
from runi.db.session import get_db


async def get_caller_context(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CallerContext:
    """
    Owner JWT from Authorization: Bearer, staff session from the
    X-Staff-Session header. Either, both or neither may be present.
    """
    return CallerContext(
        bearer_token=credentials.credentials if credentials else None,
        session_token=request.headers.get(settings.STAFF_SESSION_HEADER),
    )


def require_permission(permission_key: str | PermissionKey) -> Callable:
    """
    Dependency factory guarding a tenant-scoped route. Resolves to the owner
    id the route must filter by.

    The key is checked against PermissionKey when the route is declared, so
    a typo fails at import time rather than denying every request.
    """
    key = PermissionKey(permission_key)

    async def _checker(
        db: AsyncSession = Depends(get_db),
        ctx: CallerContext = Depends(get_caller_context),
    ) -> uuid.UUID:
        return await authorize(db, ctx, key)

    return _checker


def optional_permission(permission_key: str | PermissionKey) -> Callable:
    """Like require_permission, but resolves to None instead of failing (list reads)."""
    key = PermissionKey(permission_key)

    async def _checker(
        db: AsyncSession = Depends(get_db),
        ctx: CallerContext = Depends(get_caller_context),
    ) -> Optional[uuid.UUID]:
        return await authorize_or_none(db, ctx, key)

    return _checker


async def require_owner(
    db: AsyncSession = Depends(get_db),
    ctx: CallerContext = Depends(get_caller_context),
) -> uuid.UUID:
    """Owner-only administration (staff accounts and their grants)."""
    owner_id = await current_owner_id(db, ctx.bearer_token)
    if owner_id is not None:
        return owner_id

    # a staff caller is still authenticated first, so a disabled account gets 401
    identity = await authenticate(db, CallerContext(session_token=ctx.session_token))
    if isinstance(identity, StaffIdentity):
        raise PermissionDenied("owner", "Only the business owner can perform this action")
    raise Unauthenticated("please log in")


async def require_staff_session(
    db: AsyncSession = Depends(get_db),
    ctx: CallerContext = Depends(get_caller_context),
) -> StaffIdentity:
    # session-only: an owner token must not satisfy staff endpoints
    identity = await authenticate(db, CallerContext(session_token=ctx.session_token))
    if not isinstance(identity, StaffIdentity):
        raise Unauthenticated("please log in")
    return identity
