# runi/core/authorization.py
from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from runi.core.errors import AuthzError, PermissionDenied
from runi.core.identity import CallerContext, OwnerIdentity, StaffIdentity, authenticate
from runi.core.permissions import PermissionKey, normalize_permission_key
from runi.crud.staff_permission import is_granted

logger = logging.getLogger(__name__)


async def authorize(db: AsyncSession, ctx: CallerContext, permission_key: str | PermissionKey) -> uuid.UUID:
    """
    Decide whether the caller may perform the action guarded by
    permission_key and return the owner id the action must be scoped to.

    - owner: allowed for their own tenant, no grant lookup
    - staff: needs an enabled grant for exactly this key
    Raises Unauthenticated or PermissionDenied.
    """
    key = normalize_permission_key(permission_key)
    identity = await authenticate(db, ctx)

    if isinstance(identity, OwnerIdentity):
        return identity.owner_id

    if isinstance(identity, StaffIdentity):
        # is_granted only matches keys still in the catalog
        if await is_granted(db, identity.staff_id, key):
            return identity.owner_id

        logger.info(
            "permission denied",
            extra={"staff_id": str(identity.staff_id), "permission_key": key},
        )
        raise PermissionDenied(key)

    raise TypeError(f"unexpected caller identity: {identity!r}")


async def authorize_or_none(
    db: AsyncSession,
    ctx: CallerContext,
    permission_key: str | PermissionKey,
) -> Optional[uuid.UUID]:
    """Same as authorize() for read paths that show nothing instead of failing."""
    try:
        return await authorize(db, ctx, permission_key)
    except AuthzError:
        return None
