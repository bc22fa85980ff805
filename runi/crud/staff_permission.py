# runi/crud/staff_permission.py
from __future__ import annotations

import logging
import uuid
from typing import Dict, List, Mapping

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from runi.core.errors import Conflict
from runi.core.permissions import PermissionKey, normalize_permission_key
from runi.models.permission import PermissionDefinition
from runi.models.staff_permission import StaffPermission

logger = logging.getLogger(__name__)


async def is_granted(db: AsyncSession, staff_id: uuid.UUID, permission_key: str | PermissionKey) -> bool:
    """
    True only for an enabled grant whose key is still in the catalog.
    No row, a disabled row or a dangling key all deny.
    """
    key = normalize_permission_key(permission_key)
    if not key:
        return False

    stmt = (
        select(StaffPermission.is_enabled)
        .join(PermissionDefinition, PermissionDefinition.permission_key == StaffPermission.permission_key)
        .where(
            StaffPermission.staff_id == staff_id,
            StaffPermission.permission_key == key,
        )
    )
    enabled = (await db.execute(stmt)).scalar_one_or_none()
    return enabled is True


async def list_grants(db: AsyncSession, staff_id: uuid.UUID, *, enabled_only: bool = False) -> List[StaffPermission]:
    stmt = select(StaffPermission).where(StaffPermission.staff_id == staff_id)
    if enabled_only:
        stmt = stmt.where(StaffPermission.is_enabled.is_(True))
    stmt = stmt.order_by(StaffPermission.permission_key)
    return list((await db.execute(stmt)).scalars().all())


async def _load_grants(db: AsyncSession, staff_id: uuid.UUID, keys: List[str]) -> Dict[str, StaffPermission]:
    stmt = (
        select(StaffPermission)
        .where(
            StaffPermission.staff_id == staff_id,
            StaffPermission.permission_key.in_(keys),
        )
        .execution_options(populate_existing=True)
    )
    return {g.permission_key: g for g in (await db.execute(stmt)).scalars().all()}


async def set_grants(
    db: AsyncSession,
    staff_id: uuid.UUID,
    grants: Mapping[str | PermissionKey, bool],
) -> List[StaffPermission]:
    """
    Upsert (staff_id, permission_key) -> is_enabled. Keys not mentioned are
    left as they are.

    A row inserted by a concurrent writer between our read and our commit
    trips the unique constraint; the write is then replayed as an update, so
    the last writer wins.
    """
    wanted = {normalize_permission_key(k): bool(v) for k, v in grants.items()}

    for attempt in range(2):
        existing = await _load_grants(db, staff_id, list(wanted))

        for key, enabled in wanted.items():
            row = existing.get(key)
            if row is None:
                db.add(StaffPermission(staff_id=staff_id, permission_key=key, is_enabled=enabled))
            else:
                row.is_enabled = enabled

        try:
            await db.commit()
            break
        except IntegrityError:
            await db.rollback()
            if attempt:
                raise Conflict("Permissions changed concurrently, please retry")
            logger.info("grant insert raced, replaying as update", extra={"staff_id": str(staff_id)})

    return await list_grants(db, staff_id)
