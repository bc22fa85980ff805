# runi/crud/permission.py
from __future__ import annotations

import logging
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from runi.core.permissions import PERMISSION_DEFINITIONS, PermissionKey, PermissionSpec, normalize_permission_key
from runi.models.permission import PermissionDefinition

logger = logging.getLogger(__name__)


async def seed_permissions(
    db: AsyncSession,
    definitions: Iterable[PermissionSpec] = PERMISSION_DEFINITIONS,
) -> int:
    """
    Insert catalog rows whose permission_key is missing. Existing rows are
    never touched, so labels edited in the database survive a re-seed.

    Safe to run repeatedly and alongside another seeder: a row inserted
    concurrently is skipped. Returns the number of rows inserted.
    """
    existing = set((await db.execute(select(PermissionDefinition.permission_key))).scalars().all())

    created = 0
    for spec in definitions:
        if spec.permission_key in existing:
            continue

        db.add(
            PermissionDefinition(
                permission_key=spec.permission_key,
                main_tab_key=spec.main_tab_key,
                sub_tab_key=spec.sub_tab_key,
                action_key=spec.action_key,
                label=spec.label,
                description=spec.description,
            )
        )
        try:
            await db.commit()
        except IntegrityError:
            await db.rollback()
            continue

        existing.add(spec.permission_key)
        created += 1

    logger.info("permission catalog seeded", extra={"inserted": created, "catalog_size": len(existing)})
    return created


async def permission_exists(db: AsyncSession, permission_key: str | PermissionKey) -> bool:
    key = normalize_permission_key(permission_key)
    if not key:
        return False
    stmt = select(PermissionDefinition.id).where(PermissionDefinition.permission_key == key)
    return (await db.execute(stmt)).first() is not None


async def list_permissions(db: AsyncSession) -> List[PermissionDefinition]:
    stmt = select(PermissionDefinition).order_by(
        PermissionDefinition.main_tab_key,
        PermissionDefinition.sub_tab_key,
        PermissionDefinition.action_key,
    )
    return list((await db.execute(stmt)).scalars().all())
