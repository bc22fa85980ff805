# runi/core/identity.py
"""
Caller resolution.

A request is made either by a business owner (bearer JWT from the identity
provider) or by one of the owner's staff members (session token from
POST /staff/login). Both collapse to the owner id that scopes every query.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional, Union

from sqlalchemy.ext.asyncio import AsyncSession

from runi.core.errors import Unauthenticated
from runi.core.security import decode_access_token
from runi.crud.staff import validate_session
from runi.models.owner import Owner
from runi.models.staff import Staff


@dataclass(frozen=True)
class CallerContext:
    """Credentials presented by one request."""

    bearer_token: Optional[str] = None
    session_token: Optional[str] = None


@dataclass(frozen=True)
class OwnerIdentity:
    owner_id: uuid.UUID


@dataclass(frozen=True)
class StaffIdentity:
    staff: Staff
    owner_id: uuid.UUID

    @property
    def staff_id(self) -> uuid.UUID:
        return self.staff.id


CallerIdentity = Union[OwnerIdentity, StaffIdentity]


async def current_owner_id(db: AsyncSession, bearer_token: Optional[str]) -> Optional[uuid.UUID]:
    """
    Identity oracle: the owner behind the bearer token, or None.
    Never raises; a bad token just means "not an owner".
    """
    sub = decode_access_token(bearer_token)
    if not sub:
        return None

    try:
        owner_uuid = uuid.UUID(sub)
    except ValueError:
        return None

    owner = await db.get(Owner, owner_uuid)
    if owner is None or not owner.is_active:
        return None
    return owner.id


async def authenticate(db: AsyncSession, ctx: CallerContext) -> CallerIdentity:
    # Owner identity is checked first and always wins, even when a stale
    # staff token rides along in the same request.
    owner_id = await current_owner_id(db, ctx.bearer_token)
    if owner_id is not None:
        return OwnerIdentity(owner_id=owner_id)

    if not ctx.session_token:
        raise Unauthenticated("please log in")

    staff = await validate_session(db, ctx.session_token)
    if staff is None:
        raise Unauthenticated("invalid or expired session")

    if not staff.is_active:
        raise Unauthenticated("account disabled")

    return StaffIdentity(staff=staff, owner_id=staff.owner_id)
