# runi/crud/staff.py
"""
Staff credential and session lifecycle.

Every mutation here touches exactly one staff row. Counters and session
fields are written with single UPDATE statements so concurrent requests
cannot lose each other's writes.
"""
from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from runi.core.config import settings
from runi.core.errors import Conflict, InvalidCredentials, NotFound, Unauthenticated
from runi.core.security import (
    hash_password,
    new_session_token,
    normalize_session_token,
    pwd_context,
    verify_password,
)
from runi.models.staff import Staff
from runi.models.staff_permission import StaffPermission

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Backends without timezone support hand back naive datetimes; those are UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_staff_by_email(db: AsyncSession, email: str) -> Optional[Staff]:
    stmt = select(Staff).where(Staff.email == normalize_email(email))
    return (await db.execute(stmt)).scalar_one_or_none()


async def email_exists(db: AsyncSession, email: str) -> bool:
    return await get_staff_by_email(db, email) is not None


async def create_staff(
    db: AsyncSession,
    *,
    owner_id: uuid.UUID,
    email: str,
    password: str,
    full_name: str,
    phone_number: Optional[str] = None,
    id_card_front_url: Optional[str] = None,
    id_card_back_url: Optional[str] = None,
) -> Staff:
    email = normalize_email(email)

    if await email_exists(db, email):
        raise Conflict("Staff member with this email already exists")

    staff = Staff(
        owner_id=owner_id,
        email=email,
        full_name=full_name,
        phone_number=phone_number,
        id_card_front_url=id_card_front_url,
        id_card_back_url=id_card_back_url,
        password_hash=hash_password(password),
        failed_login_attempts=0,
        is_active=True,
        session_token=None,
        session_expiry=None,
    )
    db.add(staff)
    try:
        await db.commit()
    except IntegrityError:
        # lost a race against another create with the same email
        await db.rollback()
        raise Conflict("Staff member with this email already exists")

    await db.refresh(staff)
    logger.info("staff created", extra={"staff_id": str(staff.id), "owner_id": str(owner_id)})
    return staff


async def purge_expired_sessions(db: AsyncSession) -> int:
    """
    Clear sessions whose expiry has passed, across all owners. Validation
    already ignores them; this only keeps the token index small.

    Maintenance only: runs in its own transaction at startup, never inside a
    request, so logins never lock rows they do not own.
    """
    stmt = (
        update(Staff)
        .where(Staff.session_expiry.is_not(None))
        .where(Staff.session_expiry < utcnow())
        .values(session_token=None, session_expiry=None)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.commit()

    purged = result.rowcount or 0
    logger.info("expired staff sessions purged", extra={"purged": purged})
    return purged


async def _record_failed_login(db: AsyncSession, staff_id: uuid.UUID) -> None:
    stmt = (
        update(Staff)
        .where(Staff.id == staff_id)
        .values(failed_login_attempts=Staff.failed_login_attempts + 1)
    )
    await db.execute(stmt)
    await db.commit()


async def login(db: AsyncSession, email: str, password: str) -> Tuple[Staff, str]:
    """
    Verify credentials and issue a fresh session token.

    Issuing a token overwrites the previous one, so at most one session per
    staff member is valid at any time.
    """
    staff = await get_staff_by_email(db, email)
    if staff is None:
        # keep timing similar to a real verification
        pwd_context.dummy_verify()
        logger.info("staff login failed: unknown email")
        raise InvalidCredentials()

    if not verify_password(password, staff.password_hash):
        await _record_failed_login(db, staff.id)
        logger.warning("staff login failed: wrong password", extra={"staff_id": str(staff.id)})
        raise InvalidCredentials()

    if not staff.is_active:
        logger.info("staff login refused: account disabled", extra={"staff_id": str(staff.id)})
        raise Unauthenticated("account disabled")

    token = new_session_token()
    expiry = utcnow() + timedelta(hours=settings.STAFF_SESSION_TTL_HOURS)

    stmt = (
        update(Staff)
        .where(Staff.id == staff.id)
        .values(session_token=token, session_expiry=expiry, failed_login_attempts=0)
    )
    await db.execute(stmt)
    await db.commit()
    await db.refresh(staff)

    logger.info("staff logged in", extra={"staff_id": str(staff.id), "owner_id": str(staff.owner_id)})
    return staff, token


async def validate_session(db: AsyncSession, token: Optional[str]) -> Optional[Staff]:
    """
    Resolve a session token to its staff row. Unknown and expired tokens
    both yield None; expired rows are left in place.
    """
    token = normalize_session_token(token)
    if not token:
        return None

    # always re-read: is_active and expiry must reflect the committed row
    stmt = (
        select(Staff)
        .where(Staff.session_token == token)
        .execution_options(populate_existing=True)
    )
    staff = (await db.execute(stmt)).scalar_one_or_none()
    if staff is None:
        return None

    expiry = as_utc(staff.session_expiry)
    if expiry is None or expiry < utcnow():
        return None

    return staff


async def logout(db: AsyncSession, staff_id: uuid.UUID) -> None:
    stmt = (
        update(Staff)
        .where(Staff.id == staff_id)
        .values(session_token=None, session_expiry=None)
    )
    await db.execute(stmt)
    await db.commit()
    logger.info("staff session cleared", extra={"staff_id": str(staff_id)})


invalidate_session = logout


async def list_staff_for_owner(db: AsyncSession, owner_id: uuid.UUID) -> List[Staff]:
    stmt = (
        select(Staff)
        .where(Staff.owner_id == owner_id)
        .order_by(Staff.created_at.desc())
    )
    return list((await db.execute(stmt)).scalars().all())


async def get_staff_for_owner(db: AsyncSession, owner_id: uuid.UUID, staff_id: uuid.UUID) -> Staff:
    stmt = select(Staff).where(Staff.id == staff_id, Staff.owner_id == owner_id)
    staff = (await db.execute(stmt)).scalar_one_or_none()
    if staff is None:
        # same answer for "absent" and "belongs to another owner"
        raise NotFound("Staff member not found")
    return staff


async def set_active(db: AsyncSession, staff: Staff, is_active: bool) -> Staff:
    values: dict = {"is_active": is_active}
    if not is_active:
        values.update(session_token=None, session_expiry=None)

    await db.execute(update(Staff).where(Staff.id == staff.id).values(**values))
    await db.commit()
    await db.refresh(staff)

    logger.info(
        "staff active status changed",
        extra={"staff_id": str(staff.id), "is_active": is_active},
    )
    return staff


async def delete_staff(db: AsyncSession, staff: Staff) -> None:
    staff_id, owner_id = staff.id, staff.owner_id

    # explicit so backends that do not enforce ON DELETE CASCADE stay clean
    await db.execute(delete(StaffPermission).where(StaffPermission.staff_id == staff_id))
    await db.delete(staff)
    await db.commit()
    logger.info("staff deleted", extra={"staff_id": str(staff_id), "owner_id": str(owner_id)})
