# runi/api/v1/staff.py
from __future__ import annotations

import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import EmailStr
from sqlalchemy.ext.asyncio import AsyncSession

from runi.api.deps.authz import get_caller_context, require_owner, require_staff_session
from runi.core.identity import CallerContext, StaffIdentity
from runi.crud import staff as staff_crud
from runi.crud.staff_permission import list_grants, set_grants
from runi.db.session import get_db
from runi.schemas.staff import (
    EmailCheckResponse,
    GrantOut,
    GrantsUpdate,
    StaffActiveUpdate,
    StaffCreate,
    StaffLoginRequest,
    StaffLoginResponse,
    StaffOut,
)

router = APIRouter(prefix="/staff", tags=["staff"])


# ---------------------------------------------------------
# Staff-facing session endpoints
# ---------------------------------------------------------
@router.post("/login", response_model=StaffLoginResponse)
async def login(payload: StaffLoginRequest, db: AsyncSession = Depends(get_db)) -> StaffLoginResponse:
    """
    Body: {"email": "staff@example.com", "password": "..."}
    Returns the staff profile and a session token to send as X-Staff-Session.
    """
    staff, token = await staff_crud.login(db, payload.email, payload.password)
    return StaffLoginResponse(
        staff=StaffOut.model_validate(staff),
        session_token=token,
        session_expiry=staff_crud.as_utc(staff.session_expiry),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    db: AsyncSession = Depends(get_db),
    identity: StaffIdentity = Depends(require_staff_session),
) -> None:
    await staff_crud.logout(db, identity.staff_id)


@router.get("/session", response_model=Optional[StaffOut])
async def current_session(
    db: AsyncSession = Depends(get_db),
    ctx: CallerContext = Depends(get_caller_context),
):
    """
    The staff member behind X-Staff-Session, or null when the token is
    missing, unknown or expired, or the account is disabled.
    """
    staff = await staff_crud.validate_session(db, ctx.session_token)
    if staff is None or not staff.is_active:
        return None
    return staff


@router.get("/session/permissions", response_model=List[GrantOut])
async def current_session_permissions(
    db: AsyncSession = Depends(get_db),
    ctx: CallerContext = Depends(get_caller_context),
):
    """Enabled grants for the current staff session; empty when there is none."""
    staff = await staff_crud.validate_session(db, ctx.session_token)
    if staff is None or not staff.is_active:
        return []
    return await list_grants(db, staff.id, enabled_only=True)


# ---------------------------------------------------------
# Owner-only administration
# ---------------------------------------------------------
@router.post("", response_model=StaffOut, status_code=status.HTTP_201_CREATED)
async def create_staff(
    payload: StaffCreate,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
):
    return await staff_crud.create_staff(
        db,
        owner_id=owner_id,
        email=payload.email,
        password=payload.password,
        full_name=payload.full_name,
        phone_number=payload.phone_number,
        id_card_front_url=payload.id_card_front_url,
        id_card_back_url=payload.id_card_back_url,
    )


@router.get("", response_model=List[StaffOut])
async def list_staff(
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
):
    return await staff_crud.list_staff_for_owner(db, owner_id)


@router.get("/check-email", response_model=EmailCheckResponse)
async def check_email(
    email: EmailStr = Query(...),
    db: AsyncSession = Depends(get_db),
    _owner_id: uuid.UUID = Depends(require_owner),
) -> EmailCheckResponse:
    return EmailCheckResponse(exists=await staff_crud.email_exists(db, email))


@router.patch("/{staff_id}/active", response_model=StaffOut)
async def set_staff_active(
    staff_id: uuid.UUID,
    payload: StaffActiveUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
):
    """Disabling a staff member also ends their current session."""
    staff = await staff_crud.get_staff_for_owner(db, owner_id, staff_id)
    return await staff_crud.set_active(db, staff, payload.is_active)


@router.post("/{staff_id}/logout", status_code=status.HTTP_204_NO_CONTENT)
async def force_logout(
    staff_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
) -> None:
    staff = await staff_crud.get_staff_for_owner(db, owner_id, staff_id)
    await staff_crud.invalidate_session(db, staff.id)


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_staff(
    staff_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
) -> None:
    staff = await staff_crud.get_staff_for_owner(db, owner_id, staff_id)
    await staff_crud.delete_staff(db, staff)


@router.get("/{staff_id}/permissions", response_model=List[GrantOut])
async def get_staff_permissions(
    staff_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
):
    staff = await staff_crud.get_staff_for_owner(db, owner_id, staff_id)
    return await list_grants(db, staff.id)


@router.put("/{staff_id}/permissions", response_model=List[GrantOut])
async def update_staff_permissions(
    staff_id: uuid.UUID,
    payload: GrantsUpdate,
    db: AsyncSession = Depends(get_db),
    owner_id: uuid.UUID = Depends(require_owner),
):
    """
    Body: {"grants": {"product_categories_view": true, "live_stock_edit": false}}
    Only the listed keys change.
    """
    staff = await staff_crud.get_staff_for_owner(db, owner_id, staff_id)
    return await set_grants(db, staff.id, payload.grants)
