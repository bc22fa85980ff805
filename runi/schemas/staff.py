# runi/schemas/staff.py
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from runi.core.permissions import PermissionKey


def _normalize_full_name(value: str) -> str:
    v = " ".join(value.strip().split())
    if not v:
        raise ValueError("full_name must not be blank.")
    return v


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    v = value.strip()
    return v or None


class StaffCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    full_name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)

    phone_number: Optional[str] = Field(default=None, max_length=32)
    id_card_front_url: Optional[str] = Field(default=None, max_length=1024)
    id_card_back_url: Optional[str] = Field(default=None, max_length=1024)

    @field_validator("full_name")
    @classmethod
    def validate_full_name(cls, v: str) -> str:
        return _normalize_full_name(v)

    @field_validator("phone_number", "id_card_front_url", "id_card_back_url")
    @classmethod
    def validate_optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


class StaffOut(BaseModel):
    """Staff profile. Never carries the password hash or the session token."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    owner_id: uuid.UUID
    full_name: str
    email: str

    phone_number: Optional[str] = None
    id_card_front_url: Optional[str] = None
    id_card_back_url: Optional[str] = None

    failed_login_attempts: int
    is_active: bool

    created_at: datetime
    updated_at: datetime


class StaffLoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1, max_length=128)


class StaffLoginResponse(BaseModel):
    staff: StaffOut
    session_token: str
    session_expiry: datetime


class StaffActiveUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    is_active: bool


class EmailCheckResponse(BaseModel):
    exists: bool


class GrantOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    permission_key: str
    is_enabled: bool


class GrantsUpdate(BaseModel):
    """{"grants": {"product_categories_view": true, ...}}; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    grants: Dict[PermissionKey, bool]
