# runi/models/staff.py
import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from runi.db.base import Base


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Set once at creation; every record the staff member can reach is scoped to this owner.
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("owners.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    full_name: Mapped[str] = mapped_column(String(200), nullable=False)

    # Stored trimmed + lowercased; unique across all owners.
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True, nullable=False)

    phone_number: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    id_card_front_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    id_card_back_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)

    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    failed_login_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Single active session. NULL = logged out.
    session_token: Mapped[Optional[str]] = mapped_column(String(128), unique=True, index=True, nullable=True)
    session_expiry: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
