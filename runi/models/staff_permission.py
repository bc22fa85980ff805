# runi/models/staff_permission.py
import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from runi.db.base import Base


class StaffPermission(Base):
    """One checkbox in the owner's staff permission grid."""

    __tablename__ = "staff_permissions"
    __table_args__ = (
        UniqueConstraint("staff_id", "permission_key", name="uq_staff_permissions_staff_key"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    staff_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("staff.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Not a foreign key: a grant may outlive its catalog row and then simply denies.
    permission_key: Mapped[str] = mapped_column(String(100), nullable=False)

    is_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
