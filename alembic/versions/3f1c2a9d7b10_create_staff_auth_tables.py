"""create owners, staff, permission catalog, grants and product categories

Revision ID: 3f1c2a9d7b10
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3f1c2a9d7b10"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "owners",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=True),
        sa.Column("business_name", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_owners_email", "owners", ["email"], unique=True)

    op.create_table(
        "staff",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("owners.id", ondelete="CASCADE"), nullable=False),
        sa.Column("full_name", sa.String(length=200), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=True),
        sa.Column("id_card_front_url", sa.String(length=1024), nullable=True),
        sa.Column("id_card_back_url", sa.String(length=1024), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("failed_login_attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("session_token", sa.String(length=128), nullable=True),
        sa.Column("session_expiry", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_staff_owner_id", "staff", ["owner_id"])
    op.create_index("ix_staff_email", "staff", ["email"], unique=True)
    # NULLs do not collide, so any number of logged-out staff rows is fine
    op.create_index("ix_staff_session_token", "staff", ["session_token"], unique=True)

    op.create_table(
        "permissions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("permission_key", sa.String(length=100), nullable=False),
        sa.Column("main_tab_key", sa.String(length=64), nullable=False),
        sa.Column("sub_tab_key", sa.String(length=64), nullable=False),
        sa.Column("action_key", sa.String(length=64), nullable=False),
        sa.Column("label", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_permissions_permission_key", "permissions", ["permission_key"], unique=True)

    op.create_table(
        "staff_permissions",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("staff_id", sa.Uuid(), sa.ForeignKey("staff.id", ondelete="CASCADE"), nullable=False),
        sa.Column("permission_key", sa.String(length=100), nullable=False),
        sa.Column("is_enabled", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("staff_id", "permission_key", name="uq_staff_permissions_staff_key"),
    )
    op.create_index("ix_staff_permissions_staff_id", "staff_permissions", ["staff_id"])

    op.create_table(
        "product_categories",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("owner_id", sa.Uuid(), sa.ForeignKey("owners.id", ondelete="CASCADE"), nullable=False),
        sa.Column("category_name", sa.String(length=200), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("owner_id", "category_name", name="uq_product_categories_owner_name"),
    )
    op.create_index("ix_product_categories_owner_id", "product_categories", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_product_categories_owner_id", table_name="product_categories")
    op.drop_table("product_categories")

    op.drop_index("ix_staff_permissions_staff_id", table_name="staff_permissions")
    op.drop_table("staff_permissions")

    op.drop_index("ix_permissions_permission_key", table_name="permissions")
    op.drop_table("permissions")

    op.drop_index("ix_staff_session_token", table_name="staff")
    op.drop_index("ix_staff_email", table_name="staff")
    op.drop_index("ix_staff_owner_id", table_name="staff")
    op.drop_table("staff")

    op.drop_index("ix_owners_email", table_name="owners")
    op.drop_table("owners")
