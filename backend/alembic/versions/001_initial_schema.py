"""Initial schema — businesses, users, draws, draw_participants.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "businesses",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("city", sa.String(120), nullable=True),
    )

    op.create_table(
        "users",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(320), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("business_id", UUID(as_uuid=True), sa.ForeignKey("businesses.id"), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("role IN ('user', 'restaurant', 'admin')", name="ck_users_role"),
    )

    op.create_table(
        "draws",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("business_id", UUID(as_uuid=True), sa.ForeignKey("businesses.id"), nullable=False),
        sa.Column("prize_name", sa.String(200), nullable=False),
        sa.Column("prize_description", sa.Text, nullable=True),
        sa.Column("prize_image_url", sa.Text, nullable=True),
        sa.Column("draw_type", sa.String(20), nullable=False),
        sa.Column("draw_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("trigger_threshold", sa.Integer, nullable=True),
        sa.Column("win_probability", sa.String(50), nullable=True),
        sa.Column("terms_url", sa.Text, nullable=True),
        sa.Column("use_default_terms", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("custom_terms", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("winner_user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("drawn_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("char_length(prize_name) BETWEEN 5 AND 200", name="ck_draws_prize_name_length"),
        sa.CheckConstraint("draw_type IN ('fixed_date', 'conditional')", name="ck_draws_draw_type"),
        sa.CheckConstraint("status IN ('active', 'completed', 'cancelled')", name="ck_draws_status"),
        sa.CheckConstraint(
            "trigger_threshold IS NULL OR trigger_threshold > 0",
            name="ck_draws_trigger_threshold_positive",
        ),
    )
    op.create_index("ix_draws_business_id", "draws", ["business_id"])
    op.create_index("ix_draws_status", "draws", ["status"])

    op.create_table(
        "draw_participants",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "draw_id", UUID(as_uuid=True),
            sa.ForeignKey("draws.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("user_id", UUID(as_uuid=True), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("participated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("draw_id", "user_id", name="uq_draw_participants_draw_user"),
    )
    op.create_index("ix_draw_participants_draw_id", "draw_participants", ["draw_id"])


def downgrade() -> None:
    op.drop_index("ix_draw_participants_draw_id", table_name="draw_participants")
    op.drop_table("draw_participants")
    op.drop_index("ix_draws_status", table_name="draws")
    op.drop_index("ix_draws_business_id", table_name="draws")
    op.drop_table("draws")
    op.drop_table("users")
    op.drop_table("businesses")
