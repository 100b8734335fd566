"""Draw ORM — a prize giveaway owned by a business.

Invariants:
    - id is UUID primary key
    - prize_name 5-200 chars (validated in core.enforce_draws, column sized to match)
    - fixed_date draws carry draw_date; conditional draws carry trigger_threshold
    - status transitions: active -> completed | cancelled (external drawing process)
    - mutable only while no participant rows reference it

Design Decisions:
    - participant_count is never stored: always counted from draw_participants so
      the modification lock cannot drift from reality
    - ON DELETE CASCADE on draw_participants: deleting a draw removes its entries
      at DB level (only reachable for empty draws through the API)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from draws.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Draw(Base):
    """Draw aggregate root — owns its participant entries."""
    __tablename__ = "draws"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("businesses.id"),
        nullable=False, index=True,
    )
    prize_name: Mapped[str] = mapped_column(String(200), nullable=False)
    prize_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    prize_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    draw_type: Mapped[str] = mapped_column(String(20), nullable=False)
    draw_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    trigger_threshold: Mapped[int | None] = mapped_column(Integer, nullable=True)
    win_probability: Mapped[str | None] = mapped_column(String(50), nullable=True)
    terms_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    use_default_terms: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    custom_terms: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="active", index=True,
    )
    winner_user_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=True,
    )
    drawn_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
        default=_utcnow, onupdate=_utcnow,
    )
