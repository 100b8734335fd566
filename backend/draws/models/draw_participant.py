"""DrawParticipant ORM — one user's entry into one draw.

Invariants:
    - (draw_id, user_id) is unique — enforced by the database, not application code
    - draw_id FK cascades on delete
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from draws.db.base import Base


class DrawParticipant(Base):
    """Participation entry — the row whose existence locks a draw."""
    __tablename__ = "draw_participants"
    __table_args__ = (
        UniqueConstraint(
            "draw_id", "user_id", name="uq_draw_participants_draw_user",
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    draw_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("draws.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id"), nullable=False,
    )
    participated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
