"""Business ORM — the restaurant that owns draws.

Invariants:
    - id is UUID primary key
    - name is non-nullable; email and city optional
"""

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from draws.db.base import Base


class Business(Base):
    """Restaurant account — draws are scoped by business_id."""
    __tablename__ = "businesses"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    city: Mapped[str | None] = mapped_column(String(120), nullable=True)
