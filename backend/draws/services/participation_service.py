"""Participation Service — enter a draw, list a draw's participants.

Invariants:
    - Only role `user` participates; terms must be accepted; draw must be active
    - One entry per (draw, user): checked up front, and the DB unique constraint
      settles races. Only a unique violation is reported as ALREADY_PARTICIPATED;
      any other integrity failure propagates
    - Participant lists are visible to the owning restaurant only, paginated

Design Decisions:
    - IntegrityError caught here rather than in the session manager: only this
      insert knows the violation means "already participated"
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from draws.core.domain_types import UserRole
from draws.core.enforce_access import check_restaurant_owner, check_role
from draws.core.enforce_draws import (
    check_participation, check_terms_accepted, normalize_pagination,
)
from draws.core.errors import AlreadyParticipatedError, ErrorContext, raise_if
from draws.models.draw_participant import DrawParticipant
from draws.models.user import User
from draws.schemas.draw import ParticipantEntry, ParticipantsPage, ParticipationResponse
from draws.services.draw_queries import (
    count_participants, get_draw_or_404, has_participated,
)

logger = logging.getLogger(__name__)

DUPLICATE_ENTRY_CONSTRAINT = "uq_draw_participants_draw_user"


def _is_duplicate_entry(error: IntegrityError) -> bool:
    """Unique (draw_id, user_id) violation, as reported by PostgreSQL or SQLite."""
    message = str(error.orig).lower()
    return DUPLICATE_ENTRY_CONSTRAINT in message or "unique constraint" in message


class ParticipationService:
    """Entries into draws."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def participate(
        self, draw_id: UUID, user: User, accept_terms: bool,
    ) -> ParticipationResponse:
        raise_if(check_role(user, UserRole.USER))
        raise_if(check_terms_accepted(accept_terms))
        draw = await get_draw_or_404(draw_id, self.db)
        user_id = user.id
        context = ErrorContext(draw_id=str(draw.id), user_id=str(user_id))

        already = await has_participated(draw.id, user_id, self.db)
        raise_if(check_participation(draw.status, already), context)

        entry = DrawParticipant(draw_id=draw.id, user_id=user_id)
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            if not _is_duplicate_entry(e):
                raise
            logger.warning(
                "Duplicate participation rejected by constraint",
                extra={"draw_id": draw_id, "user_id": user_id},
            )
            raise AlreadyParticipatedError(context)
        await self.db.refresh(entry)
        logger.info(
            "User entered draw",
            extra={"draw_id": draw_id, "user_id": user_id},
        )
        return ParticipationResponse.model_validate(entry)

    async def list_participants(
        self,
        draw_id: UUID,
        user: User,
        limit: int | str | None = None,
        offset: int | str | None = None,
    ) -> ParticipantsPage:
        """Owner-only, most recent entries first."""
        raise_if(check_role(user, UserRole.RESTAURANT))
        draw = await get_draw_or_404(draw_id, self.db)
        raise_if(
            check_restaurant_owner(user, draw),
            ErrorContext(draw_id=str(draw.id), user_id=str(user.id)),
        )
        limit, offset = normalize_pagination(limit, offset)

        total = await count_participants(draw.id, self.db)

        result = await self.db.execute(
            select(
                DrawParticipant.id,
                User.name,
                User.email,
                DrawParticipant.participated_at,
            )
            .join(User, DrawParticipant.user_id == User.id)
            .where(DrawParticipant.draw_id == draw.id)
            .order_by(DrawParticipant.participated_at.desc())
            .limit(limit)
            .offset(offset),
        )
        return ParticipantsPage(
            participants=[
                ParticipantEntry(
                    id=row_id,
                    user_name=name,
                    user_email=email,
                    participated_at=participated_at,
                )
                for row_id, name, email, participated_at in result.all()
            ],
            total=total,
            limit=limit,
            offset=offset,
        )
