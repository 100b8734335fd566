"""Draw Service — list, create, read, update and delete draws.

Invariants:
    - Every mutation runs: authorize -> load -> lock check -> validate -> write
    - Only restaurant accounts with a business manage draws, and only their own
    - A draw with participants is neither modified nor deleted
    - Active draws are readable anonymously; other statuses need owner,
      participant or admin

Design Decisions:
    - Rules come from core (pure); this class only does IO and raises what they return
    - `now` read once per call and handed to the rules, keeping them deterministic
"""

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from draws.core.domain_types import DrawAction, UserRole
from draws.core.enforce_access import (
    check_business_id, check_can_view, check_restaurant_owner, check_role,
)
from draws.core.enforce_draws import (
    check_modifiable, validate_draw_create, validate_draw_update,
)
from draws.core.errors import ErrorContext, raise_if
from draws.models.business import Business
from draws.models.draw import Draw
from draws.models.user import User
from draws.schemas.draw import (
    BusinessResponse, DrawCreate, DrawDetail, DrawResponse, DrawSummary, DrawUpdate,
)
from draws.services.draw_queries import (
    count_participants, get_draw_or_404, has_participated, participant_count_subquery,
)

logger = logging.getLogger(__name__)


class DrawService:
    """Draw CRUD guarded by ownership and the participant lock."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_draws(self, user: User, status: str | None = None) -> list[DrawSummary]:
        """Draws of the caller's business, newest first."""
        raise_if(check_role(user, UserRole.RESTAURANT) or check_business_id(user))

        participant_count = participant_count_subquery().label("participant_count")
        query = (
            select(Draw, participant_count)
            .where(Draw.business_id == user.business_id)
            .order_by(Draw.created_at.desc())
        )
        if status:
            query = query.where(Draw.status == status)

        result = await self.db.execute(query)
        return [
            DrawSummary(
                id=draw.id,
                prize_name=draw.prize_name,
                status=draw.status,
                participant_count=count,
                draw_date=draw.draw_date,
                created_at=draw.created_at,
            )
            for draw, count in result.all()
        ]

    async def create_draw(self, user: User, body: DrawCreate) -> DrawResponse:
        raise_if(check_role(user, UserRole.RESTAURANT) or check_business_id(user))
        fields = body.model_dump()
        raise_if(validate_draw_create(fields, datetime.now(timezone.utc)))

        draw = Draw(business_id=user.business_id, **fields)
        self.db.add(draw)
        await self.db.commit()
        await self.db.refresh(draw)
        logger.info(
            f"Draw created: {draw.prize_name}",
            extra={"draw_id": draw.id, "business_id": draw.business_id},
        )
        return DrawResponse.model_validate(draw)

    async def get_draw(self, draw_id: UUID, user: User | None) -> DrawDetail:
        """Draw detail with owner, participant count and the caller's entry flag."""
        draw = await get_draw_or_404(draw_id, self.db)

        participated = False
        if user is not None and user.role == UserRole.USER:
            participated = await has_participated(draw.id, user.id, self.db)
        raise_if(
            check_can_view(draw, user, participated),
            ErrorContext(
                draw_id=str(draw.id), user_id=str(user.id) if user else None,
            ),
        )

        business = await self.db.get(Business, draw.business_id)
        return DrawDetail(
            draw=DrawResponse.model_validate(draw),
            business=BusinessResponse.model_validate(business) if business else None,
            participant_count=await count_participants(draw.id, self.db),
            user_has_participated=participated,
        )

    async def update_draw(
        self, draw_id: UUID, user: User, body: DrawUpdate,
    ) -> DrawResponse:
        draw = await self._load_for_mutation(draw_id, user, DrawAction.MODIFY)

        changes = body.changes()
        current = {
            "draw_type": draw.draw_type,
            "draw_date": draw.draw_date,
            "trigger_threshold": draw.trigger_threshold,
        }
        raise_if(validate_draw_update(current, changes, datetime.now(timezone.utc)))

        for name, value in changes.items():
            setattr(draw, name, value)
        draw.updated_at = datetime.now(timezone.utc)
        await self.db.commit()
        await self.db.refresh(draw)
        logger.info(
            f"Draw updated: {sorted(changes)}",
            extra={"draw_id": draw.id, "business_id": draw.business_id},
        )
        return DrawResponse.model_validate(draw)

    async def delete_draw(self, draw_id: UUID, user: User) -> None:
        draw = await self._load_for_mutation(draw_id, user, DrawAction.DELETE)
        await self.db.delete(draw)
        await self.db.commit()
        logger.info(
            "Draw deleted",
            extra={"draw_id": draw_id, "business_id": user.business_id},
        )

    async def _load_for_mutation(
        self, draw_id: UUID, user: User, action: DrawAction,
    ) -> Draw:
        """Role -> existence -> ownership -> participant lock."""
        raise_if(check_role(user, UserRole.RESTAURANT))
        draw = await get_draw_or_404(draw_id, self.db)
        context = ErrorContext(draw_id=str(draw.id), user_id=str(user.id))
        raise_if(check_restaurant_owner(user, draw), context)
        participant_count = await count_participants(draw.id, self.db)
        raise_if(check_modifiable(participant_count, action), context)
        return draw
