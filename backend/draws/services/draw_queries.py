"""Draw Queries — shared reads used by both draw and participation services.

Invariants:
    - participant_count always computed from draw_participants (never cached)
    - get_draw_or_404 raises ResourceNotFoundError, never returns None
"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from draws.core.errors import ResourceNotFoundError
from draws.models.draw import Draw
from draws.models.draw_participant import DrawParticipant


def participant_count_subquery():
    """Correlated COUNT of entries for the outer Draw row."""
    return (
        select(func.count(DrawParticipant.id))
        .where(DrawParticipant.draw_id == Draw.id)
        .correlate(Draw)
        .scalar_subquery()
    )


async def get_draw_or_404(draw_id: UUID, db: AsyncSession) -> Draw:
    result = await db.execute(select(Draw).where(Draw.id == draw_id))
    draw = result.scalar_one_or_none()
    if not draw:
        raise ResourceNotFoundError("Draw", str(draw_id))
    return draw


async def count_participants(draw_id: UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(DrawParticipant.id))
        .where(DrawParticipant.draw_id == draw_id),
    )
    return result.scalar_one()


async def has_participated(draw_id: UUID, user_id: UUID, db: AsyncSession) -> bool:
    result = await db.execute(
        select(DrawParticipant.id)
        .where(DrawParticipant.draw_id == draw_id)
        .where(DrawParticipant.user_id == user_id),
    )
    return result.first() is not None
