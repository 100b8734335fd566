"""Participation Routes — entering a draw and listing its participants.

Invariants:
    - POST /participate without a body is treated as accept_terms=false
    - Participant listing is paginated (limit clamped to 1..100, offset >= 0);
      limit/offset arrive as raw strings so malformed values fall back to defaults
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from draws.infrastructure.auth import get_current_user
from draws.infrastructure.database import get_db
from draws.models.user import User
from draws.schemas.draw import ParticipateRequest, envelope
from draws.services.participation_service import ParticipationService

router = APIRouter(prefix="/api/v1/draws", tags=["participants"])


@router.get("/{draw_id}/participants")
async def list_participants(
    draw_id: UUID,
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Participants of a draw, for its owning restaurant."""
    page = await ParticipationService(db).list_participants(
        draw_id, user, limit, offset,
    )
    return envelope(page)


@router.post("/{draw_id}/participate", status_code=status.HTTP_201_CREATED)
async def participate(
    draw_id: UUID,
    body: ParticipateRequest | None = None,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Enter the authenticated user into a draw."""
    accept_terms = body.accept_terms if body else False
    entry = await ParticipationService(db).participate(draw_id, user, accept_terms)
    return envelope(entry)
