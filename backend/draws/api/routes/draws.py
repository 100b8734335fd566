"""Draw Routes — /api/v1/draws collection and item endpoints.

Invariants:
    - Mutations require a bearer token; GET by id is public for active draws
    - Every response is wrapped in the {success, data} envelope
    - Unsupported methods answer 405 through the global handler

Design Decisions:
    - Routes only wire dependencies into DrawService (no rules here)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from draws.infrastructure.auth import get_current_user, get_optional_user
from draws.infrastructure.database import get_db
from draws.models.user import User
from draws.schemas.draw import DrawCreate, DrawStatusLiteral, DrawUpdate, envelope
from draws.services.draw_service import DrawService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/draws", tags=["draws"])


@router.get("")
async def list_draws(
    status_filter: DrawStatusLiteral | None = Query(None, alias="status"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """List the authenticated restaurant's draws with participant counts."""
    draws = await DrawService(db).list_draws(user, status_filter)
    return envelope(draws)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_draw(
    body: DrawCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Create a draw for the authenticated restaurant."""
    draw = await DrawService(db).create_draw(user, body)
    return envelope(draw)


@router.get("/{draw_id}")
async def get_draw(
    draw_id: UUID,
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    """Draw detail — public for active draws."""
    detail = await DrawService(db).get_draw(draw_id, user)
    return envelope(detail)


@router.patch("/{draw_id}")
async def update_draw(
    draw_id: UUID,
    body: DrawUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Partially update a draw that has no participants yet."""
    draw = await DrawService(db).update_draw(draw_id, user, body)
    return envelope(draw)


@router.delete("/{draw_id}")
async def delete_draw(
    draw_id: UUID,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a draw that has no participants yet."""
    await DrawService(db).delete_draw(draw_id, user)
    return envelope()
