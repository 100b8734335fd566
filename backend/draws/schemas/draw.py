"""Draw Schemas — Pydantic models for draw and participation API boundaries.

Invariants:
    - DrawCreate.prize_name: 5-200 chars
    - DrawUpdate fields are all optional; only fields present in the body are applied
      (explicit null clears an optional field)
    - Response models read straight from ORM rows (from_attributes)
    - Cross-field rules (draw_type vs draw_date/trigger_threshold, future dates)
      live in core.enforce_draws, not here

Design Decisions:
    - Literal for draw_type/status over str enum: Pydantic handles validation natively
    - Unknown body fields ignored (status, winner_user_id cannot be set by clients)
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from draws.core.domain_types import PRIZE_NAME_MAX_LENGTH, PRIZE_NAME_MIN_LENGTH

DrawTypeLiteral = Literal["fixed_date", "conditional"]
DrawStatusLiteral = Literal["active", "completed", "cancelled"]


# --- Requests -----------------------------------------------------------------

class DrawCreate(BaseModel):
    """New draw — field shapes only; schedule rules checked in core."""
    prize_name: str = Field(
        min_length=PRIZE_NAME_MIN_LENGTH, max_length=PRIZE_NAME_MAX_LENGTH,
    )
    prize_description: str | None = None
    prize_image_url: str | None = None
    draw_type: DrawTypeLiteral
    draw_date: datetime | None = None
    trigger_threshold: int | None = None
    win_probability: str | None = Field(None, max_length=50)
    terms_url: str | None = None
    use_default_terms: bool = True
    custom_terms: str | None = None


class DrawUpdate(BaseModel):
    """Partial draw update (PATCH)."""
    prize_name: str | None = Field(
        None, min_length=PRIZE_NAME_MIN_LENGTH, max_length=PRIZE_NAME_MAX_LENGTH,
    )
    prize_description: str | None = None
    prize_image_url: str | None = None
    draw_type: DrawTypeLiteral | None = None
    draw_date: datetime | None = None
    trigger_threshold: int | None = None
    win_probability: str | None = Field(None, max_length=50)
    terms_url: str | None = None
    use_default_terms: bool | None = None
    custom_terms: str | None = None

    def changes(self) -> dict[str, Any]:
        """Fields the client actually sent, including explicit nulls."""
        return self.model_dump(exclude_unset=True)


class ParticipateRequest(BaseModel):
    """Participation body — terms must be accepted explicitly."""
    accept_terms: bool = False


# --- Responses ----------------------------------------------------------------

class DrawResponse(BaseModel):
    """Full draw record."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    business_id: UUID
    prize_name: str
    prize_description: str | None = None
    prize_image_url: str | None = None
    draw_type: DrawTypeLiteral
    draw_date: datetime | None = None
    trigger_threshold: int | None = None
    win_probability: str | None = None
    terms_url: str | None = None
    use_default_terms: bool
    custom_terms: str | None = None
    status: DrawStatusLiteral
    winner_user_id: UUID | None = None
    drawn_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class DrawSummary(BaseModel):
    """Row in the restaurant's draw list."""
    id: UUID
    prize_name: str
    status: DrawStatusLiteral
    participant_count: int
    draw_date: datetime | None = None
    created_at: datetime


class BusinessResponse(BaseModel):
    """Public business card shown with a draw."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str | None = None
    city: str | None = None


class DrawDetail(BaseModel):
    """Draw detail view — draw, owner, and the caller's participation flag."""
    draw: DrawResponse
    business: BusinessResponse | None
    participant_count: int
    user_has_participated: bool


class ParticipationResponse(BaseModel):
    """Participation record returned after entering a draw."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    draw_id: UUID
    user_id: UUID
    participated_at: datetime


class ParticipantEntry(BaseModel):
    """Participant as seen by the owning restaurant."""
    id: UUID
    user_name: str
    user_email: str
    participated_at: datetime


class ParticipantsPage(BaseModel):
    """Paginated participant list."""
    participants: list[ParticipantEntry]
    total: int
    limit: int
    offset: int


def envelope(data: BaseModel | list[BaseModel] | None = None) -> dict:
    """Wrap a payload in the {success, data} envelope, JSON-ready."""
    if data is None:
        return {"success": True}
    if isinstance(data, list):
        return {"success": True, "data": [d.model_dump(mode="json") for d in data]}
    return {"success": True, "data": data.model_dump(mode="json")}
