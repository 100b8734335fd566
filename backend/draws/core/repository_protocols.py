"""Boundary Protocols — structural contracts between core rules and ORM objects.

Invariants:
    - Core NEVER imports ORM models — dependency arrows point inward only
    - Anything with the listed attributes satisfies the protocol (ORM rows, test doubles)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
"""

from typing import Protocol
from uuid import UUID


class UserLike(Protocol):
    """Structural contract for the authenticated caller."""
    id: UUID
    role: str
    business_id: UUID | None
    is_active: bool


class DrawLike(Protocol):
    """Structural contract for a draw passed to access and lock rules."""
    id: UUID
    business_id: UUID
    status: str
