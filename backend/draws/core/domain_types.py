"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - DrawId, UserId, BusinessId wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - Prize name and pagination bounds live here, next to the types they constrain

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders, compare equal to DB strings
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

DrawId = NewType("DrawId", UUID)
UserId = NewType("UserId", UUID)
BusinessId = NewType("BusinessId", UUID)


# ─── Bounds ──────────────────────────────────────────────────────

PRIZE_NAME_MIN_LENGTH = 5
PRIZE_NAME_MAX_LENGTH = 200

PARTICIPANTS_DEFAULT_LIMIT = 50
PARTICIPANTS_MAX_LIMIT = 100


# ─── Enums ───────────────────────────────────────────────────────

class DrawType(str, Enum):
    """How a draw is triggered — decides which scheduling field is required."""
    FIXED_DATE = "fixed_date"
    CONDITIONAL = "conditional"


class DrawStatus(str, Enum):
    """Draw lifecycle states — maps to DB `status` column.

    Only ACTIVE draws accept participants. COMPLETED/CANCELLED are set by the
    external drawing process, never by this API.
    """
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class UserRole(str, Enum):
    """Account roles — gate every mutation."""
    USER = "user"
    RESTAURANT = "restaurant"
    ADMIN = "admin"


class DrawAction(str, Enum):
    """Mutations blocked once a draw has participants."""
    MODIFY = "modify"
    DELETE = "delete"
