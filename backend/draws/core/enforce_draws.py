"""Draw Rule Enforcement — payload validation, modification lock, participation preconditions.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Current time is always passed in as `now` (never read inside a rule)
    - Return a DrawsError on violation, None on success
    - validate_* functions chain checks — first error wins
    - A draw with participant_count > 0 can be neither modified nor deleted

Design Decisions:
    - Plain dicts in, errors out: rules run on create bodies, PATCH deltas and
      stored rows alike without depending on Pydantic or ORM types
    - Naive datetimes are read as UTC: SQLite drops tzinfo on round-trip
"""

import re
from datetime import datetime, timezone
from typing import Any

from draws.core.domain_types import (
    DrawAction,
    DrawStatus,
    DrawType,
    PARTICIPANTS_DEFAULT_LIMIT,
    PARTICIPANTS_MAX_LIMIT,
    PRIZE_NAME_MAX_LENGTH,
    PRIZE_NAME_MIN_LENGTH,
)
from draws.core.errors import (
    AlreadyParticipatedError,
    DrawHasParticipantsError,
    DrawNotAvailableError,
    DrawValidationError,
    DrawsError,
    NoFieldsToUpdateError,
    TermsNotAcceptedError,
)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes; convert aware ones."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ─── Field rules ─────────────────────────────────────────────────

def check_prize_name(prize_name: Any) -> DrawsError | None:
    if not isinstance(prize_name, str) or not prize_name:
        return DrawValidationError(
            "prize_name is required and must be a string", "prize_name",
        )
    if not PRIZE_NAME_MIN_LENGTH <= len(prize_name) <= PRIZE_NAME_MAX_LENGTH:
        return DrawValidationError(
            f"prize_name must be between {PRIZE_NAME_MIN_LENGTH} and "
            f"{PRIZE_NAME_MAX_LENGTH} characters",
            "prize_name",
        )
    return None


def check_draw_type(draw_type: Any) -> DrawsError | None:
    if draw_type not in {t.value for t in DrawType}:
        return DrawValidationError(
            'draw_type must be "fixed_date" or "conditional"', "draw_type",
        )
    return None


def check_future_date(draw_date: datetime, now: datetime) -> DrawsError | None:
    if as_utc(draw_date) <= as_utc(now):
        return DrawValidationError("draw_date must be in the future", "draw_date")
    return None


def check_trigger_threshold(trigger_threshold: Any) -> DrawsError | None:
    if trigger_threshold is None or trigger_threshold <= 0:
        return DrawValidationError(
            "trigger_threshold is required and must be > 0 for conditional draws",
            "trigger_threshold",
        )
    return None


def check_schedule(
    draw_type: str,
    draw_date: datetime | None,
    trigger_threshold: int | None,
    now: datetime,
    require_future: bool = True,
) -> DrawsError | None:
    """Draw-type specific requirements.

    fixed_date needs a draw_date (in the future when `require_future`);
    conditional needs a positive trigger_threshold.
    """
    if draw_type == DrawType.FIXED_DATE:
        if draw_date is None:
            return DrawValidationError(
                "draw_date is required for fixed_date draws", "draw_date",
            )
        if require_future:
            return check_future_date(draw_date, now)
    elif draw_type == DrawType.CONDITIONAL:
        return check_trigger_threshold(trigger_threshold)
    return None


# ─── Payload validation ──────────────────────────────────────────

def validate_draw_create(fields: dict, now: datetime) -> DrawsError | None:
    """Validate a new draw. First error wins."""
    return (
        check_prize_name(fields.get("prize_name"))
        or check_draw_type(fields.get("draw_type"))
        or check_schedule(
            fields["draw_type"],
            fields.get("draw_date"),
            fields.get("trigger_threshold"),
            now,
        )
    )


def validate_draw_update(
    current: dict, changes: dict, now: datetime,
) -> DrawsError | None:
    """Validate a partial update against the stored draw. First error wins.

    Each supplied field is checked on its own, then the merged draw must still
    satisfy its draw_type requirements. The future-date rule only applies when
    the change touches draw_date or draw_type, so a draw whose date has passed
    can still have its description edited.
    """
    if not changes:
        return NoFieldsToUpdateError()

    if "prize_name" in changes:
        error = check_prize_name(changes["prize_name"])
        if error:
            return error
    if "draw_type" in changes:
        error = check_draw_type(changes["draw_type"])
        if error:
            return error
    if changes.get("draw_date") is not None:
        error = check_future_date(changes["draw_date"], now)
        if error:
            return error
    if changes.get("trigger_threshold") is not None and changes["trigger_threshold"] <= 0:
        return DrawValidationError("trigger_threshold must be > 0", "trigger_threshold")
    if "use_default_terms" in changes and changes["use_default_terms"] is None:
        return DrawValidationError(
            "use_default_terms must be a boolean", "use_default_terms",
        )

    merged = {**current, **changes}
    return check_schedule(
        merged["draw_type"],
        merged.get("draw_date"),
        merged.get("trigger_threshold"),
        now,
        require_future="draw_type" in changes or "draw_date" in changes,
    )


# ─── Lock & participation ────────────────────────────────────────

def check_modifiable(participant_count: int, action: DrawAction) -> DrawsError | None:
    """A draw is frozen as soon as one user has entered it."""
    if participant_count > 0:
        return DrawHasParticipantsError(action.value)
    return None


def check_terms_accepted(accept_terms: bool) -> DrawsError | None:
    """Checked before the draw is even looked up."""
    if not accept_terms:
        return TermsNotAcceptedError()
    return None


def check_participation(
    status: str, already_participated: bool,
) -> DrawsError | None:
    """Draw active, no prior entry, in that order."""
    if status != DrawStatus.ACTIVE:
        return DrawNotAvailableError()
    if already_participated:
        return AlreadyParticipatedError()
    return None


_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_query_int(value: int | str | None) -> int | None:
    """Leading integer of a query value, None when there is none ("12abc" -> 12)."""
    if value is None or isinstance(value, int):
        return value
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def normalize_pagination(
    limit: int | str | None, offset: int | str | None,
) -> tuple[int, int]:
    """Clamp participant paging: limit in (0, 100], default 50; offset >= 0.

    Unparseable values fall back to the defaults instead of being rejected.
    """
    limit = parse_query_int(limit)
    offset = parse_query_int(offset)
    if limit is None or limit <= 0:
        limit = PARTICIPANTS_DEFAULT_LIMIT
    limit = min(limit, PARTICIPANTS_MAX_LIMIT)
    if offset is None or offset < 0:
        offset = 0
    return limit, offset
