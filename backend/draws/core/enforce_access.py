"""Access Enforcement — role, business and ownership checks for every draw operation.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Return a DrawsError on violation, None on success
    - Unauthenticated callers get 401; authenticated but disallowed callers get 403

Design Decisions:
    - Errors returned, not raised: services decide when to raise, so the same
      rule can be composed (check_can_view) or tested without pytest.raises
"""

from draws.core.domain_types import DrawStatus, UserRole
from draws.core.errors import AuthenticationError, DrawsError, ForbiddenError
from draws.core.repository_protocols import DrawLike, UserLike


def check_role(user: UserLike, *roles: UserRole) -> DrawsError | None:
    """Caller's role must be one of `roles`."""
    if user.role not in {r.value for r in roles}:
        allowed = ", ".join(r.value for r in roles)
        return ForbiddenError(f"User role must be one of: {allowed}")
    return None


def check_business_id(user: UserLike) -> DrawsError | None:
    """Restaurant accounts must be linked to a business before managing draws."""
    if not user.business_id:
        return ForbiddenError(
            "User must have a business_id", code="BUSINESS_REQUIRED",
        )
    return None


def check_ownership(user: UserLike, draw: DrawLike) -> DrawsError | None:
    """Only the restaurant that owns the draw may manage it."""
    if draw.business_id != user.business_id:
        return ForbiddenError()
    return None


def check_restaurant_owner(user: UserLike, draw: DrawLike) -> DrawsError | None:
    """Chain role, business and ownership checks — first error wins."""
    return (
        check_role(user, UserRole.RESTAURANT)
        or check_business_id(user)
        or check_ownership(user, draw)
    )


def check_can_view(
    draw: DrawLike, user: UserLike | None, has_participated: bool,
) -> DrawsError | None:
    """Active draws are public. Anything else is visible to admins,
    the owning restaurant, and users who entered the draw."""
    if draw.status == DrawStatus.ACTIVE:
        return None
    if user is None:
        return AuthenticationError()
    if user.role == UserRole.ADMIN:
        return None
    if user.role == UserRole.RESTAURANT and check_ownership(user, draw) is None:
        return None
    if user.role == UserRole.USER and has_participated:
        return None
    return ForbiddenError()
