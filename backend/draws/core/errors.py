"""Error Hierarchy — typed, categorized exceptions for all draws API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope {success, error, code}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DrawsError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    draw_id: str | None = None
    user_id: str | None = None


class DrawsError(Exception):
    """Base exception for all draws API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the standard REST envelope."""
        return {
            "success": False,
            "error": self.message,
            "code": self.code,
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class DrawValidationError(DrawsError):
    """Draw payload failed a field or cross-field rule."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class NoFieldsToUpdateError(DrawsError):
    """PATCH body carried no updatable field."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No fields to update",
            "NO_FIELDS_TO_UPDATE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class DrawHasParticipantsError(DrawsError):
    """Draw is locked because users already entered it."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot {action} a draw with participants",
            "DRAW_HAS_PARTICIPANTS", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )
        self.action = action


class TermsNotAcceptedError(DrawsError):
    """Participation attempted without accepting the draw terms."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You must accept the terms to participate",
            "TERMS_NOT_ACCEPTED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class DrawNotAvailableError(DrawsError):
    """Participation attempted on a draw that is not active."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "This draw is not available",
            "DRAW_NOT_AVAILABLE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400,
        )


class AlreadyParticipatedError(DrawsError):
    """User already has an entry in this draw."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "You are already participating in this draw",
            "ALREADY_PARTICIPATED", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class AuthenticationError(DrawsError):
    """Caller could not be authenticated."""
    def __init__(
        self,
        message: str = "Authentication required",
        code: str = "AUTHENTICATION_REQUIRED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(DrawsError):
    """Caller is authenticated but not allowed to perform the action."""
    def __init__(
        self,
        message: str = "Unauthorized",
        code: str = "FORBIDDEN",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(DrawsError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            f"{resource_type.upper()}_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_id = resource_id


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DrawsError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class AuthNotConfiguredError(DrawsError):
    """Token verification requested but no signing secret is configured."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Authentication is not configured",
            "AUTH_NOT_CONFIGURED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


def raise_if(error: DrawsError | None, context: ErrorContext | None = None) -> None:
    """Raise the error returned by a rule check, if any, tagged with `context`."""
    if error is not None:
        if context is not None:
            error.context = context
        raise error
