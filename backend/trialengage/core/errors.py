"""Error Hierarchy — typed, categorized exceptions for all TrialEngage failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope: {"success": false, "error": {...}}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TrialEngageError base: one FastAPI handler catches all
    - ErrorContext as dataclass: tenant/user ids for log correlation without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for log correlation."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    company_id: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


class TrialEngageError(Exception):
    """Base exception for all TrialEngage errors."""

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
        """Convert to standardized REST error response."""
        return {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "company_id": self.context.company_id,
                    "user_id": self.context.user_id,
                },
            },
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidRequestError(TrialEngageError):
    """Request is well-formed JSON but violates a business precondition."""
    def __init__(self, message: str, field: str | None = None, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_REQUEST", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class AuthenticationError(TrialEngageError):
    """Missing, malformed, expired token or wrong credentials."""
    def __init__(self, message: str = "Invalid credentials", context: ErrorContext | None = None):
        super().__init__(
            message, "AUTHENTICATION_FAILED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class PermissionDeniedError(TrialEngageError):
    """Authenticated principal may not act on this tenant or resource."""
    def __init__(self, message: str = "Access denied", context: ErrorContext | None = None):
        super().__init__(
            message, "ACCESS_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class AccountNotApprovedError(TrialEngageError):
    """Investigator exists but has not been approved by the tenant admin."""
    def __init__(self, status: str, context: ErrorContext | None = None):
        super().__init__(
            "Account pending approval" if status == "pending"
            else f"Account is {status}",
            "ACCOUNT_NOT_APPROVED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.status = status


class DuplicateResourceError(TrialEngageError):
    """A record with the same natural key already exists."""
    def __init__(self, resource_type: str, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} '{key}' already exists",
            "DUPLICATE_RESOURCE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )
        self.resource_type = resource_type


class LoginCodeError(TrialEngageError):
    """One-time login code missing, expired, wrong or exhausted."""

    NOT_REQUESTED = "LOGIN_CODE_NOT_REQUESTED"
    EXPIRED = "LOGIN_CODE_EXPIRED"
    MISMATCH = "LOGIN_CODE_INVALID"
    EXHAUSTED = "LOGIN_CODE_ATTEMPTS_EXCEEDED"

    _MESSAGES = {
        NOT_REQUESTED: "No code requested or code expired",
        EXPIRED: "Code expired",
        MISMATCH: "Invalid code",
        EXHAUSTED: "Too many attempts. Please request a new code.",
    }

    def __init__(self, code: str, context: ErrorContext | None = None):
        super().__init__(
            self._MESSAGES[code], code, ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 400,
        )


class UploadRejectedError(TrialEngageError):
    """Uploaded file has the wrong type or exceeds the size limit."""
    def __init__(self, message: str, http_status: int = 400, context: ErrorContext | None = None):
        super().__init__(
            message, "UPLOAD_REJECTED", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, http_status,
        )


class ResourceNotFoundError(TrialEngageError):
    """Requested resource does not exist (or belongs to another tenant)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TrialEngageError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StorageError(TrialEngageError):
    """Document storage read/write failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
