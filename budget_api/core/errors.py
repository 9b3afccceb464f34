"""Error Hierarchy — typed, categorized exceptions for all Budget API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are raised before any store access where possible
    - to_response() produces the REST envelope: {"success": false, "error": {...}}
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with BudgetApiError base: one global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: observability fields without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and the response envelope."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_id: int | None = None
    currency: str | None = None
    debug_info: dict[str, Any] | None = None


class BudgetApiError(Exception):
    """Base exception for all Budget API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: list[dict] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        error = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.details:
            error["details"] = self.details
        return {"success": False, "error": error}


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidIdentifierError(BudgetApiError):
    """Path identifier is not an integer."""
    def __init__(self, raw: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid project ID: '{raw}'",
            "INVALID_IDENTIFIER", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )
        self.raw = raw


class MissingFieldsError(BudgetApiError):
    """Request body lacks one or more required fields."""
    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Missing required fields: {', '.join(fields)}",
            "MISSING_FIELDS", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
            details=[{"field": f, "message": "Field required"} for f in fields],
        )
        self.fields = fields


class TypeMismatchError(BudgetApiError):
    """Request body field has the wrong type or format."""
    def __init__(
        self, details: list[dict], context: ErrorContext | None = None,
    ):
        fields = [d["field"] for d in details]
        super().__init__(
            f"Invalid field type: {', '.join(fields)}",
            "TYPE_MISMATCH", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
            details=details,
        )
        self.fields = fields


class ResourceNotFoundError(BudgetApiError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )


class ConflictError(BudgetApiError):
    """Resource with the same identity already exists."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' already exists",
            "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(BudgetApiError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class ExchangeRateError(BudgetApiError):
    """Exchange-rate provider call failed or returned no usable rate."""
    def __init__(
        self, message: str, reason: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Exchange rate lookup failed ({reason}): {message}",
            "EXCHANGE_RATE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, context, 502,
        )
        self.reason = reason
