"""Error Hierarchy: typed, categorized exceptions for all todo-store failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Lookup and constraint errors are recoverable by the caller; storage errors are critical
    - to_response() produces a JSON-able envelope for the application layer
    - No error is swallowed: this module only classifies, never suppresses

Design Decisions:
    - Single hierarchy with TodoStoreError base: one except clause catches every store failure
    - http_status is a hint for HTTP collaborators; this package serves no HTTP itself
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    RESOURCE_NOT_FOUND = "resource_not_found"
    INTEGRITY = "integrity"
    CONFLICT = "conflict"
    DATABASE = "database"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    table: str | None = None
    row_id: int | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class TodoStoreError(Exception):
    """Base exception for all todo-store errors."""

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
        """Convert to standardized error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "table": self.context.table,
                    "row_id": self.context.row_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class NotFoundError(TodoStoreError):
    """Lookup by identifier matched no row."""
    def __init__(
        self, resource_type: str, resource_id: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ReferencedRowError(TodoStoreError):
    """Delete refused: todo_labels rows still reference the row."""
    def __init__(
        self,
        resource_type: str,
        resource_id: int,
        reference_count: int,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' is referenced by "
            f"{reference_count} association(s)",
            "ROW_IS_REFERENCED", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.reference_count = reference_count


class ReferentialIntegrityError(TodoStoreError):
    """A todo_labels row referenced a missing todo or label at commit time."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Referential integrity violated: {message}",
            "REFERENTIAL_INTEGRITY_VIOLATION", ErrorCategory.INTEGRITY,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TodoStoreError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class StorageUnavailableError(TodoStoreError):
    """Connection or transport failure to the underlying store."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage unavailable: {message}",
            "STORAGE_UNAVAILABLE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
