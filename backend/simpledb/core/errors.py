"""Error Hierarchy - typed, categorized exceptions for every SimpleDB failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Addressing/projection errors are 400-level; storage errors are 500-level
    - to_response() produces the REST envelope used by the global handlers
    - Storage errors are raised by the storage adapter and never re-wrapped by the router

Design Decisions:
    - Single hierarchy with SimpleDbError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging
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
    ADDRESSING = "addressing"
    CONFIGURATION = "configuration"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    address: str | None = None
    table: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class SimpleDbError(Exception):
    """Base exception for all SimpleDB errors."""

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
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "address": self.context.address,
                    "table": self.context.table,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Addressing & Validation Errors (400-level) ─────────────────

class UnmatchedAddressError(SimpleDbError):
    """Address does not resolve to any registered resource."""
    def __init__(self, address: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.address = address
        super().__init__(
            f"Unknown address: {address}",
            "UNMATCHED_ADDRESS", ErrorCategory.ADDRESSING,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.address = address


class UnknownTableError(SimpleDbError):
    """Table name is not part of the registered schema."""
    def __init__(self, table: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table = table
        super().__init__(
            f"Table '{table}' is not registered",
            "UNKNOWN_TABLE", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.table = table


class InvalidProjectionError(SimpleDbError):
    """Requested columns are not part of the resolved table."""
    def __init__(
        self, table: str, names: list[str], context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.table = table
        super().__init__(
            f"Unknown columns for table '{table}': {', '.join(names)}",
            "INVALID_PROJECTION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.table = table
        self.names = names


class FilterArgumentError(SimpleDbError):
    """Filter placeholders and bound arguments disagree."""
    def __init__(
        self, placeholders: int, arguments: int, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Filter has {placeholders} placeholder(s) but {arguments} argument(s)",
            "FILTER_ARGUMENT_MISMATCH", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.placeholders = placeholders
        self.arguments = arguments


class UnsupportedOperationError(SimpleDbError):
    """Operation is not defined for the resolved resource scope."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "UNSUPPORTED_OPERATION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 405,
        )


# ─── Configuration Errors (registration time) ───────────────────

class DuplicateTableError(SimpleDbError):
    """Two registered tables share a name."""
    def __init__(self, table: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table = table
        super().__init__(
            f"Table '{table}' is registered more than once",
            "DUPLICATE_TABLE", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.table = table


class InvalidSchemaError(SimpleDbError):
    """Table or column definition cannot be registered."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_SCHEMA", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class SchemaFrozenError(SimpleDbError):
    """Registry already holds a schema; tables are fixed after init."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Schema is already registered and cannot change",
            "SCHEMA_FROZEN", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class ProviderNotReadyError(SimpleDbError):
    """CRUD attempted before storage was created successfully."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Storage is not ready; on_create() has not succeeded",
            "PROVIDER_NOT_READY", ErrorCategory.UNAVAILABLE,
            ErrorSeverity.CRITICAL, context, 503,
        )


# ─── Storage Errors (500-level) ─────────────────────────────────

class StorageError(SimpleDbError):
    """Storage statement failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        context: ErrorContext | None = None,
        http_status: int = 503,
        code: str = "DATABASE_ERROR",
        category: ErrorCategory = ErrorCategory.DATABASE,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            code, category, ErrorSeverity.CRITICAL, ctx, http_status,
        )
        self.operation = operation


class InsertError(StorageError):
    """Row violates the target table's constraints."""
    def __init__(self, message: str, table: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table = table
        super().__init__(
            message, "insert", ctx, 409, "INSERT_FAILED", ErrorCategory.CONFLICT,
        )
        self.table = table


class StorageInitError(StorageError):
    """A table could not be created."""
    def __init__(self, message: str, table: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.table = table
        super().__init__(
            message, "create_table", ctx, 503, "STORAGE_INIT_FAILED",
        )
        self.table = table
