"""Domain Types - rich types that replace bare primitives across the codebase.

Invariants:
    - ResourceCode wraps int: one value per (table, scope) pair
    - RowId wraps int: always a positive integer taken from an address
    - All valid column types and scopes encoded as Enums, no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import Any, NewType


# ─── Identity Types ──────────────────────────────────────────────

ResourceCode = NewType("ResourceCode", int)
RowId = NewType("RowId", int)

Row = dict[str, Any]

ID_COLUMN = "_id"


# ─── Enums ───────────────────────────────────────────────────────

class ColumnType(str, Enum):
    """Declared column types understood by the storage adapter."""
    TEXT = "text"
    INTEGER = "integer"
    REAL = "real"
    BOOLEAN = "boolean"
    BLOB = "blob"


class Scope(str, Enum):
    """Whether an address names a whole table or one row in it."""
    COLLECTION = "collection"
    ROW = "row"


class Operation(str, Enum):
    """CRUD verbs, used in change events and log records."""
    READ = "read"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
