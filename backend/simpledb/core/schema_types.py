"""Schema Types - immutable Table, Column and Schema definitions.

Invariants:
    - Table and column names are SQL identifiers ([A-Za-z_][A-Za-z0-9_]*)
    - No column name repeats within a table
    - _id is implicit: always present, always first, never declared by callers
    - Schema.version is a positive integer

Design Decisions:
    - Frozen dataclasses with tuple fields: safe to share across concurrent requests
    - Validation in __post_init__: an invalid Table can never be constructed
"""

import re
from dataclasses import dataclass, field

from simpledb.core.domain_types import ColumnType, ID_COLUMN
from simpledb.core.errors import InvalidSchemaError

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def check_identifier(name: str, kind: str) -> None:
    """Raise InvalidSchemaError unless name is a plain SQL identifier."""
    if not isinstance(name, str) or not _IDENTIFIER.match(name):
        raise InvalidSchemaError(f"Invalid {kind} name: {name!r}")


@dataclass(frozen=True)
class Column:
    """A named, typed column belonging to one table."""
    name: str
    type: ColumnType = ColumnType.TEXT
    nullable: bool = True

    def __post_init__(self):
        check_identifier(self.name, "column")
        # accept plain strings ("integer") from config files
        object.__setattr__(self, "type", ColumnType(self.type))


@dataclass(frozen=True)
class Table:
    """A named relational entity; the _id identity column is implicit."""
    name: str
    columns: tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self):
        check_identifier(self.name, "table")
        object.__setattr__(self, "columns", tuple(self.columns))
        seen: set[str] = set()
        for column in self.columns:
            if column.name == ID_COLUMN:
                raise InvalidSchemaError(
                    f"Table '{self.name}' declares {ID_COLUMN}; it is added automatically",
                )
            if column.name in seen:
                raise InvalidSchemaError(
                    f"Column '{column.name}' repeats in table '{self.name}'",
                )
            seen.add(column.name)

    def all_columns(self) -> tuple[str, ...]:
        """Column names including the implicit identity column."""
        return (ID_COLUMN, *(c.name for c in self.columns))

    def has_column(self, name: str) -> bool:
        return name == ID_COLUMN or any(c.name == name for c in self.columns)


@dataclass(frozen=True)
class Schema:
    """The full, fixed set of tables for one storage instance."""
    name: str
    version: int
    tables: tuple[Table, ...]

    def __post_init__(self):
        if not self.name:
            raise InvalidSchemaError("Schema name cannot be empty")
        if self.version < 1:
            raise InvalidSchemaError(
                f"Schema version must be positive, got {self.version}",
            )
        object.__setattr__(self, "tables", tuple(self.tables))
