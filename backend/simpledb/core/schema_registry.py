"""Schema Registry - holds the fixed table list and creates it in storage.

Invariants:
    - register() runs once per registry; the table tuple never changes afterward
    - No two tables share a name (DuplicateTableError)
    - create_all() reports failure through its boolean result, never by raising
    - A failed create_all() is not rolled back: tables already created remain

Design Decisions:
    - Registry owns the Schema value object, not a storage handle
      (storage is passed to create_all, keeping core free of IO state)
    - create_all() keeps going after a failure so every broken table is logged
"""

import logging
from typing import Iterable

from simpledb.core.errors import (
    DuplicateTableError, SchemaFrozenError, StorageInitError, UnknownTableError,
)
from simpledb.core.schema_types import Schema, Table
from simpledb.core.storage_protocols import StorageBackend

logger = logging.getLogger(__name__)


class SchemaRegistry:
    """Answers table/column questions for one registered schema."""

    def __init__(self, name: str, version: int):
        self._name = name
        self._version = version
        self._schema: Schema | None = None
        self._by_name: dict[str, Table] = {}

    @property
    def schema(self) -> Schema:
        if self._schema is None:
            return Schema(self._name, self._version, ())
        return self._schema

    @property
    def tables(self) -> tuple[Table, ...]:
        return self.schema.tables

    def register(self, tables: Iterable[Table]) -> Schema:
        """Fix the table list. Raises DuplicateTableError on a repeated name."""
        if self._schema is not None:
            raise SchemaFrozenError()
        tables = tuple(tables)
        by_name: dict[str, Table] = {}
        for table in tables:
            if table.name in by_name:
                raise DuplicateTableError(table.name)
            by_name[table.name] = table
        self._schema = Schema(self._name, self._version, tables)
        self._by_name = by_name
        logger.info(
            "Registered schema %s v%d with %d table(s)",
            self._name, self._version, len(tables),
        )
        return self._schema

    def table_by_name(self, name: str) -> Table:
        table = self._by_name.get(name)
        if table is None:
            raise UnknownTableError(name)
        return table

    def has_column(self, table_name: str, column: str) -> bool:
        return self.table_by_name(table_name).has_column(column)

    async def create_all(self, storage: StorageBackend) -> bool:
        """Create every registered table. True only if all creations succeed."""
        ok = True
        for table in self.tables:
            try:
                await storage.create_table(table.name, table.columns)
            except StorageInitError as e:
                ok = False
                logger.error(
                    f"Table creation failed: {e.message}",
                    extra={"table": table.name, "error_code": e.code},
                )
        if ok:
            logger.info("Created %d table(s) in storage", len(self.tables))
        return ok
