"""Storage Adapter - SQLAlchemy async facade for filtered table operations.

Invariants:
    - Every statement runs in its own transaction (engine.begin): atomic in isolation
    - Filters arrive with positional '?' placeholders and are always bound, never formatted
    - All SQLAlchemy exceptions mapped to the StorageError family (core/errors.py)
    - Statement errors caused by caller filter text map to 400, connection errors to 503
    - ORDER BY built from table column objects: keyword-named columns are quoted
    - Insert failures surface as InsertError; table creation failures as StorageInitError
    - Every table gets '_id INTEGER PRIMARY KEY AUTOINCREMENT' first

Design Decisions:
    - SQLAlchemy Core tables built at runtime from the registered schema: no ORM
      models exist because tables are not known until init
    - Pool sizing only applied to server databases; SQLite uses SQLAlchemy's default pool
    - pool_pre_ping for stale connection detection (same as the session manager it replaces)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Sequence

import sqlalchemy as sa
from sqlalchemy import text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, ProgrammingError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine

from simpledb.core.domain_types import ColumnType, ID_COLUMN, Row
from simpledb.core.errors import InsertError, StorageError, StorageInitError
from simpledb.core.filters import bind_positional
from simpledb.core.projection import SortTerm
from simpledb.core.schema_types import Column

logger = logging.getLogger(__name__)

_SQL_TYPES = {
    ColumnType.TEXT: sa.Text,
    ColumnType.INTEGER: sa.Integer,
    ColumnType.REAL: sa.Float,
    ColumnType.BOOLEAN: sa.Boolean,
    ColumnType.BLOB: sa.LargeBinary,
}


class StorageAdapter:
    """Creates tables and runs filtered select/insert/update/delete."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._metadata = sa.MetaData()
        self._tables: dict[str, sa.Table] = {}

    # ─── DDL ─────────────────────────────────────────────────────

    async def create_table(self, name: str, columns: Sequence[Column]) -> None:
        """Create the table if it does not exist yet."""
        # metadata keeps the definition across a failed attempt, so retries reuse it
        table = self._metadata.tables.get(name)
        if table is None:
            table = sa.Table(
                name,
                self._metadata,
                sa.Column(ID_COLUMN, sa.Integer, primary_key=True, autoincrement=True),
                *(
                    sa.Column(c.name, _SQL_TYPES[c.type], nullable=c.nullable)
                    for c in columns
                ),
                sqlite_autoincrement=True,
            )
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(table.create, checkfirst=True)
        except SQLAlchemyError as e:
            logger.error(f"DB create_table error: {e}", extra={"table": name})
            raise StorageInitError(str(e.__class__.__name__), name) from e
        self._tables[name] = table

    # ─── DML ─────────────────────────────────────────────────────

    async def select(
        self,
        table: str,
        columns: Sequence[str] | None,
        where: str | None,
        args: Sequence[object],
        order_by: Sequence[SortTerm] | None,
    ) -> list[Row]:
        t = self._table(table, "select")
        if columns:
            stmt = sa.select(*(t.c[name] for name in columns))
        else:
            stmt = sa.select(t)
        clause = self._where(where, args)
        if clause is not None:
            stmt = stmt.where(clause)
        if order_by:
            stmt = stmt.order_by(*(
                t.c[term.column].desc() if term.descending else t.c[term.column].asc()
                for term in order_by
            ))
        async with self._transaction("select", table) as conn:
            result = await conn.execute(stmt)
            return [dict(row._mapping) for row in result]

    async def insert(self, table: str, row: Row) -> int:
        t = self._table(table, "insert")
        async with self._transaction("insert", table) as conn:
            result = await conn.execute(t.insert().values(**row))
            return int(result.inserted_primary_key[0])

    async def update(
        self, table: str, row: Row, where: str | None, args: Sequence[object],
    ) -> int:
        t = self._table(table, "update")
        stmt = t.update().values(**row)
        clause = self._where(where, args)
        if clause is not None:
            stmt = stmt.where(clause)
        async with self._transaction("update", table) as conn:
            result = await conn.execute(stmt)
            return result.rowcount

    async def delete(
        self, table: str, where: str | None, args: Sequence[object],
    ) -> int:
        t = self._table(table, "delete")
        stmt = t.delete()
        clause = self._where(where, args)
        if clause is not None:
            stmt = stmt.where(clause)
        async with self._transaction("delete", table) as conn:
            result = await conn.execute(stmt)
            return result.rowcount

    # ─── Lifecycle ───────────────────────────────────────────────

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()

    # ─── Helpers ─────────────────────────────────────────────────

    def _table(self, name: str, operation: str) -> sa.Table:
        table = self._tables.get(name)
        if table is None:
            raise StorageError(
                f"table '{name}' has not been created", operation, http_status=500,
            )
        return table

    @staticmethod
    def _where(where: str | None, args: Sequence[object]):
        clause, params = bind_positional(where, args)
        if clause is None:
            return None
        return text(clause).bindparams(**params)

    @asynccontextmanager
    async def _transaction(
        self, operation: str, table: str,
    ) -> AsyncGenerator[AsyncConnection, None]:
        """Run one statement in its own transaction, mapping driver errors."""
        try:
            async with self.engine.begin() as conn:
                yield conn
        except IntegrityError as e:
            logger.error(f"DB integrity error: {e}", extra={"table": table})
            raise self._failure(
                "Integrity constraint violated", operation, table, 409,
            ) from e
        except ProgrammingError as e:
            logger.warning(f"DB statement error: {e}", extra={"table": table})
            raise self._failure(
                "Malformed filter or sort expression", operation, table, 400,
            ) from e
        except OperationalError as e:
            # SQLite reports statement errors (syntax, unknown column) as operational
            if _is_statement_error(e):
                logger.warning(f"DB statement error: {e}", extra={"table": table})
                raise self._failure(
                    "Malformed filter or sort expression", operation, table, 400,
                ) from e
            logger.error(f"DB operational error: {e}", extra={"table": table})
            raise self._failure(
                "Connection or operational error", operation, table, 503,
            ) from e
        except DBAPIError as e:
            logger.error(f"DB driver error: {e}", extra={"table": table})
            raise self._failure("Database driver error", operation, table, 503) from e
        except SQLAlchemyError as e:
            # compile-time failures: unknown columns, bad values for a typed column
            logger.error(f"SQLAlchemy error: {e}", extra={"table": table})
            raise self._failure(
                "Statement rejected for this table", operation, table, 400,
            ) from e
        except OverflowError as e:
            # raised by the driver while binding, outside SQLAlchemy's wrapping
            logger.warning(f"Bound value out of range: {e}", extra={"table": table})
            raise self._failure(
                "Bound value out of range for storage", operation, table, 400,
            ) from e

    @staticmethod
    def _failure(
        message: str, operation: str, table: str, http_status: int,
    ) -> StorageError:
        if operation == "insert":
            return InsertError(message, table)
        error = StorageError(message, operation, http_status=http_status)
        error.context.table = table
        return error


_STATEMENT_ERROR_MARKERS = (
    "syntax error", "no such column", "no such function", "unrecognized token",
    "incomplete input", "misuse of", "wrong number of arguments",
)


def _is_statement_error(error: OperationalError) -> bool:
    """True when the driver rejected the statement text, not the connection."""
    message = str(error.orig).lower()
    return any(marker in message for marker in _STATEMENT_ERROR_MARKERS)
