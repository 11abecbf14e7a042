"""Operation Router - generic CRUD dispatch from addresses to filtered storage calls.

Invariants:
    - Every call is resolve -> (validate) -> rewrite filter -> execute -> notify -> respond
    - Unmatched addresses fail before storage is touched
    - Storage only ever sees the table resolved from the address
    - Row-scoped calls bind the row id as a parameter: '_id = ?' AND (caller filter)
    - Notifications follow successful writes only; reads never notify
    - Storage errors propagate unchanged: no retries, no compensation, no re-wrapping

Design Decisions:
    - One entry point per verb; table/scope come from the matcher's direct code map
    - Row creation only on collection addresses: identities are always storage-assigned
    - strict_projection=False keeps the lenient behavior (log and return all columns)
"""

import logging
from typing import Callable, Mapping, Sequence

from simpledb.core.address_matcher import AddressMatcher, ResolvedAddress
from simpledb.core.domain_types import ID_COLUMN, Operation, Row
from simpledb.core.errors import (
    InvalidProjectionError, ProviderNotReadyError, UnsupportedOperationError,
    ErrorContext,
)
from simpledb.core.filters import scope_filter
from simpledb.core.projection import normalize_order_by, validate_projection
from simpledb.core.schema_types import Table
from simpledb.core.storage_protocols import StorageBackend
from simpledb.infrastructure.notifications import ChangeNotifier

logger = logging.getLogger(__name__)


class OperationRouter:
    """Routes read/create/update/delete on an address to the resolved table."""

    def __init__(
        self,
        matcher: AddressMatcher,
        storage: StorageBackend,
        notifier: ChangeNotifier,
        strict_projection: bool = True,
        is_ready: Callable[[], bool] = lambda: True,
    ):
        self._matcher = matcher
        self._storage = storage
        self._notifier = notifier
        self._strict_projection = strict_projection
        self._is_ready = is_ready

    @property
    def matcher(self) -> AddressMatcher:
        return self._matcher

    async def read(
        self,
        address: str,
        columns: Sequence[str] | None = None,
        where: str | None = None,
        args: Sequence[object] = (),
        order_by: str | None = None,
    ) -> list[Row]:
        """Filtered select on the resolved table; row addresses add '_id = ?'."""
        resolved = self._resolve(address)
        table = resolved.target.table
        projection = self._projection(columns, table, address)
        order = normalize_order_by(order_by, table)
        clause, bound = scope_filter(where, args, resolved.row_id)
        rows = await self._storage.select(table.name, projection, clause, bound, order)
        logger.debug(
            "read %s -> %d row(s)", resolved.path, len(rows),
            extra={"resource_code": resolved.code, "table": table.name},
        )
        return rows

    async def create(self, address: str, row: Mapping[str, object]) -> str:
        """Insert into a collection. Returns the new row's address 'table/id'."""
        resolved = self._resolve(address)
        if resolved.is_row:
            raise UnsupportedOperationError(
                f"Rows are created on the collection address '{resolved.table_name}', "
                f"not on '{resolved.path}'",
                ErrorContext(address=address, operation=Operation.CREATE.value),
            )
        self._reject_identity(row, address, Operation.CREATE)
        new_id = await self._storage.insert(resolved.table_name, dict(row))
        self._notify(resolved, Operation.CREATE)
        return f"{resolved.table_name}/{new_id}"

    async def update(
        self,
        address: str,
        row: Mapping[str, object],
        where: str | None = None,
        args: Sequence[object] = (),
    ) -> int:
        """Filtered update. Returns affected count; 0 means no row matched."""
        resolved = self._resolve(address)
        if not row:
            raise UnsupportedOperationError(
                "Update requires at least one column value",
                ErrorContext(address=address, operation=Operation.UPDATE.value),
            )
        self._reject_identity(row, address, Operation.UPDATE)
        clause, bound = scope_filter(where, args, resolved.row_id)
        affected = await self._storage.update(
            resolved.table_name, dict(row), clause, bound,
        )
        self._notify(resolved, Operation.UPDATE, affected)
        return affected

    async def delete(
        self,
        address: str,
        where: str | None = None,
        args: Sequence[object] = (),
    ) -> int:
        """Filtered delete. Returns removed count; 0 is not an error."""
        resolved = self._resolve(address)
        clause, bound = scope_filter(where, args, resolved.row_id)
        affected = await self._storage.delete(resolved.table_name, clause, bound)
        self._notify(resolved, Operation.DELETE, affected)
        return affected

    # ─── Helpers ─────────────────────────────────────────────────

    def _resolve(self, address: str) -> ResolvedAddress:
        resolved = self._matcher.parse(address)
        if not self._is_ready():
            raise ProviderNotReadyError(ErrorContext(address=address))
        return resolved

    def _projection(
        self, columns: Sequence[str] | None, table: Table, address: str,
    ) -> list[str] | None:
        if not columns:
            return None
        try:
            validate_projection(columns, table)
        except InvalidProjectionError as e:
            if self._strict_projection:
                e.context.address = address
                raise
            logger.warning(
                f"Ignoring invalid projection: {e.message}",
                extra={"address": address, "error_code": e.code},
            )
            return None
        return list(columns)

    @staticmethod
    def _reject_identity(
        row: Mapping[str, object], address: str, operation: Operation,
    ) -> None:
        if ID_COLUMN in row:
            raise UnsupportedOperationError(
                f"{ID_COLUMN} is assigned by storage and cannot be written",
                ErrorContext(address=address, operation=operation.value),
            )

    def _notify(
        self, resolved: ResolvedAddress, operation: Operation, affected: int | None = None,
    ) -> None:
        uri = self._matcher.content_uri(resolved.path)
        self._notifier.notify(uri, operation)
        logger.info(
            f"{operation.value} {resolved.path}",
            extra={
                "address": uri, "operation": operation.value,
                "resource_code": resolved.code, "affected": affected,
            },
        )
