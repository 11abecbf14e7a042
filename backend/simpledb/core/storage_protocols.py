"""Boundary Protocols - contracts between core and the storage shell.

Invariants:
    - Core NEVER imports from infrastructure; dependency arrows point inward only
    - Filter expressions use positional '?' placeholders bound to args
    - Implementations provided by the shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, tests can pass plain fakes
    - Async in Protocol: implementations do IO
"""

from typing import Protocol, Sequence

from simpledb.core.domain_types import Row
from simpledb.core.projection import SortTerm
from simpledb.core.schema_types import Column


class StorageBackend(Protocol):
    """Contract for the relational store behind the router."""

    async def create_table(self, name: str, columns: Sequence[Column]) -> None: ...

    async def select(
        self,
        table: str,
        columns: Sequence[str] | None,
        where: str | None,
        args: Sequence[object],
        order_by: Sequence[SortTerm] | None,
    ) -> list[Row]: ...

    async def insert(self, table: str, row: Row) -> int: ...

    async def update(
        self, table: str, row: Row, where: str | None, args: Sequence[object],
    ) -> int: ...

    async def delete(
        self, table: str, where: str | None, args: Sequence[object],
    ) -> int: ...
