"""Address Matcher - maps resource addresses to ResourceCodes and back to targets.

Invariants:
    - Two patterns per table: 'name' (collection) and 'name/#' (row)
    - '#' matches a positive integer only ([1-9][0-9]*), at most MAX_ROW_ID
    - Codes are injective over (table index, scope): collection = 2i+1, row = 2i+2
    - Row pattern is tried before the collection pattern ('items/3' never hits 'items')
    - Full URIs must carry the configured scheme and provider authority
    - Read-only after construction: safe for concurrent lookups

Design Decisions:
    - Direct dict from code to ResourceTarget: no scan over all codes per call
    - Odd/even interleaving instead of powers of ten: no overflow, no collisions
      for any number of tables
"""

import re
from dataclasses import dataclass
from urllib.parse import urlsplit

from simpledb.core.domain_types import ResourceCode, RowId, Scope
from simpledb.core.errors import UnmatchedAddressError
from simpledb.core.schema_types import Table

_ROW_ID = re.compile(r"^[1-9][0-9]*$")
# largest id a signed 64-bit INTEGER column can hold
MAX_ROW_ID = 2**63 - 1


@dataclass(frozen=True)
class ResourceTarget:
    """The (table, scope) pair a ResourceCode stands for."""
    table: Table
    scope: Scope


@dataclass(frozen=True)
class ResolvedAddress:
    """One parsed address: its code, target and row id (row scope only)."""
    code: ResourceCode
    target: ResourceTarget
    path: str
    row_id: RowId | None = None

    @property
    def table_name(self) -> str:
        return self.target.table.name

    @property
    def is_row(self) -> bool:
        return self.target.scope is Scope.ROW


def _row_id(raw: str) -> RowId | None:
    if not _ROW_ID.match(raw):
        return None
    value = int(raw)
    return RowId(value) if value <= MAX_ROW_ID else None


def derive_codes(index: int) -> tuple[ResourceCode, ResourceCode]:
    """Collection and row codes for the table registered at index."""
    return ResourceCode(2 * index + 1), ResourceCode(2 * index + 2)


class AddressMatcher:
    """Resolves 'table' and 'table/<id>' addresses for one provider."""

    def __init__(
        self, tables: tuple[Table, ...], provider_name: str, scheme: str = "content",
    ):
        self._provider_name = provider_name
        self._scheme = scheme
        self._collection_codes: dict[str, ResourceCode] = {}
        self._row_codes: dict[str, ResourceCode] = {}
        self._targets: dict[ResourceCode, ResourceTarget] = {}
        for index, table in enumerate(tables):
            collection, row = derive_codes(index)
            self._collection_codes[table.name] = collection
            self._row_codes[table.name] = row
            self._targets[collection] = ResourceTarget(table, Scope.COLLECTION)
            self._targets[row] = ResourceTarget(table, Scope.ROW)

    @property
    def provider_name(self) -> str:
        return self._provider_name

    @property
    def scheme(self) -> str:
        return self._scheme

    def codes(self) -> dict[ResourceCode, ResourceTarget]:
        return dict(self._targets)

    def code_for(self, table_name: str, scope: Scope) -> ResourceCode:
        codes = self._row_codes if scope is Scope.ROW else self._collection_codes
        if table_name not in codes:
            raise UnmatchedAddressError(table_name)
        return codes[table_name]

    def resolve(self, address: str) -> ResourceCode:
        return self.parse(address).code

    def target(self, code: ResourceCode) -> ResourceTarget:
        target = self._targets.get(code)
        if target is None:
            raise UnmatchedAddressError(str(code))
        return target

    def parse(self, address: str) -> ResolvedAddress:
        """Resolve an address into code, target and optional row id."""
        segments = self._segments(address)
        if segments is None:
            raise UnmatchedAddressError(address)

        if len(segments) == 2:
            name, raw_id = segments
            row_id = _row_id(raw_id)
            if name in self._row_codes and row_id is not None:
                code = self._row_codes[name]
                return ResolvedAddress(
                    code, self._targets[code], f"{name}/{raw_id}", row_id,
                )
        elif len(segments) == 1:
            name = segments[0]
            if name in self._collection_codes:
                code = self._collection_codes[name]
                return ResolvedAddress(code, self._targets[code], name)
        raise UnmatchedAddressError(address)

    def content_uri(self, path: str) -> str:
        """'items' or 'items/3' -> 'content://<provider>/items[/3]'."""
        return f"{self._scheme}://{self._provider_name}/{path.strip('/')}"

    def _segments(self, address: str) -> list[str] | None:
        if not isinstance(address, str):
            return None
        if "://" in address:
            parts = urlsplit(address)
            if parts.scheme != self._scheme or parts.netloc != self._provider_name:
                return None
            path = parts.path
        else:
            path = address
        path = path.strip("/")
        if not path:
            return None
        return path.split("/")
