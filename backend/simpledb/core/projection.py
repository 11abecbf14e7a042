"""Projection Validator - checks requested columns and sort terms against a table.

Invariants:
    - Empty or absent projection always passes (caller wants every column)
    - Every requested name must be in table.all_columns(), _id included
    - Offending names are reported in request order, without duplicates
    - Pure: never mutates the table or the request

Design Decisions:
    - Sort terms validated with the same rule and returned as (column, direction)
      pairs: storage orders by its own column objects, never by caller text
"""

from dataclasses import dataclass
from typing import Sequence

from simpledb.core.errors import InvalidProjectionError
from simpledb.core.schema_types import Table

_DIRECTIONS = ("ASC", "DESC")


def unknown_columns(requested: Sequence[str] | None, table: Table) -> list[str]:
    """Names in requested that the table does not have."""
    if not requested:
        return []
    available = set(table.all_columns())
    missing: list[str] = []
    for name in requested:
        if name not in available and name not in missing:
            missing.append(name)
    return missing


def validate_projection(requested: Sequence[str] | None, table: Table) -> None:
    """Raise InvalidProjectionError listing every unknown requested column."""
    missing = unknown_columns(requested, table)
    if missing:
        raise InvalidProjectionError(table.name, missing)


@dataclass(frozen=True)
class SortTerm:
    """One validated sort key: a known column and its direction."""
    column: str
    descending: bool = False


def normalize_order_by(order_by: str | None, table: Table) -> list[SortTerm] | None:
    """Parse 'col [ASC|DESC], ...' into SortTerms over the table's columns."""
    if order_by is None or not order_by.strip():
        return None
    terms: list[SortTerm] = []
    bad: list[str] = []
    for raw in order_by.split(","):
        parts = raw.split()
        if not parts or len(parts) > 2:
            bad.append(raw.strip())
            continue
        column = parts[0]
        direction = parts[1].upper() if len(parts) == 2 else "ASC"
        if not table.has_column(column) or direction not in _DIRECTIONS:
            bad.append(raw.strip())
            continue
        terms.append(SortTerm(column, descending=direction == "DESC"))
    if bad:
        raise InvalidProjectionError(table.name, bad)
    return terms
