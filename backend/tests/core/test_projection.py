"""Projection Validator - column membership and sort-term checks.

Tests cover:
    - Empty/absent projection always passes
    - _id is always a valid column
    - Offending names listed in request order without duplicates
    - order_by accepts 'col [ASC|DESC]' terms over known columns, as SortTerms
"""

import pytest

from simpledb.core.domain_types import ColumnType
from simpledb.core.errors import InvalidProjectionError
from simpledb.core.projection import (
    SortTerm, normalize_order_by, unknown_columns, validate_projection,
)
from simpledb.core.schema_types import Column, Table


@pytest.mark.parametrize("requested", [None, [], ()])
def test_empty_projection_passes_for_every_table(tables, requested):
    for table in tables:
        validate_projection(requested, table)


def test_empty_projection_passes_for_table_without_columns():
    validate_projection(None, Table("bare"))


def test_known_columns_pass(items_table):
    validate_projection(["name", "qty", "_id"], items_table)


def test_unknown_column_raises_with_names(items_table):
    with pytest.raises(InvalidProjectionError) as exc_info:
        validate_projection(["name", "bogus", "other", "bogus"], items_table)
    assert exc_info.value.names == ["bogus", "other"]
    assert exc_info.value.table == "items"
    assert exc_info.value.http_status == 400


def test_column_from_other_table_is_unknown(items_table):
    assert unknown_columns(["title"], items_table) == ["title"]


def test_validate_does_not_mutate_request(items_table):
    requested = ["name", "bogus"]
    with pytest.raises(InvalidProjectionError):
        validate_projection(requested, items_table)
    assert requested == ["name", "bogus"]


def test_order_by_none_or_blank(items_table):
    assert normalize_order_by(None, items_table) is None
    assert normalize_order_by("  ", items_table) is None


def test_order_by_normalizes_terms(items_table):
    assert normalize_order_by("qty desc,  name", items_table) == [
        SortTerm("qty", descending=True), SortTerm("name"),
    ]
    assert normalize_order_by("_id ASC", items_table) == [SortTerm("_id")]


@pytest.mark.parametrize("order_by", [
    "bogus", "qty sideways", "name; DROP TABLE items", "qty DESC LIMIT", "name,",
])
def test_order_by_rejects_unknown_terms(items_table, order_by):
    with pytest.raises(InvalidProjectionError):
        normalize_order_by(order_by, items_table)


def test_order_by_accepts_keyword_named_column():
    table = Table("things", (Column("order", ColumnType.INTEGER),))
    assert normalize_order_by("order DESC", table) == [SortTerm("order", descending=True)]
