"""Root conftest - shared test configuration and schema fixtures."""

import os

import pytest

# Ensure tests never pick up a developer's .env or real database
os.environ.setdefault("SIMPLEDB_DATABASE_URL", "sqlite+aiosqlite:///test.db")
os.environ.setdefault("SIMPLEDB_LOG_FORMAT", "text")

from simpledb.core.domain_types import ColumnType  # noqa: E402
from simpledb.core.schema_types import Column, Table  # noqa: E402
from simpledb.infrastructure.storage import StorageAdapter  # noqa: E402


@pytest.fixture
def items_table():
    return Table("items", (
        Column("name", ColumnType.TEXT, nullable=False),
        Column("qty", ColumnType.INTEGER),
    ))


@pytest.fixture
def categories_table():
    return Table("categories", (Column("title", ColumnType.TEXT),))


@pytest.fixture
def tables(items_table, categories_table):
    return [items_table, categories_table]


@pytest.fixture
async def storage(tmp_path):
    """Real SQLAlchemy adapter on a throwaway SQLite file."""
    adapter = StorageAdapter(f"sqlite+aiosqlite:///{tmp_path / 'store.db'}")
    yield adapter
    await adapter.dispose()
