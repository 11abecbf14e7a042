"""Schema Definition - Pydantic model for the JSON schema file loaded at startup.

Invariants:
    - Column types restricted to ColumnType values
    - Names validated again by core Table/Column (identifier rules live in one place)
    - to_tables() preserves file order: registration index drives ResourceCodes

Design Decisions:
    - JSON over Python config: the schema ships with the deployment, not the code
"""

from pathlib import Path

from pydantic import BaseModel, Field

from simpledb.core.domain_types import ColumnType
from simpledb.core.schema_types import Column, Table


class ColumnDefinition(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    type: ColumnType = ColumnType.TEXT
    nullable: bool = True


class TableDefinition(BaseModel):
    name: str = Field(min_length=1, max_length=64)
    columns: list[ColumnDefinition] = Field(default_factory=list)


class SchemaDefinition(BaseModel):
    """Top-level schema file: {"tables": [{"name": ..., "columns": [...]}]}."""
    tables: list[TableDefinition] = Field(default_factory=list)

    def to_tables(self) -> list[Table]:
        return [
            Table(
                t.name,
                tuple(Column(c.name, c.type, c.nullable) for c in t.columns),
            )
            for t in self.tables
        ]


def load_schema_file(path: str | Path) -> SchemaDefinition:
    """Read and validate a schema JSON file."""
    return SchemaDefinition.model_validate_json(
        Path(path).read_text(encoding="utf-8"),
    )
