"""Resource Schemas - request/response bodies for the generic resource routes.

Invariants:
    - Rows are free-form JSON objects; column checks happen in the router/storage
    - Filter args are positional and match '?' placeholders in `where`
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class UpdateRequest(BaseModel):
    """PATCH body: column values plus an optional filter."""
    values: dict[str, Any] = Field(min_length=1)
    where: str | None = Field(None, max_length=2000)
    args: list[Any] = Field(default_factory=list)

    @field_validator("where")
    @classmethod
    def strip_where(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class CreateResponse(BaseModel):
    address: str
    uri: str


class ReadResponse(BaseModel):
    rows: list[dict[str, Any]]
    count: int


class AffectedResponse(BaseModel):
    affected: int
