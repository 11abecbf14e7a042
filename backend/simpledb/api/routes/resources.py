"""Resource Routes - generic CRUD over every registered table.

Invariants:
    - One route per verb for ALL tables: '{address:path}' is 'table' or 'table/<id>'
    - Routes only translate HTTP <-> OperationRouter; no table logic here
    - Query-string filter args arrive as strings and are bound positionally

Design Decisions:
    - PATCH for updates: partial column sets are the normal case
    - POST returns 201 with both the relative address and the content URI
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, Query, status

from simpledb.api.dependencies import get_router
from simpledb.schemas.resource import (
    AffectedResponse, CreateResponse, ReadResponse, UpdateRequest,
)
from simpledb.services.operation_router import OperationRouter

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/resources", tags=["resources"])


@router.get("/{address:path}", response_model=ReadResponse)
async def read_resource(
    address: str,
    columns: list[str] | None = Query(None),
    where: str | None = Query(None, max_length=2000),
    args: list[str] = Query([]),
    order_by: str | None = Query(None, max_length=500),
    ops: OperationRouter = Depends(get_router),
):
    """Read a table or one row of it."""
    rows = await ops.read(address, columns, where, args, order_by)
    return ReadResponse(rows=rows, count=len(rows))


@router.post(
    "/{address:path}", response_model=CreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_resource(
    address: str,
    row: dict[str, Any] = Body(...),
    ops: OperationRouter = Depends(get_router),
):
    """Insert a row into a table; the new row's address is returned."""
    new_address = await ops.create(address, row)
    return CreateResponse(
        address=new_address, uri=ops.matcher.content_uri(new_address),
    )


@router.patch("/{address:path}", response_model=AffectedResponse)
async def update_resource(
    address: str,
    body: UpdateRequest,
    ops: OperationRouter = Depends(get_router),
):
    """Update matching rows. affected=0 means nothing matched."""
    affected = await ops.update(address, body.values, body.where, body.args)
    return AffectedResponse(affected=affected)


@router.delete("/{address:path}", response_model=AffectedResponse)
async def delete_resource(
    address: str,
    where: str | None = Query(None, max_length=2000),
    args: list[str] = Query([]),
    ops: OperationRouter = Depends(get_router),
):
    """Delete matching rows. Deleting a missing row returns affected=0."""
    affected = await ops.delete(address, where, args)
    return AffectedResponse(affected=affected)
