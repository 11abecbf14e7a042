"""Resource Routes - generic CRUD over HTTP.

Tests cover:
    - POST creates a row and returns 201 with address and URI
    - GET reads a collection or one row with projection, filter and order
    - PATCH/DELETE return affected counts (0 is a 200, not an error)
    - Domain errors map to their HTTP status and error code
    - Domain error logs carry the address and table that failed
"""

import logging

import pytest

PROVIDER = "test.provider"


async def _create(client, address="items", **row):
    res = await client.post(f"/api/v1/resources/{address}", json=row)
    assert res.status_code == 201, res.text
    return res.json()


async def test_create_returns_address_and_uri(client):
    body = await _create(client, name="Pen", qty=5)
    assert body == {
        "address": "items/1",
        "uri": f"content://{PROVIDER}/items/1",
    }


async def test_read_row_with_projection(client):
    await _create(client, name="Pen", qty=5)
    res = await client.get("/api/v1/resources/items/1", params={"columns": ["name"]})
    assert res.status_code == 200
    assert res.json() == {"rows": [{"name": "Pen"}], "count": 1}


async def test_read_collection_with_filter_and_order(client):
    for name, qty in [("a", 3), ("b", 1), ("c", 2)]:
        await _create(client, name=name, qty=qty)
    res = await client.get(
        "/api/v1/resources/items",
        params={"where": "qty >= ?", "args": ["2"], "order_by": "qty DESC"},
    )
    assert [r["name"] for r in res.json()["rows"]] == ["a", "c"]


async def test_read_unknown_projection_is_400(client):
    res = await client.get("/api/v1/resources/items", params={"columns": ["bogus"]})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_PROJECTION"


async def test_unmatched_address_is_404(client):
    res = await client.get("/api/v1/resources/nope/1")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "UNMATCHED_ADDRESS"


async def test_create_on_row_address_is_405(client):
    res = await client.post("/api/v1/resources/items/3", json={"name": "Pen"})
    assert res.status_code == 405
    assert res.json()["error"]["code"] == "UNSUPPORTED_OPERATION"


async def test_create_constraint_violation_is_409(client):
    res = await client.post("/api/v1/resources/items", json={"qty": 1})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "INSERT_FAILED"


async def test_update_row(client):
    await _create(client, name="Pen", qty=5)
    res = await client.patch("/api/v1/resources/items/1", json={"values": {"qty": 10}})
    assert res.json() == {"affected": 1}
    rows = (await client.get("/api/v1/resources/items/1")).json()["rows"]
    assert rows[0]["qty"] == 10


async def test_update_missing_row_returns_zero(client):
    res = await client.patch("/api/v1/resources/items/9", json={"values": {"qty": 1}})
    assert res.status_code == 200
    assert res.json() == {"affected": 0}


async def test_update_without_values_is_400(client):
    res = await client.patch("/api/v1/resources/items/1", json={"values": {}})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_delete_missing_row_returns_zero(client):
    res = await client.delete("/api/v1/resources/items/2")
    assert res.status_code == 200
    assert res.json() == {"affected": 0}


async def test_delete_collection_with_filter(client):
    for name in ("a", "b"):
        await _create(client, name=name)
    res = await client.delete(
        "/api/v1/resources/items", params={"where": "name = ?", "args": ["a"]},
    )
    assert res.json() == {"affected": 1}


async def test_filter_argument_mismatch_is_400(client):
    res = await client.delete("/api/v1/resources/items", params={"where": "name = ?"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "FILTER_ARGUMENT_MISMATCH"


@pytest.mark.parametrize("address", [
    "items/0", "items/1%20OR%201=1", "items/99999999999999999999",
])
async def test_invalid_row_ids_are_unmatched(client, address):
    res = await client.get(f"/api/v1/resources/{address}")
    assert res.status_code == 404


async def test_delete_oversized_row_id_is_404(client):
    res = await client.delete("/api/v1/resources/items/99999999999999999999")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "UNMATCHED_ADDRESS"


async def test_malformed_filter_is_400_not_503(client):
    res = await client.get(
        "/api/v1/resources/items", params={"where": "qty >= ? AND", "args": ["1"]},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "DATABASE_ERROR"


async def test_domain_error_log_carries_address_and_table(client, caplog):
    with caplog.at_level(logging.WARNING, logger="simpledb.api.error_handlers"):
        await client.get("/api/v1/resources/items", params={"columns": ["bogus"]})
    record = next(r for r in caplog.records if r.name == "simpledb.api.error_handlers")
    assert record.error_code == "INVALID_PROJECTION"
    assert record.address == "items"
    assert record.table == "items"
