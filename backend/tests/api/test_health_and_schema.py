"""Health, Schema and Change Stream routes.

Tests cover:
    - Liveness always 200; readiness 200 only for a ready provider
    - Schema route exposes tables, codes and URIs
    - Change stream formats events as SSE lines
"""

from simpledb.api.routes.changes import format_sse
from simpledb.core.domain_types import Operation
from simpledb.infrastructure.notifications import ChangeNotifier


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


async def test_readiness_ready(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["status"] == "ready"


async def test_readiness_not_ready(client, provider):
    provider.ready = False
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "storage_not_created"


async def test_crud_on_not_ready_provider_is_503(client, provider):
    provider.ready = False
    res = await client.get("/api/v1/resources/items")
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "PROVIDER_NOT_READY"


async def test_schema_route(client):
    res = await client.get("/api/v1/schema")
    assert res.status_code == 200
    body = res.json()
    assert [t["name"] for t in body["tables"]] == ["items", "categories"]
    assert body["tables"][1]["collection"]["uri"] == "content://test.provider/categories"


def test_format_sse_event():
    event = ChangeNotifier().notify("content://p/items", Operation.CREATE)
    line = format_sse(event.to_dict())
    assert line.startswith("event: change\ndata: {")
    assert '"uri": "content://p/items"' in line
    assert line.endswith("\n\n")
