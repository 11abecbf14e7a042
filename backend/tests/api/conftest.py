"""API test fixtures - FastAPI test client bound to a SQLite-backed provider.

Invariants:
    - Every test gets a fresh SQLite file and a ready provider
    - get_provider dependency overridden; app.state.provider set for health probes
    - Lifespan does not run under ASGITransport: nothing reads schema.json here
"""

import pytest
from httpx import ASGITransport, AsyncClient

from simpledb.api.dependencies import get_provider
from simpledb.infrastructure.notifications import ChangeNotifier
from simpledb.main import app
from simpledb.services.provider import init_provider

PROVIDER = "test.provider"


@pytest.fixture
async def provider(tables, storage):
    provider = init_provider(
        PROVIDER, "testdb", 1, tables, storage=storage, notifier=ChangeNotifier(),
    )
    assert await provider.on_create()
    return provider


@pytest.fixture
async def client(provider):
    """FastAPI test client with the provider dependency overridden."""
    app.dependency_overrides[get_provider] = lambda: provider
    original = getattr(app.state, "provider", None)
    app.state.provider = provider

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.provider = original
