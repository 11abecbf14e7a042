"""Service test fixtures - providers over fake and real storage.

Invariants:
    - fake_provider never touches a database: calls are recorded on FakeStorage
    - sqlite_provider runs on a fresh SQLite file per test
    - Every provider collects change events in `events`
"""

import pytest

from simpledb.infrastructure.notifications import ChangeNotifier
from simpledb.services.provider import init_provider
from tests.services.fake_storage import FakeStorage

PROVIDER = "test.provider"


@pytest.fixture
def events():
    return []


@pytest.fixture
def notifier(events):
    notifier = ChangeNotifier()
    notifier.add_listener(events.append)
    return notifier


@pytest.fixture
def fake_storage():
    return FakeStorage()


@pytest.fixture
async def fake_provider(tables, fake_storage, notifier):
    provider = init_provider(
        PROVIDER, "testdb", 1, tables, storage=fake_storage, notifier=notifier,
    )
    assert await provider.on_create()
    fake_storage.calls.clear()
    return provider


@pytest.fixture
async def sqlite_provider(tables, storage, notifier):
    provider = init_provider(
        PROVIDER, "testdb", 1, tables, storage=storage, notifier=notifier,
    )
    assert await provider.on_create()
    return provider
