"""
Pytest configuration and fixtures.

HTTP tests run the real app through httpx's ASGI transport with the store,
id generator and settings swapped via ``app.dependency_overrides``; every
test gets its own in-memory store.
"""
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient

from nextup.catalog import CatalogManager
from nextup.core.config import Settings, get_settings
from nextup.deps import get_id_generator, get_store
from nextup.identity import IdGenerator
from nextup.ledger import BookingLedger
from nextup.main import create_app
from nextup.registry import ShopRegistry
from nextup.storage import MemoryStore


class FixedClock:
    """Callable clock that tests can move by hand."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def settings():
    return Settings(STORAGE_BACKEND="memory", PUBLIC_BASE_URL="https://nextup.test")


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def ids():
    return IdGenerator()


@pytest.fixture
def clock():
    return FixedClock(datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def registry(store, ids):
    return ShopRegistry(store, ids)


@pytest.fixture
def catalog(store, ids):
    return CatalogManager(store, ids)


@pytest.fixture
def ledger(store, ids, clock):
    return BookingLedger(store, ids, clock=clock)


@pytest.fixture
async def shop(registry):
    return await registry.create_shop("Gallari Barbershop", "owner@gallari.com", owner_name="Gio")


@pytest.fixture
async def other_shop(registry):
    return await registry.create_shop("Fade Factory", "boss@fadefactory.com")


@pytest.fixture
def app(settings, store, ids):
    application = create_app(settings)
    application.dependency_overrides[get_settings] = lambda: settings
    application.dependency_overrides[get_store] = lambda: store
    application.dependency_overrides[get_id_generator] = lambda: ids
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
