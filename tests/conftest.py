from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from pokeprice.api.dependencies import get_data_service
from pokeprice.cache.memory import MemoryCacheStore
from pokeprice.clients.pokedata import PokeDataClient
from pokeprice.db.database import get_session
from pokeprice.main import app
from pokeprice.models.card import Card
from pokeprice.models.db import Base
from pokeprice.models.mapping import MatchType, SetMappingEntry
from pokeprice.models.set import PokemonSet
from pokeprice.services.data_service import DataService
from pokeprice.services.set_mapping import SetMappingTable


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore(clock=clock)


@pytest.fixture
async def async_engine():
    """Create an in-memory SQLite engine for testing."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncSession:
    """Provide a database session for tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def sample_sets() -> list[PokemonSet]:
    return [
        PokemonSet(id=555, code="SSP", name="Surging Sparks", release_date="2024-11-08"),
        PokemonSet(id=557, code="PRE", name="Prismatic Evolutions", release_date="2025-01-17"),
        PokemonSet(id=None, code="CRZ", name="Crown Zenith", release_date="2023-01-20"),
        PokemonSet(id=None, code=None, name="Evolutions", release_date="2016-11-02"),
    ]


@pytest.fixture
def sample_cards() -> list[Card]:
    return [
        Card(id="73121", set_id=557, name="Eevee", card_number="074", set_code="PRE"),
        Card(id="73160", set_id=557, name="Umbreon ex", card_number="161", set_code="PRE"),
    ]


@pytest.fixture
def pokedata_client(sample_sets: list[PokemonSet], sample_cards: list[Card]) -> AsyncMock:
    """PokeData client double returning the sample data."""
    client = AsyncMock(spec=PokeDataClient)
    client.get_sets.return_value = list(sample_sets)
    client.get_cards_in_set.return_value = list(sample_cards)
    client.get_card_pricing.return_value = {"psa": {"10": 412.5}, "tcgPlayer": 38.2}
    return client


@pytest.fixture
def data_service(pokedata_client: AsyncMock, memory_cache: MemoryCacheStore, clock) -> DataService:
    """DataService over the memory cache, with Prismatic Evolutions mapped."""
    mapping = SetMappingTable(
        {"sv8pt5": SetMappingEntry("sv8pt5", "PRE", 557, MatchType.MANUAL)}
    )
    return DataService(
        client=pokedata_client,
        cache=memory_cache,
        mapping=mapping,
        fallback_loader=list,
        clock=clock,
    )


@pytest.fixture
async def api_client(data_service: DataService, session_factory):
    """Async test client wired to the test DataService and database."""

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_data_service] = lambda: data_service
    app.dependency_overrides[get_session] = override_get_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
