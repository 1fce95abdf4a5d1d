import fakeredis
import httpx
import pytest
import pytest_asyncio

from task_service.main import create_app
from task_service.store import TaskStore

from .fakes import BrokenRedis, TickingClock


@pytest.fixture()
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture()
def redis_server() -> fakeredis.FakeServer:
    # One server per test keeps data isolated.
    return fakeredis.FakeServer()


@pytest_asyncio.fixture()
async def redis_client(redis_server):
    client = fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True)
    yield client
    await client.aclose()


@pytest.fixture()
def store(redis_client) -> TaskStore:
    return TaskStore(redis_client)


@pytest_asyncio.fixture()
async def client(store, clock):
    app = create_app(store=store, clock=clock)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest_asyncio.fixture()
async def broken_client(clock):
    app = create_app(store=TaskStore(BrokenRedis()), clock=clock)
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest_asyncio.fixture()
async def raw_redis_client(redis_server):
    # Same data as redis_client, but replies stay bytes.
    client = fakeredis.FakeAsyncRedis(server=redis_server)
    yield client
    await client.aclose()
