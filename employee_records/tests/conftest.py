# tests/conftest.py
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from employee_records.database import EmployeeStore
from employee_records.main import create_app
from employee_records.ui.api_client import EmployeeApiClient
from employee_records.ui.board import EmployeeBoard


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest_asyncio.fixture
async def store(tmp_path):
    store = EmployeeStore(f"sqlite+aiosqlite:///{tmp_path / 'employees.db'}", retry_delay=0)
    await store.initialize()
    yield store
    await store.dispose()


@pytest_asyncio.fixture
async def client(store):
    app = create_app(store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def api_client(store):
    """UI-side API client wired straight into the API app."""
    app = create_app(store=store)
    http = AsyncClient(transport=ASGITransport(app=app), base_url="http://test/api")
    api = EmployeeApiClient(http=http)
    yield api
    await api.aclose()


@pytest.fixture
def clock():
    return FakeClock()


@pytest_asyncio.fixture
async def board(api_client, clock):
    return EmployeeBoard(api_client, clock=clock)
