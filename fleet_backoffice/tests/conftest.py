"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from fleet_backoffice.app.main import app
from fleet_backoffice.app.db.session import get_db, Base
from fleet_backoffice.app.core.jwt import create_access_token
from fleet_backoffice.app.core.redis_client import get_redis
from fleet_backoffice.app.services.alert_feed import alert_bell

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self.ttl = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        self.ttl[key] = ex
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}
            self.ttl = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture
def mock_redis():
    return MockRedis()


@pytest.fixture(autouse=True)
def apply_overrides(mock_redis):
    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    async def override_get_redis():
        return mock_redis

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_redis] = override_get_redis
    yield
    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    alert_bell.reset()

    yield

    alert_bell.reset()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def auth_headers():
    """Bearer token as issued by the auth provider."""
    token = create_access_token({"sub": "3f1c2a9e-operator", "email": "operator@fleet.test"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def vehicle_payload():
    def build(**overrides):
        data = {
            "plate": "ABC1D23",
            "make": "Volvo",
            "model": "FH 540",
            "year": 2022,
            "status": "Ativo",
            "odometer": 120000,
            "fuel_type": "Diesel",
            "next_maintenance": "2030-01-15",
            "location": "Campinas - SP",
            "fuel_level": 80,
        }
        data.update(overrides)
        return data
    return build


@pytest.fixture
def driver_payload():
    def build(**overrides):
        data = {
            "name": "João Silva",
            "email": "joao.silva@frota.com.br",
            "phone": "11987654321",
            "license_category": "E",
            "license_number": "01234567890",
            "license_expiry": "2031-06-30",
            "status": "Ativo",
        }
        data.update(overrides)
        return data
    return build


@pytest.fixture
async def create_vehicle(client, auth_headers, vehicle_payload):
    async def create(**overrides):
        response = await client.post("/v1/vehicles", json=vehicle_payload(**overrides), headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return create


@pytest.fixture
async def create_driver(client, auth_headers, driver_payload):
    async def create(**overrides):
        response = await client.post("/v1/drivers", json=driver_payload(**overrides), headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return create
