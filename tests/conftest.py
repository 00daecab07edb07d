import os
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# ------------------------------------------------------------------
# TEST SETTINGS
# Must be set BEFORE importing app.main so settings pick them up:
# no simulated latency, cheap bcrypt, throwaway sqlite file.
# ------------------------------------------------------------------
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_ccms.db"
os.environ["CLEARANCE_CHECK_DELAY_SECONDS"] = "0"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_ON_STARTUP"] = "false"

from app.main import app
from app.api.deps import get_repositories
from app.core.seeding_logic import build_seeded_store
from app.core.storage import storage
from app.services.certificate_service import certificate_cache


@pytest.fixture
def store():
    """Fresh seeded in-memory store per test."""
    return build_seeded_store()


@pytest.fixture
def repos(store):
    return store.repositories()


@pytest_asyncio.fixture
async def client(store):
    """
    Uses ASGITransport (httpx >= 0.27). Requests run against the in-memory
    repositories so no database is needed.
    """
    async def memory_repositories():
        return store.repositories()

    app.dependency_overrides[get_repositories] = memory_repositories
    certificate_cache.clear()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()
    storage.use_database()


async def login_headers(client, username: str, password: str) -> dict:
    res = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture
def login(client):
    async def _login(username: str, password: str) -> dict:
        return await login_headers(client, username, password)
    return _login


@pytest_asyncio.fixture
async def student_headers(client):
    return await login_headers(client, "abebe", "abebe123")


@pytest_asyncio.fixture
async def official_headers(client):
    return await login_headers(client, "library", "library123")


@pytest_asyncio.fixture
async def admin_headers(client):
    return await login_headers(client, "admin", "admin123")
