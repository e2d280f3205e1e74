import os
import tempfile
import uuid

# Settings are read at import time, so point them at a throwaway database first
_DB_DIR = tempfile.mkdtemp(prefix="finance-api-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_DB_DIR, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key-for-finance-api"
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["DEFAULT_CURRENCY"] = "USD"

import httpx
import pytest
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from finance_api.api.deps import get_current_user
from finance_api.core.auth import User
from finance_api.core.database import AsyncSessionLocal, Base, engine, get_async_session
from finance_api.main import app


@pytest.fixture
async def db_setup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest.fixture
async def session(db_setup):
    async with AsyncSessionLocal() as db:
        yield db


@pytest.fixture
async def user(db_setup) -> User:
    async with AsyncSessionLocal() as db:
        db_user = User(
            id=uuid.uuid4(),
            email="saver@example.com",
            hashed_password="not-used-in-these-tests",
            is_active=True,
            is_superuser=False,
            is_verified=True,
            full_name="Sam Saver",
            currency="USD",
        )
        db.add(db_user)
        await db.commit()
    return db_user


@pytest.fixture
async def anon_client(db_setup):
    """Client without any auth override, for the real login flow."""
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def client(user):
    """Client authenticated as ``user``; the user is loaded in each request's own session."""

    async def _current_user(db: AsyncSession = Depends(get_async_session)) -> User:
        return await db.get(User, user.id)

    app.dependency_overrides[get_current_user] = _current_user
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def make_account(client):
    async def _make(name="Main checking", balance=1000.0, type="bank", currency=None):
        payload = {"name": name, "balance": balance, "type": type}
        if currency:
            payload["currency"] = currency
        resp = await client.post("/api/v1/accounts", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make
