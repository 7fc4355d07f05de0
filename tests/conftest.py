import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["LOG_FILE"] = ""
os.environ["SECRET_KEY"] = "dailyflip-test-secret-key-0123456789abcdef"

from dataclasses import dataclass

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from dailyflip.api.dependencies import get_async_db
from dailyflip.core.auth import create_access_token
from dailyflip.database import Base
from dailyflip.main import app
from dailyflip.models.users import ROLE_ADMIN, ROLE_MEMBER
from dailyflip.services.users import UserService


@dataclass
class Account:
    id: int
    name: str
    email: str
    headers: dict


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
async def client(session_maker):
    async def override_get_async_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_db] = override_get_async_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_account(session_maker):
    async def _make(name: str, role: str = ROLE_MEMBER) -> Account:
        email = f"{name.lower()}@example.com"
        async with session_maker() as session:
            user = await UserService(session).register(name, email, "password123", role=role)
        token = create_access_token(data={"sub": email, "id": user.id})
        return Account(id=user.id, name=name, email=email, headers={"Authorization": f"Bearer {token}"})
    return _make


@pytest.fixture
async def alice(make_account):
    return await make_account("Alice")


@pytest.fixture
async def bob(make_account):
    return await make_account("Bob")


@pytest.fixture
async def carol(make_account):
    return await make_account("Carol")


@pytest.fixture
async def admin(make_account):
    return await make_account("Admin", role=ROLE_ADMIN)
