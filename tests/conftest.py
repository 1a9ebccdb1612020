"""Global test configuration and fixtures."""

import os

# Set test environment before the app reads its settings
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-flashdeck.db")
os.environ.setdefault("GEMINI_API_KEY", "test-gemini-key")
os.environ.setdefault("MODE", "test")

from typing import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.apis.deps import get_oracle
from app.core.db.base import Base, get_session
from app.core.db.schemas.auth import User
from main import create_app
from tests._helpers.fakes import ScriptedOracle, cards_json, register_and_login


@pytest.fixture
def oracle() -> ScriptedOracle:
    return ScriptedOracle(cards_json(3))


# Database fixtures
@pytest_asyncio.fixture
async def session_maker(tmp_path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncIterator[AsyncSession]:
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def user(session) -> User:
    u = User(email="owner@example.com", hashed_password="not-a-real-hash")
    session.add(u)
    await session.commit()
    return u


# HTTP fixtures
@pytest_asyncio.fixture
async def client(session_maker, oracle) -> AsyncIterator[AsyncClient]:
    app = create_app()

    async def _get_session() -> AsyncIterator[AsyncSession]:
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_oracle] = lambda: oracle

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as c:
        yield c


@pytest_asyncio.fixture
async def auth_headers(client) -> dict[str, str]:
    return await register_and_login(client)
