"""Shared test fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.ot_common.database import get_db_session


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints (lifespan not run)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def redis_mock() -> MagicMock:
    """Stand-in for redis.asyncio.Redis: empty cache, SET acknowledges."""
    redis = MagicMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    return redis


@pytest.fixture
def db_session() -> MagicMock:
    return MagicMock()


@pytest.fixture
def override_db(db_session: MagicMock):
    async def _session():
        yield db_session

    app.dependency_overrides[get_db_session] = _session
    yield db_session
    app.dependency_overrides.pop(get_db_session, None)
