"""Test configuration and fixtures."""

import os
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

# Set test environment variables BEFORE importing the app
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["DATABASE_PROVIDER"] = "postgresql"
os.environ["ENVIRONMENT"] = "test"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret-for-testing-only"
os.environ["ENABLE_AUTH"] = "true"

from learning_tracker.models.base import Base  # noqa: E402
from learning_tracker.tracking import FixedClock, SqlActivityStore  # noqa: E402


TEST_ASYNC_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def make_engine():
    return create_async_engine(
        TEST_ASYNC_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database with all tables created."""
    test_engine = make_engine()
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def store(session_factory) -> SqlActivityStore:
    return SqlActivityStore(session_factory)


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to midday UTC on 2024-01-10."""
    return FixedClock(datetime(2024, 1, 10, 12, 0, tzinfo=timezone.utc))


@pytest_asyncio.fixture
async def empty_engine():
    """In-memory database without tables; every statement against it fails."""
    test_engine = make_engine()
    yield test_engine
    await test_engine.dispose()
