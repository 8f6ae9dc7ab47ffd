"""Fixtures for tests that run real SQL against an in-memory SQLite database."""

from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest_asyncio
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from transferquota.models import Base


@pytest_asyncio.fixture
async def session_factory():
    """Session factory over a fresh schema; one shared connection per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, autoflush=False, expire_on_commit=False)
    await engine.dispose()


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def sqlite_db_context(session_factory):
    """Patch get_db_context so services open sessions on the test database."""

    @asynccontextmanager
    async def _db_context():
        async with session_factory() as session:
            yield session

    with patch("transferquota.db.session.get_db_context", _db_context):
        yield session_factory
