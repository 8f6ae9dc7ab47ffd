"""Concurrent add_transfer calls against a file-backed SQLite database.

Every ledger call opens its own session on its own connection (NullPool),
so the increments and latch claims race through real crud statements.
"""

import asyncio
from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
import pytest_asyncio
from sqlalchemy import event
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from transferquota.domains.notifications.fakes.dispatcher import FakeNotificationDispatcher
from transferquota.domains.quota.ledger import TransferQuotaLedger
from transferquota.domains.quota.repository import QuotaRepository, ThresholdSettingsRepository
from transferquota.models import Base

MIB = 1024**2
WARNING = "warning_threshold_reached"


@pytest_asyncio.fixture
async def file_session_factory(tmp_path):
    """Session factory over a database file, one connection per session."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'quota.db'}",
        poolclass=NullPool,
        connect_args={"timeout": 30},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, autoflush=False, expire_on_commit=False)

    @asynccontextmanager
    async def _db_context():
        async with factory() as session:
            yield session

    with patch("transferquota.db.session.get_db_context", _db_context):
        yield factory
    await engine.dispose()


@pytest.mark.usefixtures("file_session_factory")
class TestConcurrentIncrements:
    @pytest.mark.asyncio
    async def test_no_lost_updates_and_one_warning(self):
        dispatcher = FakeNotificationDispatcher()
        ledger = TransferQuotaLedger(
            quota_repo=QuotaRepository(),
            settings_repo=ThresholdSettingsRepository(),
            dispatcher=dispatcher,
        )
        calls = 50
        # 50 of 60 MiB is 83%: past warning, short of critical
        assert await ledger.set_quota("alice", 60 * MIB)

        results = await asyncio.gather(
            *(ledger.add_transfer("alice", MIB) for _ in range(calls))
        )

        assert all(results)
        record = await ledger.get_quota("alice")
        assert record.current_usage_bytes == calls * MIB
        assert record.warning_latch is True
        assert record.critical_latch is False
        assert dispatcher.subjects_for("alice") == [WARNING]
