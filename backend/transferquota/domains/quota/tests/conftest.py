"""Quota domain test fixtures and helpers."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

from transferquota.domains.notifications.fakes.dispatcher import FakeNotificationDispatcher
from transferquota.domains.quota.fakes.repository import (
    FakeQuotaRepository,
    FakeThresholdSettingsRepository,
)
from transferquota.domains.quota.ledger import TransferQuotaLedger

GIB = 1024**3
DEFAULT_ACCOUNT = "alice"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _fake_db_context():
    yield AsyncMock()


def _make_ledger(
    *,
    quota_repo=None,
    settings_repo=None,
    dispatcher=None,
    limit_bytes: int = 10 * GIB,
    usage_bytes: int = 0,
    seed: bool = True,
):
    """Build a TransferQuotaLedger wired to fakes. Optionally seeds DEFAULT_ACCOUNT."""
    qr = quota_repo or FakeQuotaRepository()
    sr = settings_repo or FakeThresholdSettingsRepository(warning=80, critical=95)
    dp = dispatcher or FakeNotificationDispatcher()

    if seed:
        qr.seed(DEFAULT_ACCOUNT, limit_bytes=limit_bytes, usage_bytes=usage_bytes)

    ledger = TransferQuotaLedger(quota_repo=qr, settings_repo=sr, dispatcher=dp)
    return ledger, qr, sr, dp
