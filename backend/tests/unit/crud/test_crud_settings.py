"""CRUD tests for quota settings and aggregation watermarks on SQLite."""

from datetime import timedelta

import pytest

from transferquota import crud
from transferquota.core.datetime_utils import utc_now_naive


class TestQuotaSetting:
    @pytest.mark.asyncio
    async def test_set_then_overwrite(self, db):
        assert await crud.quota_setting.get_value(db, key="warning_threshold") is None

        await crud.quota_setting.set_value(db, key="warning_threshold", value="80")
        await crud.quota_setting.set_value(db, key="warning_threshold", value="70")
        await db.commit()

        assert await crud.quota_setting.get_value(db, key="warning_threshold") == "70"

    @pytest.mark.asyncio
    async def test_get_values_omits_unset_keys(self, db):
        await crud.quota_setting.set_value(db, key="critical_threshold", value="95")

        values = await crud.quota_setting.get_values(
            db, keys=["warning_threshold", "critical_threshold"]
        )

        assert values == {"critical_threshold": "95"}


class TestAggregationWatermark:
    @pytest.mark.asyncio
    async def test_upsert_and_recent(self, db):
        assert await crud.aggregation_watermark.get_count(db, account_id="alice") == 0

        await crud.aggregation_watermark.set_count(db, account_id="alice", count=30)
        await crud.aggregation_watermark.set_count(db, account_id="alice", count=37)
        await db.commit()

        assert await crud.aggregation_watermark.get_count(db, account_id="alice") == 37

        recent = await crud.aggregation_watermark.get_updated_since(
            db, since=utc_now_naive() - timedelta(minutes=5)
        )
        assert [w.account_id for w in recent] == ["alice"]

        later = await crud.aggregation_watermark.get_updated_since(
            db, since=utc_now_naive() + timedelta(minutes=5)
        )
        assert later == []
