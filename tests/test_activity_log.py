"""Tests for the bounded activity log."""

import pytest

from expensedaddy.audit import DEFAULT_ACTIVITY_LIMIT, ActivityLogRecorder
from expensedaddy.models import ActivityEntryBuilder, ActivityType
from expensedaddy.services.storage import Collection, InMemoryStore, StorageIOError


class FailingStore(InMemoryStore):
    """Store whose writes always fail."""

    async def set(self, collection, value):
        raise StorageIOError("disk full")


class TestActivityLogRecorder:
    """Tests for ActivityLogRecorder."""

    def test_limit_must_be_positive(self, store):
        with pytest.raises(ValueError):
            ActivityLogRecorder(store, limit=0)

    @pytest.mark.asyncio
    async def test_record_prepends(self, activity):
        await activity.record(ActivityType.EXPENSE_ADDED, "first", 1)
        await activity.record(ActivityType.EXPENSE_ADDED, "second", 2)
        log = await activity.list()
        assert [item.description for item in log] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_log_is_bounded_to_most_recent(self, activity, store):
        total = DEFAULT_ACTIVITY_LIMIT + 5
        for i in range(total):
            await activity.record(ActivityType.EXPENSE_ADDED, f"entry {i}", i)
        log = await activity.list()
        assert len(log) == DEFAULT_ACTIVITY_LIMIT
        assert log[0].description == f"entry {total - 1}"
        assert log[-1].description == "entry 5"
        assert len(await store.get(Collection.ACTIVITY_LOG)) == DEFAULT_ACTIVITY_LIMIT

    @pytest.mark.asyncio
    async def test_custom_limit(self, store):
        recorder = ActivityLogRecorder(store, limit=3)
        for i in range(5):
            await recorder.record(ActivityType.GOAL_UPDATED, f"g{i}")
        assert [item.description for item in await recorder.list()] == ["g4", "g3", "g2"]

    @pytest.mark.asyncio
    async def test_record_entry_without_amount(self, activity, store):
        item = await activity.record_entry(ActivityEntryBuilder.card_added("Travel"))
        assert item.amount is None
        raw = await store.get(Collection.ACTIVITY_LOG)
        assert "amount" not in raw[0]
        assert raw[0]["type"] == "card_added"

    @pytest.mark.asyncio
    async def test_storage_failure_propagates(self):
        recorder = ActivityLogRecorder(FailingStore())
        with pytest.raises(StorageIOError):
            await recorder.record(ActivityType.BUDGET_UPDATED, "Budget updated to 10", 10)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
