"""Tests for the key-value store implementations."""

import json

import pytest

from expensedaddy.services.storage import (
    Collection,
    CorruptDataError,
    InMemoryStore,
    JsonFileStore,
    StorageIOError,
)


class TestInMemoryStore:
    """Tests for InMemoryStore."""

    @pytest.mark.asyncio
    async def test_missing_collection_returns_default(self, store):
        assert await store.get(Collection.EXPENSES, []) == []
        assert await store.get(Collection.USER_PROFILE) is None

    @pytest.mark.asyncio
    async def test_default_is_a_copy(self, store):
        default = []
        value = await store.get(Collection.EXPENSES, default)
        value.append("x")
        assert default == []

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, store):
        await store.set(Collection.SHOPPING_LIST, ["milk"])
        value = await store.get(Collection.SHOPPING_LIST, [])
        value.append("eggs")
        assert await store.get(Collection.SHOPPING_LIST, []) == ["milk"]

    @pytest.mark.asyncio
    async def test_keys_use_prefix(self, store):
        await store.set(Collection.LOANS, [])
        await store.set(Collection.FIXED_EXPENSES, [])
        assert store.keys() == ["@budgetflow_fixed_expenses", "@budgetflow_loans"]

    @pytest.mark.asyncio
    async def test_remove(self, store):
        await store.set(Collection.LOANS, [{"id": "1"}])
        await store.remove(Collection.LOANS)
        await store.remove(Collection.LOANS)
        assert await store.get(Collection.LOANS, []) == []

    def test_lock_is_per_collection(self):
        store = InMemoryStore()
        assert store.lock(Collection.EXPENSES) is store.lock(Collection.EXPENSES)
        assert store.lock(Collection.EXPENSES) is not store.lock(Collection.LOANS)


class TestJsonFileStore:
    """Tests for JsonFileStore."""

    @pytest.mark.asyncio
    async def test_missing_file_returns_default(self, file_store):
        assert await file_store.get(Collection.EXPENSES, []) == []

    @pytest.mark.asyncio
    async def test_round_trip(self, file_store):
        value = [{"id": "1", "name": "Café", "amount": 4.5}]
        await file_store.set(Collection.EXPENSES, value)
        assert await file_store.get(Collection.EXPENSES, []) == value

    @pytest.mark.asyncio
    async def test_one_file_per_collection(self, file_store):
        await file_store.set(Collection.SHOPPING_LIST, ["milk"])
        path = file_store.data_dir / "@budgetflow_shopping_list.json"
        assert path.exists()
        assert json.loads(path.read_text(encoding="utf-8")) == ["milk"]

    @pytest.mark.asyncio
    async def test_no_temp_files_left_behind(self, file_store):
        await file_store.set(Collection.EXPENSES, [])
        await file_store.set(Collection.EXPENSES, [{"id": "1"}])
        names = [p.name for p in file_store.data_dir.iterdir()]
        assert names == ["@budgetflow_expenses.json"]

    @pytest.mark.asyncio
    async def test_empty_file_returns_default(self, file_store):
        file_store.data_dir.mkdir(parents=True)
        file_store.path_for(Collection.LOANS).write_text("", encoding="utf-8")
        assert await file_store.get(Collection.LOANS, []) == []

    @pytest.mark.asyncio
    async def test_corrupt_file_raises(self, file_store):
        file_store.data_dir.mkdir(parents=True)
        file_store.path_for(Collection.LOANS).write_text("{not json", encoding="utf-8")
        with pytest.raises(CorruptDataError):
            await file_store.get(Collection.LOANS, [])

    @pytest.mark.asyncio
    async def test_unusable_directory_raises_io_error(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("", encoding="utf-8")
        store = JsonFileStore(blocker)
        with pytest.raises(StorageIOError):
            await store.set(Collection.EXPENSES, [])
        with pytest.raises(StorageIOError):
            await store.get(Collection.EXPENSES, [])

    @pytest.mark.asyncio
    async def test_remove_missing_is_noop(self, file_store):
        await file_store.remove(Collection.SAVED_CARDS)
        await file_store.set(Collection.SAVED_CARDS, [])
        await file_store.remove(Collection.SAVED_CARDS)
        assert not file_store.path_for(Collection.SAVED_CARDS).exists()

    @pytest.mark.asyncio
    async def test_custom_prefix(self, tmp_path):
        store = JsonFileStore(tmp_path, key_prefix="test_")
        await store.set(Collection.USER_PROFILE, {"name": "Sam"})
        assert (tmp_path / "test_user_profile.json").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
