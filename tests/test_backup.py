"""Tests for backup export and import."""

import json

import pytest

from expensedaddy.backup import BackupCodec, InvalidBackupError
from expensedaddy.orchestrator import BudgetService
from expensedaddy.services.storage import Collection, InMemoryStore, StorageIOError


class FailOnCollectionStore(InMemoryStore):
    """Store that fails writes to one collection."""

    def __init__(self, failing: Collection):
        super().__init__()
        self._failing = failing

    async def set(self, collection, value):
        if collection == self._failing:
            raise StorageIOError(f"cannot write {collection.value}")
        await super().set(collection, value)


def v1_document(**overrides):
    document = {
        "version": 1,
        "exportDate": "2023-12-31T00:00:00.000Z",
        "appName": "ExpenseDaddy",
        "expenses": [
            {
                "id": "e1",
                "name": "Lunch",
                "amount": 12,
                "category": "Food",
                "date": "2023-12-30",
                "createdAt": "2023-12-30T12:00:00.000Z",
            }
        ],
        "profile": {"name": "Sam", "currency": "£", "monthlyBudget": 400, "dailyBudgetTarget": 15},
        "savingsGoals": [],
        "savedCards": [],
        "activityLog": [],
        "budgetHistory": [],
        "shoppingList": ["milk"],
    }
    document.update(overrides)
    return document


class TestExport:
    """Tests for BackupCodec.export_document."""

    @pytest.mark.asyncio
    async def test_export_tags_document(self, service):
        document = await service.export_backup()
        assert document.app_name == "ExpenseDaddy"
        assert document.version == 2
        assert document.export_date.endswith("Z")
        assert document.profile == {
            "name": "User",
            "currency": "$",
            "monthlyBudget": 0,
            "dailyBudgetTarget": 0,
        }

    @pytest.mark.asyncio
    async def test_export_carries_raw_records(self, service, store):
        legacy = {"id": "old", "name": "Old", "amount": 3, "date": "2022-01-01", "createdAt": "x"}
        await store.set(Collection.EXPENSES, [legacy])
        document = await service.export_backup()
        assert document.expenses == [legacy]

    @pytest.mark.asyncio
    async def test_round_trip_restores_every_collection(self, service):
        await service.add_expense({"name": "Coffee", "amount": 4.5, "date": "2024-03-15T10:00:00Z"})
        await service.add_loan({"name": "Bike", "amount": 50})
        await service.add_fixed_expense({"name": "Rent", "amount": 900})
        await service.add_savings_goal({"name": "Trip", "targetAmount": 1000})
        await service.add_saved_card({"cardName": "A", "cardNumber": "4111", "expiryDate": "0128"})
        await service.update_profile({"monthlyBudget": 500})
        await service.set_shopping_list(["milk"])
        exported = await service.backup.export_json()

        fresh_store = InMemoryStore()
        fresh = BudgetService(fresh_store)
        written = await fresh.import_backup(exported)
        assert written == [
            "expenses", "profile", "savingsGoals", "savedCards", "activityLog",
            "budgetHistory", "shoppingList", "loans", "fixedExpenses",
        ]

        for collection in Collection:
            assert await fresh_store.get(collection) == await service.store.get(collection)


class TestImport:
    """Tests for BackupCodec.import_document."""

    @pytest.mark.asyncio
    async def test_wrong_app_name_changes_nothing(self, service, store):
        await service.add_expense({"name": "Coffee", "amount": 4.5})
        before = {c: await store.get(c) for c in Collection}

        with pytest.raises(InvalidBackupError) as excinfo:
            await service.import_backup(v1_document(appName="OtherApp"))
        assert str(excinfo.value) == "Invalid backup file"

        assert {c: await store.get(c) for c in Collection} == before

    @pytest.mark.asyncio
    @pytest.mark.parametrize("document", ["{not json", "[1, 2]", b"\xff\xfe", "null"])
    async def test_malformed_documents_rejected(self, service, document):
        with pytest.raises(InvalidBackupError):
            await service.import_backup(document)

    def test_invalid_backup_is_a_value_error(self):
        assert issubclass(InvalidBackupError, ValueError)

    @pytest.mark.asyncio
    async def test_v1_document_keeps_loans_and_fixed(self, service, store):
        loan = await service.add_loan({"name": "Bike", "amount": 50})
        await service.add_fixed_expense({"name": "Rent", "amount": 900})

        written = await service.import_backup(json.dumps(v1_document()))

        assert "loans" not in written
        assert "fixedExpenses" not in written
        assert [item.id for item in await service.loans.list()] == [loan.id]
        assert len(await service.fixed_expenses.list()) == 1
        assert (await service.profile.get()).currency == "£"
        assert service.snapshot.profile.monthly_budget == 400

    @pytest.mark.asyncio
    async def test_legacy_expense_loads_as_daily(self, service, store):
        await service.import_backup(v1_document())
        assert service.snapshot.expenses[0].is_daily
        assert "expenseType" not in (await store.get(Collection.EXPENSES))[0]

    @pytest.mark.asyncio
    async def test_null_field_is_skipped(self, service, store):
        await service.set_shopping_list(["eggs"])
        await service.import_backup(v1_document(shoppingList=None))
        assert await store.get(Collection.SHOPPING_LIST) == ["eggs"]

    @pytest.mark.asyncio
    async def test_import_generates_no_activity(self, service):
        await service.import_backup(v1_document())
        assert service.snapshot.activity_log == []

    @pytest.mark.asyncio
    async def test_partial_failure_leaves_earlier_collections_written(self):
        store = FailOnCollectionStore(Collection.ACTIVITY_LOG)
        service = BudgetService(store)
        with pytest.raises(StorageIOError):
            await service.import_backup(v1_document())

        assert (await store.get(Collection.EXPENSES))[0]["id"] == "e1"
        assert (await store.get(Collection.USER_PROFILE))["name"] == "Sam"
        assert await store.get(Collection.SHOPPING_LIST) is None
        assert not service.is_loading


class TestCodecDirect:
    """Tests for BackupCodec with a custom identity."""

    @pytest.mark.asyncio
    async def test_custom_app_name(self, store, profiles):
        codec = BackupCodec(store, profiles, app_name="BudgetFlow", version=3)
        document = await codec.export_document()
        assert document.app_name == "BudgetFlow"
        assert document.version == 3
        assert codec.parse(document.to_dict())["appName"] == "BudgetFlow"
        with pytest.raises(InvalidBackupError):
            codec.parse(v1_document())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
