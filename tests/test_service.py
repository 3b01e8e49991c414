"""Integration tests for BudgetService and the component factory."""

import logging
from datetime import date

import pytest

from expensedaddy.config import AppSettings, Settings, StorageSettings
from expensedaddy.metrics import utc_today
from expensedaddy.orchestrator import BudgetService, create_app_components
from expensedaddy.services.auth import AuthClient
from expensedaddy.services.storage import InMemoryStore, JsonFileStore


class TestBudgetService:
    """Tests for BudgetService."""

    def test_loading_until_first_refresh(self, service):
        assert service.is_loading
        assert service.snapshot.expenses == []

    @pytest.mark.asyncio
    async def test_refresh_reads_every_collection(self, service):
        snapshot = await service.refresh()
        assert not service.is_loading
        assert snapshot is service.snapshot
        assert snapshot.profile.name == "User"
        assert snapshot.shopping_list == []

    @pytest.mark.asyncio
    async def test_mutations_refresh_snapshot(self, service):
        expense = await service.add_expense({"name": "Coffee", "amount": 4.5, "category": "Food"})
        assert service.snapshot.expenses[0].id == expense.id
        assert service.snapshot.activity_log[0].description == "Added expense: Coffee"

        await service.update_expense(expense.id, {"amount": 6})
        assert service.snapshot.expenses[0].amount == 6

        await service.delete_expense(expense.id)
        assert service.snapshot.expenses == []

    @pytest.mark.asyncio
    async def test_dashboard_uses_snapshot(self, service):
        await service.update_profile({"monthlyBudget": 100})
        await service.add_expense({"name": "Coffee", "amount": 4.5, "date": "2024-03-15T10:00:00Z"})
        metrics = service.dashboard(today=date(2024, 3, 15))
        assert metrics.today_total == 4.5
        assert metrics.remaining_budget == 95.5

    @pytest.mark.asyncio
    async def test_default_date_is_today(self, service):
        await service.add_expense({"name": "Coffee", "amount": 4.5})
        assert service.dashboard(today=utc_today()).today_total == 4.5

    @pytest.mark.asyncio
    async def test_toggle_loan_paid(self, service):
        loan = await service.add_loan({"name": "Bike", "amount": 50})
        assert service.dashboard().total_loans_outstanding == 50

        paid = await service.toggle_loan_paid(loan.id)
        assert paid.is_paid and paid.paid_date
        assert service.dashboard().total_loans_outstanding == 0

        reopened = await service.toggle_loan_paid(loan.id)
        assert not reopened.is_paid
        assert reopened.paid_date is None

        assert await service.toggle_loan_paid("missing") is None

    @pytest.mark.asyncio
    async def test_goals_and_cards(self, service):
        goal = await service.add_savings_goal({"name": "Trip", "targetAmount": 100})
        await service.add_funds_to_goal(goal.id, 25)
        await service.update_savings_goal(goal.id, {"name": "Japan"})
        assert service.snapshot.savings_goals[0].current_amount == 25
        assert service.snapshot.savings_goals[0].name == "Japan"

        card = await service.add_saved_card(
            {"cardName": "Travel", "cardNumber": "5500 0000 0000 0004", "expiryDate": "12/29"}
        )
        await service.update_saved_card(card.id, {"isDefault": True})
        assert service.snapshot.saved_cards[0].is_default
        await service.delete_saved_card(card.id)
        await service.delete_savings_goal(goal.id)
        assert service.snapshot.saved_cards == []
        assert service.snapshot.savings_goals == []

    @pytest.mark.asyncio
    async def test_fixed_expenses_and_shopping(self, service):
        fixed = await service.add_fixed_expense({"name": "Rent", "amount": 900, "date": "2024-03-01"})
        await service.update_fixed_expense(fixed.id, {"amount": 950})
        assert service.dashboard(today=date(2024, 3, 20)).month_fixed_total == 950
        await service.delete_fixed_expense(fixed.id)
        assert service.snapshot.fixed_expenses == []

        await service.set_shopping_list(["milk", "eggs"])
        assert service.snapshot.shopping_list == ["milk", "eggs"]

    @pytest.mark.asyncio
    async def test_calendar(self, service):
        await service.add_expense({"name": "Cake", "amount": 20, "date": "2023-07-04T12:00:00Z"})
        month = service.calendar(2023, 7)
        assert month.daily_totals == {4: 20}

    @pytest.mark.asyncio
    async def test_budget_change_updates_history_in_snapshot(self, service):
        await service.update_profile({"monthlyBudget": 300})
        assert [h.amount for h in service.snapshot.budget_history] == [300]
        assert service.snapshot.activity_log[0].description == "Budget updated to 300"


class TestCreateAppComponents:
    """Tests for create_app_components."""

    def test_uses_given_store(self):
        store = InMemoryStore()
        service, auth = create_app_components(store=store, with_auth=False)
        assert service.store is store
        assert auth is None

    def test_builds_file_store_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EXPENSEDADDY_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("EXPENSEDADDY_DEFAULT_CURRENCY", "€")
        service, auth = create_app_components(settings=Settings())
        assert isinstance(service.store, JsonFileStore)
        assert service.store.data_dir == tmp_path
        assert isinstance(auth, AuthClient)

    @pytest.mark.asyncio
    async def test_default_profile_from_settings(self, tmp_path, monkeypatch):
        monkeypatch.setenv("EXPENSEDADDY_STORAGE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("EXPENSEDADDY_DEFAULT_CURRENCY", "€")
        monkeypatch.setenv("EXPENSEDADDY_ACTIVITY_LOG_LIMIT", "2")
        service, _ = create_app_components(settings=Settings(), with_auth=False)
        snapshot = await service.refresh()
        assert snapshot.profile.currency == "€"
        assert service.activity.limit == 2
        assert (tmp_path / "@budgetflow_user_profile.json").exists()

    def test_applies_configured_log_level(self, monkeypatch):
        """Test that the configured level gates our loggers."""
        monkeypatch.setenv("EXPENSEDADDY_LOG_LEVEL", "warning")
        package_logger = logging.getLogger("expensedaddy")
        try:
            create_app_components(settings=Settings(), store=InMemoryStore(), with_auth=False)
            assert package_logger.level == logging.WARNING
            assert not logging.getLogger("expensedaddy.orchestrator").isEnabledFor(logging.INFO)
        finally:
            package_logger.setLevel(logging.NOTSET)


class TestSettings:
    """Tests for settings sections."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("EXPENSEDADDY_STORAGE_DATA_DIR", raising=False)
        storage = StorageSettings()
        assert storage.key_prefix == "@budgetflow_"
        assert storage.data_dir.name == ".expensedaddy"

    def test_log_level_normalized(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_bad_log_level_rejected(self):
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
