"""
Shared fixtures.

Every test gets a fresh in-memory store, so no test sees another's data.
Nothing here touches the network or the user's home directory.
"""

import pytest

from expensedaddy.audit import ActivityLogRecorder
from expensedaddy.orchestrator import BudgetService
from expensedaddy.repositories import (
    BudgetHistoryRepository,
    ExpenseRepository,
    FixedExpenseRepository,
    LoanRepository,
    SavedCardRepository,
    SavingsGoalRepository,
    ShoppingListRepository,
    UserProfileRepository,
)
from expensedaddy.services.storage import InMemoryStore, JsonFileStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def file_store(tmp_path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "data")


@pytest.fixture
def activity(store) -> ActivityLogRecorder:
    return ActivityLogRecorder(store)


@pytest.fixture
def expenses(store, activity) -> ExpenseRepository:
    return ExpenseRepository(store, activity)


@pytest.fixture
def loans(store, activity) -> LoanRepository:
    return LoanRepository(store, activity)


@pytest.fixture
def fixed_expenses(store, activity) -> FixedExpenseRepository:
    return FixedExpenseRepository(store, activity)


@pytest.fixture
def goals(store, activity) -> SavingsGoalRepository:
    return SavingsGoalRepository(store, activity)


@pytest.fixture
def cards(store, activity) -> SavedCardRepository:
    return SavedCardRepository(store, activity)


@pytest.fixture
def budget_history(store) -> BudgetHistoryRepository:
    return BudgetHistoryRepository(store)


@pytest.fixture
def profiles(store, activity, budget_history) -> UserProfileRepository:
    return UserProfileRepository(store, activity, budget_history)


@pytest.fixture
def shopping(store) -> ShoppingListRepository:
    return ShoppingListRepository(store)


@pytest.fixture
def service(store) -> BudgetService:
    return BudgetService(store)
