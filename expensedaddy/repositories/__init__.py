"""
Entity Repositories Package

One repository per collection. Every mutation persists first and then
records an activity entry.
"""

from expensedaddy.repositories.base import CollectionRepository
from expensedaddy.repositories.expenses import (
    ExpenseRepository,
    FixedExpenseRepository,
    LoanRepository,
)
from expensedaddy.repositories.profile import (
    BudgetHistoryRepository,
    ShoppingListRepository,
    UserProfileRepository,
)
from expensedaddy.repositories.savings import (
    SavedCardRepository,
    SavingsGoalRepository,
)

__all__ = [
    "BudgetHistoryRepository",
    "CollectionRepository",
    "ExpenseRepository",
    "FixedExpenseRepository",
    "LoanRepository",
    "SavedCardRepository",
    "SavingsGoalRepository",
    "ShoppingListRepository",
    "UserProfileRepository",
]
