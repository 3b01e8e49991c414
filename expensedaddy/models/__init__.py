"""
Data Models Package

This package contains all Pydantic models used by ExpenseDaddy.
Every record read from or written to storage conforms to these schemas.
"""

from expensedaddy.models.base import (
    apply_patch,
    format_timestamp,
    generate_id,
    utc_now_iso,
)
from expensedaddy.models.finance import (
    CATEGORIES,
    CURRENCY_OPTIONS,
    FIXED_CATEGORIES,
    BudgetHistory,
    CardType,
    Expense,
    ExpenseType,
    ExpenseUpdate,
    FixedExpense,
    FixedExpenseUpdate,
    LoanEntry,
    LoanUpdate,
    NewExpense,
    NewFixedExpense,
    NewLoanEntry,
    NewSavedCard,
    NewSavingsGoal,
    ProfileUpdate,
    RecurringType,
    SavedCard,
    SavedCardUpdate,
    SavingsGoal,
    SavingsGoalUpdate,
    UserProfile,
)
from expensedaddy.models.activity import (
    ActivityEntry,
    ActivityEntryBuilder,
    ActivityItem,
    ActivityType,
)
from expensedaddy.models.backup import BackupDocument

__all__ = [
    # Helpers
    "apply_patch",
    "format_timestamp",
    "generate_id",
    "utc_now_iso",
    # Finance models
    "CATEGORIES",
    "CURRENCY_OPTIONS",
    "FIXED_CATEGORIES",
    "BudgetHistory",
    "CardType",
    "Expense",
    "ExpenseType",
    "ExpenseUpdate",
    "FixedExpense",
    "FixedExpenseUpdate",
    "LoanEntry",
    "LoanUpdate",
    "NewExpense",
    "NewFixedExpense",
    "NewLoanEntry",
    "NewSavedCard",
    "NewSavingsGoal",
    "ProfileUpdate",
    "RecurringType",
    "SavedCard",
    "SavedCardUpdate",
    "SavingsGoal",
    "SavingsGoalUpdate",
    "UserProfile",
    # Activity models
    "ActivityEntry",
    "ActivityEntryBuilder",
    "ActivityItem",
    "ActivityType",
    # Backup
    "BackupDocument",
]
