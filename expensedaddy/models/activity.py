"""
Activity Models for ExpenseDaddy

Every mutation of a collection leaves one entry in the activity log.
This provides:
1. A user-visible history of what changed
2. The amount involved, where there is one
3. Debugging context when numbers look wrong

DESIGN DECISION: The activity log is append-only and bounded.
Entries are never edited; the oldest fall off once the cap is reached.
"""

from enum import Enum
from typing import NamedTuple, Optional

from expensedaddy.models.base import StoredModel


class ActivityType(str, Enum):
    """
    Kinds of mutation we record.

    Closed set: one value per (collection, mutation) pair.
    """
    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_EDITED = "expense_edited"
    EXPENSE_DELETED = "expense_deleted"

    # Profile
    BUDGET_UPDATED = "budget_updated"

    # Cards
    CARD_ADDED = "card_added"
    CARD_UPDATED = "card_updated"
    CARD_DELETED = "card_deleted"

    # Savings goals
    GOAL_ADDED = "goal_added"
    GOAL_UPDATED = "goal_updated"
    GOAL_DELETED = "goal_deleted"

    # Loans
    LOAN_ADDED = "loan_added"
    LOAN_UPDATED = "loan_updated"
    LOAN_DELETED = "loan_deleted"

    # Fixed expenses
    FIXED_ADDED = "fixed_added"
    FIXED_UPDATED = "fixed_updated"
    FIXED_DELETED = "fixed_deleted"


class ActivityItem(StoredModel):
    """A single activity log entry."""
    id: str
    type: ActivityType
    description: str
    date: str
    amount: Optional[float] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "activity_id": self.id,
            "activity_type": self.type.value,
            "description": self.description,
            "date": self.date,
            "amount": self.amount,
        }


class ActivityEntry(NamedTuple):
    """
    An activity waiting to be recorded.

    The recorder assigns id and date when it persists the entry.
    """
    type: ActivityType
    description: str
    amount: Optional[float] = None


def _plain_number(value: float) -> str:
    """Render 500.0 as "500" and 12.5 as "12.5"."""
    return str(int(value)) if float(value).is_integer() else str(value)


class ActivityEntryBuilder:
    """
    Helper class to build activity entries with common patterns.

    Usage:
        entry = ActivityEntryBuilder.expense_added("Coffee", 4.5)
        entry = ActivityEntryBuilder.budget_updated(500)
    """

    @staticmethod
    def expense_added(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.EXPENSE_ADDED, f"Added expense: {name}", amount)

    @staticmethod
    def expense_edited(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.EXPENSE_EDITED, f"Edited expense: {name}", amount)

    @staticmethod
    def expense_deleted(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.EXPENSE_DELETED, f"Deleted expense: {name}", amount)

    @staticmethod
    def budget_updated(amount: float) -> ActivityEntry:
        return ActivityEntry(
            ActivityType.BUDGET_UPDATED,
            f"Budget updated to {_plain_number(amount)}",
            amount,
        )

    @staticmethod
    def card_added(card_name: str) -> ActivityEntry:
        return ActivityEntry(ActivityType.CARD_ADDED, f"Added card: {card_name}")

    @staticmethod
    def card_updated(card_name: str) -> ActivityEntry:
        return ActivityEntry(ActivityType.CARD_UPDATED, f"Updated card: {card_name}")

    @staticmethod
    def card_deleted(card_name: str) -> ActivityEntry:
        return ActivityEntry(ActivityType.CARD_DELETED, f"Removed card: {card_name}")

    @staticmethod
    def goal_added(name: str, target_amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.GOAL_ADDED, f"Added goal: {name}", target_amount)

    @staticmethod
    def goal_updated(name: str) -> ActivityEntry:
        return ActivityEntry(ActivityType.GOAL_UPDATED, f"Updated goal: {name}")

    @staticmethod
    def goal_deleted(name: str, target_amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.GOAL_DELETED, f"Deleted goal: {name}", target_amount)

    @staticmethod
    def loan_added(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.LOAN_ADDED, f"Added loan: {name}", amount)

    @staticmethod
    def loan_updated(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.LOAN_UPDATED, f"Updated loan: {name}", amount)

    @staticmethod
    def loan_paid(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.LOAN_UPDATED, f"Marked loan paid: {name}", amount)

    @staticmethod
    def loan_deleted(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.LOAN_DELETED, f"Deleted loan: {name}", amount)

    @staticmethod
    def fixed_added(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.FIXED_ADDED, f"Added fixed expense: {name}", amount)

    @staticmethod
    def fixed_updated(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.FIXED_UPDATED, f"Updated fixed expense: {name}", amount)

    @staticmethod
    def fixed_deleted(name: str, amount: float) -> ActivityEntry:
        return ActivityEntry(ActivityType.FIXED_DELETED, f"Deleted fixed expense: {name}", amount)
