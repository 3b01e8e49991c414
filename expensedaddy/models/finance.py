"""
Core Data Models for ExpenseDaddy

These models define the schemas of every persisted collection.
They are designed to:
1. Round-trip the camelCase JSON kept on disk and in backups
2. Validate creation inputs once, at the boundary
3. Make partial updates explicit (named optional fields, no free-form dicts)

DESIGN DECISION: Records are split into three shapes per entity:
- The stored record (frozen, lenient on load)
- The creation input (strict: amount > 0, trimmed strings)
- The patch (every field optional, unknown fields rejected)
"""

from enum import Enum
from typing import ClassVar, Optional

from pydantic import Field, field_validator, model_validator

from expensedaddy.models.base import (
    InputModel,
    PatchModel,
    StoredModel,
    utc_now_iso,
)
from expensedaddy.validation import (
    detect_card_type,
    format_expiry,
    normalize_card_number,
    normalize_tags,
    require_iso_date,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseType(str, Enum):
    """
    Which ledger an expense belongs to.

    Only DAILY expenses count against the monthly budget.
    """
    DAILY = "daily"
    FIXED = "fixed"
    LOAN = "loan"


class RecurringType(str, Enum):
    """How often a recurring expense repeats."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class CardType(str, Enum):
    """Card networks we recognise."""
    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    OTHER = "other"


CATEGORIES = [
    "Food",
    "Transport",
    "Shopping",
    "Entertainment",
    "Health",
    "Housing",
    "Utilities",
    "Education",
    "Subscriptions",
    "Other",
]

FIXED_CATEGORIES = [
    "Rent",
    "Utilities",
    "Subscriptions",
    "Insurance",
    "Internet",
    "Phone",
    "Other",
]

CURRENCY_OPTIONS = ["৳", "$", "€", "£", "¥", "₹", "₿"]


# =============================================================================
# STORED RECORDS
# =============================================================================

class Expense(StoredModel):
    """
    A recorded expense.

    `expense_type` defaults to DAILY when a stored record lacks it.
    That is a migration default for records written before the field
    existed, not a business rule.
    """
    id: str
    name: str
    amount: float
    category: str = "Other"
    tags: list[str] = Field(default_factory=list)
    notes: str = ""
    date: str
    created_at: str
    is_recurring: bool = False
    recurring_type: Optional[RecurringType] = None
    expense_type: ExpenseType = ExpenseType.DAILY

    @property
    def is_daily(self) -> bool:
        return self.expense_type == ExpenseType.DAILY


class LoanEntry(StoredModel):
    """Money borrowed or lent, tracked until marked paid."""
    id: str
    name: str
    amount: float
    notes: str = ""
    date: str
    created_at: str
    is_paid: bool = False
    paid_date: Optional[str] = None


class FixedExpense(StoredModel):
    """A bill-like expense tracked outside the daily budget."""
    id: str
    name: str
    amount: float
    category: str = "Other"
    notes: str = ""
    date: str
    created_at: str


class SavingsGoal(StoredModel):
    """A savings target. `current_amount` may exceed `target_amount`."""
    id: str
    name: str
    target_amount: float
    current_amount: float = 0
    created_at: str


class SavedCard(StoredModel):
    """
    A saved payment card.

    Several cards may be flagged default at once; nothing enforces
    a single default.
    """
    id: str
    card_name: str
    card_number: str
    expiry_date: str
    card_type: CardType = CardType.OTHER
    is_default: bool = False


class UserProfile(StoredModel):
    """The singleton local profile."""
    name: str = "User"
    currency: str = "$"
    monthly_budget: float = 0
    daily_budget_target: float = 0


class BudgetHistory(StoredModel):
    """One distinct monthly budget value, as it was set."""
    id: str
    amount: float
    date: str


# =============================================================================
# CREATION INPUTS
# =============================================================================

class NewExpense(InputModel):
    """Fields a caller supplies to record an expense."""
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: str = Field(default="Other", min_length=1)
    tags: list[str] = Field(default_factory=list)
    notes: str = ""
    date: str = Field(default_factory=utc_now_iso)
    is_recurring: bool = False
    recurring_type: Optional[RecurringType] = None
    expense_type: Optional[ExpenseType] = None

    @field_validator('date')
    @classmethod
    def check_date(cls, v: str) -> str:
        return require_iso_date(v)

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)

    @model_validator(mode='after')
    def drop_orphan_recurrence(self) -> 'NewExpense':
        """A recurrence period only means something on a recurring expense."""
        if not self.is_recurring:
            self.recurring_type = None
        return self


class NewLoanEntry(InputModel):
    """Fields a caller supplies to record a loan. `isPaid` is never accepted."""
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    notes: str = ""
    date: str = Field(default_factory=utc_now_iso)

    @field_validator('date')
    @classmethod
    def check_date(cls, v: str) -> str:
        return require_iso_date(v)


class NewFixedExpense(InputModel):
    """Fields a caller supplies to record a fixed expense."""
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    category: str = Field(default="Other", min_length=1)
    notes: str = ""
    date: str = Field(default_factory=utc_now_iso)

    @field_validator('date')
    @classmethod
    def check_date(cls, v: str) -> str:
        return require_iso_date(v)


class NewSavingsGoal(InputModel):
    """Fields a caller supplies to open a savings goal."""
    name: str = Field(..., min_length=1, max_length=200)
    target_amount: float = Field(..., gt=0, allow_inf_nan=False)
    current_amount: float = Field(default=0, ge=0, allow_inf_nan=False)


class NewSavedCard(InputModel):
    """
    Fields a caller supplies to save a card.

    The number is persisted digits-only; the network is detected from
    it when the caller does not name one.
    """
    card_name: str = Field(..., min_length=1, max_length=100)
    card_number: str
    expiry_date: str
    card_type: Optional[CardType] = None
    is_default: bool = False

    @field_validator('card_number')
    @classmethod
    def clean_card_number(cls, v: str) -> str:
        digits = normalize_card_number(v)
        if len(digits) < 4:
            raise ValueError("Card number needs at least 4 digits")
        return digits

    @field_validator('expiry_date')
    @classmethod
    def clean_expiry(cls, v: str) -> str:
        return format_expiry(v)

    @model_validator(mode='after')
    def fill_card_type(self) -> 'NewSavedCard':
        if self.card_type is None:
            self.card_type = CardType(detect_card_type(self.card_number))
        return self


# =============================================================================
# PATCHES
# =============================================================================

class ExpenseUpdate(PatchModel):
    clearable: ClassVar[frozenset[str]] = frozenset({"recurring_type"})

    name: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    tags: Optional[list[str]] = None
    notes: Optional[str] = None
    date: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurring_type: Optional[RecurringType] = None
    expense_type: Optional[ExpenseType] = None


class LoanUpdate(PatchModel):
    """
    Partial loan update.

    Setting `is_paid=True` is expected to come with `paid_date`; that
    pairing is the caller's contract (see LoanRepository.mark_paid).
    """
    clearable: ClassVar[frozenset[str]] = frozenset({"paid_date"})

    name: Optional[str] = None
    amount: Optional[float] = None
    notes: Optional[str] = None
    date: Optional[str] = None
    is_paid: Optional[bool] = None
    paid_date: Optional[str] = None


class FixedExpenseUpdate(PatchModel):
    name: Optional[str] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    date: Optional[str] = None


class SavingsGoalUpdate(PatchModel):
    name: Optional[str] = None
    target_amount: Optional[float] = None
    current_amount: Optional[float] = None


class SavedCardUpdate(PatchModel):
    card_name: Optional[str] = None
    card_number: Optional[str] = None
    expiry_date: Optional[str] = None
    card_type: Optional[CardType] = None
    is_default: Optional[bool] = None


class ProfileUpdate(PatchModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    currency: Optional[str] = Field(default=None, min_length=1, max_length=5)
    monthly_budget: Optional[float] = Field(default=None, ge=0)
    daily_budget_target: Optional[float] = Field(default=None, ge=0)
