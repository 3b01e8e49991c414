"""
Derived Metrics Engine

DESIGN DECISION: Every number shown on a dashboard is a pure,
synchronous function of collections that are already loaded.
There is no I/O here, and "today" is always an explicit input, so
the same inputs always give the same numbers.

DATE MATCHING: Records carry ISO 8601 strings. A record falls on a day
when its first 10 characters equal `YYYY-MM-DD`, and in a month when its
first 7 equal `YYYY-MM`. This is timezone-naive: a record stored as
`2024-03-15T23:30:00Z` counts on the 15th even for a user whose local
clock already reads the 16th. The behaviour is kept deliberately and
covered by tests; do not "fix" it with timezone-aware parsing.

DIVISION: Percentages over a zero denominator are 0, checked up front.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from expensedaddy.models.finance import (
    Expense,
    ExpenseType,
    FixedExpense,
    LoanEntry,
    UserProfile,
)


WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


# =============================================================================
# RESULT MODELS
# =============================================================================

class CategoryTotal(BaseModel):
    name: str
    amount: float


class DayTotal(BaseModel):
    """Spending on one day of the weekly chart."""
    day: str
    date: str
    amount: float


class CalendarMonth(BaseModel):
    """
    Data for a month calendar view.

    `first_weekday` counts from Sunday (0) so the grid can be padded
    the way wall calendars are laid out.
    """
    year: int
    month: int
    days_in_month: int
    first_weekday: int
    daily_totals: dict[int, float] = Field(default_factory=dict)
    max_daily: float = 1

    def intensity(self, day: int) -> float:
        """Relative spend for shading a day: 0 if nothing, else at least 0.15."""
        spent = self.daily_totals.get(day, 0)
        if spent <= 0:
            return 0.0
        return max(0.15, spent / self.max_daily)


class DashboardMetrics(BaseModel):
    """Everything the home and insights screens show, for one `today`."""
    today: date
    current_month: str
    today_expenses: list[Expense]
    month_expenses: list[Expense]
    recent_expenses: list[Expense]
    today_total: float
    month_total: float
    remaining_budget: float
    remaining_daily_budget: float
    month_fixed_total: float
    total_loans_outstanding: float
    budget_used_percent: float
    daily_target_used_percent: float
    category_breakdown: list[CategoryTotal]
    top_categories: list[CategoryTotal]
    no_spend_days: int
    weekly: list[DayTotal]

    @property
    def is_over_budget(self) -> bool:
        return self.remaining_budget < 0


# =============================================================================
# FILTERS
# =============================================================================

def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def month_key(today: date) -> str:
    """`YYYY-MM` for the month containing `today`."""
    return today.isoformat()[:7]


def daily_expenses(expenses: Iterable[Expense]) -> list[Expense]:
    """Budget-counted expenses only (a missing type already loads as daily)."""
    return [e for e in expenses if e.expense_type == ExpenseType.DAILY]


def expenses_on(expenses: Iterable[Expense], day: date) -> list[Expense]:
    prefix = day.isoformat()
    return [e for e in expenses if e.date.startswith(prefix)]


def expenses_in_month(expenses: Iterable[Expense], month: str) -> list[Expense]:
    return [e for e in expenses if e.date[:7] == month]


def total(records: Iterable) -> float:
    return sum(record.amount for record in records)


def recent_expenses(expenses: Sequence[Expense], limit: int = 5) -> list[Expense]:
    """The first `limit` daily expenses in stored (newest first) order."""
    return daily_expenses(expenses)[:limit]


# =============================================================================
# TOTALS
# =============================================================================

def remaining_budget(profile: UserProfile, month_total: float) -> float:
    """Negative means over budget."""
    return profile.monthly_budget - month_total


def remaining_daily_budget(profile: UserProfile, today_total: float) -> float:
    return profile.daily_budget_target - today_total


def month_fixed_total(fixed_expenses: Iterable[FixedExpense], month: str) -> float:
    return sum(f.amount for f in fixed_expenses if f.date[:7] == month)


def total_loans_outstanding(loans: Iterable[LoanEntry]) -> float:
    return sum(loan.amount for loan in loans if not loan.is_paid)


# =============================================================================
# BREAKDOWNS
# =============================================================================

def category_breakdown(expenses: Iterable[Expense]) -> list[CategoryTotal]:
    """
    Sum per category, largest first.

    Ties keep the order in which categories were first seen.
    """
    sums: dict[str, float] = {}
    for expense in expenses:
        sums[expense.category] = sums.get(expense.category, 0) + expense.amount
    ordered = sorted(sums.items(), key=lambda pair: pair[1], reverse=True)
    return [CategoryTotal(name=name, amount=amount) for name, amount in ordered]


def top_categories(expenses: Iterable[Expense], limit: int = 3) -> list[CategoryTotal]:
    return category_breakdown(expenses)[:limit]


def no_spend_days(month_expenses: Iterable[Expense], today: date) -> int:
    """
    Days from the 1st through today (inclusive) with no expense.

    Days after today are never counted.
    """
    spent_days = set()
    for expense in month_expenses:
        day = expense.date[8:10]
        if day.isdigit():
            spent_days.add(int(day))
    return sum(1 for day in range(1, today.day + 1) if day not in spent_days)


def weekly_totals(expenses: Iterable[Expense], today: date) -> list[DayTotal]:
    """
    Spending for each day of the Monday-starting week containing today.

    Runs over every expense, whatever its type.
    """
    expenses = list(expenses)
    monday = today - timedelta(days=today.weekday())
    week = []
    for offset, label in enumerate(WEEKDAY_LABELS):
        day = monday + timedelta(days=offset)
        week.append(DayTotal(day=label, date=day.isoformat(), amount=total(expenses_on(expenses, day))))
    return week


def calendar_totals(expenses: Iterable[Expense], year: int, month: int) -> dict[int, float]:
    """Sum per day-of-month for one (year, month), `month` being 1-12."""
    prefix = f"{year:04d}-{month:02d}"
    totals: dict[int, float] = {}
    for expense in expenses:
        if expense.date[:7] != prefix:
            continue
        day = expense.date[8:10]
        if not day.isdigit():
            continue
        totals[int(day)] = totals.get(int(day), 0) + expense.amount
    return totals


def calendar_month(expenses: Iterable[Expense], year: int, month: int) -> CalendarMonth:
    totals = calendar_totals(expenses, year, month)
    first_weekday, days = calendar.monthrange(year, month)
    return CalendarMonth(
        year=year,
        month=month,
        days_in_month=days,
        first_weekday=(first_weekday + 1) % 7,
        daily_totals=totals,
        max_daily=max([1, *totals.values()]),
    )


# =============================================================================
# PERCENTAGES
# =============================================================================

def budget_used_percent(spent: float, budget: float) -> float:
    """Share of a budget used, capped at 100. A zero budget reads as 0%."""
    return min(spent / budget * 100, 100) if budget > 0 else 0.0


def category_share_percent(amount: float, month_total: float) -> float:
    return amount / month_total * 100 if month_total > 0 else 0.0


def goal_progress_percent(current_amount: float, target_amount: float) -> float:
    return min(current_amount / target_amount * 100, 100) if target_amount > 0 else 0.0


def suggested_daily_target(monthly_budget: float, year: int, month: int) -> float:
    """Monthly budget spread evenly over the days of the month."""
    days = calendar.monthrange(year, month)[1]
    return round(monthly_budget / days, 2)


# =============================================================================
# DASHBOARD
# =============================================================================

def compute_dashboard(
    expenses: Sequence[Expense],
    loans: Sequence[LoanEntry],
    fixed_expenses: Sequence[FixedExpense],
    profile: UserProfile,
    today: Optional[date] = None,
) -> DashboardMetrics:
    """Compute every dashboard figure for one day."""
    today = today or utc_today()
    month = month_key(today)

    daily = daily_expenses(expenses)
    todays = expenses_on(daily, today)
    months = expenses_in_month(daily, month)
    today_sum = total(todays)
    month_sum = total(months)
    breakdown = category_breakdown(months)

    return DashboardMetrics(
        today=today,
        current_month=month,
        today_expenses=todays,
        month_expenses=months,
        recent_expenses=recent_expenses(expenses),
        today_total=today_sum,
        month_total=month_sum,
        remaining_budget=remaining_budget(profile, month_sum),
        remaining_daily_budget=remaining_daily_budget(profile, today_sum),
        month_fixed_total=month_fixed_total(fixed_expenses, month),
        total_loans_outstanding=total_loans_outstanding(loans),
        budget_used_percent=budget_used_percent(month_sum, profile.monthly_budget),
        daily_target_used_percent=budget_used_percent(today_sum, profile.daily_budget_target),
        category_breakdown=breakdown,
        top_categories=breakdown[:3],
        no_spend_days=no_spend_days(months, today),
        weekly=weekly_totals(expenses, today),
    )
