"""Derived metrics package."""

from expensedaddy.metrics.engine import (
    CalendarMonth,
    CategoryTotal,
    DashboardMetrics,
    DayTotal,
    budget_used_percent,
    calendar_month,
    calendar_totals,
    category_breakdown,
    category_share_percent,
    compute_dashboard,
    daily_expenses,
    expenses_in_month,
    expenses_on,
    goal_progress_percent,
    month_fixed_total,
    month_key,
    no_spend_days,
    recent_expenses,
    remaining_budget,
    remaining_daily_budget,
    suggested_daily_target,
    top_categories,
    total,
    total_loans_outstanding,
    utc_today,
    weekly_totals,
)
from expensedaddy.metrics.formatting import format_currency

__all__ = [
    "CalendarMonth",
    "CategoryTotal",
    "DashboardMetrics",
    "DayTotal",
    "budget_used_percent",
    "calendar_month",
    "calendar_totals",
    "category_breakdown",
    "category_share_percent",
    "compute_dashboard",
    "daily_expenses",
    "expenses_in_month",
    "expenses_on",
    "format_currency",
    "goal_progress_percent",
    "month_fixed_total",
    "month_key",
    "no_spend_days",
    "recent_expenses",
    "remaining_budget",
    "remaining_daily_budget",
    "suggested_daily_target",
    "top_categories",
    "total",
    "total_loans_outstanding",
    "utc_today",
    "weekly_totals",
]
