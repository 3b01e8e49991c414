"""
ExpenseDaddy - Local Data Layer

Persistence and derived metrics for a personal finance tracker:
expenses (daily, fixed and loans), budgets, savings goals and
spending analytics, plus a full backup/restore cycle.

DESIGN PRINCIPLES:
1. Every collection is read whole and written whole
2. Derived numbers are pure functions of loaded collections
3. Mutations leave an audit trail in the activity log
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "ExpenseDaddy Team"
