"""
Expense, Loan and Fixed-Expense Repositories

All three ledgers keep newest records first.
"""

from typing import Any, Optional, Union

from expensedaddy.models.activity import ActivityEntryBuilder
from expensedaddy.models.base import generate_id, utc_now_iso
from expensedaddy.models.finance import (
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
)
from expensedaddy.repositories.base import CollectionRepository
from expensedaddy.services.storage import Collection


class ExpenseRepository(CollectionRepository[Expense, ExpenseUpdate]):
    """The canonical expense collection (daily, fixed and loan typed)."""

    collection = Collection.EXPENSES
    model = Expense
    patch_model = ExpenseUpdate

    async def add(self, fields: Union[NewExpense, dict[str, Any]]) -> Expense:
        """
        Record an expense.

        A missing `expense_type` is backfilled to "daily" for
        compatibility with records written before the field existed.
        """
        new = fields if isinstance(fields, NewExpense) else NewExpense.model_validate(fields)
        expense = Expense(
            id=generate_id(),
            created_at=utc_now_iso(),
            name=new.name,
            amount=new.amount,
            category=new.category,
            tags=new.tags,
            notes=new.notes,
            date=new.date,
            is_recurring=new.is_recurring,
            recurring_type=new.recurring_type,
            expense_type=new.expense_type or ExpenseType.DAILY,
        )
        await self._insert(expense)
        await self._activity.record_entry(
            ActivityEntryBuilder.expense_added(expense.name, expense.amount)
        )
        return expense

    async def update(
        self,
        expense_id: str,
        patch: Union[ExpenseUpdate, dict[str, Any]],
    ) -> Optional[Expense]:
        """Shallow-merge changes. Returns None if the expense does not exist."""
        result = await self._replace(expense_id, self._coerce_patch(patch))
        if result is None:
            return None
        _, updated = result
        await self._activity.record_entry(
            ActivityEntryBuilder.expense_edited(updated.name, updated.amount)
        )
        return updated

    async def delete(self, expense_id: str) -> None:
        """Hard delete. Deleting an unknown id is a silent no-op."""
        removed = await self._remove(expense_id)
        if removed is not None:
            await self._activity.record_entry(
                ActivityEntryBuilder.expense_deleted(removed.name, removed.amount)
            )


class LoanRepository(CollectionRepository[LoanEntry, LoanUpdate]):
    """
    Loans, tracked until paid.

    `update` is a plain shallow merge. Pairing `is_paid=True` with a
    `paid_date` is the caller's job; `mark_paid` does it for them.
    """

    collection = Collection.LOANS
    model = LoanEntry
    patch_model = LoanUpdate

    async def add(self, fields: Union[NewLoanEntry, dict[str, Any]]) -> LoanEntry:
        """Record a loan. It always starts unpaid, whatever the caller sent."""
        new = fields if isinstance(fields, NewLoanEntry) else NewLoanEntry.model_validate(fields)
        loan = LoanEntry(
            id=generate_id(),
            created_at=utc_now_iso(),
            name=new.name,
            amount=new.amount,
            notes=new.notes,
            date=new.date,
            is_paid=False,
        )
        await self._insert(loan)
        await self._activity.record_entry(
            ActivityEntryBuilder.loan_added(loan.name, loan.amount)
        )
        return loan

    async def update(
        self,
        loan_id: str,
        patch: Union[LoanUpdate, dict[str, Any]],
    ) -> Optional[LoanEntry]:
        result = await self._replace(loan_id, self._coerce_patch(patch))
        if result is None:
            return None
        before, after = result
        if after.is_paid and not before.is_paid:
            entry = ActivityEntryBuilder.loan_paid(after.name, after.amount)
        else:
            entry = ActivityEntryBuilder.loan_updated(after.name, after.amount)
        await self._activity.record_entry(entry)
        return after

    async def mark_paid(
        self,
        loan_id: str,
        paid_date: Optional[str] = None,
    ) -> Optional[LoanEntry]:
        """Flag a loan paid and stamp `paid_date` (now, unless given)."""
        return await self.update(
            loan_id,
            LoanUpdate(is_paid=True, paid_date=paid_date or utc_now_iso()),
        )

    async def mark_unpaid(self, loan_id: str) -> Optional[LoanEntry]:
        """Reopen a loan and clear its `paid_date`."""
        return await self.update(loan_id, LoanUpdate(is_paid=False, paid_date=None))

    async def delete(self, loan_id: str) -> None:
        removed = await self._remove(loan_id)
        if removed is not None:
            await self._activity.record_entry(
                ActivityEntryBuilder.loan_deleted(removed.name, removed.amount)
            )


class FixedExpenseRepository(CollectionRepository[FixedExpense, FixedExpenseUpdate]):
    """Recurring bills, re-entered each month."""

    collection = Collection.FIXED_EXPENSES
    model = FixedExpense
    patch_model = FixedExpenseUpdate

    async def add(self, fields: Union[NewFixedExpense, dict[str, Any]]) -> FixedExpense:
        new = fields if isinstance(fields, NewFixedExpense) else NewFixedExpense.model_validate(fields)
        fixed = FixedExpense(
            id=generate_id(),
            created_at=utc_now_iso(),
            name=new.name,
            amount=new.amount,
            category=new.category,
            notes=new.notes,
            date=new.date,
        )
        await self._insert(fixed)
        await self._activity.record_entry(
            ActivityEntryBuilder.fixed_added(fixed.name, fixed.amount)
        )
        return fixed

    async def update(
        self,
        fixed_id: str,
        patch: Union[FixedExpenseUpdate, dict[str, Any]],
    ) -> Optional[FixedExpense]:
        result = await self._replace(fixed_id, self._coerce_patch(patch))
        if result is None:
            return None
        _, updated = result
        await self._activity.record_entry(
            ActivityEntryBuilder.fixed_updated(updated.name, updated.amount)
        )
        return updated

    async def delete(self, fixed_id: str) -> None:
        removed = await self._remove(fixed_id)
        if removed is not None:
            await self._activity.record_entry(
                ActivityEntryBuilder.fixed_deleted(removed.name, removed.amount)
            )
