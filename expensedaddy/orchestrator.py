"""
Main Orchestrator for ExpenseDaddy

This module ties together all the components behind one service object
that callers hold by reference:
1. Repositories for every collection, sharing one store and one activity log
2. A consistent snapshot of all collections, rebuilt by `refresh()`
3. Dashboard metrics computed from that snapshot
4. Backup export/import

DESIGN DECISION: There is no ambient global state. The host creates a
BudgetService (usually through `create_app_components`) and passes it
where it is needed. Every mutation goes through a repository and is
followed by a refresh, so `snapshot` always reflects storage.
"""

import asyncio
from datetime import date
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, ConfigDict

from expensedaddy.audit import ActivityLogRecorder, configure_logging
from expensedaddy.backup import BackupCodec
from expensedaddy.config import Settings, get_settings
from expensedaddy.metrics import DashboardMetrics, calendar_month, compute_dashboard
from expensedaddy.metrics.engine import CalendarMonth
from expensedaddy.models.activity import ActivityItem
from expensedaddy.models.backup import BackupDocument
from expensedaddy.models.finance import (
    BudgetHistory,
    Expense,
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
    SavedCard,
    SavedCardUpdate,
    SavingsGoal,
    SavingsGoalUpdate,
    UserProfile,
)
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
from expensedaddy.services.auth import AuthClient
from expensedaddy.services.storage import JsonFileStore, KeyValueStoreInterface


logger = structlog.get_logger(__name__)


class BudgetSnapshot(BaseModel):
    """
    Every collection as read by one refresh.

    Each collection is internally consistent; collections are read
    concurrently, so there is no ordering guarantee between them.
    """
    model_config = ConfigDict(frozen=True)

    expenses: list[Expense] = []
    loans: list[LoanEntry] = []
    fixed_expenses: list[FixedExpense] = []
    profile: UserProfile = UserProfile()
    savings_goals: list[SavingsGoal] = []
    saved_cards: list[SavedCard] = []
    activity_log: list[ActivityItem] = []
    budget_history: list[BudgetHistory] = []
    shopping_list: list[str] = []


class BudgetService:
    """
    Service object over the local data layer.

    Holds the repositories, the last snapshot, and the loading flag.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        activity_log_limit: int = 200,
        default_profile: Optional[UserProfile] = None,
        backup_app_name: str = "ExpenseDaddy",
        backup_version: int = 2,
    ):
        self._store = store
        self.activity = ActivityLogRecorder(store, limit=activity_log_limit)
        self.expenses = ExpenseRepository(store, self.activity)
        self.loans = LoanRepository(store, self.activity)
        self.fixed_expenses = FixedExpenseRepository(store, self.activity)
        self.savings_goals = SavingsGoalRepository(store, self.activity)
        self.saved_cards = SavedCardRepository(store, self.activity)
        self.budget_history = BudgetHistoryRepository(store)
        self.profile = UserProfileRepository(
            store,
            self.activity,
            self.budget_history,
            default_profile=default_profile or UserProfile(),
        )
        self.shopping_list = ShoppingListRepository(store)
        self.backup = BackupCodec(
            store,
            self.profile,
            app_name=backup_app_name,
            version=backup_version,
        )
        self._snapshot = BudgetSnapshot()
        self._is_loading = True

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    @property
    def snapshot(self) -> BudgetSnapshot:
        """The collections as of the last refresh."""
        return self._snapshot

    @property
    def is_loading(self) -> bool:
        """True until the first refresh completes."""
        return self._is_loading

    async def refresh(self) -> BudgetSnapshot:
        """Read every collection concurrently and publish a new snapshot."""
        (
            expenses,
            loans,
            fixed_expenses,
            profile,
            savings_goals,
            saved_cards,
            activity_log,
            budget_history,
            shopping_list,
        ) = await asyncio.gather(
            self.expenses.list(),
            self.loans.list(),
            self.fixed_expenses.list(),
            self.profile.get(),
            self.savings_goals.list(),
            self.saved_cards.list(),
            self.activity.list(),
            self.budget_history.list(),
            self.shopping_list.items(),
        )
        self._snapshot = BudgetSnapshot(
            expenses=expenses,
            loans=loans,
            fixed_expenses=fixed_expenses,
            profile=profile,
            savings_goals=savings_goals,
            saved_cards=saved_cards,
            activity_log=activity_log,
            budget_history=budget_history,
            shopping_list=shopping_list,
        )
        self._is_loading = False
        return self._snapshot

    def dashboard(self, today: Optional[date] = None) -> DashboardMetrics:
        """Metrics for the current snapshot (no I/O)."""
        snap = self._snapshot
        return compute_dashboard(
            snap.expenses,
            snap.loans,
            snap.fixed_expenses,
            snap.profile,
            today=today,
        )

    def calendar(self, year: int, month: int) -> CalendarMonth:
        """Per-day totals for any month, independent of today."""
        return calendar_month(self._snapshot.expenses, year, month)

    # -------------------------------------------------------------------------
    # Mutations: delegate, then refresh
    # -------------------------------------------------------------------------

    async def add_expense(self, fields: Union[NewExpense, dict[str, Any]]) -> Expense:
        expense = await self.expenses.add(fields)
        await self.refresh()
        return expense

    async def update_expense(
        self,
        expense_id: str,
        patch: Union[ExpenseUpdate, dict[str, Any]],
    ) -> Optional[Expense]:
        expense = await self.expenses.update(expense_id, patch)
        await self.refresh()
        return expense

    async def delete_expense(self, expense_id: str) -> None:
        await self.expenses.delete(expense_id)
        await self.refresh()

    async def add_loan(self, fields: Union[NewLoanEntry, dict[str, Any]]) -> LoanEntry:
        loan = await self.loans.add(fields)
        await self.refresh()
        return loan

    async def update_loan(
        self,
        loan_id: str,
        patch: Union[LoanUpdate, dict[str, Any]],
    ) -> Optional[LoanEntry]:
        loan = await self.loans.update(loan_id, patch)
        await self.refresh()
        return loan

    async def toggle_loan_paid(self, loan_id: str) -> Optional[LoanEntry]:
        """Flip a loan's paid flag, keeping `paid_date` paired with it."""
        loan = await self.loans.get(loan_id)
        if loan is None:
            return None
        if loan.is_paid:
            updated = await self.loans.mark_unpaid(loan_id)
        else:
            updated = await self.loans.mark_paid(loan_id)
        await self.refresh()
        return updated

    async def delete_loan(self, loan_id: str) -> None:
        await self.loans.delete(loan_id)
        await self.refresh()

    async def add_fixed_expense(
        self,
        fields: Union[NewFixedExpense, dict[str, Any]],
    ) -> FixedExpense:
        fixed = await self.fixed_expenses.add(fields)
        await self.refresh()
        return fixed

    async def update_fixed_expense(
        self,
        fixed_id: str,
        patch: Union[FixedExpenseUpdate, dict[str, Any]],
    ) -> Optional[FixedExpense]:
        fixed = await self.fixed_expenses.update(fixed_id, patch)
        await self.refresh()
        return fixed

    async def delete_fixed_expense(self, fixed_id: str) -> None:
        await self.fixed_expenses.delete(fixed_id)
        await self.refresh()

    async def update_profile(self, patch: Union[ProfileUpdate, dict[str, Any]]) -> UserProfile:
        profile = await self.profile.update(patch)
        await self.refresh()
        return profile

    async def add_savings_goal(
        self,
        fields: Union[NewSavingsGoal, dict[str, Any]],
    ) -> SavingsGoal:
        goal = await self.savings_goals.add(fields)
        await self.refresh()
        return goal

    async def update_savings_goal(
        self,
        goal_id: str,
        patch: Union[SavingsGoalUpdate, dict[str, Any]],
    ) -> Optional[SavingsGoal]:
        goal = await self.savings_goals.update(goal_id, patch)
        await self.refresh()
        return goal

    async def add_funds_to_goal(self, goal_id: str, amount: float) -> Optional[SavingsGoal]:
        goal = await self.savings_goals.add_funds(goal_id, amount)
        await self.refresh()
        return goal

    async def delete_savings_goal(self, goal_id: str) -> None:
        await self.savings_goals.delete(goal_id)
        await self.refresh()

    async def add_saved_card(self, fields: Union[NewSavedCard, dict[str, Any]]) -> SavedCard:
        card = await self.saved_cards.add(fields)
        await self.refresh()
        return card

    async def update_saved_card(
        self,
        card_id: str,
        patch: Union[SavedCardUpdate, dict[str, Any]],
    ) -> Optional[SavedCard]:
        card = await self.saved_cards.update(card_id, patch)
        await self.refresh()
        return card

    async def delete_saved_card(self, card_id: str) -> None:
        await self.saved_cards.delete(card_id)
        await self.refresh()

    async def set_shopping_list(self, items: list[str]) -> list[str]:
        result = await self.shopping_list.replace(items)
        await self.refresh()
        return result

    # -------------------------------------------------------------------------
    # Backup
    # -------------------------------------------------------------------------

    async def export_backup(self) -> BackupDocument:
        return await self.backup.export_document()

    async def import_backup(self, document: Union[str, bytes, dict[str, Any]]) -> list[str]:
        """
        Restore a backup and refresh.

        InvalidBackupError leaves storage untouched. A storage failure
        mid-import leaves some collections replaced (see BackupCodec);
        the snapshot is refreshed either way so it shows what is stored.
        """
        try:
            return await self.backup.import_document(document)
        finally:
            await self.refresh()


def create_app_components(
    settings: Optional[Settings] = None,
    store: Optional[KeyValueStoreInterface] = None,
    with_auth: bool = True,
) -> tuple[BudgetService, Optional[AuthClient]]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use; defaults to get_settings().
        store: Store to use; defaults to a JsonFileStore in the
               configured data directory.
        with_auth: Whether to build the account service client.

    Returns:
        (budget_service, auth_client)
    """
    settings = settings or get_settings()
    app = settings.app
    configure_logging(app.log_level)

    if store is None:
        storage = settings.storage
        store = JsonFileStore(
            storage.data_dir,
            key_prefix=storage.key_prefix,
            indent=storage.indent,
        )

    service = BudgetService(
        store,
        activity_log_limit=app.activity_log_limit,
        default_profile=UserProfile(
            name=app.default_profile_name,
            currency=app.default_currency,
        ),
        backup_app_name=app.backup_app_name,
        backup_version=app.backup_version,
    )

    auth_client = AuthClient(settings.auth) if with_auth else None

    logger.info(
        "app_components_created",
        store=type(store).__name__,
        environment=app.app_environment,
        auth=auth_client is not None,
    )
    return service, auth_client
