"""
Profile, Budget History and Shopping List Repositories

The profile is a singleton: reading it when nothing is stored
materializes (and persists) a default one.
"""

from typing import Any, Iterable, Union

import structlog

from expensedaddy.audit import ActivityLogRecorder
from expensedaddy.models.activity import ActivityEntryBuilder
from expensedaddy.models.base import apply_patch, generate_id, utc_now_iso
from expensedaddy.models.finance import BudgetHistory, ProfileUpdate, UserProfile
from expensedaddy.services.storage import Collection, KeyValueStoreInterface


logger = structlog.get_logger(__name__)


class BudgetHistoryRepository:
    """Every distinct monthly budget ever set, newest first."""

    def __init__(self, store: KeyValueStoreInterface):
        self._store = store

    async def list(self) -> list[BudgetHistory]:
        raw = await self._store.get(Collection.BUDGET_HISTORY, [])
        return [BudgetHistory.model_validate(item) for item in raw]

    async def append(self, amount: float) -> BudgetHistory:
        entry = BudgetHistory(id=generate_id(), amount=amount, date=utc_now_iso())
        async with self._store.lock(Collection.BUDGET_HISTORY):
            history = await self._store.get(Collection.BUDGET_HISTORY, [])
            history.insert(0, entry.to_storage())
            await self._store.set(Collection.BUDGET_HISTORY, history)
        logger.info("budget_history_appended", amount=amount)
        return entry


class UserProfileRepository:
    """
    The singleton local profile.

    Changing `monthly_budget` to a different value appends a budget
    history entry and an activity entry. Setting it to the value it
    already has writes neither.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        activity: ActivityLogRecorder,
        history: BudgetHistoryRepository,
        default_profile: UserProfile = UserProfile(),
    ):
        self._store = store
        self._activity = activity
        self._history = history
        self._default = default_profile

    async def _read(self) -> UserProfile:
        raw = await self._store.get(Collection.USER_PROFILE)
        if raw is None:
            await self._store.set(Collection.USER_PROFILE, self._default.to_storage())
            logger.info("profile_materialized", name=self._default.name)
            return self._default
        return UserProfile.model_validate(raw)

    async def get(self) -> UserProfile:
        async with self._store.lock(Collection.USER_PROFILE):
            return await self._read()

    async def update(self, patch: Union[ProfileUpdate, dict[str, Any]]) -> UserProfile:
        if not isinstance(patch, ProfileUpdate):
            patch = ProfileUpdate.model_validate(patch)

        async with self._store.lock(Collection.USER_PROFILE):
            current = await self._read()
            updated = apply_patch(current, patch)
            await self._store.set(Collection.USER_PROFILE, updated.to_storage())

        budget_changed = (
            "monthly_budget" in patch.changes()
            and updated.monthly_budget != current.monthly_budget
        )
        if budget_changed:
            await self._history.append(updated.monthly_budget)
            await self._activity.record_entry(
                ActivityEntryBuilder.budget_updated(updated.monthly_budget)
            )

        logger.info(
            "profile_updated",
            fields=sorted(patch.changes()),
            budget_changed=budget_changed,
        )
        return updated


class ShoppingListRepository:
    """A plain list of strings, replaced wholesale or edited item by item."""

    def __init__(self, store: KeyValueStoreInterface):
        self._store = store

    async def items(self) -> list[str]:
        return await self._store.get(Collection.SHOPPING_LIST, [])

    async def replace(self, items: Iterable[str]) -> list[str]:
        new_items = list(items)
        async with self._store.lock(Collection.SHOPPING_LIST):
            await self._store.set(Collection.SHOPPING_LIST, new_items)
        return new_items

    async def add_item(self, item: str) -> list[str]:
        item = item.strip()
        if not item:
            raise ValueError("Shopping list item cannot be blank")
        async with self._store.lock(Collection.SHOPPING_LIST):
            current = await self._store.get(Collection.SHOPPING_LIST, [])
            current.append(item)
            await self._store.set(Collection.SHOPPING_LIST, current)
        return current

    async def remove_item(self, item: str) -> list[str]:
        """Remove the first matching item. Unknown items are ignored."""
        async with self._store.lock(Collection.SHOPPING_LIST):
            current = await self._store.get(Collection.SHOPPING_LIST, [])
            if item not in current:
                return current
            current.remove(item)
            await self._store.set(Collection.SHOPPING_LIST, current)
        return current

    async def list(self) -> list[str]:
        return await self.items()
