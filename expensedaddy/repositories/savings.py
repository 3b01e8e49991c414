"""
Savings Goal and Saved Card Repositories

Both collections keep insertion order (new records are appended).
"""

from typing import Any, Optional, Union

from expensedaddy.models.activity import ActivityEntryBuilder
from expensedaddy.models.base import generate_id, utc_now_iso
from expensedaddy.models.finance import (
    NewSavedCard,
    NewSavingsGoal,
    SavedCard,
    SavedCardUpdate,
    SavingsGoal,
    SavingsGoalUpdate,
)
from expensedaddy.repositories.base import CollectionRepository
from expensedaddy.services.storage import Collection
from expensedaddy.validation import require_positive_amount


class SavingsGoalRepository(CollectionRepository[SavingsGoal, SavingsGoalUpdate]):
    """Savings goals. `current_amount` is never clamped at the target."""

    collection = Collection.SAVINGS_GOALS
    model = SavingsGoal
    patch_model = SavingsGoalUpdate
    prepend = False

    async def add(self, fields: Union[NewSavingsGoal, dict[str, Any]]) -> SavingsGoal:
        new = fields if isinstance(fields, NewSavingsGoal) else NewSavingsGoal.model_validate(fields)
        goal = SavingsGoal(
            id=generate_id(),
            created_at=utc_now_iso(),
            name=new.name,
            target_amount=new.target_amount,
            current_amount=new.current_amount,
        )
        await self._insert(goal)
        await self._activity.record_entry(
            ActivityEntryBuilder.goal_added(goal.name, goal.target_amount)
        )
        return goal

    async def update(
        self,
        goal_id: str,
        patch: Union[SavingsGoalUpdate, dict[str, Any]],
    ) -> Optional[SavingsGoal]:
        result = await self._replace(goal_id, self._coerce_patch(patch))
        if result is None:
            return None
        _, updated = result
        await self._activity.record_entry(ActivityEntryBuilder.goal_updated(updated.name))
        return updated

    async def add_funds(self, goal_id: str, amount: float) -> Optional[SavingsGoal]:
        """
        Move money into a goal.

        The increment is read and written under one lock, so concurrent
        fundings all land.
        """
        require_positive_amount(amount)
        result = await self._replace(
            goal_id,
            lambda goal: SavingsGoalUpdate(current_amount=goal.current_amount + amount),
        )
        if result is None:
            return None
        _, updated = result
        await self._activity.record_entry(ActivityEntryBuilder.goal_updated(updated.name))
        return updated

    async def delete(self, goal_id: str) -> None:
        removed = await self._remove(goal_id)
        if removed is not None:
            await self._activity.record_entry(
                ActivityEntryBuilder.goal_deleted(removed.name, removed.target_amount)
            )


class SavedCardRepository(CollectionRepository[SavedCard, SavedCardUpdate]):
    """Saved cards. More than one may be flagged default."""

    collection = Collection.SAVED_CARDS
    model = SavedCard
    patch_model = SavedCardUpdate
    prepend = False

    async def add(self, fields: Union[NewSavedCard, dict[str, Any]]) -> SavedCard:
        new = fields if isinstance(fields, NewSavedCard) else NewSavedCard.model_validate(fields)
        card = SavedCard(
            id=generate_id(),
            card_name=new.card_name,
            card_number=new.card_number,
            expiry_date=new.expiry_date,
            card_type=new.card_type,
            is_default=new.is_default,
        )
        await self._insert(card)
        await self._activity.record_entry(ActivityEntryBuilder.card_added(card.card_name))
        return card

    async def update(
        self,
        card_id: str,
        patch: Union[SavedCardUpdate, dict[str, Any]],
    ) -> Optional[SavedCard]:
        result = await self._replace(card_id, self._coerce_patch(patch))
        if result is None:
            return None
        _, updated = result
        await self._activity.record_entry(ActivityEntryBuilder.card_updated(updated.card_name))
        return updated

    async def delete(self, card_id: str) -> None:
        removed = await self._remove(card_id)
        if removed is not None:
            await self._activity.record_entry(ActivityEntryBuilder.card_deleted(removed.card_name))
