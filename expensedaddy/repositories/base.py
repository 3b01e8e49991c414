"""
Collection Repository Base

DESIGN DECISION: A repository owns exactly one collection and performs
every change as read-whole / modify / write-whole under that
collection's lock. Holding the lock across the read and the write means
two overlapping adds both land; without it the second write would
silently drop the first.

Untouched records are written back exactly as they were read. Only the
record being created or patched is re-serialized through its model.
"""

from typing import Any, Callable, ClassVar, Generic, Optional, TypeVar, Union

import structlog

from expensedaddy.audit import ActivityLogRecorder
from expensedaddy.models.base import PatchModel, StoredModel, apply_patch
from expensedaddy.services.storage import (
    Collection,
    KeyValueStoreInterface,
    NotFoundError,
)


R = TypeVar("R", bound=StoredModel)
P = TypeVar("P", bound=PatchModel)


class CollectionRepository(Generic[R, P]):
    """
    Generic CRUD over one ordered collection of records.

    Subclasses set `collection`, `model`, `patch_model` and whether new
    records go to the front (`prepend = True`, newest first) or the back.
    """

    collection: ClassVar[Collection]
    model: ClassVar[type[StoredModel]]
    patch_model: ClassVar[type[PatchModel]]
    prepend: ClassVar[bool] = True

    def __init__(
        self,
        store: KeyValueStoreInterface,
        activity: ActivityLogRecorder,
    ):
        self._store = store
        self._activity = activity
        self._logger = structlog.get_logger(__name__).bind(
            collection=self.collection.value,
        )

    async def _load_raw(self) -> list[dict[str, Any]]:
        return await self._store.get(self.collection, [])

    async def list(self) -> list[R]:
        """Every record, in stored order."""
        return [self.model.model_validate(item) for item in await self._load_raw()]

    async def get(self, record_id: str) -> Optional[R]:
        """The record with this id, or None."""
        for item in await self._load_raw():
            if item.get("id") == record_id:
                return self.model.model_validate(item)
        return None

    async def get_or_raise(self, record_id: str) -> R:
        record = await self.get(record_id)
        if record is None:
            raise NotFoundError(f"{self.collection.value} record not found: {record_id}")
        return record

    def _coerce_patch(self, patch: Union[P, dict[str, Any]]) -> P:
        if isinstance(patch, PatchModel):
            return patch
        return self.patch_model.model_validate(patch)

    async def _insert(self, record: R) -> R:
        async with self._store.lock(self.collection):
            items = await self._load_raw()
            if self.prepend:
                items.insert(0, record.to_storage())
            else:
                items.append(record.to_storage())
            await self._store.set(self.collection, items)
        self._logger.info("record_added", record_id=record.id)
        return record

    async def _replace(
        self,
        record_id: str,
        patch: Union[PatchModel, Callable[[R], PatchModel]],
    ) -> Optional[tuple[R, R]]:
        """
        Shallow-merge a patch into one record.

        `patch` may also be a function of the current record, for changes
        derived from it (increments); it runs under the collection lock.

        Returns (before, after), or None when no record has this id.
        Nothing is written in that case.
        """
        async with self._store.lock(self.collection):
            items = await self._load_raw()
            for index, item in enumerate(items):
                if item.get("id") == record_id:
                    break
            else:
                self._logger.info("record_not_found", record_id=record_id, operation="update")
                return None

            before = self.model.model_validate(items[index])
            if not isinstance(patch, PatchModel):
                patch = patch(before)
            after = apply_patch(before, patch)
            items[index] = after.to_storage()
            await self._store.set(self.collection, items)

        self._logger.info(
            "record_updated",
            record_id=record_id,
            fields=sorted(patch.changes()),
        )
        return before, after

    async def _remove(self, record_id: str) -> Optional[R]:
        """
        Hard-delete one record.

        Returns the removed record, or None if there was none, in
        which case nothing is written.
        """
        async with self._store.lock(self.collection):
            items = await self._load_raw()
            removed = next((item for item in items if item.get("id") == record_id), None)
            if removed is not None:
                await self._store.set(
                    self.collection,
                    [item for item in items if item.get("id") != record_id],
                )

        if removed is None:
            self._logger.info("record_not_found", record_id=record_id, operation="delete")
            return None

        self._logger.info("record_deleted", record_id=record_id)
        return self.model.model_validate(removed)
