"""
Activity Log Recorder

DESIGN DECISION: Every mutation of a collection is recorded.
This provides:
1. A history the user can scroll through
2. Debugging context when totals look wrong
3. A trace of budget changes alongside the budget history

The recorder:
- Prepends the newest entry and keeps at most `limit` entries
- Runs after the primary write, outside its transactional boundary:
  if the log write fails the mutation is already persisted
- Also emits every entry to the structured local log
"""

import logging
from typing import Optional

import structlog

from expensedaddy.models.activity import ActivityEntry, ActivityItem, ActivityType
from expensedaddy.models.base import generate_id, utc_now_iso
from expensedaddy.services.storage import (
    Collection,
    KeyValueStoreInterface,
    StorageError,
)


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Set the stdlib level that `filter_by_level` checks for our loggers."""
    logging.basicConfig(level=level, format="%(message)s")
    logging.getLogger("expensedaddy").setLevel(level)


DEFAULT_ACTIVITY_LIMIT = 200


class ActivityLogRecorder:
    """
    Append-only, bounded audit trail of collection mutations.

    Entries are kept newest first. After every append the log holds
    at most `limit` entries; the oldest are evicted.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        limit: int = DEFAULT_ACTIVITY_LIMIT,
    ):
        """
        Initialize the recorder.

        Args:
            store: Store holding the activity log collection.
            limit: Maximum number of entries kept.
        """
        if limit < 1:
            raise ValueError("Activity log limit must be at least 1")
        self._store = store
        self._limit = limit
        self._logger = structlog.get_logger(__name__)

    @property
    def limit(self) -> int:
        return self._limit

    async def list(self) -> list[ActivityItem]:
        """All entries, newest first."""
        raw = await self._store.get(Collection.ACTIVITY_LOG, [])
        return [ActivityItem.model_validate(item) for item in raw]

    async def record(
        self,
        type: ActivityType,
        description: str,
        amount: Optional[float] = None,
    ) -> ActivityItem:
        """
        Prepend a new entry and truncate the log to `limit` entries.

        Returns the stored entry. Storage failures are logged and
        re-raised.
        """
        item = ActivityItem(
            id=generate_id(),
            type=ActivityType(type),
            description=description,
            date=utc_now_iso(),
            amount=amount,
        )

        try:
            async with self._store.lock(Collection.ACTIVITY_LOG):
                log = await self._store.get(Collection.ACTIVITY_LOG, [])
                log.insert(0, item.to_storage())
                del log[self._limit:]
                await self._store.set(Collection.ACTIVITY_LOG, log)
        except StorageError as e:
            self._logger.error(
                "activity_storage_failed",
                error=str(e),
                **item.to_log_dict(),
            )
            raise

        self._logger.info("activity_recorded", **item.to_log_dict())
        return item

    async def record_entry(self, entry: ActivityEntry) -> ActivityItem:
        """Record an entry prepared by ActivityEntryBuilder."""
        return await self.record(entry.type, entry.description, entry.amount)
