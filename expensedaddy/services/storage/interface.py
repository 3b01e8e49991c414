"""
Abstract Key-Value Store Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep collections in plain JSON files on a device
2. Use in-memory storage for testing
3. Swap in another durable backend later
4. Keep repositories decoupled from storage implementation

The interface is intentionally tiny: a fixed set of named collections,
each holding one JSON value that is read whole and written whole.
There are no partial or delta writes.
"""

import asyncio
import copy
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any


class Collection(str, Enum):
    """
    The named collections kept in the store.

    The value is the collection's suffix; the store prepends its key
    prefix (`@budgetflow_` by default) to form the storage key.
    """
    EXPENSES = "expenses"
    LOANS = "loans"
    FIXED_EXPENSES = "fixed_expenses"
    SAVINGS_GOALS = "savings_goals"
    SAVED_CARDS = "saved_cards"
    ACTIVITY_LOG = "activity_log"
    BUDGET_HISTORY = "budget_history"
    USER_PROFILE = "user_profile"
    SHOPPING_LIST = "shopping_list"


class KeyValueStoreInterface(ABC):
    """
    Abstract interface for the persistent key-value store.

    Any storage implementation must implement `get`, `set` and `remove`.

    Every operation is a coroutine and suspends the caller until the
    backend responds. Failures propagate as StorageError subclasses;
    nothing is retried here.
    """

    def __init__(self, key_prefix: str = "@budgetflow_"):
        self._key_prefix = key_prefix
        self._locks: dict[Collection, asyncio.Lock] = {}

    def storage_key(self, collection: Collection) -> str:
        """Full key under which a collection is stored."""
        return f"{self._key_prefix}{Collection(collection).value}"

    def lock(self, collection: Collection) -> asyncio.Lock:
        """
        The mutual-exclusion lock for one collection.

        Read-modify-write sequences hold it so overlapping writers to
        the same collection queue up instead of overwriting each other.
        Distinct collections never contend.
        """
        collection = Collection(collection)
        if collection not in self._locks:
            self._locks[collection] = asyncio.Lock()
        return self._locks[collection]

    @staticmethod
    def _fallback(default: Any) -> Any:
        # Callers mutate what they read; never hand out a shared default.
        return copy.deepcopy(default)

    @abstractmethod
    async def get(self, collection: Collection, default: Any = None) -> Any:
        """
        Read a collection's JSON value.

        Args:
            collection: Which collection to read
            default: Returned (as a copy) when nothing is stored yet

        Returns:
            The decoded JSON value, or the default

        Raises:
            StorageIOError: If the backend cannot be read
            CorruptDataError: If the stored value is not valid JSON
        """
        pass

    @abstractmethod
    async def set(self, collection: Collection, value: Any) -> None:
        """
        Replace a collection's JSON value.

        Args:
            collection: Which collection to write
            value: Any JSON-serializable value

        Raises:
            StorageIOError: If the backend cannot be written
        """
        pass

    @abstractmethod
    async def remove(self, collection: Collection) -> None:
        """
        Forget a collection entirely. Removing a missing one is a no-op.

        Raises:
            StorageIOError: If the backend cannot be written
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageIOError(StorageError):
    """The underlying store is unavailable or unwritable."""
    pass


class CorruptDataError(StorageError):
    """A stored value could not be decoded as JSON."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
