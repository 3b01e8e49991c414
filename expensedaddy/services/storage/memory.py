"""
In-Memory Storage Implementation

Holds each collection as a serialized JSON string, so callers get the
same copy semantics as a real backend: what you read is yours to
mutate, and only `set` changes what is stored.
"""

import json
from typing import Any

from expensedaddy.services.storage.interface import (
    Collection,
    KeyValueStoreInterface,
)


class InMemoryStore(KeyValueStoreInterface):
    """Volatile store for tests and throwaway sessions."""

    def __init__(self, key_prefix: str = "@budgetflow_"):
        super().__init__(key_prefix=key_prefix)
        self._data: dict[str, str] = {}

    async def get(self, collection: Collection, default: Any = None) -> Any:
        raw = self._data.get(self.storage_key(collection))
        if raw is None:
            return self._fallback(default)
        return json.loads(raw)

    async def set(self, collection: Collection, value: Any) -> None:
        self._data[self.storage_key(collection)] = json.dumps(value, ensure_ascii=False)

    async def remove(self, collection: Collection) -> None:
        self._data.pop(self.storage_key(collection), None)

    def keys(self) -> list[str]:
        """Storage keys currently holding a value."""
        return sorted(self._data)
