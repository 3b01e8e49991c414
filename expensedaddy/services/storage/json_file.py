"""
JSON File Storage Implementation

DESIGN DECISION: Each collection lives in its own JSON file under the
configured data directory because:
1. Users can inspect and back up their data with ordinary tools
2. No database setup required
3. A write touches only the collection that changed

TRADEOFFS:
- Every write re-serializes the whole collection (O(n) per write);
  fine for personal-finance volumes, thousands of records not millions
- No transactions across files: a multi-collection change can be
  interrupted halfway

Writes go to a temporary file that is then renamed over the target,
so a crash mid-write leaves either the old or the new file, never a
truncated one.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Optional

import structlog

from expensedaddy.services.storage.interface import (
    Collection,
    CorruptDataError,
    KeyValueStoreInterface,
    StorageIOError,
)


logger = structlog.get_logger(__name__)


class JsonFileStore(KeyValueStoreInterface):
    """
    Key-value store backed by one JSON file per collection.

    File I/O runs in a worker thread so the event loop is never blocked.
    """

    def __init__(
        self,
        data_dir: Path,
        key_prefix: str = "@budgetflow_",
        indent: Optional[int] = None,
    ):
        super().__init__(key_prefix=key_prefix)
        self._data_dir = Path(data_dir)
        self._indent = indent

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, collection: Collection) -> Path:
        return self._data_dir / f"{self.storage_key(collection)}.json"

    async def get(self, collection: Collection, default: Any = None) -> Any:
        path = self.path_for(collection)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return self._fallback(default)
        except OSError as e:
            logger.error("storage_read_failed", key=self.storage_key(collection), error=str(e))
            raise StorageIOError(f"Failed to read {path}: {e}") from e

        if not text:
            return self._fallback(default)

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            logger.error("storage_corrupt", key=self.storage_key(collection), error=str(e))
            raise CorruptDataError(f"Stored value at {path} is not valid JSON: {e}") from e

    async def set(self, collection: Collection, value: Any) -> None:
        path = self.path_for(collection)
        text = json.dumps(value, indent=self._indent, ensure_ascii=False)
        try:
            await asyncio.to_thread(self._write_atomic, path, text)
        except OSError as e:
            logger.error("storage_write_failed", key=self.storage_key(collection), error=str(e))
            raise StorageIOError(f"Failed to write {path}: {e}") from e

    async def remove(self, collection: Collection) -> None:
        path = self.path_for(collection)
        try:
            await asyncio.to_thread(path.unlink, missing_ok=True)
        except OSError as e:
            logger.error("storage_remove_failed", key=self.storage_key(collection), error=str(e))
            raise StorageIOError(f"Failed to remove {path}: {e}") from e

    @staticmethod
    def _write_atomic(path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
