"""
Storage Services Package

Provides the abstract key-value store interface and its implementations.
JSON files are the durable backend; the in-memory store backs tests.
"""

from expensedaddy.services.storage.interface import (
    Collection,
    CorruptDataError,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
    StorageIOError,
)
from expensedaddy.services.storage.json_file import JsonFileStore
from expensedaddy.services.storage.memory import InMemoryStore

__all__ = [
    # Interface
    "Collection",
    "KeyValueStoreInterface",
    # Exceptions
    "CorruptDataError",
    "NotFoundError",
    "StorageError",
    "StorageIOError",
    # Implementations
    "InMemoryStore",
    "JsonFileStore",
]
