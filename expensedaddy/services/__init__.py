"""Services package."""

from expensedaddy.services.auth import (
    AuthClient,
    AuthenticationError,
    AuthError,
    AuthServiceError,
    RemoteProfileUpdate,
    RemoteUser,
)
from expensedaddy.services.storage import (
    Collection,
    CorruptDataError,
    InMemoryStore,
    JsonFileStore,
    KeyValueStoreInterface,
    NotFoundError,
    StorageError,
    StorageIOError,
)

__all__ = [
    # Account service
    "AuthClient",
    "AuthenticationError",
    "AuthError",
    "AuthServiceError",
    "RemoteProfileUpdate",
    "RemoteUser",
    # Storage services
    "Collection",
    "CorruptDataError",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStoreInterface",
    "NotFoundError",
    "StorageError",
    "StorageIOError",
]
