"""Account service client package."""

from expensedaddy.services.auth.client import (
    AuthClient,
    AuthenticationError,
    AuthError,
    AuthServiceError,
    RemoteProfileUpdate,
    RemoteUser,
)

__all__ = [
    "AuthClient",
    "AuthenticationError",
    "AuthError",
    "AuthServiceError",
    "RemoteProfileUpdate",
    "RemoteUser",
]
