"""
Remote Account Service Client

The account service owns login, registration and the server-side user
profile. This client only consumes it.

DESIGN NOTE: The server-side profile (`RemoteUser`) and the local
`UserProfile` both carry currency and budget fields, and nothing keeps
them in sync. They are two separate representations; this client does
not write through to local storage and local storage does not push to
the server.

Requests that fail to connect are retried with exponential backoff.
HTTP error responses are never retried.
"""

from typing import Any, Optional

import requests
import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from expensedaddy.config import AuthSettings


logger = structlog.get_logger(__name__)


class AuthError(Exception):
    """Base exception for account service errors."""
    pass


class AuthenticationError(AuthError):
    """The service answered 401: not logged in or wrong credentials."""
    pass


class AuthServiceError(AuthError):
    """Any other failure talking to the account service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RemoteUser(BaseModel):
    """The account as the server sees it."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    id: str
    username: str
    display_name: str = "User"
    currency: str = "$"
    monthly_budget: float = 0
    daily_budget_target: float = 0
    created_at: Optional[str] = None


class RemoteProfileUpdate(BaseModel):
    """Fields the server accepts on PUT /api/auth/profile."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    display_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    currency: Optional[str] = Field(default=None, min_length=1, max_length=5)
    monthly_budget: Optional[float] = Field(default=None, ge=0)
    daily_budget_target: Optional[float] = Field(default=None, ge=0)


class AuthClient:
    """
    Client for the /api/auth endpoints.

    Holds a requests.Session so the login cookie is reused across calls.
    """

    def __init__(
        self,
        settings: Optional[AuthSettings] = None,
        session: Optional[requests.Session] = None,
    ):
        self._settings = settings or AuthSettings()
        self._session = session or requests.Session()
        self._retrying = Retrying(
            stop=stop_after_attempt(self._settings.max_attempts),
            wait=wait_exponential(multiplier=self._settings.retry_backoff, max=10),
            retry=retry_if_exception_type(requests.ConnectionError),
            reraise=True,
        )

    def _url(self, path: str) -> str:
        return f"{self._settings.base_url}{path}"

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        try:
            response = self._retrying(
                self._session.request,
                method,
                self._url(path),
                json=payload,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error("auth_request_failed", method=method, path=path, error=str(e))
            raise AuthServiceError(f"Could not reach account service: {e}") from e

        if response.status_code == 401:
            raise AuthenticationError(self._error_message(response, "Not authenticated"))
        if not response.ok:
            logger.warning("auth_request_rejected", method=method, path=path, status=response.status_code)
            raise AuthServiceError(
                self._error_message(response, f"Account service returned {response.status_code}"),
                status_code=response.status_code,
            )
        return response

    @staticmethod
    def _error_message(response: requests.Response, fallback: str) -> str:
        try:
            body = response.json()
        except ValueError:
            return fallback
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return fallback

    def register(self, username: str, password: str) -> RemoteUser:
        response = self._request(
            "POST", "/api/auth/register", {"username": username, "password": password}
        )
        logger.info("auth_registered", username=username)
        return RemoteUser.model_validate(response.json())

    def login(self, username: str, password: str) -> RemoteUser:
        """Raises AuthenticationError on bad credentials."""
        response = self._request(
            "POST", "/api/auth/login", {"username": username, "password": password}
        )
        logger.info("auth_logged_in", username=username)
        return RemoteUser.model_validate(response.json())

    def logout(self) -> None:
        self._request("POST", "/api/auth/logout")
        logger.info("auth_logged_out")

    def me(self) -> Optional[RemoteUser]:
        """The current user, or None when not logged in."""
        try:
            response = self._request("GET", "/api/auth/me")
        except AuthenticationError:
            return None
        return RemoteUser.model_validate(response.json())

    def update_profile(self, updates: RemoteProfileUpdate) -> RemoteUser:
        payload = updates.model_dump(by_alias=True, exclude_none=True)
        response = self._request("PUT", "/api/auth/profile", payload)
        return RemoteUser.model_validate(response.json())

    def change_password(self, current_password: str, new_password: str) -> None:
        """Raises AuthenticationError when the current password is wrong."""
        self._request(
            "PUT",
            "/api/auth/password",
            {"currentPassword": current_password, "newPassword": new_password},
        )
        logger.info("auth_password_changed")
