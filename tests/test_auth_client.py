"""
Tests for the account service client.

The HTTP session is a mock; nothing goes over the network.
"""

from unittest.mock import MagicMock

import pytest
import requests

from expensedaddy.config import AuthSettings
from expensedaddy.services.auth import (
    AuthClient,
    AuthenticationError,
    AuthServiceError,
    RemoteProfileUpdate,
)


USER = {
    "id": "u1",
    "username": "sam",
    "displayName": "Sam",
    "currency": "£",
    "monthlyBudget": 400,
    "dailyBudgetTarget": 15,
    "createdAt": "2024-01-01T00:00:00.000Z",
}


def make_response(status_code=200, body=None):
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400
    if body is None:
        response.json.side_effect = ValueError("no body")
    else:
        response.json.return_value = body
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(session):
    settings = AuthSettings(base_url="http://auth.test/", max_attempts=3, retry_backoff=0)
    return AuthClient(settings, session=session)


class TestAuthClient:
    """Tests for AuthClient."""

    def test_login_returns_remote_user(self, client, session):
        session.request.return_value = make_response(200, USER)
        user = client.login("sam", "secret")
        assert user.display_name == "Sam"
        assert user.monthly_budget == 400
        session.request.assert_called_once_with(
            "POST",
            "http://auth.test/api/auth/login",
            json={"username": "sam", "password": "secret"},
            timeout=10.0,
        )

    def test_login_bad_credentials(self, client, session):
        session.request.return_value = make_response(401, {"message": "Invalid credentials"})
        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            client.login("sam", "wrong")

    def test_me_returns_none_when_logged_out(self, client, session):
        session.request.return_value = make_response(401, {"message": "Not authenticated"})
        assert client.me() is None

    def test_me_returns_user(self, client, session):
        session.request.return_value = make_response(200, USER)
        assert client.me().username == "sam"

    def test_server_error_carries_status(self, client, session):
        session.request.return_value = make_response(500)
        with pytest.raises(AuthServiceError) as excinfo:
            client.register("sam", "secret")
        assert excinfo.value.status_code == 500
        assert "500" in str(excinfo.value)
        assert session.request.call_count == 1

    def test_connection_errors_are_retried(self, client, session):
        session.request.side_effect = [
            requests.ConnectionError("refused"),
            make_response(200, USER),
        ]
        assert client.register("sam", "secret").id == "u1"
        assert session.request.call_count == 2

    def test_gives_up_after_max_attempts(self, client, session):
        session.request.side_effect = requests.ConnectionError("refused")
        with pytest.raises(AuthServiceError):
            client.logout()
        assert session.request.call_count == 3

    def test_update_profile_sends_camel_case(self, client, session):
        session.request.return_value = make_response(200, {**USER, "currency": "€"})
        user = client.update_profile(RemoteProfileUpdate(currency="€", monthly_budget=500))
        assert user.currency == "€"
        _, kwargs = session.request.call_args
        assert kwargs["json"] == {"currency": "€", "monthlyBudget": 500}

    def test_change_password_payload(self, client, session):
        session.request.return_value = make_response(200, {"message": "ok"})
        client.change_password("old", "new")
        args, kwargs = session.request.call_args
        assert args == ("PUT", "http://auth.test/api/auth/password")
        assert kwargs["json"] == {"currentPassword": "old", "newPassword": "new"}

    def test_profile_update_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            RemoteProfileUpdate.model_validate({"password": "x"})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
