"""
Tests for services.auth_service and engine.auth_session.
"""
import pytest
from unittest.mock import MagicMock

from engine.auth_session import AuthSession
from services.auth_service import ACCESS_DENIED, STATUS_MESSAGES, AuthService
from services.errors import ApiError, AuthenticationError


def _login_body(role="admin", status="active", token="tok-1", refresh=None):
    token_body = {"access_token": token}
    if refresh:
        token_body["refresh_token"] = refresh
    return {
        "user": {"id": "u1", "email": "user@example.com", "name": "User", "role": role, "status": status},
        "token": token_body,
    }


@pytest.fixture
def client(token_store):
    client = MagicMock()
    client.token_store = token_store
    return client


@pytest.fixture
def auth(client):
    return AuthService(client)


# ---------------------------------------------------------------------------
# AuthService.login
# ---------------------------------------------------------------------------

class TestLogin:
    def test_admin_login_persists_token(self, auth, client, token_store):
        client.post.return_value = _login_body(role="admin", refresh="ref-1")
        response = auth.login("user@example.com", "secret1")
        assert response.user.role == "admin"
        assert token_store.get_access_token() == "tok-1"
        assert token_store.get_refresh_token() == "ref-1"
        client.post.assert_called_once_with(
            "/auth/login", json={"email": "user@example.com", "password": "secret1"}
        )

    def test_board_login_allowed(self, auth, client, token_store):
        client.post.return_value = _login_body(role="board")
        auth.login("user@example.com", "secret1")
        assert token_store.is_authenticated()

    def test_resident_denied_without_token(self, auth, client, token_store):
        client.post.return_value = _login_body(role="resident")
        with pytest.raises(AuthenticationError) as exc:
            auth.login("user@example.com", "secret1")
        assert str(exc.value) == ACCESS_DENIED
        assert token_store.get_access_token() is None

    def test_role_checked_before_status(self, auth, client):
        client.post.return_value = _login_body(role="resident", status="pending")
        with pytest.raises(AuthenticationError) as exc:
            auth.login("user@example.com", "secret1")
        assert str(exc.value) == ACCESS_DENIED

    @pytest.mark.parametrize("status", ["pending", "rejected", "inactive"])
    def test_blocked_status_messages(self, auth, client, token_store, status):
        client.post.return_value = _login_body(role="board", status=status)
        with pytest.raises(AuthenticationError) as exc:
            auth.login("user@example.com", "secret1")
        assert str(exc.value) == STATUS_MESSAGES[status]
        assert token_store.get_access_token() is None

    def test_missing_token_rejected(self, auth, client, token_store):
        client.post.return_value = _login_body(token="")
        with pytest.raises(AuthenticationError):
            auth.login("user@example.com", "secret1")
        assert not token_store.is_authenticated()

    def test_logout_clears_tokens(self, auth, token_store):
        token_store.save("tok", "ref")
        auth.logout()
        assert not auth.is_authenticated()


# ---------------------------------------------------------------------------
# AuthSession
# ---------------------------------------------------------------------------

class TestAuthSession:
    def test_restore_without_token_stays_signed_out(self, auth, client):
        session = AuthSession(auth)
        assert session.restore() is None
        client.get.assert_not_called()

    def test_restore_fetches_current_user(self, auth, client, token_store):
        token_store.save("tok")
        client.get.return_value = {"id": "u1", "email": "a@b.com", "role": "admin"}
        session = AuthSession(auth)
        user = session.restore()
        assert user.id == "u1"
        assert session.is_authenticated
        client.get.assert_called_once_with("/users/me")

    def test_restore_failure_clears_token(self, auth, client, token_store):
        token_store.save("tok")
        client.get.side_effect = ApiError("Unauthorized", status_code=401)
        session = AuthSession(auth)
        assert session.restore() is None
        assert not session.is_authenticated
        assert token_store.get_access_token() is None

    def test_restore_runs_once(self, auth, client, token_store):
        token_store.save("tok")
        client.get.return_value = {"id": "u1", "email": "a@b.com", "role": "admin"}
        session = AuthSession(auth)
        session.restore()
        session.restore()
        assert client.get.call_count == 1

    def test_login_and_logout(self, auth, client, token_store):
        client.post.return_value = _login_body(role="board")
        session = AuthSession(auth)
        user = session.login("user@example.com", "secret1")
        assert session.user is user
        session.logout()
        assert session.user is None
        assert token_store.get_access_token() is None
