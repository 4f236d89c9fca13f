import json
from unittest.mock import Mock

import pytest

from mediavault.core.api import AuthClient
from mediavault.core.auth_manager import AuthManager
from mediavault.core.dto.user import UserDTO
from mediavault.core.errors import APIError, HTTPStatusError, NetworkError

from conftest import make_user


@pytest.fixture
def auth(http, session_store):
    return AuthManager(AuthClient(http), session_store)


def test_login_stores_exact_token_and_user(auth, adapter, session_store):
    adapter.queue({"data": make_user(), "token": "tok-1"})

    user = auth.login("alice", "pw")

    assert adapter.last.url == "http://api.test/api/auth/login"
    assert json.loads(adapter.last.body) == {"username": "alice", "password": "pw"}
    assert user.username == "alice"
    assert session_store.get_token() == "tok-1"
    assert session_store.get_user() == user
    assert auth.is_logged_in()


def test_failed_login_leaves_session_unchanged(auth, adapter, session_store):
    previous = UserDTO.from_raw(make_user(id=9, username="old"))
    session_store.set_session("old-token", previous)

    adapter.queue({"error": "bad credentials"}, status=401)
    with pytest.raises(HTTPStatusError):
        auth.login("alice", "wrong")

    assert session_store.get_token() == "old-token"
    assert session_store.get_user() == previous


def test_login_with_malformed_user_is_rejected(auth, adapter, session_store):
    adapter.queue({"data": {"email": "x@example.com"}, "token": "tok-1"})

    with pytest.raises(APIError):
        auth.login("alice", "pw")

    assert session_store.get_token() is None
    assert not auth.is_logged_in()


def test_login_without_token_is_rejected(auth, adapter, session_store):
    adapter.queue({"data": make_user()})

    with pytest.raises(APIError):
        auth.login("alice", "pw")
    assert session_store.get_user() is None


def test_register_does_not_log_in(auth, adapter, session_store):
    adapter.queue({"data": make_user(username="carol", is_admin=False)})

    user = auth.register("carol", "carol@example.com", "pw")

    assert user.username == "carol"
    assert json.loads(adapter.last.body) == {
        "username": "carol", "email": "carol@example.com", "password": "pw",
    }
    assert not auth.is_logged_in()


def test_refresh_replaces_token_only(auth, adapter, session_store):
    user = UserDTO.from_raw(make_user())
    session_store.set_session("tok-1", user)
    adapter.queue({"token": "tok-2"})

    assert auth.refresh_token() == "tok-2"
    assert adapter.last.headers["Authorization"] == "Bearer tok-1"
    assert session_store.get_token() == "tok-2"
    assert session_store.get_user() == user


@pytest.mark.parametrize("seed", ["both", "token", "none"])
def test_refresh_failure_always_clears_session(auth, adapter, db, session_store, seed):
    if seed == "both":
        session_store.set_session("tok-1", UserDTO.from_raw(make_user()))
    elif seed == "token":
        session_store.set_token("tok-1")

    adapter.queue({"error": "expired"}, status=401)
    with pytest.raises(APIError):
        auth.refresh_token()

    assert not db.has_config("token")
    assert not db.has_config("user")


def test_refresh_network_failure_clears_session():
    client = Mock(spec=AuthClient)
    client.refresh.side_effect = NetworkError("down")
    store = Mock()

    with pytest.raises(NetworkError):
        AuthManager(client, store).refresh_token()
    store.clear_session.assert_called_once_with()
    store.set_token.assert_not_called()


def test_verify_maps_response(auth, adapter):
    adapter.queue({"valid": True, "username": "alice", "is_admin": True, "message": "Token is valid"})

    result = auth.verify()

    assert adapter.last.url == "http://api.test/api/auth/verify"
    assert result.valid is True
    assert result.is_admin is True
    assert result.username == "alice"


def test_logout_is_local(auth, adapter, session_store):
    session_store.set_session("tok-1", UserDTO.from_raw(make_user()))

    auth.logout()

    assert adapter.requests == []
    assert auth.get_current_user() is None
    assert not auth.is_logged_in()


def test_is_logged_in_ignores_user_key(auth, db, session_store):
    db.set_config("user", json.dumps(make_user()))
    assert auth.is_logged_in() is False
    assert auth.get_current_user() is not None

    session_store.set_token("tok-1")
    db.delete_config("user")
    assert auth.is_logged_in() is True
    assert auth.get_current_user() is None


def test_login_with_out_of_range_user_id_is_rejected(auth, adapter, session_store):
    adapter.queue({"data": make_user(id=1e400), "token": "tok-1"})

    with pytest.raises(APIError):
        auth.login("alice", "pw")
    assert not auth.is_logged_in()
