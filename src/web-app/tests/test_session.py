"""Tests for the authentication session lifecycle."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from search_app.identity import DEMO_USER, DemoIdentityProvider
from search_app.session import SESSION_KEY, SessionManager
from search_app.storage import JsonFileStorage, MemoryStorage

USER = {
    "id": "42",
    "email": "ada@example.com",
    "name": "Ada Lovelace",
    "given_name": "Ada",
    "verified_email": True,
    "token": "tok",
}


class TestRestore:
    """Startup restoration from storage."""

    def test_loading_until_restored(self) -> None:
        manager = SessionManager(MemoryStorage())
        assert manager.is_loading is True
        manager.restore()
        assert manager.is_loading is False

    def test_nothing_stored(self) -> None:
        manager = SessionManager.open(MemoryStorage())
        assert manager.user is None
        assert manager.is_authenticated is False
        assert manager.profile is None

    def test_restores_stored_user(self) -> None:
        storage = MemoryStorage({SESSION_KEY: json.dumps(USER)})
        manager = SessionManager.open(storage)
        assert manager.user == USER
        assert manager.is_authenticated is True
        assert manager.profile.display_name == "Ada"

    def test_corrupt_blob_is_discarded(self) -> None:
        storage = MemoryStorage({SESSION_KEY: "{not json"})
        manager = SessionManager.open(storage)
        assert manager.user is None
        assert manager.is_authenticated is False
        assert manager.is_loading is False
        assert storage.get_item(SESSION_KEY) is None

    def test_non_object_blob_is_discarded(self) -> None:
        storage = MemoryStorage({SESSION_KEY: "[1, 2]"})
        manager = SessionManager.open(storage)
        assert manager.user is None
        assert storage.get_item(SESSION_KEY) is None

    def test_null_blob_is_discarded(self) -> None:
        storage = MemoryStorage({SESSION_KEY: "null"})
        assert SessionManager.open(storage).is_authenticated is False
        assert storage.get_item(SESSION_KEY) is None

    def test_custom_key(self) -> None:
        storage = MemoryStorage({"auth": json.dumps(USER)})
        assert SessionManager.open(storage, key="auth").user == USER
        assert SessionManager.open(storage).user is None


class TestLoginLogout:
    """login/logout keep memory and storage in sync."""

    def test_login_persists_verbatim(self) -> None:
        storage = MemoryStorage()
        manager = SessionManager.open(storage)
        manager.login(USER)
        assert manager.is_authenticated is True
        assert json.loads(storage.get_item(SESSION_KEY)) == USER

    def test_unserialisable_login_leaves_session_unchanged(self) -> None:
        storage = MemoryStorage()
        manager = SessionManager.open(storage)
        with pytest.raises(TypeError):
            manager.login({"id": "1", "callback": object()})
        assert manager.is_authenticated is False
        assert storage.get_item(SESSION_KEY) is None

    def test_login_accepts_unvalidated_shape(self) -> None:
        storage = MemoryStorage()
        manager = SessionManager.open(storage)
        manager.login({"anything": ["goes"]})
        assert manager.profile.display_name == ""
        assert json.loads(storage.get_item(SESSION_KEY)) == {"anything": ["goes"]}

    def test_round_trip_across_restarts(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        SessionManager.open(JsonFileStorage(path)).login(USER)
        restored = SessionManager.open(JsonFileStorage(path))
        assert restored.user == USER

    def test_logout_clears_storage(self) -> None:
        storage = MemoryStorage({SESSION_KEY: json.dumps(USER)})
        manager = SessionManager.open(storage)
        manager.logout()
        assert manager.user is None
        assert manager.is_authenticated is False
        assert storage.get_item(SESSION_KEY) is None
        assert SessionManager.open(storage).is_authenticated is False

    def test_logout_disables_auto_select(self) -> None:
        identity = DemoIdentityProvider()
        manager = SessionManager.open(MemoryStorage(), identity)
        manager.login(identity.demo_user())
        manager.logout()
        assert identity.auto_select is False

    def test_logout_survives_identity_failure(self) -> None:
        identity = MagicMock()
        identity.disable_auto_select.side_effect = RuntimeError("sdk not loaded")
        storage = MemoryStorage()
        manager = SessionManager.open(storage, identity)
        manager.login(dict(DEMO_USER))
        manager.logout()
        identity.disable_auto_select.assert_called_once()
        assert manager.is_authenticated is False
        assert storage.get_item(SESSION_KEY) is None

    def test_logout_when_logged_out(self) -> None:
        manager = SessionManager.open(MemoryStorage())
        manager.logout()
        assert manager.is_authenticated is False
