"""Authentication session backed by durable client storage.

Lifecycle: a ``SessionManager`` is created in the loading state,
``restore()`` reads the persisted blob once and leaves it ready.  Only
``login`` and ``logout`` change the session afterwards.  A stored user is
the single source of truth: ``is_authenticated`` is derived from it, so
the two can never disagree.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from search_app.identity import IdentityProvider
from search_app.models import UserSession
from search_app.storage import Storage

logger = logging.getLogger(__name__)

SESSION_KEY = "user"


class SessionManager:
    """Owns the current user and mirrors it into ``storage``."""

    def __init__(
        self,
        storage: Storage,
        identity: IdentityProvider | None = None,
        *,
        key: str = SESSION_KEY,
    ) -> None:
        self.storage = storage
        self.identity = identity
        self.key = key
        self._user: dict[str, Any] | None = None
        self._is_loading = True

    @classmethod
    def open(
        cls,
        storage: Storage,
        identity: IdentityProvider | None = None,
        *,
        key: str = SESSION_KEY,
    ) -> SessionManager:
        """Create a manager and restore any persisted session."""
        manager = cls(storage, identity, key=key)
        manager.restore()
        return manager

    @property
    def user(self) -> dict[str, Any] | None:
        return self._user

    @property
    def profile(self) -> UserSession | None:
        return UserSession.from_dict(self._user) if self._user is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    def restore(self) -> dict[str, Any] | None:
        """Restore the persisted session; corrupt data is discarded, never raised."""
        self._is_loading = True
        try:
            raw = self.storage.get_item(self.key)
            if raw is None:
                self._user = None
                return None
            try:
                user = json.loads(raw)
            except ValueError:
                logger.error("Error parsing saved user — clearing stored session", exc_info=True)
                user = None
            if user is not None and not isinstance(user, dict):
                logger.error("Saved user is not an object — clearing stored session")
                user = None
            if user is None:
                self.storage.remove_item(self.key)
            self._user = user
            return user
        finally:
            self._is_loading = False

    def login(self, user_data: dict[str, Any]) -> None:
        """Authenticate as ``user_data`` and persist it verbatim."""
        blob = json.dumps(user_data)
        self.storage.set_item(self.key, blob)
        self._user = user_data
        self._is_loading = False
        logger.info("User logged in")

    def logout(self) -> None:
        """Clear the session and ask the identity provider to forget auto sign-in."""
        self._user = None
        self.storage.remove_item(self.key)
        if self.identity is None:
            return
        try:
            self.identity.disable_auto_select()
        except Exception:
            logger.warning("Identity provider sign-out failed", exc_info=True)
