"""Identity providers — Google Identity Services and a demo stand-in.

The session manager calls ``disable_auto_select`` on logout and the chat
shell reads ``auto_select`` before signing a user in automatically; the
preference lives in the same per-user storage as the session blob.  The
rest of this module turns provider credentials into the user dict that
gets persisted as that blob.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any, Protocol

import httpx

from search_app.storage import MemoryStorage, Storage

logger = logging.getLogger(__name__)

GOOGLE_TOKENINFO_URL = "https://oauth2.googleapis.com/tokeninfo"
AUTO_SELECT_KEY = "auto_select"

DEMO_USER: dict[str, Any] = {
    "id": "demo-user-123",
    "email": "demo@example.com",
    "name": "Demo User",
    "picture": "https://via.placeholder.com/40",
    "given_name": "Demo",
    "family_name": "User",
    "verified_email": True,
    "token": "demo-token",
}


class IdentityError(Exception):
    """A credential could not be decoded or verified."""


class IdentityProvider(Protocol):
    @property
    def auto_select(self) -> bool:
        """Whether the user may be signed in without an explicit login."""
        ...

    def disable_auto_select(self) -> None:
        """Forget automatic sign-in for the current user."""
        ...


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.lower() == "true"
    return bool(value)


def decode_jwt_payload(token: str) -> dict[str, Any]:
    """Decode the (unverified) claims segment of a JWT."""
    try:
        segment = token.split(".")[1]
        padded = segment + "=" * (-len(segment) % 4)
        claims = json.loads(base64.urlsafe_b64decode(padded))
    except (IndexError, binascii.Error, ValueError) as exc:
        raise IdentityError(f"Malformed ID token: {exc}") from exc
    if not isinstance(claims, dict):
        raise IdentityError("ID token payload is not an object")
    return claims


def user_from_claims(claims: dict[str, Any], token: str = "") -> dict[str, Any]:
    """Map Google ID-token / userinfo claims onto the session blob shape."""
    return {
        "id": claims.get("sub") or claims.get("id"),
        "email": claims.get("email"),
        "name": claims.get("name"),
        "picture": claims.get("picture"),
        "given_name": claims.get("given_name"),
        "family_name": claims.get("family_name"),
        "verified_email": _as_bool(claims.get("email_verified", claims.get("verified_email", False))),
        "token": token,
    }


class _AutoSelect:
    """Automatic sign-in preference, remembered in the user's storage.

    Logging out disables it until the user explicitly logs in again, so a
    new chat never signs a logged-out user back in.
    """

    def __init__(self, storage: Storage | None = None) -> None:
        self._storage = storage if storage is not None else MemoryStorage()

    @property
    def auto_select(self) -> bool:
        return self._storage.get_item(AUTO_SELECT_KEY) != "false"

    def disable_auto_select(self) -> None:
        self._storage.set_item(AUTO_SELECT_KEY, "false")

    def enable_auto_select(self) -> None:
        self._storage.remove_item(AUTO_SELECT_KEY)


class GoogleIdentityProvider(_AutoSelect):
    """Google Identity Services credentials.

    ``verify_credential`` checks an ID token with Google and that it was
    issued for our client id.
    """

    def __init__(
        self,
        client_id: str,
        *,
        storage: Storage | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(storage)
        self.client_id = client_id
        self._timeout = timeout
        self._transport = transport

    async def verify_credential(self, credential: str) -> dict[str, Any]:
        decode_jwt_payload(credential)
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(GOOGLE_TOKENINFO_URL, params={"id_token": credential})
                response.raise_for_status()
            claims = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise IdentityError(f"Token verification failed: {exc}") from exc

        if not isinstance(claims, dict) or claims.get("aud") != self.client_id:
            raise IdentityError("ID token was not issued for this client")
        return user_from_claims(claims, credential)

    def disable_auto_select(self) -> None:
        super().disable_auto_select()
        logger.info("Google auto sign-in disabled")


class DemoIdentityProvider(_AutoSelect):
    """Simulated sign-in for local development."""

    def demo_user(self) -> dict[str, Any]:
        return dict(DEMO_USER)

    def email_user(self, email: str) -> dict[str, Any]:
        return {
            "id": "email-user-123",
            "email": email,
            "name": email.split("@")[0],
            "picture": DEMO_USER["picture"],
            "verified_email": False,
        }
