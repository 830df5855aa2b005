"""Search web app — Chainlit entry point.

A thin chat shell over ``SearchController``: quick actions are offered as
conversation starters, every user message is one search submission, and
the rendered view replaces the "searching" placeholder when the Finance
Search API answers.  The product (generic or finance) is chosen by
``SEARCH_MODE``.

Run with ``chainlit run src/web-app/search_app/main.py``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import chainlit as cl

from search_app.config import config
from search_app.identity import (
    DemoIdentityProvider,
    GoogleIdentityProvider,
    IdentityError,
    user_from_claims,
)
from search_app.presentation import (
    LOADING_TEXT,
    create_backend,
    create_controller,
    get_variant,
    render_navigation,
    render_view,
)
from search_app.search import SearchController
from search_app.session import SessionManager
from search_app.storage import JsonFileStorage, Storage

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)
for _name in ("httpx", "watchfiles"):
    logging.getLogger(_name).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

VARIANT = get_variant(config.search_mode)

_UNSAFE_FILENAME_RE = re.compile(r"[^A-Za-z0-9_.@-]")

COMMANDS_HELP = "Try `/whoami`, `/login [email or ID token]` or `/logout`."


# ---------------------------------------------------------------------------
# Session helpers
# ---------------------------------------------------------------------------

def _session_path(user_id: str) -> Path:
    """One session file per user under the configured storage directory."""
    safe = _UNSAFE_FILENAME_RE.sub("_", user_id).lstrip(".") or "_"
    return config.session_storage_dir / f"{safe}.json"


def _create_identity(storage: Storage) -> GoogleIdentityProvider | DemoIdentityProvider:
    """A fresh identity provider bound to one user's storage."""
    if config.google_oauth_enabled:
        return GoogleIdentityProvider(config.google_client_id, storage=storage)
    return DemoIdentityProvider(storage)


def _auth_profile(user: cl.User | None) -> dict[str, Any] | None:
    """The profile attached to the Chainlit user by the auth callbacks."""
    if user is None:
        return None
    profile = (user.metadata or {}).get("profile")
    return profile if isinstance(profile, dict) else None


def _open_session(user: cl.User | None) -> SessionManager:
    """Restore the user's persisted session.

    Without a stored session, the authenticated Chainlit profile signs the
    user in, unless they logged out earlier (auto sign-in disabled).
    """
    user_id = user.identifier if user else "local-user"
    storage = JsonFileStorage(_session_path(user_id))
    identity = _create_identity(storage)
    session = SessionManager.open(storage, identity)
    profile = _auth_profile(user)
    if not session.is_authenticated and profile and identity.auto_select:
        session.login(profile)
    return session


async def _login(argument: str, session: SessionManager, profile: dict[str, Any] | None) -> str:
    identity = session.identity
    try:
        if isinstance(identity, DemoIdentityProvider) and "@" in argument:
            user_data = identity.email_user(argument)
        elif isinstance(identity, GoogleIdentityProvider) and argument:
            user_data = await identity.verify_credential(argument)
        elif profile:
            user_data = profile
        elif isinstance(identity, DemoIdentityProvider):
            user_data = identity.demo_user()
        else:
            return "Sign in with Google first, or use `/login <ID token>`."
    except IdentityError as exc:
        logger.warning("Sign-in failed: %s", exc)
        return "Sign-in failed. Please try again."

    session.login(user_data)
    identity.enable_auto_select()
    return render_navigation(VARIANT, session.profile)


async def _run_command(text: str, session: SessionManager, profile: dict[str, Any] | None = None) -> str:
    """Execute a slash command and return the reply to show."""
    command, _, argument = text.strip().partition(" ")
    command = command.lower()
    argument = argument.strip()

    if command == "/logout":
        session.logout()
        return "You have been logged out.\n\n" + render_navigation(VARIANT, None)
    if command == "/login":
        return await _login(argument, session, profile)
    if command == "/whoami":
        return render_navigation(VARIANT, session.profile)
    return f"Unknown command `{command}`. {COMMANDS_HELP}"


# ---------------------------------------------------------------------------
# Authentication — Google OAuth + header-based fallback
# ---------------------------------------------------------------------------

# Chainlit's decorator raises ValueError at import time if no OAuth
# provider env var is configured.
if config.google_oauth_enabled:
    @cl.oauth_callback
    async def oauth_callback(
        provider_id: str,
        token: str,
        raw_user_data: dict,
        default_user: cl.User,
    ) -> cl.User | None:
        """Handle Google sign-in; the Google subject id is the stable identifier."""
        if provider_id != "google":
            return None
        profile = user_from_claims(raw_user_data, token)
        identifier = profile["id"] or profile["email"]
        if not identifier:
            return None
        return cl.User(
            identifier=identifier,
            metadata={"provider": "google", "profile": profile},
        )


@cl.header_auth_callback
async def header_auth_callback(headers: dict) -> cl.User | None:
    """Local dev — auto-accept as the demo user."""
    demo = DemoIdentityProvider().demo_user()
    return cl.User(identifier="local-user", metadata={"provider": "header", "profile": demo})


# ---------------------------------------------------------------------------
# Chainlit lifecycle hooks
# ---------------------------------------------------------------------------

@cl.set_starters
async def set_starters() -> list[cl.Starter]:
    """Quick actions for the current product."""
    return [
        cl.Starter(label=f"{action.icon} {action.text}", message=action.query)
        for action in VARIANT.quick_actions
    ]


@cl.on_chat_start
async def on_chat_start() -> None:
    """Mount a fresh search interface and restore the user's session."""
    backend = create_backend(VARIANT, config.api_base_url, timeout=config.request_timeout)
    cl.user_session.set("controller", create_controller(VARIANT, backend))
    session = _open_session(cl.user_session.get("user"))
    cl.user_session.set("session", session)
    logger.info(
        "New %s search session (api: %s, authenticated: %s)",
        VARIANT.name,
        config.api_base_url,
        session.is_authenticated,
    )


@cl.on_chat_end
async def on_chat_end() -> None:
    """Unmount: cancel any pending timers."""
    controller: SearchController | None = cl.user_session.get("controller")
    if controller is not None:
        controller.close()


@cl.on_message
async def on_message(message: cl.Message) -> None:
    """Run one search submission and render the resulting view."""
    controller: SearchController = cl.user_session.get("controller")  # type: ignore[assignment]
    session: SessionManager = cl.user_session.get("session")  # type: ignore[assignment]

    text = message.content or ""
    if text.strip().startswith("/"):
        profile = _auth_profile(cl.user_session.get("user"))
        await cl.Message(content=await _run_command(text, session, profile)).send()
        return

    msg = cl.Message(content=f"⏳ {LOADING_TEXT}")
    await msg.send()

    await controller.submit(text)

    msg.content = render_view(controller.view(), VARIANT)
    await msg.update()
