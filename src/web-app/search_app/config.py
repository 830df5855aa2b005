"""Web app configuration — loads environment variables and validates settings.

Usage:
    from search_app.config import config
    print(config.api_base_url)
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

SEARCH_MODES = ("generic", "finance")


def _find_env_file() -> Path | None:
    """Search for .env file starting from this file's directory, then up."""
    current = Path(__file__).resolve().parent.parent  # src/web-app/
    candidates = [
        current / ".env",
        current.parent.parent / ".env",  # repo root
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


@dataclass(frozen=True)
class Config:
    """Typed configuration loaded from environment variables."""

    # Finance Search API (local: http://localhost:5001)
    api_base_url: str

    # Presentation variant: "generic" or "finance"
    search_mode: str

    # Per-request timeout in seconds
    request_timeout: float

    # Durable session storage (one JSON file per user)
    session_storage_dir: Path

    # Google Identity Services client id
    google_client_id: str

    @property
    def google_oauth_enabled(self) -> bool:
        return bool(os.environ.get("OAUTH_GOOGLE_CLIENT_ID"))


def _load_config() -> Config:
    """Load and validate configuration from environment."""
    env_file = _find_env_file()
    if env_file:
        load_dotenv(env_file, override=False)

    search_mode = os.environ.get("SEARCH_MODE", "finance").lower()
    if search_mode not in SEARCH_MODES:
        print(
            f"Error: SEARCH_MODE must be one of {', '.join(SEARCH_MODES)}, got {search_mode!r}",
            file=sys.stderr,
        )
        sys.exit(1)

    raw_timeout = os.environ.get("SEARCH_TIMEOUT", "30")
    try:
        request_timeout = float(raw_timeout)
    except ValueError:
        print(f"Error: SEARCH_TIMEOUT must be a number, got {raw_timeout!r}", file=sys.stderr)
        sys.exit(1)

    return Config(
        api_base_url=os.environ.get("SEARCH_API_URL", "http://localhost:5001"),
        search_mode=search_mode,
        request_timeout=request_timeout,
        session_storage_dir=Path(
            os.environ.get("SESSION_STORAGE_DIR", str(Path.home() / ".search-app" / "sessions"))
        ).expanduser(),
        google_client_id=os.environ.get("GOOGLE_CLIENT_ID", "your-google-client-id"),
    )


# Singleton — imported as `from search_app.config import config`
config = _load_config()
