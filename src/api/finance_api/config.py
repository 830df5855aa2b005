"""API configuration — loads environment variables with mock-friendly defaults.

Every third-party key is optional: when a key is absent the matching
provider runs in mock mode instead of failing startup.

Usage:
    from finance_api.config import config
    print(config.port)
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _find_env_file() -> Path | None:
    """Search for .env file starting from this file's directory, then up."""
    current = Path(__file__).resolve().parent.parent  # src/api/
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

    # HTTP server
    port: int
    version: str

    # CORS — origin of the web app
    frontend_url: str

    # OpenAI (narrative generation)
    openai_api_key: str
    openai_model: str

    # Market data providers
    alpha_vantage_api_key: str
    finnhub_api_key: str
    iex_api_key: str

    # Rate limiting on /api/ paths
    rate_limit_window_ms: int
    rate_limit_max_requests: int

    # Artificial latency for the generic search endpoint
    search_delay_ms: int

    # Directory holding the single-page app shell (index.html)
    static_dir: Path

    @property
    def llm_enabled(self) -> bool:
        return bool(self.openai_api_key)

    @property
    def market_data_enabled(self) -> bool:
        return bool(self.alpha_vantage_api_key)


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        print(f"Error: {name} must be an integer, got {raw!r}", file=sys.stderr)
        sys.exit(1)


def _load_config() -> Config:
    """Load and validate configuration from environment."""
    env_file = _find_env_file()
    if env_file:
        load_dotenv(env_file, override=False)

    return Config(
        port=_int_env("PORT", 5001),
        version=os.environ.get("APP_VERSION", "1.0.0"),
        frontend_url=os.environ.get("FRONTEND_URL", "http://localhost:3000"),
        openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
        openai_model=os.environ.get("OPENAI_MODEL", "gpt-4"),
        alpha_vantage_api_key=os.environ.get("ALPHA_VANTAGE_API_KEY", ""),
        finnhub_api_key=os.environ.get("FINNHUB_API_KEY", ""),
        iex_api_key=os.environ.get("IEX_API_KEY", ""),
        rate_limit_window_ms=_int_env("RATE_LIMIT_WINDOW_MS", 15 * 60 * 1000),
        rate_limit_max_requests=_int_env("RATE_LIMIT_MAX_REQUESTS", 100),
        search_delay_ms=_int_env("SEARCH_DELAY_MS", 0),
        static_dir=Path(
            os.environ.get("STATIC_DIR", str(Path(__file__).resolve().parent / "static"))
        ),
    )


# Singleton — imported as `from finance_api.config import config`
config = _load_config()
