"""Shared test fixtures for API tests.

``finance_api.config`` evaluates ``_load_config()`` at import time, so the
environment is pinned here before any API module is imported: no provider
keys (mock mode everywhere) and no artificial search delay.
"""

import os

for _key in ("OPENAI_API_KEY", "ALPHA_VANTAGE_API_KEY", "FINNHUB_API_KEY", "IEX_API_KEY"):
    os.environ[_key] = ""
os.environ["SEARCH_DELAY_MS"] = "0"
os.environ.setdefault("FRONTEND_URL", "http://localhost:3000")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Each test starts with a fresh rate-limit window."""
    from finance_api import main as _mod

    _mod.limiter.reset()
    yield
    _mod.limiter.reset()


@pytest.fixture
def transport():
    """ASGI transport wrapping the FastAPI app (no lifespan events)."""
    from finance_api.main import app

    return ASGITransport(app=app)


@pytest_asyncio.fixture
async def client(transport):
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
