"""Shared test fixtures for web-app tests."""

from __future__ import annotations

import asyncio
import os
import tempfile

# Config is loaded at import time — pin the environment before any
# search_app module is imported by the test collector.
os.environ.setdefault("SEARCH_API_URL", "http://localhost:5001")
os.environ.setdefault("SEARCH_MODE", "finance")
os.environ.setdefault("SESSION_STORAGE_DIR", tempfile.mkdtemp(prefix="search-app-sessions-"))
os.environ.pop("OAUTH_GOOGLE_CLIENT_ID", None)

import pytest  # noqa: E402

from search_app.backends import BackendError  # noqa: E402
from search_app.models import SearchResult  # noqa: E402


class FakeBackend:
    """In-memory ``SearchBackend`` that records every query it receives."""

    def __init__(
        self,
        results: list[SearchResult] | None = None,
        *,
        error: Exception | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.results = results if results is not None else [SearchResult("Hit", "A matching result")]
        self.error = error
        self.delays = delays or {}
        self.calls: list[str] = []

    async def search(self, query: str) -> list[SearchResult]:
        self.calls.append(query)
        delay = self.delays.get(query, 0.0)
        if delay:
            await asyncio.sleep(delay)
        if self.error is not None:
            raise self.error
        return [SearchResult(f"{r.title} ({query})", r.snippet) for r in self.results]

    def fallback(self, query: str) -> list[SearchResult]:
        return [SearchResult(f"Fallback: {query}", "Server unavailable")]


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def failing_backend() -> FakeBackend:
    return FakeBackend(error=BackendError("bad payload"))


@pytest.fixture
def make_backend():
    """Factory for backends with custom results, errors or per-query delays."""
    return FakeBackend
