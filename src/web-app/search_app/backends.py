"""Search backends — HTTP clients for the Finance Search API.

Each backend knows how to turn a server payload into result records and
what to show instead when the server cannot be reached.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Protocol

import httpx

from search_app.models import FinanceResult, SearchResult

logger = logging.getLogger(__name__)


class BackendError(Exception):
    """The server answered, but with a payload we cannot interpret."""


class SearchBackend(Protocol):
    """Interface for the search interface's network layer."""

    async def search(self, query: str) -> list[SearchResult]:
        """Run one search request for an already-trimmed, non-empty query.

        Raises:
            httpx.HTTPError: network failure or non-2xx status.
            BackendError: malformed payload.
        """
        ...

    def fallback(self, query: str) -> list[SearchResult]:
        """Results to display when ``search`` failed."""
        ...


class GenericSearchBackend:
    """``GET /api/search?q=`` → plain ``{title, snippet}`` records."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def search(self, query: str) -> list[SearchResult]:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.get("/api/search", params={"q": query})
            response.raise_for_status()
        try:
            payload = response.json()
            return [SearchResult(title=r["title"], snippet=r["snippet"]) for r in payload["results"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise BackendError(f"Malformed search payload: {exc}") from exc

    def fallback(self, query: str) -> list[SearchResult]:
        return []


class FinanceSearchBackend:
    """``POST /api/finance/search`` → one synthesized analysis record."""

    def __init__(
        self,
        base_url: str,
        *,
        context: str = "search",
        include_data: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.context = context
        self.include_data = include_data
        self._timeout = timeout
        self._transport = transport

    async def search(self, query: str) -> list[SearchResult]:
        async with httpx.AsyncClient(
            base_url=self.base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.post(
                "/api/finance/search",
                json={"query": query, "context": self.context, "includeData": self.include_data},
            )
            response.raise_for_status()
        try:
            payload = response.json()
            return [
                FinanceResult(
                    title=f"Financial Analysis: {query}",
                    snippet=payload["response"],
                    data=payload.get("data"),
                    sources=list(payload.get("sources") or []),
                    suggestions=list(payload.get("suggestions") or []),
                    timestamp=payload.get("timestamp", ""),
                )
            ]
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise BackendError(f"Malformed finance payload: {exc}") from exc

    def fallback(self, query: str) -> list[SearchResult]:
        return [
            FinanceResult(
                title=f"Finance Search: {query}",
                snippet=(
                    f'Unable to connect to Finance GPT API. This is a fallback response for "{query}". '
                    f"Please ensure the Finance API server is running at {self.base_url}."
                ),
                data=None,
                sources=["Fallback Mode"],
                suggestions=["Check API server status", "Verify network connection"],
                timestamp=datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            )
        ]
