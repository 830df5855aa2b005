"""Generic mock search — substring filter over the fixture listing."""

from __future__ import annotations

import asyncio
import logging

from finance_api import fixtures
from finance_api.models import SearchItem, SearchResponse, utc_timestamp

logger = logging.getLogger(__name__)


def filter_results(query: str) -> list[SearchItem]:
    """Return fixture items whose title contains ``query`` (case-insensitive).

    An empty query matches every item — this endpoint is also the raw
    listing, unlike the client which refuses to submit empty queries.
    """
    needle = query.lower()
    return [
        SearchItem(**item)
        for item in fixtures.SEARCH_ITEMS
        if not needle or needle in item["title"].lower()
    ]


async def run_search(query: str, *, delay_ms: int = 0) -> SearchResponse:
    """Build the ``/api/search`` response, optionally after an artificial delay."""
    if delay_ms > 0:
        await asyncio.sleep(delay_ms / 1000)

    results = filter_results(query)
    logger.info("Search for '%s' → %d results", query[:80], len(results))
    return SearchResponse(
        query=query,
        results=results,
        total=len(results),
        timestamp=utc_timestamp(),
    )
