"""Search interface state machine.

``SearchController`` owns one ``SearchState`` for the lifetime of a
mounted search interface.  Every trigger (Enter, button click, quick
action, debounced typing) funnels into ``submit`` so validation and state
transitions are identical regardless of how a search was started.

Timers run on the asyncio event loop; the controller is meant to be
driven from a single event loop, so no locking is needed.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

import httpx

from search_app.backends import BackendError, SearchBackend
from search_app.models import SearchResult, SearchState

logger = logging.getLogger(__name__)

WARNING_DELAY = 3.0
MIN_AUTO_SEARCH_CHARS = 3


class ViewKind(str, Enum):
    LOADING = "loading"
    WELCOME = "welcome"
    NO_RESULTS = "no_results"
    RESULTS = "results"


@dataclass
class SearchView:
    """What the interface should render right now."""

    kind: ViewKind
    query: str
    results: list[SearchResult] = field(default_factory=list)
    show_empty_warning: bool = False
    button_enabled: bool = False


class SearchController:
    """Drives a ``SearchBackend`` from user interactions.

    Parameters
    ----------
    backend:
        Network layer used for every non-empty submission.
    warning_delay:
        Seconds before the empty-query warning hides itself.
    debounce_delay:
        When set, typing schedules an automatic search this many seconds
        after the last keystroke (only for queries of at least
        ``min_auto_chars`` characters).
    discard_stale:
        When true, responses that resolve after a newer submission was
        issued are dropped.  By default the last response to resolve wins.
    """

    def __init__(
        self,
        backend: SearchBackend,
        *,
        warning_delay: float = WARNING_DELAY,
        debounce_delay: float | None = None,
        min_auto_chars: int = MIN_AUTO_SEARCH_CHARS,
        discard_stale: bool = False,
    ) -> None:
        self.backend = backend
        self.warning_delay = warning_delay
        self.debounce_delay = debounce_delay
        self.min_auto_chars = min_auto_chars
        self.discard_stale = discard_stale
        self.state = SearchState()

        self._warning_timer: asyncio.TimerHandle | None = None
        self._debounce_timer: asyncio.TimerHandle | None = None
        self._auto_tasks: set[asyncio.Task] = set()
        self._sequence = 0
        self._closed = False

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    @property
    def button_enabled(self) -> bool:
        return bool(self.state.query.strip())

    def set_query(self, text: str) -> None:
        """Record a change to the search field."""
        self.state.query = text
        if self.state.show_empty_warning and text.strip():
            self._hide_warning()
        if self.debounce_delay is not None and not self._closed:
            self._schedule_auto_search()

    async def press_key(self, key: str) -> list[SearchResult] | None:
        if key == "Enter":
            return await self.submit()
        return None

    async def click_search(self) -> list[SearchResult]:
        return await self.submit()

    async def quick_action(self, query: str) -> list[SearchResult]:
        self.set_query(query)
        return await self.submit(query)

    async def submit(self, query: str | None = None) -> list[SearchResult]:
        """Validate and run one search; the single entry point for every trigger.

        Returns the results produced by this submission (which may not be
        the ones displayed if a newer submission is in flight and
        ``discard_stale`` is set).
        """
        if query is not None:
            self.state.query = query
        trimmed = self.state.query.strip()
        self._cancel_auto_search()

        if not trimmed:
            self.state.results = []
            self.state.has_searched = False
            self._show_warning()
            return []

        self._hide_warning()
        self.state.is_loading = True
        self.state.has_searched = True
        self._sequence += 1
        ticket = self._sequence

        try:
            try:
                results = await self.backend.search(trimmed)
            except (httpx.HTTPError, BackendError) as exc:
                logger.warning("Search failed for '%s': %s — showing fallback", trimmed[:80], exc)
                results = self.backend.fallback(trimmed)

            if self._is_stale(ticket):
                logger.info("Discarding stale results for '%s'", trimmed[:80])
            else:
                self.state.results = results
            return results
        finally:
            if not self._is_stale(ticket):
                self.state.is_loading = False

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def view(self) -> SearchView:
        """Select the view to render; loading always wins."""
        state = self.state
        if state.is_loading:
            kind = ViewKind.LOADING
        elif not state.has_searched:
            kind = ViewKind.WELCOME
        elif not state.results:
            kind = ViewKind.NO_RESULTS
        else:
            kind = ViewKind.RESULTS
        return SearchView(
            kind=kind,
            query=state.query,
            results=list(state.results) if kind is ViewKind.RESULTS else [],
            show_empty_warning=state.show_empty_warning,
            button_enabled=self.button_enabled,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Unmount: cancel timers and pending automatic searches."""
        self._closed = True
        self._cancel_auto_search()
        if self._warning_timer is not None:
            self._warning_timer.cancel()
            self._warning_timer = None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_stale(self, ticket: int) -> bool:
        return self.discard_stale and ticket != self._sequence

    def _show_warning(self) -> None:
        if self._closed:
            return
        if self._warning_timer is not None:
            self._warning_timer.cancel()
        self.state.show_empty_warning = True
        loop = asyncio.get_running_loop()
        self._warning_timer = loop.call_later(self.warning_delay, self._hide_warning)

    def _hide_warning(self) -> None:
        if self._warning_timer is not None:
            self._warning_timer.cancel()
            self._warning_timer = None
        self.state.show_empty_warning = False

    def _schedule_auto_search(self) -> None:
        self._cancel_auto_search()
        if len(self.state.query.strip()) < self.min_auto_chars:
            return
        loop = asyncio.get_running_loop()
        self._debounce_timer = loop.call_later(self.debounce_delay, self._fire_auto_search)

    def _fire_auto_search(self) -> None:
        self._debounce_timer = None
        task = asyncio.ensure_future(self.submit())
        self._auto_tasks.add(task)
        task.add_done_callback(self._auto_tasks.discard)

    def _cancel_auto_search(self) -> None:
        if self._debounce_timer is not None:
            self._debounce_timer.cancel()
            self._debounce_timer = None
        if self._closed:
            for task in list(self._auto_tasks):
                task.cancel()
