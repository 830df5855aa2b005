"""Per-client fixed-window rate limiting."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable


@dataclass
class _Window:
    started_at: float
    count: int = 0


class FixedWindowRateLimiter:
    """Allow at most ``max_requests`` per client within each ``window_seconds``.

    A client's window starts with its first request and resets once it
    has fully elapsed.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock
        self._windows: dict[str, _Window] = {}

    def hit(self, key: str) -> bool:
        """Record a request for ``key``; return False when it is over the limit."""
        now = self._clock()
        window = self._windows.get(key)
        if window is None or now - window.started_at >= self.window_seconds:
            self._prune(now)
            window = _Window(started_at=now)
            self._windows[key] = window
        window.count += 1
        return window.count <= self.max_requests

    def retry_after(self, key: str) -> int:
        """Seconds until ``key``'s current window resets."""
        window = self._windows.get(key)
        if window is None:
            return 0
        remaining = self.window_seconds - (self._clock() - window.started_at)
        return max(0, int(remaining + 0.999))

    def reset(self) -> None:
        self._windows.clear()

    def _prune(self, now: float) -> None:
        expired = [k for k, w in self._windows.items() if now - w.started_at >= self.window_seconds]
        for k in expired:
            del self._windows[k]
