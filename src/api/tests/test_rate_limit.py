"""Tests for the fixed-window rate limiter."""

from __future__ import annotations

from finance_api.rate_limit import FixedWindowRateLimiter


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestFixedWindowRateLimiter:
    """Test per-client windows."""

    def test_allows_up_to_limit(self) -> None:
        limiter = FixedWindowRateLimiter(3, 60, clock=_Clock())
        assert [limiter.hit("a") for _ in range(4)] == [True, True, True, False]

    def test_clients_are_independent(self) -> None:
        limiter = FixedWindowRateLimiter(1, 60, clock=_Clock())
        assert limiter.hit("a")
        assert not limiter.hit("a")
        assert limiter.hit("b")

    def test_window_resets_after_elapsed(self) -> None:
        clock = _Clock()
        limiter = FixedWindowRateLimiter(1, 60, clock=clock)
        assert limiter.hit("a")
        clock.now = 59.9
        assert not limiter.hit("a")
        clock.now = 60.0
        assert limiter.hit("a")

    def test_retry_after(self) -> None:
        clock = _Clock()
        limiter = FixedWindowRateLimiter(1, 900, clock=clock)
        assert limiter.retry_after("a") == 0
        limiter.hit("a")
        clock.now = 100.0
        assert limiter.retry_after("a") == 800

    def test_reset_clears_windows(self) -> None:
        limiter = FixedWindowRateLimiter(1, 60, clock=_Clock())
        limiter.hit("a")
        limiter.reset()
        assert limiter.hit("a")
