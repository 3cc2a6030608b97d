"""
TASKFLOW API - Rate Limiter Tests

Fixed-window counting per user with a controllable clock.
"""

import pytest

from app.errors import RateLimitError
from app.rate_limit import RATE_LIMIT_NAMESPACE, RateLimiter
from app.session_store import InMemorySessionStore


class FakeClock:

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemorySessionStore()


class TestRateLimiter:

    def test_counts_up_to_limit(self, store, clock):
        limiter = RateLimiter(store, limit=3, window_seconds=60, clock=clock)
        assert [limiter.hit("u1") for _ in range(3)] == [1, 2, 3]

    def test_over_limit_raises_with_retry_after(self, store, clock):
        limiter = RateLimiter(store, limit=2, window_seconds=60, clock=clock)
        limiter.hit("u1")
        limiter.hit("u1")
        clock.now += 15.5

        with pytest.raises(RateLimitError) as exc_info:
            limiter.hit("u1")
        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 45
        assert exc_info.value.message == "Rate limit exceeded. Retry in 45s."

    def test_users_counted_separately(self, store, clock):
        limiter = RateLimiter(store, limit=1, window_seconds=60, clock=clock)
        limiter.hit("u1")
        assert limiter.hit("u2") == 1

    def test_new_window_resets_count(self, store, clock):
        limiter = RateLimiter(store, limit=1, window_seconds=60, clock=clock)
        limiter.hit("u1")
        clock.now += 60

        assert limiter.hit("u1") == 1
        assert store.get(RATE_LIMIT_NAMESPACE, "u1")["started_at"] == clock.now

    def test_zero_limit_disables(self, store, clock):
        limiter = RateLimiter(store, limit=0, window_seconds=60, clock=clock)
        for _ in range(500):
            assert limiter.hit("u1") == 0
        assert store.get(RATE_LIMIT_NAMESPACE, "u1") is None
