"""
Unit tests for the fixed-window RateLimiter
"""

import pytest

from glance.core.exceptions import RateLimitExceededError
from glance.middleware.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.mark.unit
class TestRateLimiter:

    def test_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            RateLimiter(limit=0, window_seconds=60)

    def test_rejects_request_past_limit(self, clock):
        limiter = RateLimiter(limit=3, window_seconds=60, timer=clock)

        for _ in range(3):
            limiter.check("user_a")

        with pytest.raises(RateLimitExceededError) as exc_info:
            limiter.check("user_a")

        assert exc_info.value.retry_after == 60
        assert exc_info.value.status_code == 429

    def test_retry_after_counts_down(self, clock):
        limiter = RateLimiter(limit=1, window_seconds=60, timer=clock)
        limiter.check("user_a")

        clock.now = 30.5
        with pytest.raises(RateLimitExceededError) as exc_info:
            limiter.check("user_a")

        assert exc_info.value.retry_after == 30

    def test_readmits_after_window(self, clock):
        limiter = RateLimiter(limit=2, window_seconds=60, timer=clock)
        limiter.check("user_a")
        limiter.check("user_a")

        clock.now = 61
        limiter.check("user_a")

    def test_window_is_not_extended_by_requests(self, clock):
        limiter = RateLimiter(limit=2, window_seconds=60, timer=clock)

        limiter.check("user_a")
        clock.now = 50
        limiter.check("user_a")

        clock.now = 55
        with pytest.raises(RateLimitExceededError):
            limiter.check("user_a")

        # Window opened at t=0, so it closes at t=60 regardless of the t=50 hit
        clock.now = 61
        limiter.check("user_a")

    def test_keys_are_independent(self, clock):
        limiter = RateLimiter(limit=1, window_seconds=60, timer=clock)
        limiter.check("user_a")
        limiter.check("user_b")

        with pytest.raises(RateLimitExceededError):
            limiter.check("user_a")

    def test_tracked_keys_are_bounded(self, clock):
        limiter = RateLimiter(limit=5, window_seconds=60, max_keys=2, timer=clock)

        for key in ("a", "b", "c", "d"):
            limiter.check(key)

        assert len(limiter) <= 2

    def test_expired_windows_are_dropped(self, clock):
        limiter = RateLimiter(limit=5, window_seconds=60, timer=clock)
        limiter.check("a")
        limiter.check("b")
        assert len(limiter) == 2

        clock.now = 120
        assert len(limiter) == 0
