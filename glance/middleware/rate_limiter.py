"""
Rate Limiting

Fixed-window request counting per caller, held in a bounded TTL cache.
The limiter lives on app.state and reaches handlers through a FastAPI
dependency (glance.api.deps.get_search_rate_limiter), so tests can
override it or drive it with a fake clock.
"""

from dataclasses import dataclass
from typing import Callable
import logging
import math
import threading
import time

from cachetools import TTLCache

from glance.config import settings
from glance.core.exceptions import RateLimitExceededError
from glance.utils.sanitize import get_safe_user_display

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    started: float
    count: int


class RateLimiter:
    """
    Per-key fixed-window limiter

    A key's window opens on its first request and closes `window_seconds`
    later, when the cache evicts it. At most `max_keys` windows are tracked;
    beyond that the least recently used window is dropped.
    """

    def __init__(
        self,
        limit: int,
        window_seconds: float,
        max_keys: int = 500,
        timer: Callable[[], float] = time.monotonic,
    ):
        if limit < 1:
            raise ValueError("limit must be at least 1")

        self.limit = limit
        self.window_seconds = window_seconds
        self._timer = timer
        self._windows = TTLCache(maxsize=max_keys, ttl=window_seconds, timer=timer)
        self._lock = threading.Lock()

    def check(self, key: str):
        """
        Count one request for `key`

        Raises:
            RateLimitExceededError: `limit` requests already counted in the current window
        """
        with self._lock:
            window = self._windows.get(key)

            if window is None:
                self._windows[key] = _Window(started=self._timer(), count=1)
                return

            if window.count >= self.limit:
                remaining = window.started + self.window_seconds - self._timer()
                retry_after = max(1, math.ceil(remaining))
                logger.warning(f"Rate limit exceeded for {get_safe_user_display(key)} (retry in {retry_after}s)")
                raise RateLimitExceededError(retry_after=retry_after)

            # In-place update keeps the original expiry
            window.count += 1

    def __len__(self) -> int:
        with self._lock:
            self._windows.expire()
            return len(self._windows)


def setup_rate_limiting(app):
    """
    Attach the search limiter to the app

    Args:
        app: FastAPI application instance
    """
    app.state.search_rate_limiter = RateLimiter(
        limit=settings.SEARCH_RATE_LIMIT,
        window_seconds=settings.SEARCH_RATE_WINDOW_SECONDS,
        max_keys=settings.RATE_LIMIT_MAX_KEYS,
    )
    logger.info(
        f"Search rate limit: {settings.SEARCH_RATE_LIMIT} requests / "
        f"{settings.SEARCH_RATE_WINDOW_SECONDS}s per user"
    )
