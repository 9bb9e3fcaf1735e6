"""
In-memory sliding window rate limiter.

Provides per-client rate limiting to protect the login route against brute
force and the data API against abuse.
"""

import math
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass

from starlette.requests import Request

from orchestrator.config.logging import get_logger
from orchestrator.config.settings import Settings
from orchestrator.constants import LOGIN_RATE_LIMIT_MAX_REQUESTS

logger = get_logger(__name__)

UNKNOWN_CLIENT = "unknown"


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check."""

    allowed: bool
    limit: int
    remaining: int
    reset_after: int  # seconds until the oldest counted request leaves the window

    def headers(self) -> dict[str, str]:
        """Standard RateLimit-* response headers."""
        return {
            "RateLimit-Limit": str(self.limit),
            "RateLimit-Remaining": str(self.remaining),
            "RateLimit-Reset": str(self.reset_after),
        }


class RateLimiter:
    """
    Sliding window rate limiter with per-client tracking.

    Each key gets its own deque of request timestamps. Old entries are
    cleaned up on each check. Updates happen under a lock so concurrent
    requests from the same source are never undercounted.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the rate limiter.

        Args:
            max_requests: Maximum requests allowed per window per key
            window_seconds: Sliding window duration in seconds
            clock: Monotonic time source
        """
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._requests: dict[str, deque[float]] = {}
        self._lock = threading.Lock()

    def _prune(self, window: deque[float], now: float) -> None:
        cutoff = now - self.window_seconds
        while window and window[0] <= cutoff:
            window.popleft()

    def _reset_after(self, window: deque[float], now: float) -> int:
        if not window:
            return self.window_seconds
        return max(0, math.ceil(window[0] + self.window_seconds - now))

    def hit(self, key: str) -> RateLimitResult:
        """
        Count a request for the given key.

        Args:
            key: Client identifier

        Returns:
            RateLimitResult describing whether the request is allowed
        """
        with self._lock:
            now = self.clock()
            window = self._requests.setdefault(key, deque())
            self._prune(window, now)

            if len(window) >= self.max_requests:
                return RateLimitResult(
                    allowed=False,
                    limit=self.max_requests,
                    remaining=0,
                    reset_after=self._reset_after(window, now),
                )

            window.append(now)
            return RateLimitResult(
                allowed=True,
                limit=self.max_requests,
                remaining=self.max_requests - len(window),
                reset_after=self._reset_after(window, now),
            )

    def check(self, key: str) -> bool:
        """
        Check if a request is allowed for the given key.

        Returns:
            True if the request is allowed, False if rate-limited
        """
        return self.hit(key).allowed

    def cleanup_key(self, key: str) -> None:
        """Remove tracking data for a key."""
        with self._lock:
            self._requests.pop(key, None)

    def cleanup_stale(self) -> int:
        """
        Remove keys with no recent requests.

        Returns:
            Number of keys cleaned up
        """
        with self._lock:
            now = self.clock()
            stale = []
            for key, window in self._requests.items():
                self._prune(window, now)
                if not window:
                    stale.append(key)

            for key in stale:
                del self._requests[key]

        return len(stale)


def create_api_rate_limiter(settings: Settings) -> RateLimiter:
    """General API limiter, configured from settings."""
    return RateLimiter(
        max_requests=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window,
    )


def create_login_rate_limiter(settings: Settings) -> RateLimiter:
    """
    Login limiter.

    Shares the configured window with the API limiter but has a fixed,
    much stricter ceiling to slow down password guessing.
    """
    return RateLimiter(
        max_requests=LOGIN_RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.rate_limit_window,
    )


def get_client_ip(request: Request, trust_forwarded_for: bool = True) -> str:
    """
    Derive the rate limit key for a request.

    Prefers the first address of X-Forwarded-For (the server sits behind one
    reverse proxy), then the direct peer address, then "unknown".

    Args:
        request: Incoming request
        trust_forwarded_for: Whether to honour X-Forwarded-For

    Returns:
        Client IP address string
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for")
        if forwarded:
            first = forwarded.split(",")[0].strip()
            if first:
                return first

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT
