import logging
import math
import time
from collections import deque
from typing import Callable, Deque, Dict, Tuple

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """
    Allows at most `limit` hits per key within any `window_seconds` span.
    The clock is injectable so tests can move time by hand.
    """

    def __init__(self, limit: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.limit = limit
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits: Dict[str, Deque[float]] = {}
        self._last_sweep = clock()

    def hit(self, key: str) -> Tuple[bool, float]:
        """
        Record a hit for key. Returns (allowed, retry_after_seconds).
        Rejected hits are not recorded.
        """
        now = self.clock()
        if now - self._last_sweep >= self.window_seconds:
            self._sweep(now)

        hits = self._hits.get(key)
        if hits:
            self._prune(hits, now)
            if not hits:
                del self._hits[key]
                hits = None

        if hits and len(hits) >= self.limit:
            retry_after = hits[0] + self.window_seconds - now
            return False, max(retry_after, 0.0)

        if hits is None:
            hits = self._hits[key] = deque()
        hits.append(now)
        return True, 0.0

    def _prune(self, hits: Deque[float], now: float) -> None:
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()

    def _sweep(self, now: float) -> None:
        # Drop keys whose hits have all left the window
        for key in list(self._hits):
            hits = self._hits[key]
            self._prune(hits, now)
            if not hits:
                del self._hits[key]
        self._last_sweep = now


def client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def rate_limit_middleware(limiter: SlidingWindowRateLimiter):
    async def middleware(request: Request, call_next):
        # Let CORS preflight pass through
        if request.method == "OPTIONS":
            return await call_next(request)

        key = client_key(request)
        allowed, retry_after = limiter.hit(key)
        if not allowed:
            logger.warning("Rate limit exceeded for %s on %s", key, request.url.path)
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={"detail": "Too many requests"},
                headers={"Retry-After": str(max(1, math.ceil(retry_after)))},
            )

        return await call_next(request)

    return middleware
