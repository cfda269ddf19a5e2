"""
HTTP middleware: request logging, client IP resolution and rate limiting.

The rate limiter is a per-process sliding window keyed by (client ip,
endpoint). It fails open: an internal limiter error allows the request
rather than blocking legitimate users.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from typing import Awaitable, Callable

from fastapi import Request, Response

from backend_privacyscore.privacy_logging import get_logger

logger = get_logger(__name__)

UNKNOWN_IP = "unknown"


def get_client_ip(request: Request) -> str:
    """First hop of x-forwarded-for, then x-real-ip, cf-connecting-ip, socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first
    for header in ("x-real-ip", "cf-connecting-ip"):
        value = (request.headers.get(header) or "").strip()
        if value:
            return value
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_IP


class SlidingWindowRateLimiter:
    """At most max_requests per window_sec for each (ip, endpoint) key."""

    def __init__(
        self,
        max_requests: int,
        window_sec: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0:
            raise ValueError("max_requests must be positive")
        if window_sec <= 0:
            raise ValueError("window_sec must be positive")
        self.max_requests = max_requests
        self.window_sec = window_sec
        self._clock = clock
        self._hits: dict[tuple[str, str], deque[float]] = {}
        self._lock = threading.Lock()
        self._last_sweep: float | None = None

    @property
    def retry_after_sec(self) -> int:
        return int(self.window_sec)

    @property
    def tracked_keys(self) -> int:
        return len(self._hits)

    def _sweep(self, now: float) -> None:
        """Drop keys whose newest hit has left the window; runs at most once per window."""
        if self._last_sweep is not None and now - self._last_sweep < self.window_sec:
            return
        self._last_sweep = now
        cutoff = now - self.window_sec
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        if stale:
            logger.debug("rate_limit_keys_evicted", count=len(stale), remaining=len(self._hits))

    def check(self, ip: str, endpoint: str) -> bool:
        """Record a hit and return True if the request is allowed."""
        try:
            now = self._clock()
            with self._lock:
                self._sweep(now)
                hits = self._hits.setdefault((ip, endpoint), deque())
                cutoff = now - self.window_sec
                while hits and hits[0] <= cutoff:
                    hits.popleft()
                if len(hits) >= self.max_requests:
                    return False
                hits.append(now)
                return True
        except Exception as e:
            logger.error("rate_limit_check_error", error=str(e), endpoint=endpoint)
            return True


async def log_requests(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Log method, path, status and latency of every request; client ip and bodies are not logged."""
    started = time.perf_counter()
    response = await call_next(request)
    logger.info(
        "http_request",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.perf_counter() - started) * 1000, 2),
    )
    return response
