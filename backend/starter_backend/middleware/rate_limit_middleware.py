"""Simple in-memory rate limit middleware.

Fixed-window counter per client IP (and optionally per-path) to throttle requests.

# Production guidance when deployed behind a reverse proxy
# -------------------------------------------------------
# - request.client.host will be the proxy address. Configure your reverse proxy
#   to send a trusted client IP header and strip it from public traffic at the edge.
# - Counters live in process memory; each worker/instance limits independently.
"""

import logging
import time
from typing import Callable, Dict, Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from starter_backend.managers.config import config_manager

logger = logging.getLogger(__name__)

EXEMPT_PATHS = frozenset({"/health", "/api/health", "/api/health/ready"})


class FixedWindowRateLimiter:
    """Counts requests per key inside a fixed time window."""

    def __init__(
        self,
        max_requests: int,
        window_seconds: int,
        per_path: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.per_path = per_path
        self._clock = clock
        self._buckets: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()

    def _key(self, client_host: str, path: str) -> str:
        if self.per_path and path:
            return f"{client_host}:{path}"
        return client_host

    def check(self, client_host: str, path: str = "") -> Tuple[bool, Optional[int]]:
        """
        Record a request and decide whether it is allowed.

        Returns:
            (is_allowed, retry_after_seconds)
        """
        key = self._key(client_host, path)
        now = self._clock()
        if now - self._last_sweep > self.window_seconds:
            self._sweep(now)

        bucket = self._buckets.get(key)
        if bucket is None or now - bucket[0] > self.window_seconds:
            self._buckets[key] = (now, 1)
            return True, None

        window_start, count = bucket
        if count >= self.max_requests:
            retry_after = int(self.window_seconds - (now - window_start)) + 1
            return False, retry_after

        self._buckets[key] = (window_start, count + 1)
        return True, None

    def _sweep(self, now: float) -> None:
        """Drop buckets whose window has passed; runs at most once per window."""
        expired = [k for k, (start, _) in self._buckets.items() if now - start > self.window_seconds]
        for key in expired:
            del self._buckets[key]
        self._last_sweep = now

    @property
    def bucket_count(self) -> int:
        return len(self._buckets)

    def reset(self) -> None:
        self._buckets.clear()


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, limiter: Optional[FixedWindowRateLimiter] = None) -> None:
        super().__init__(app)
        if limiter is None:
            settings = config_manager.app_settings
            limiter = FixedWindowRateLimiter(
                max_requests=settings.rate_limit_rpm,
                window_seconds=settings.rate_limit_window_seconds,
                per_path=settings.rate_limit_per_path,
            )
        self.limiter = limiter

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path in EXEMPT_PATHS:
            return await call_next(request)

        client_host = getattr(request.client, "host", "unknown") if request.client else "unknown"
        allowed, retry_after = self.limiter.check(client_host, path)

        if not allowed:
            logger.warning(f"Rate limit exceeded for {client_host}")
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Please try again later."},
                headers={"Retry-After": str(retry_after)},
            )

        return await call_next(request)
