"""
Duet Backend — Rate Limiting Middleware
=========================================

What:  Per-client sliding window limit on API requests.
How:   Each client key keeps a deque of request timestamps. Timestamps older
       than the window are dropped on every hit; a full window is answered
       with 429 and a `Retry-After` of the seconds until the oldest hit ages
       out.

State lives in process memory, so each uvicorn worker enforces its own
limit.
"""

import logging
import time
from collections import deque
from typing import Deque, Dict, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from app.config import settings
from app.exceptions import RateLimitExceededError
from app.middleware.request_id import request_id_var

logger = logging.getLogger(__name__)

EXEMPT_PATHS = frozenset({"/health", "/docs", "/redoc", "/openapi.json"})


class SlidingWindowLimiter:
    """
    Counts hits per key inside a trailing window of `window` seconds.

    `hit()` returns None when the request is allowed, or the retry-after in
    whole seconds when it is not. Rejected hits are not recorded.
    """

    def __init__(self, limit: int, window: int):
        self.limit = limit
        self.window = window
        self._hits: Dict[str, Deque[float]] = {}

    def hit(self, key: str, now: Optional[float] = None) -> Optional[int]:
        now = time.monotonic() if now is None else now
        hits = self._hits.setdefault(key, deque())
        cutoff = now - self.window
        while hits and hits[0] <= cutoff:
            hits.popleft()

        if len(hits) >= self.limit:
            return max(1, int(hits[0] + self.window - now) + 1)

        hits.append(now)
        return None

    def prune(self, now: Optional[float] = None) -> int:
        """Forget keys with no hits inside the window. Returns how many."""
        now = time.monotonic() if now is None else now
        cutoff = now - self.window
        stale = [key for key, hits in self._hits.items() if not hits or hits[-1] <= cutoff]
        for key in stale:
            del self._hits[key]
        return len(stale)

    def __len__(self) -> int:
        return len(self._hits)


def client_key(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    PRUNE_EVERY = 1000

    def __init__(self, app, limit: Optional[int] = None, window: Optional[int] = None):
        super().__init__(app)
        self.limiter = SlidingWindowLimiter(
            limit=limit or settings.rate_limit_requests,
            window=window or settings.rate_limit_window,
        )
        self._seen = 0

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)

        key = client_key(request)
        retry_after = self.limiter.hit(key)
        if retry_after is not None:
            # Raised errors from BaseHTTPMiddleware bypass the app's
            # exception handlers, so the 429 body is built here.
            exc = RateLimitExceededError(retry_after=retry_after)
            logger.warning("Rate limit exceeded for %s (retry in %ds)", key, retry_after)
            return JSONResponse(
                status_code=429,
                content={
                    "error": "rate_limit_exceeded",
                    "message": exc.message,
                    "details": exc.context,
                    "request_id": request_id_var.get(""),
                },
                headers={"Retry-After": str(retry_after)},
            )

        self._seen += 1
        if self._seen % self.PRUNE_EVERY == 0:
            pruned = self.limiter.prune()
            if pruned:
                logger.debug("Pruned %d idle rate limit keys", pruned)

        return await call_next(request)
