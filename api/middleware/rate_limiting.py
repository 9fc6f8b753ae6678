from __future__ import annotations

import logging
import math
import time
from collections import defaultdict, deque
from threading import Lock
from typing import Deque, Dict

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from settings import SETTINGS

logger = logging.getLogger(__name__)

EXEMPT_PATHS = frozenset({"/health"})


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding one-minute window per client IP."""

    def __init__(self, app, requests_per_minute: int | None = None, window_seconds: float = 60.0) -> None:
        super().__init__(app)
        self.requests_per_minute = requests_per_minute or SETTINGS.rate_limit_per_minute
        self.window_seconds = window_seconds
        self._hits: Dict[str, Deque[float]] = defaultdict(deque)
        self._lock = Lock()

    async def dispatch(self, request: Request, call_next):
        if request.url.path in EXEMPT_PATHS:
            return await call_next(request)
        client = request.client.host if request.client else "unknown"
        now = time.monotonic()
        with self._lock:
            bucket = self._hits[client]
            while bucket and now - bucket[0] >= self.window_seconds:
                bucket.popleft()
            if len(bucket) >= self.requests_per_minute:
                retry_after = max(1, math.ceil(self.window_seconds - (now - bucket[0])))
                logger.warning("rate_limited", extra={"client": client, "path": request.url.path})
                return JSONResponse({"detail": "rate_limited"}, status_code=429, headers={"Retry-After": str(retry_after)})
            bucket.append(now)
        return await call_next(request)
