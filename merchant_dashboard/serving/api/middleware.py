"""
API Middleware

- Request logging with a request id bound into the structlog context
- Rate limiting per client address
- Security headers
"""

import asyncio
import time
from typing import Callable, Dict, List

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

logger = structlog.get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests with timing information"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        request_id = request.headers.get("X-Request-ID", str(time.time_ns()))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request failed", path=request.url.path)
            raise

        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.info(
            "Request completed",
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )

        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        response.headers["X-Request-ID"] = request_id

        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    In-memory sliding window rate limiter.

    Requests are keyed by client address. Identity headers are not trusted
    here since this runs before the request is authenticated. State is per
    process; clients idle for a full window are dropped.
    """

    def __init__(
        self,
        app,
        max_requests: int = 100,
        window_seconds: int = 60,
    ):
        super().__init__(app)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._requests: Dict[str, List[float]] = {}
        self._last_sweep = time.time()
        self._lock = asyncio.Lock()

    @staticmethod
    def _client_key(request: Request) -> str:
        return request.client.host if request.client else "unknown"

    def _prune(self, client_key: str, current_time: float) -> List[float]:
        recent = [
            t for t in self._requests.get(client_key, [])
            if current_time - t < self.window_seconds
        ]
        if recent:
            self._requests[client_key] = recent
        else:
            self._requests.pop(client_key, None)
        return recent

    def _sweep(self, current_time: float) -> None:
        """Drop every client with no request inside the window"""
        if current_time - self._last_sweep < self.window_seconds:
            return
        for client_key in list(self._requests):
            self._prune(client_key, current_time)
        self._last_sweep = current_time

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        client_key = self._client_key(request)
        current_time = time.time()

        async with self._lock:
            self._sweep(current_time)
            recent = self._prune(client_key, current_time)

            if len(recent) >= self.max_requests:
                logger.warning(
                    "Rate limit exceeded",
                    client=client_key,
                    requests=len(recent),
                )
                return Response(
                    content='{"error": "rate_limited", "message": "Rate limit exceeded"}',
                    status_code=429,
                    media_type="application/json",
                    headers={
                        "Retry-After": str(self.window_seconds),
                        "X-RateLimit-Limit": str(self.max_requests),
                        "X-RateLimit-Remaining": "0",
                    },
                )

            recent.append(current_time)
            self._requests[client_key] = recent
            remaining = self.max_requests - len(recent)

        response = await call_next(request)

        response.headers["X-RateLimit-Limit"] = str(self.max_requests)
        response.headers["X-RateLimit-Remaining"] = str(remaining)

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers; API payloads are per-merchant and never cached"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if request.url.path.startswith("/api/"):
            response.headers["Cache-Control"] = "no-store"

        return response
