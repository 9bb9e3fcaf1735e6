"""
Security middleware for the orchestrator.

Adds security headers to all responses, enforces request size limits,
applies per-route rate limits and logs each request.
"""

import time
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from orchestrator.audit import AuditEvent, audit_log
from orchestrator.config.logging import bind_request_context, clear_request_context, get_logger
from orchestrator.errors import RateLimitExceededError
from orchestrator.rate_limiter import RateLimiter, get_client_ip

logger = get_logger(__name__)


@dataclass(frozen=True)
class RateLimitRule:
    """Binds a limiter to the requests it gates."""

    limiter: RateLimiter
    path: str
    error_class: type[RateLimitExceededError] = RateLimitExceededError
    prefix: bool = False
    methods: frozenset[str] | None = None

    def matches(self, request: Request) -> bool:
        if self.methods is not None and request.method not in self.methods:
            return False
        path = request.url.path
        if self.prefix:
            return path == self.path or path.startswith(self.path.rstrip("/") + "/")
        return path == self.path


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware that enforces per-client rate limits.

    The first matching rule decides which limiter counts the request.
    Responses on limited routes carry RateLimit-* headers, whether the
    request was allowed or rejected.
    """

    def __init__(
        self,
        app,
        rules: Sequence[RateLimitRule] = (),
        trust_forwarded_for: bool = True,
    ) -> None:
        """
        Initialize the middleware.

        Args:
            app: The ASGI application
            rules: Rate limit rules, checked in order
            trust_forwarded_for: Whether to key clients by X-Forwarded-For
        """
        super().__init__(app)
        self.rules = list(rules)
        self.trust_forwarded_for = trust_forwarded_for

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rule = next((r for r in self.rules if r.matches(request)), None)
        if rule is None:
            return await call_next(request)

        client_ip = get_client_ip(request, self.trust_forwarded_for)
        result = rule.limiter.hit(client_ip)

        if not result.allowed:
            error = rule.error_class(retry_after=result.reset_after)
            audit_log(
                AuditEvent.SECURITY_RATE_LIMIT,
                client_ip=client_ip,
                code=error.code,
                success=False,
                details={"path": request.url.path, "method": request.method},
            )
            headers = result.headers()
            headers["Retry-After"] = str(result.reset_after)
            return JSONResponse(
                status_code=error.status_code,
                content=error.to_dict(),
                headers=headers,
            )

        response = await call_next(request)
        for name, value in result.headers().items():
            response.headers[name] = value
        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Middleware that enforces request body size limits.

    Rejects requests whose Content-Length exceeds the configured size.
    """

    def __init__(self, app, max_body_size: int = 1024 * 1024) -> None:
        """
        Initialize the middleware.

        Args:
            app: The ASGI application
            max_body_size: Maximum allowed request body size in bytes (default 1MB)
        """
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                length = int(content_length)
            except ValueError:
                length = 0  # malformed header, let the body parser decide
            if length > self.max_body_size:
                return JSONResponse(
                    status_code=413,
                    content={
                        "ok": False,
                        "error": f"Request body too large. Maximum size is {self.max_body_size} bytes.",
                        "code": "PAYLOAD_TOO_LARGE",
                    },
                )

        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that adds security headers to responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that binds a request ID, method and path to every log event
    of the request and logs its outcome.

    Bodies and headers are never logged.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = bind_request_context(
            request.headers.get("x-request-id"),
            method=request.method,
            path=request.url.path,
        )
        started = time.perf_counter()
        try:
            response = await call_next(request)
            logger.info(
                "Request completed",
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
        finally:
            clear_request_context()

        response.headers["X-Request-ID"] = request_id
        return response
