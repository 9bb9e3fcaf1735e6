"""
Middleware for the orchestrator.
"""

from orchestrator.middleware.security import (
    RateLimitMiddleware,
    RateLimitRule,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

__all__ = [
    "RateLimitMiddleware",
    "RateLimitRule",
    "RequestLoggingMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]
