"""
Request guards for protected routes.

A guard takes the incoming request and either returns (accept) or raises an
AuthenticationError subclass carrying the rejection code. Protected routes
apply an ordered tuple of guards: the API key gate first, then the bearer
token check. Both must pass before the handler runs.
"""

import hmac
from collections.abc import Callable, Iterable

from fastapi import Request

from orchestrator.audit import AuditEvent, audit_log
from orchestrator.auth.tokens import SessionClaims, SessionTokenService
from orchestrator.constants import API_KEY_HEADER
from orchestrator.errors import (
    AuthenticationError,
    InvalidApiKeyError,
    InvalidAuthFormatError,
    MissingApiKeyError,
    MissingAuthHeaderError,
)
from orchestrator.rate_limiter import get_client_ip

Guard = Callable[[Request], None]

BEARER_SCHEME = "Bearer"


class ApiKeyGate:
    """Validates the static shared-secret header."""

    def __init__(self, api_key: str):
        if not api_key:
            raise ValueError("API key cannot be empty")
        self._api_key = api_key.encode("utf-8")

    def check(self, value: str | None) -> None:
        """
        Check an X-API-Key header value.

        Raises:
            MissingApiKeyError: If the header is absent or empty
            InvalidApiKeyError: If the value does not match
        """
        if not value:
            raise MissingApiKeyError()
        if not hmac.compare_digest(value.encode("utf-8"), self._api_key):
            raise InvalidApiKeyError()


def parse_bearer_header(value: str | None) -> str:
    """
    Extract the token from an Authorization header.

    The header must be exactly ``Bearer <token>``: two parts separated by a
    single space, the first literally "Bearer".

    Raises:
        MissingAuthHeaderError: If the header is absent or empty
        InvalidAuthFormatError: If the header has any other shape
    """
    if not value:
        raise MissingAuthHeaderError()

    parts = value.split(" ")
    if len(parts) != 2 or parts[0] != BEARER_SCHEME:
        raise InvalidAuthFormatError()

    return parts[1]


def api_key_guard(request: Request) -> None:
    """Reject requests without the configured API key."""
    gate: ApiKeyGate = request.app.state.api_key_gate
    gate.check(request.headers.get(API_KEY_HEADER))


def bearer_token_guard(request: Request) -> None:
    """Verify the bearer token and attach its claims to the request."""
    token = parse_bearer_header(request.headers.get("authorization"))
    token_service: SessionTokenService = request.app.state.token_service
    request.state.user = token_service.verify(token)


PROTECTED_ROUTE_GUARDS: tuple[Guard, ...] = (api_key_guard, bearer_token_guard)


def apply_guards(request: Request, guards: Iterable[Guard] = PROTECTED_ROUTE_GUARDS) -> None:
    """
    Run guards in order, stopping at the first rejection.

    Raises:
        AuthenticationError: From the first guard that rejects
    """
    for guard in guards:
        try:
            guard(request)
        except AuthenticationError as e:
            event = (
                AuditEvent.SECURITY_INVALID_API_KEY
                if guard is api_key_guard
                else AuditEvent.SECURITY_INVALID_TOKEN
            )
            settings = request.app.state.settings
            audit_log(
                event,
                client_ip=get_client_ip(request, settings.trust_forwarded_for),
                code=e.code,
                success=False,
                details={"path": request.url.path, "method": request.method},
            )
            raise


async def require_api_access(request: Request) -> SessionClaims:
    """FastAPI dependency guarding the data API."""
    apply_guards(request)
    return request.state.user
