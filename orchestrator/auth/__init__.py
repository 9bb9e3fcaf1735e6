"""
Authentication module.

Provides password verification, session token signing and the guards that
protect the data API.
"""

from orchestrator.auth.credentials import CredentialVerifier
from orchestrator.auth.guards import (
    PROTECTED_ROUTE_GUARDS,
    ApiKeyGate,
    apply_guards,
    parse_bearer_header,
    require_api_access,
)
from orchestrator.auth.tokens import IssuedToken, SessionClaims, SessionTokenService

__all__ = [
    "ApiKeyGate",
    "CredentialVerifier",
    "IssuedToken",
    "PROTECTED_ROUTE_GUARDS",
    "SessionClaims",
    "SessionTokenService",
    "apply_guards",
    "parse_bearer_header",
    "require_api_access",
]
