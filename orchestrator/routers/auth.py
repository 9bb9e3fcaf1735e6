"""
Authentication endpoints.

Provides password login:
- POST /auth/login - Exchange the shared access password for a session token

The route is rate limited per client by the login limiter (see main.py).
"""

from fastapi import APIRouter, Request

from orchestrator.auth.credentials import CredentialVerifier
from orchestrator.models.auth import LoginRequest, LoginResponse
from orchestrator.rate_limiter import get_client_ip

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(body: LoginRequest, request: Request) -> LoginResponse:
    """
    Authenticate with the access password and return a session token.

    A wrong password yields 401 INVALID_PASSWORD; a malformed body yields
    400 VALIDATION_ERROR.
    """
    verifier: CredentialVerifier = request.app.state.credential_verifier
    settings = request.app.state.settings

    issued = verifier.verify(
        body.password,
        client_ip=get_client_ip(request, settings.trust_forwarded_for),
    )

    return LoginResponse(token=issued.token, expires_in=issued.expires_in)
