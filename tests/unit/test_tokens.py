"""
Tests for session token signing and verification.
"""

import time

import jwt
import pytest

from orchestrator.auth.tokens import SessionClaims, SessionTokenService
from orchestrator.errors import InvalidTokenError, TokenExpiredError

SECRET = "unit-test-secret-with-at-least-32-characters"


@pytest.fixture
def service() -> SessionTokenService:
    return SessionTokenService(SECRET)


def _tamper(token: str) -> str:
    """Flip one character in the middle of the signature segment."""
    header, payload, signature = token.split(".")
    middle = len(signature) // 2
    replacement = "A" if signature[middle] != "A" else "B"
    return ".".join([header, payload, signature[:middle] + replacement + signature[middle + 1:]])


class TestIssue:
    def test_issue_claims(self, service):
        """Tokens carry the admin identity and an 8 hour lifetime."""
        issued = service.issue(now=1_700_000_000)

        assert issued.expires_in == 28800
        assert issued.claims == SessionClaims(
            subject="admin",
            role="admin",
            issued_at=1_700_000_000,
            expires_at=1_700_028_800,
        )

    def test_issue_is_hs256_jwt(self, service):
        issued = service.issue()

        assert jwt.get_unverified_header(issued.token)["alg"] == "HS256"

    def test_issue_deterministic(self, service):
        """Same secret, claims and time produce the same token."""
        assert service.issue(now=1_700_000_000).token == service.issue(now=1_700_000_000).token

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            SessionTokenService("")


class TestVerify:
    def test_round_trip(self, service):
        """A freshly issued token verifies to its claims."""
        issued = service.issue()

        assert service.verify(issued.token) == issued.claims

    def test_expired(self, service):
        """A token issued 9 hours ago is expired."""
        issued = service.issue(now=time.time() - 9 * 3600)

        with pytest.raises(TokenExpiredError):
            service.verify(issued.token)

    def test_expiry_boundary(self, service):
        """Valid one second before exp, expired at exp."""
        issued = service.issue(now=1_700_000_000)
        exp = issued.claims.expires_at

        assert service.verify(issued.token, now=exp - 1).subject == "admin"
        with pytest.raises(TokenExpiredError):
            service.verify(issued.token, now=exp)

    def test_tampered_signature(self, service):
        """Changing one character invalidates the token."""
        token = _tamper(service.issue().token)

        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_wrong_secret(self, service):
        token = SessionTokenService("another-secret-with-at-least-32-chars!").issue().token

        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_forged_expired_token_is_invalid(self, service):
        """Signature is checked before expiry."""
        issued = service.issue(now=time.time() - 9 * 3600)

        with pytest.raises(InvalidTokenError):
            service.verify(_tamper(issued.token))

    @pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c", "a.b"])
    def test_malformed(self, service, token):
        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_missing_claims(self, service):
        """Tokens without the role claim are rejected."""
        token = jwt.encode({"sub": "admin", "iat": 1, "exp": 2**31}, SECRET, algorithm="HS256")

        with pytest.raises(InvalidTokenError):
            service.verify(token)

    def test_algorithm_none_rejected(self, service):
        claims = {"sub": "admin", "role": "admin", "iat": 1, "exp": 2**31}
        token = jwt.encode(claims, None, algorithm="none")

        with pytest.raises(InvalidTokenError):
            service.verify(token)
