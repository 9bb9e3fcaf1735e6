"""
Session token signing and verification.

Session tokens are HS256 JWTs carrying a fixed subject and role plus
issued-at and expiry claims. The server keeps no session state: a token is
valid exactly as long as its signature checks out and its expiry is ahead.
"""

import time
from dataclasses import dataclass
from typing import Any

import jwt

from orchestrator.constants import TOKEN_ALGORITHM, TOKEN_ROLE, TOKEN_SUBJECT, TOKEN_TTL_SECONDS
from orchestrator.errors import InvalidTokenError, TokenExpiredError

REQUIRED_CLAIMS = ["sub", "role", "iat", "exp"]


@dataclass(frozen=True)
class SessionClaims:
    """Decoded session token payload."""

    subject: str
    role: str
    issued_at: int
    expires_at: int

    def to_dict(self) -> dict[str, Any]:
        """Serialize claims to JWT payload form."""
        return {
            "sub": self.subject,
            "role": self.role,
            "iat": self.issued_at,
            "exp": self.expires_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SessionClaims":
        """Deserialize claims from a JWT payload."""
        return cls(
            subject=data["sub"],
            role=data["role"],
            issued_at=int(data["iat"]),
            expires_at=int(data["exp"]),
        )


@dataclass(frozen=True)
class IssuedToken:
    """A freshly signed token and its lifetime in seconds."""

    token: str
    expires_in: int
    claims: SessionClaims


class SessionTokenService:
    """Signs and verifies session tokens with a server-held secret."""

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = TOKEN_TTL_SECONDS,
        algorithm: str = TOKEN_ALGORITHM,
    ):
        if not secret:
            raise ValueError("Token signing secret cannot be empty")
        self._secret = secret
        self.ttl_seconds = ttl_seconds
        self.algorithm = algorithm

    def issue(
        self,
        subject: str = TOKEN_SUBJECT,
        role: str = TOKEN_ROLE,
        now: float | None = None,
    ) -> IssuedToken:
        """
        Sign a new session token.

        Args:
            subject: Identity encoded in the token
            role: Role encoded in the token
            now: Issue time in epoch seconds (defaults to the current time)

        Returns:
            IssuedToken with the encoded JWT and its TTL
        """
        issued_at = int(time.time() if now is None else now)
        claims = SessionClaims(
            subject=subject,
            role=role,
            issued_at=issued_at,
            expires_at=issued_at + self.ttl_seconds,
        )
        token = jwt.encode(claims.to_dict(), self._secret, algorithm=self.algorithm)
        return IssuedToken(token=token, expires_in=self.ttl_seconds, claims=claims)

    def verify(self, token: str, now: float | None = None) -> SessionClaims:
        """
        Verify a session token.

        The signature is checked first, so a forged token is reported as
        invalid even when its expiry has passed.

        Args:
            token: Encoded JWT
            now: Verification time in epoch seconds (defaults to the current time)

        Returns:
            The decoded SessionClaims

        Raises:
            TokenExpiredError: If now >= exp
            InvalidTokenError: For any other verification failure
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options={
                    "require": REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_iat": False,
                },
            )
            claims = SessionClaims.from_dict(payload)
        except (jwt.InvalidTokenError, KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError() from e

        current = time.time() if now is None else now
        if current >= claims.expires_at:
            raise TokenExpiredError()

        return claims
