"""
Password verification for the single shared access credential.
"""

import hmac

from orchestrator.audit import AuditEvent, audit_log
from orchestrator.auth.tokens import IssuedToken, SessionTokenService
from orchestrator.constants import TOKEN_ROLE, TOKEN_SUBJECT
from orchestrator.errors import InvalidCredentialError


class CredentialVerifier:
    """Checks a submitted password and issues a session token on success."""

    def __init__(self, access_password: str, token_service: SessionTokenService):
        if not access_password:
            raise ValueError("Access password cannot be empty")
        self._access_password = access_password.encode("utf-8")
        self._token_service = token_service

    def matches(self, password: str) -> bool:
        """Compare a submitted password against the configured credential."""
        return hmac.compare_digest(password.encode("utf-8"), self._access_password)

    def verify(self, password: str, client_ip: str | None = None) -> IssuedToken:
        """
        Verify a password and issue a session token.

        Every attempt is audited with the client address. The password
        itself is never logged.

        Args:
            password: Submitted password
            client_ip: Source address, for the audit trail

        Returns:
            IssuedToken for the admin identity

        Raises:
            InvalidCredentialError: If the password does not match
        """
        if not self.matches(password):
            audit_log(
                AuditEvent.AUTH_FAILURE,
                client_ip=client_ip,
                code=InvalidCredentialError.code,
                success=False,
            )
            raise InvalidCredentialError()

        issued = self._token_service.issue(subject=TOKEN_SUBJECT, role=TOKEN_ROLE)
        audit_log(
            AuditEvent.AUTH_SUCCESS,
            client_ip=client_ip,
            subject=issued.claims.subject,
        )
        return issued
