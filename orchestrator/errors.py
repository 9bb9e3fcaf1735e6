"""
Custom error types for the Holiday Email Orchestrator.

Every error carries an HTTP status and a machine-readable code so the API
layer can render a consistent ``{ok: false, error, code}`` body.
"""

from typing import Any


class OrchestratorError(Exception):
    """Base exception for all orchestrator errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to the API response body."""
        body: dict[str, Any] = {
            "ok": False,
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            body["details"] = self.details
        return body


# Input Validation Errors


class ValidationError(OrchestratorError):
    """Raised when request input is malformed."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str = "Validation failed", details: Any = None):
        super().__init__(message, details=details)


# Authentication and Authorization Errors


class AuthenticationError(OrchestratorError):
    """Raised when authentication fails."""

    status_code = 401
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InvalidCredentialError(AuthenticationError):
    """Raised when the submitted password does not match."""

    code = "INVALID_PASSWORD"

    def __init__(self, message: str = "Invalid password"):
        super().__init__(message)


class MissingAuthHeaderError(AuthenticationError):
    """Raised when a protected request has no Authorization header."""

    code = "MISSING_AUTH_HEADER"

    def __init__(self, message: str = "Missing authorization header"):
        super().__init__(message)


class InvalidAuthFormatError(AuthenticationError):
    """Raised when the Authorization header is not ``Bearer <token>``."""

    code = "INVALID_AUTH_FORMAT"

    def __init__(
        self, message: str = "Invalid authorization format. Expected: Bearer <token>"
    ):
        super().__init__(message)


class TokenExpiredError(AuthenticationError):
    """Raised when a session token has expired."""

    code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "Token expired"):
        super().__init__(message)


class InvalidTokenError(AuthenticationError):
    """Raised when a session token fails verification for any other reason."""

    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class MissingApiKeyError(AuthenticationError):
    """Raised when the X-API-Key header is absent."""

    code = "MISSING_API_KEY"

    def __init__(self, message: str = "Missing API key"):
        super().__init__(message)


class InvalidApiKeyError(AuthenticationError):
    """Raised when the X-API-Key header does not match."""

    code = "INVALID_API_KEY"

    def __init__(self, message: str = "Invalid API key"):
        super().__init__(message)


# Rate Limiting Errors


class RateLimitExceededError(OrchestratorError):
    """Raised when a client exceeds the general API rate limit."""

    status_code = 429
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(
        self,
        message: str = "Too many requests. Please try again later.",
        retry_after: int | None = None,
    ):
        self.retry_after = retry_after
        super().__init__(message)


class LoginRateLimitExceededError(RateLimitExceededError):
    """Raised when a client exceeds the login attempt limit."""

    code = "AUTH_RATE_LIMIT_EXCEEDED"

    def __init__(
        self,
        message: str = "Too many login attempts. Please try again later.",
        retry_after: int | None = None,
    ):
        super().__init__(message, retry_after=retry_after)


# Lookup Errors


class NotFoundError(OrchestratorError):
    """Raised when a requested resource does not exist."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class BatchNotFoundError(NotFoundError):
    """Raised when an email batch cannot be found."""

    def __init__(self, batch_id: str):
        self.batch_id = batch_id
        super().__init__("Batch not found")


# Configuration Errors


class ConfigurationError(OrchestratorError):
    """Raised when there's a configuration error."""

    code = "CONFIGURATION_ERROR"


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration is missing."""

    def __init__(self, config_keys: list[str], description: str | None = None):
        self.config_keys = config_keys
        message = f"Missing required configuration: {', '.join(config_keys)}"
        if description:
            message += f". {description}"
        super().__init__(message, details={"config_keys": config_keys})


# Client-side Errors


class NetworkError(OrchestratorError):
    """Raised by the client when the server cannot be reached."""

    status_code = 503
    code = "NETWORK_ERROR"


class BackendRequestError(OrchestratorError):
    """Raised by the client when the backend answers with an unexpected error."""

    code = "BACKEND_ERROR"

    def __init__(self, status: int, message: str | None = None):
        self.status = status
        super().__init__(message or f"HTTP {status}", details={"status": status})
