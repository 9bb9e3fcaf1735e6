"""
Tests for the custom error types module.
"""

from orchestrator.errors import (
    AuthenticationError,
    BackendRequestError,
    BatchNotFoundError,
    ConfigurationError,
    InvalidApiKeyError,
    InvalidAuthFormatError,
    InvalidCredentialError,
    InvalidTokenError,
    LoginRateLimitExceededError,
    MissingApiKeyError,
    MissingAuthHeaderError,
    MissingConfigurationError,
    NetworkError,
    NotFoundError,
    OrchestratorError,
    RateLimitExceededError,
    TokenExpiredError,
    ValidationError,
)


class TestOrchestratorError:
    """Tests for base error class."""

    def test_message(self):
        """Should store message."""
        error = OrchestratorError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_details(self):
        """Should have no details by default."""
        assert OrchestratorError("Test").details is None

    def test_to_dict(self):
        """Should render the API error body."""
        error = OrchestratorError("Test error", details=[{"field": "x", "message": "bad"}])

        assert error.to_dict() == {
            "ok": False,
            "error": "Test error",
            "code": "INTERNAL_ERROR",
            "details": [{"field": "x", "message": "bad"}],
        }

    def test_to_dict_omits_empty_details(self):
        """Should leave out details when there are none."""
        assert "details" not in OrchestratorError("Test").to_dict()


class TestValidationError:
    def test_defaults(self):
        error = ValidationError()
        assert error.status_code == 400
        assert error.code == "VALIDATION_ERROR"
        assert error.message == "Validation failed"


class TestAuthenticationErrors:
    """Tests for the authentication error family."""

    def test_all_are_401(self):
        """Every authentication failure maps to 401."""
        for error_class in (
            InvalidCredentialError,
            MissingAuthHeaderError,
            InvalidAuthFormatError,
            TokenExpiredError,
            InvalidTokenError,
            MissingApiKeyError,
            InvalidApiKeyError,
        ):
            error = error_class()
            assert isinstance(error, AuthenticationError)
            assert error.status_code == 401

    def test_codes(self):
        """Should carry distinct machine-readable codes."""
        assert InvalidCredentialError().code == "INVALID_PASSWORD"
        assert MissingAuthHeaderError().code == "MISSING_AUTH_HEADER"
        assert InvalidAuthFormatError().code == "INVALID_AUTH_FORMAT"
        assert TokenExpiredError().code == "TOKEN_EXPIRED"
        assert InvalidTokenError().code == "INVALID_TOKEN"
        assert MissingApiKeyError().code == "MISSING_API_KEY"
        assert InvalidApiKeyError().code == "INVALID_API_KEY"

    def test_messages(self):
        assert InvalidCredentialError().message == "Invalid password"
        assert TokenExpiredError().message == "Token expired"
        assert InvalidTokenError().message == "Invalid token"


class TestRateLimitErrors:
    def test_api_limit(self):
        error = RateLimitExceededError(retry_after=12)
        assert error.status_code == 429
        assert error.code == "RATE_LIMIT_EXCEEDED"
        assert error.retry_after == 12

    def test_login_limit(self):
        """Login limit is a rate limit error with its own code."""
        error = LoginRateLimitExceededError()
        assert isinstance(error, RateLimitExceededError)
        assert error.status_code == 429
        assert error.code == "AUTH_RATE_LIMIT_EXCEEDED"
        assert error.message == "Too many login attempts. Please try again later."


class TestNotFoundErrors:
    def test_batch_not_found(self):
        error = BatchNotFoundError("abc")
        assert isinstance(error, NotFoundError)
        assert error.status_code == 404
        assert error.batch_id == "abc"
        assert error.to_dict()["error"] == "Batch not found"


class TestConfigurationErrors:
    def test_missing_configuration(self):
        """Should list the missing keys in message and details."""
        error = MissingConfigurationError(["ORCHESTRATOR_API_KEY", "ORCHESTRATOR_JWT_SECRET"])

        assert isinstance(error, ConfigurationError)
        assert error.config_keys == ["ORCHESTRATOR_API_KEY", "ORCHESTRATOR_JWT_SECRET"]
        assert "ORCHESTRATOR_API_KEY, ORCHESTRATOR_JWT_SECRET" in error.message
        assert error.details == {"config_keys": error.config_keys}

    def test_missing_configuration_description(self):
        error = MissingConfigurationError(["X"], "Set it")
        assert error.message.endswith(". Set it")


class TestClientErrors:
    def test_network_error(self):
        assert NetworkError("down").code == "NETWORK_ERROR"

    def test_backend_request_error(self):
        error = BackendRequestError(502)
        assert error.status == 502
        assert error.message == "HTTP 502"

    def test_backend_request_error_message(self):
        assert BackendRequestError(500, "boom").message == "boom"
