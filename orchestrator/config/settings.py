"""
Application settings using pydantic-settings.

Environment variables are prefixed with ORCHESTRATOR_. The access password,
token signing secret, API key and database URL are required; the server
refuses to start without them.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from orchestrator.constants import (
    MAX_REQUEST_BODY_SIZE,
    RATE_LIMIT_CLEANUP_INTERVAL_SECONDS,
    RATE_LIMIT_MAX_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
)
from orchestrator.errors import MissingConfigurationError

load_dotenv()

REQUIRED_SECRETS = ("access_password", "jwt_secret", "api_key", "database_url")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ORCHESTRATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Secrets (required)
    access_password: str = Field(min_length=1)
    jwt_secret: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    database_url: str = Field(min_length=1)

    # Server settings
    host: str = "0.0.0.0"
    port: int = 4000
    debug: bool = False

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS settings
    cors_origins: str = "*"

    # Rate limiting
    rate_limit_max: int = Field(default=RATE_LIMIT_MAX_REQUESTS, ge=1)
    rate_limit_window: int = Field(default=RATE_LIMIT_WINDOW_SECONDS, ge=1)
    rate_limit_cleanup_interval: int = RATE_LIMIT_CLEANUP_INTERVAL_SECONDS
    # Trust the first X-Forwarded-For entry (one reverse-proxy hop)
    trust_forwarded_for: bool = True

    # Request limits
    max_request_body_size: int = MAX_REQUEST_BODY_SIZE

    @field_validator(*REQUIRED_SECRETS, mode="before")
    @classmethod
    def strip_secret(cls, value):
        """Treat whitespace-only values as missing."""
        if isinstance(value, str):
            return value.strip()
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        """Parsed CORS origins."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def load_settings(**overrides) -> Settings:
    """
    Build settings, converting validation failures of required secrets into
    a MissingConfigurationError.

    Args:
        **overrides: Explicit values that take precedence over the environment

    Raises:
        MissingConfigurationError: If a required value is absent or empty
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = sorted(
            {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
            & set(REQUIRED_SECRETS)
        )
        if not missing:
            raise
        env_names = [f"ORCHESTRATOR_{key.upper()}" for key in missing]
        raise MissingConfigurationError(
            env_names, "Set them in the environment or in a .env file"
        ) from e


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()


def reset_settings() -> None:
    """Clear the cached settings (for testing)."""
    get_settings.cache_clear()
