"""
Client configuration using pydantic-settings.

Environment variables are prefixed with ORCHESTRATOR_CLIENT_. Every value has
a development default so the client starts against a local n8n and API.
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

WEBHOOK_URL_PLACEHOLDER = "REPLACE_ME"

# Language options available in the form
LANGUAGE_OPTIONS = (
    ("en", "English"),
    ("hi", "Hindi"),
)

# Audience type options
AUDIENCE_OPTIONS = (
    ("business", "Business"),
    ("personal", "Personal"),
)

BACKEND_LABELS = {
    "local": "Local",
    "render": "Render",
    "vercel": "Vercel",
    "ngrok": "ngrok",
    "other": "Remote",
}


class ClientSettings(BaseSettings):
    """Settings for the webhook submitter and the backend API client."""

    model_config = SettingsConfigDict(
        env_prefix="ORCHESTRATOR_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # n8n endpoint for email generation and sending
    webhook_url: str = f"http://localhost:5678/webhook/{WEBHOOK_URL_PLACEHOLDER}"
    # Backend API for login and batch logging
    api_base_url: str = "http://localhost:4000"

    # Security
    api_key: str = ""
    n8n_secret: str = ""
    access_password_hint: str | None = None

    # Timeouts in seconds
    webhook_timeout: float = 30.0
    api_timeout: float = 10.0

    session_file: Path = Path.home() / ".holiday-orchestrator" / "session.json"

    def is_webhook_url_unconfigured(self) -> bool:
        """True while the webhook URL still holds the placeholder."""
        return WEBHOOK_URL_PLACEHOLDER in self.webhook_url

    def is_security_configured(self) -> bool:
        """True when both the API key and the webhook secret are set."""
        return bool(self.api_key) and bool(self.n8n_secret)

    def get_backend_type(self) -> str:
        """Classify where the webhook is hosted, from its URL."""
        url = self.webhook_url.lower()

        if "localhost" in url or "127.0.0.1" in url:
            return "local"
        if ".onrender.com" in url:
            return "render"
        if ".vercel.app" in url:
            return "vercel"
        if "ngrok" in url:
            return "ngrok"
        return "other"

    def get_backend_label(self) -> str:
        """Human-readable label for the backend type."""
        return BACKEND_LABELS[self.get_backend_type()]
