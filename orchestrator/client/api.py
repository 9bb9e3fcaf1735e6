"""
HTTP client for the orchestrator API.

Attaches the session token and API key to every request. A 401 or 403 from
the server clears the local session so the user is sent back to login.
"""

from typing import Any

import httpx

from orchestrator.client.config import ClientSettings
from orchestrator.client.session import ClientSessionManager
from orchestrator.config.logging import get_logger
from orchestrator.constants import API_KEY_HEADER
from orchestrator.errors import (
    AuthenticationError,
    BackendRequestError,
    NetworkError,
    NotFoundError,
)

logger = get_logger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."


def _error_message(response: httpx.Response) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        return data.get("error")
    return None


class BackendClient:
    """Calls the protected batch logging endpoints."""

    def __init__(
        self,
        settings: ClientSettings,
        session: ClientSessionManager,
        http_client: httpx.AsyncClient,
    ):
        self._settings = settings
        self._session = session
        self._http = http_client

    def _url(self, path: str) -> str:
        return f"{self._settings.api_base_url.rstrip('/')}{path}"

    def auth_headers(self) -> dict[str, str]:
        """Headers for an authenticated request."""
        headers = {"Content-Type": "application/json"}
        if self._session.token:
            headers["Authorization"] = f"Bearer {self._session.token}"
        if self._settings.api_key:
            headers[API_KEY_HEADER] = self._settings.api_key
        return headers

    async def log_email_batch(self, payload: dict[str, Any]) -> str | None:
        """
        Record a submitted batch. Best effort: failures are logged, not raised.

        Args:
            payload: Batch body in wire (camelCase) form

        Returns:
            The new batch ID, or None if logging failed
        """
        try:
            response = await self._http.post(
                self._url("/api/log-email-batch"),
                json=payload,
                headers=self.auth_headers(),
                timeout=self._settings.api_timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("Error logging email batch", error=str(e))
            return None

        if not response.is_success:
            if self._session.handle_auth_error(response.status_code):
                return None
            logger.warning("Failed to log email batch", status_code=response.status_code)
            return None

        try:
            batch_id = response.json().get("batchId")
        except (ValueError, AttributeError):
            batch_id = None

        logger.info("Logged email batch", batch_id=batch_id)
        return batch_id

    async def get_email_logs(
        self,
        limit: int = 50,
        offset: int = 0,
        status: str | None = None,
    ) -> dict[str, Any]:
        """List recent batches, newest first."""
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        if status:
            params["status"] = status
        return await self._get("/api/email-logs", params=params)

    async def get_email_batch(self, batch_id: str) -> dict[str, Any]:
        """Fetch one batch with its recipients."""
        data = await self._get(f"/api/email-logs/{batch_id}")
        return data["batch"]

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """
        Perform an authenticated GET.

        Raises:
            NetworkError: If the server cannot be reached
            AuthenticationError: On 401/403, after clearing the session
            NotFoundError: On 404
            BackendRequestError: On any other unsuccessful response
        """
        try:
            response = await self._http.get(
                self._url(path),
                params=params,
                headers=self.auth_headers(),
                timeout=self._settings.api_timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("API request failed", path=path, error=str(e))
            raise NetworkError("Unable to reach the API server") from e

        if self._session.handle_auth_error(response.status_code):
            raise AuthenticationError(_error_message(response) or SESSION_EXPIRED_MESSAGE)

        if response.status_code == 404:
            raise NotFoundError(_error_message(response) or "Not found")

        if not response.is_success:
            raise BackendRequestError(response.status_code, _error_message(response))

        try:
            data = response.json()
        except ValueError as e:
            raise BackendRequestError(response.status_code, "Invalid JSON response") from e

        if not isinstance(data, dict) or not data.get("ok"):
            raise BackendRequestError(response.status_code, "API returned error")

        return data
