"""
Client-side session management.

Holds the session token obtained from the login endpoint, persists it across
restarts and drops it when it expires or the server rejects it. The manager
is either unauthenticated or authenticated with a token and an expiry; every
transition goes through ``_authenticate`` or ``_clear``.
"""

import asyncio
import time
from collections.abc import Callable

import httpx

from orchestrator.client.config import ClientSettings
from orchestrator.client.storage import SessionStorage
from orchestrator.config.logging import get_logger
from orchestrator.constants import TOKEN_TTL_SECONDS

logger = get_logger(__name__)

LOGIN_FAILED_MESSAGE = "Login failed"
NETWORK_ERROR_MESSAGE = "Network error. Please check your connection."

AUTH_ERROR_STATUSES = (401, 403)


class ClientSessionManager:
    """
    Owns the client's session token and its expiry timer.

    Only one expiry timer is ever live; it is cancelled and rescheduled
    whenever the token changes. A timer firing clears the session locally
    without contacting the server.
    """

    def __init__(
        self,
        settings: ClientSettings,
        storage: SessionStorage,
        http_client: httpx.AsyncClient,
        clock: Callable[[], float] = time.time,
    ):
        """
        Initialize the session manager.

        Args:
            settings: Client settings (API base URL and timeout)
            storage: Where the token and expiry are persisted
            http_client: Shared HTTP client
            clock: Wall clock in epoch seconds
        """
        self._settings = settings
        self._storage = storage
        self._http = http_client
        self._clock = clock

        self._token: str | None = None
        self._expires_at: int | None = None
        self._error: str | None = None
        self._loading = False
        self._timer: asyncio.TimerHandle | None = None

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def expires_at(self) -> int | None:
        """Expiry in epoch milliseconds."""
        return self._expires_at

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._loading

    def clear_error(self) -> None:
        self._error = None

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    async def initialize(self) -> bool:
        """
        Restore a stored session.

        A stored session is only restored when both values are present and
        the expiry is still ahead; otherwise storage is cleared. No network
        call is made.

        Returns:
            True if a session was restored
        """
        token, expires_at = self._storage.load()

        if not token or expires_at is None or expires_at <= self._now_ms():
            if token or expires_at is not None:
                logger.info("Discarding expired or incomplete stored session")
            self._storage.clear()
            return False

        self._authenticate(token, expires_at)
        logger.info("Restored stored session", expires_at=expires_at)
        return True

    async def login(self, password: str) -> bool:
        """
        Exchange the access password for a session token.

        Returns:
            True on success; on failure ``error`` holds the reason. A call
            made while another login is in flight returns False immediately.
        """
        if self._loading:
            return False

        self._loading = True
        self._error = None

        try:
            response = await self._http.post(
                f"{self._settings.api_base_url.rstrip('/')}/auth/login",
                json={"password": password},
                headers={"Content-Type": "application/json"},
                timeout=self._settings.api_timeout,
            )
            data = response.json()
            if not isinstance(data, dict):
                data = {}
            expires_in = int(data.get("expiresIn") or TOKEN_TTL_SECONDS)
        except (httpx.HTTPError, ValueError, TypeError) as e:
            logger.warning("Login request failed", error=str(e))
            self._error = NETWORK_ERROR_MESSAGE
            return False
        finally:
            self._loading = False

        if response.is_success and data.get("ok") and data.get("token"):
            expires_at = self._now_ms() + expires_in * 1000

            self._storage.save(data["token"], expires_at)
            self._authenticate(data["token"], expires_at)
            logger.info("Logged in", expires_in=expires_in)
            return True

        self._error = data.get("error") or LOGIN_FAILED_MESSAGE
        logger.info("Login rejected", status_code=response.status_code, code=data.get("code"))
        return False

    def logout(self) -> None:
        """Drop the session and any pending error."""
        self._clear()
        self._error = None
        logger.info("Logged out")

    def handle_auth_error(self, status_code: int) -> bool:
        """
        Drop the session if the server rejected it.

        Args:
            status_code: HTTP status of a backend response

        Returns:
            True if the status was 401 or 403 and the session was cleared
        """
        if status_code not in AUTH_ERROR_STATUSES:
            return False

        logger.warning("Session rejected by server", status_code=status_code)
        self._clear()
        return True

    def _authenticate(self, token: str, expires_at: int) -> None:
        self._token = token
        self._expires_at = expires_at
        self._schedule_expiry()

    def _clear(self) -> None:
        self._cancel_timer()
        self._token = None
        self._expires_at = None
        self._storage.clear()

    def _schedule_expiry(self) -> None:
        self._cancel_timer()
        delay = max(0.0, (self._expires_at - self._now_ms()) / 1000)
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(delay, self._on_expired)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _on_expired(self) -> None:
        self._timer = None
        logger.info("Session token expired")
        self._clear()
