"""
Persistent storage for the client session.

The session is two values, the signed token and its expiry in epoch
milliseconds, stored under the keys ``jwt`` and ``jwt_expiry``. They are
always written and cleared together.
"""

import json
import os
from abc import ABC, abstractmethod
from pathlib import Path

from orchestrator.config.logging import get_logger

logger = get_logger(__name__)

JWT_STORAGE_KEY = "jwt"
JWT_EXPIRY_KEY = "jwt_expiry"


class SessionStorage(ABC):
    """Abstract base class for session storage backends."""

    @abstractmethod
    def load(self) -> tuple[str | None, int | None]:
        """Return the stored (token, expiry_ms), either of which may be None."""

    @abstractmethod
    def save(self, token: str, expires_at_ms: int) -> None:
        """Store a token and its expiry."""

    @abstractmethod
    def clear(self) -> None:
        """Remove both stored values."""


class InMemorySessionStorage(SessionStorage):
    """Session storage that lives as long as the process."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def load(self) -> tuple[str | None, int | None]:
        return _parse(self._data)

    def save(self, token: str, expires_at_ms: int) -> None:
        self._data = {JWT_STORAGE_KEY: token, JWT_EXPIRY_KEY: str(expires_at_ms)}

    def clear(self) -> None:
        self._data = {}


class FileSessionStorage(SessionStorage):
    """
    Session storage backed by a JSON file.

    The file is created with owner-only permissions. A missing or unreadable
    file is treated as an empty session.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> tuple[str | None, int | None]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None, None
        except (OSError, ValueError) as e:
            logger.warning("Unreadable session file", path=str(self.path), error=str(e))
            return None, None

        if not isinstance(data, dict):
            return None, None
        return _parse(data)

    def save(self, token: str, expires_at_ms: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({JWT_STORAGE_KEY: token, JWT_EXPIRY_KEY: str(expires_at_ms)})

        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


def _parse(data: dict) -> tuple[str | None, int | None]:
    token = data.get(JWT_STORAGE_KEY) or None
    raw_expiry = data.get(JWT_EXPIRY_KEY)
    try:
        expiry = int(raw_expiry) if raw_expiry is not None else None
    except (TypeError, ValueError):
        expiry = None
    return token, expiry
