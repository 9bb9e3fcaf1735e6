"""
Logging for the orchestrator API and its command line client.

structlog renders JSON in production and a console format in development.
Every event is stamped with the service name; events emitted while a request
is handled also carry the request ID, method and path bound by the request
logging middleware. Values logged under secret-looking keys are masked before
rendering, so a password or token passed to a logger by mistake never reaches
the output.
"""

import logging
import sys
import uuid
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from orchestrator.constants import SERVICE_NAME

AUDIT_LOGGER_NAME = "orchestrator.audit"

# Chatty dependencies, kept at WARNING unless running at DEBUG
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio", "uvicorn.access", "sqlalchemy.engine")

SECRET_KEYS = frozenset(
    {
        "password",
        "token",
        "jwt",
        "api_key",
        "x-api-key",
        "authorization",
        "jwt_secret",
        "n8n_secret",
        "x-n8n-secret",
    }
)
REDACTED = "***"

REQUEST_ID_LENGTH = 12


def bind_request_context(request_id: str | None = None, **values: Any) -> str:
    """
    Start a fresh logging context for one request.

    Args:
        request_id: Caller-supplied ID (X-Request-ID); generated when empty
        **values: Extra fields attached to every event of the request

    Returns:
        The request ID in effect
    """
    request_id = request_id or uuid.uuid4().hex[:REQUEST_ID_LENGTH]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id, **values)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_id() -> str | None:
    """Request ID bound to the current context, if any."""
    return structlog.contextvars.get_contextvars().get("request_id")


def _mask(values: Mapping[str, Any]) -> dict[str, Any]:
    masked = {}
    for key, value in values.items():
        if isinstance(key, str) and key.lower() in SECRET_KEYS:
            masked[key] = REDACTED
        elif isinstance(value, Mapping):
            masked[key] = _mask(value)
        else:
            masked[key] = value
    return masked


def mask_secrets(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor replacing secret values, including nested ones."""
    return _mask(event_dict)


def add_service(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor stamping the service name."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """
    Configure structlog and the standard library root logger.

    Audit events stay at INFO even when the application level is higher.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: JSON output when True, console output otherwise
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Callable] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        mask_secrets,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_format:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)
    logging.getLogger().setLevel(log_level)

    quiet_level = logging.DEBUG if log_level <= logging.DEBUG else logging.WARNING
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)

    logging.getLogger(AUDIT_LOGGER_NAME).setLevel(min(log_level, logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
