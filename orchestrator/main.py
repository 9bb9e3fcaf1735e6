"""
Holiday Email Orchestrator - API entry point.

Provides password login issuing session tokens and a protected API that logs
holiday email batches submitted to the n8n webhook.
"""

import asyncio
import sys
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from orchestrator.auth.credentials import CredentialVerifier
from orchestrator.auth.guards import ApiKeyGate
from orchestrator.auth.tokens import SessionTokenService
from orchestrator.config.logging import configure_logging, get_logger
from orchestrator.config.settings import Settings, get_settings
from orchestrator.constants import API_KEY_HEADER, SERVICE_NAME, SERVICE_VERSION
from orchestrator.db.base import build_engine, build_session_factory, create_tables
from orchestrator.errors import (
    LoginRateLimitExceededError,
    MissingConfigurationError,
    OrchestratorError,
    RateLimitExceededError,
    ValidationError,
)
from orchestrator.middleware.security import (
    RateLimitMiddleware,
    RateLimitRule,
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)
from orchestrator.rate_limiter import create_api_rate_limiter, create_login_rate_limiter
from orchestrator.routers import auth_router, email_logs_router, health_router

logger = get_logger(__name__)


async def _rate_limit_cleanup_loop(app: FastAPI, interval: int) -> None:
    """Background task to drop idle rate limit buckets periodically."""
    while True:
        try:
            await asyncio.sleep(interval)
            cleaned = sum(
                limiter.cleanup_stale()
                for limiter in (app.state.login_rate_limiter, app.state.api_rate_limiter)
            )
            if cleaned > 0:
                logger.info("Rate limit cleanup completed", keys_cleaned=cleaned)
        except asyncio.CancelledError:
            break
        except Exception as e:
            logger.error("Rate limit cleanup failed", error=str(e))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup and shutdown."""
    settings: Settings = app.state.settings

    # Startup
    configure_logging(level=settings.log_level, json_format=settings.log_json)
    logger.info("Starting Holiday Email Orchestrator", host=settings.host, port=settings.port)

    create_tables(app.state.engine)

    cleanup_task = asyncio.create_task(
        _rate_limit_cleanup_loop(app, settings.rate_limit_cleanup_interval)
    )
    logger.info("Started rate limit cleanup background task")

    yield

    # Shutdown
    logger.info("Shutting down Holiday Email Orchestrator")

    cleanup_task.cancel()
    try:
        await cleanup_task
    except asyncio.CancelledError:
        pass

    app.state.engine.dispose()
    logger.info("Disposed database engine")


def _register_exception_handlers(app: FastAPI, debug: bool) -> None:
    @app.exception_handler(OrchestratorError)
    async def orchestrator_error_handler(request: Request, exc: OrchestratorError) -> JSONResponse:
        headers = None
        if isinstance(exc, RateLimitExceededError) and exc.retry_after is not None:
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in err["loc"] if part not in ("body", "query", "path")),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        error = ValidationError(details=details)
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        message = "Not found" if exc.status_code == 404 else str(exc.detail)
        return JSONResponse(
            status_code=exc.status_code,
            content={"ok": False, "error": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", path=request.url.path, error=str(exc))
        return JSONResponse(
            status_code=500,
            content={"ok": False, "error": str(exc) if debug else "Internal server error"},
        )


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; loaded from the environment when omitted

    Raises:
        MissingConfigurationError: If a required secret is not configured
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title=SERVICE_NAME,
        description="Password login, session tokens and email batch logging",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    # Components built once from configuration and shared by every request
    token_service = SessionTokenService(settings.jwt_secret)
    engine = build_engine(settings.database_url)

    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.token_service = token_service
    app.state.credential_verifier = CredentialVerifier(settings.access_password, token_service)
    app.state.api_key_gate = ApiKeyGate(settings.api_key)
    app.state.login_rate_limiter = create_login_rate_limiter(settings)
    app.state.api_rate_limiter = create_api_rate_limiter(settings)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    # Middleware, innermost first
    app.add_middleware(
        RateLimitMiddleware,
        rules=[
            RateLimitRule(
                limiter=app.state.login_rate_limiter,
                path="/auth/login",
                error_class=LoginRateLimitExceededError,
                methods=frozenset({"POST"}),
            ),
            RateLimitRule(
                limiter=app.state.api_rate_limiter,
                path="/api",
                error_class=RateLimitExceededError,
                prefix=True,
            ),
        ],
        trust_forwarded_for=settings.trust_forwarded_for,
    )
    app.add_middleware(RequestSizeLimitMiddleware, max_body_size=settings.max_request_body_size)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", API_KEY_HEADER],
        expose_headers=["RateLimit-Limit", "RateLimit-Remaining", "RateLimit-Reset", "Retry-After"],
    )

    _register_exception_handlers(app, debug=settings.debug)

    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(email_logs_router)

    return app


def run():
    """
    Run the orchestrator API server.

    Exits with status 1 when a required secret is missing.
    """
    try:
        settings = get_settings()
    except MissingConfigurationError as e:
        configure_logging(json_format=False)
        logger.error("Refusing to start", error=e.message, missing=e.config_keys)
        sys.exit(1)

    configure_logging(level=settings.log_level, json_format=settings.log_json)

    uvicorn.run(
        "orchestrator.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
