"""
Health check and service info endpoints.
"""

import time
from datetime import datetime, timezone

from fastapi import APIRouter, Request

from orchestrator.constants import SERVICE_NAME, SERVICE_VERSION

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> dict:
    """
    Health check endpoint.

    Returns the service status, uptime in seconds and the current time.
    """
    started_at = request.app.state.started_at
    return {
        "status": "ok",
        "uptime": round(time.monotonic() - started_at, 3),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/")
async def service_info() -> dict:
    """Public service description."""
    return {
        "name": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "endpoints": {
            "health": "GET /health",
            "login": "POST /auth/login",
            "logBatch": "POST /api/log-email-batch (protected)",
            "getLogs": "GET /api/email-logs (protected)",
            "getBatch": "GET /api/email-logs/:id (protected)",
        },
    }
