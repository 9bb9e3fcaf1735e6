"""
API routers for the orchestrator.
"""

from orchestrator.routers.auth import router as auth_router
from orchestrator.routers.email_logs import router as email_logs_router
from orchestrator.routers.health import router as health_router

__all__ = [
    "auth_router",
    "email_logs_router",
    "health_router",
]
