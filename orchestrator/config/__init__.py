"""Configuration modules for the orchestrator."""

from orchestrator.config.logging import configure_logging, get_logger
from orchestrator.config.settings import Settings, get_settings, load_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "load_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
]
