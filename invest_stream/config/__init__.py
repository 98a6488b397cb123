"""Configuration and logging."""

from .logging import get_logger, setup_logging
from .settings import API_PACKAGE, Settings, settings

__all__ = [
    "API_PACKAGE",
    "Settings",
    "settings",
    "get_logger",
    "setup_logging",
]
