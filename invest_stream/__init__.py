"""Typed client of the brokerage trading API with streaming subscriptions."""

from .api import InvestApi
from .exceptions import (
    ApiError,
    InvestApiError,
    ReadonlyModeViolationError,
    SandboxModeViolationError,
    StreamConnectionError,
    ValidationError,
)

__version__ = "0.1.0"

__all__ = [
    "InvestApi",
    "ApiError",
    "InvestApiError",
    "ReadonlyModeViolationError",
    "SandboxModeViolationError",
    "StreamConnectionError",
    "ValidationError",
]
