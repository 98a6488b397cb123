"""Common plumbing of the unary services."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .client import UnaryClient


def format_timestamp(value: datetime) -> str:
    """Format a datetime as the RFC 3339 UTC string the gateway expects.

    Naive datetimes are taken to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class BaseUnaryService:
    """Binds a gateway service name to a :class:`UnaryClient` and the client modes."""

    service_name: str = ""

    def __init__(self, client: UnaryClient, readonly_mode: bool = False, sandbox_mode: bool = False):
        self._client = client
        self.readonly_mode = readonly_mode
        self.sandbox_mode = sandbox_mode

    def _call(self, method: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return self._client.call(self.service_name, method, payload)

    async def _acall(self, method: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return await self._client.acall(self.service_name, method, payload)
