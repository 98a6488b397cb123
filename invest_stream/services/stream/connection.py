"""WebSocket connection factory for streaming methods."""

import asyncio
from typing import Dict, Optional

from websockets.asyncio.client import ClientConnection, connect

from ...config.logging import get_logger
from ...config.settings import API_PACKAGE, Settings, settings as default_settings
from ...exceptions import StreamConnectionError

logger = get_logger(__name__)

# JSON mapping of the protocol messages is negotiated as a WebSocket subprotocol
JSON_SUBPROTOCOL = "json"


def build_auth_headers(token: str, app_name: Optional[str]) -> Dict[str, str]:
    """Headers attached to every connection: bearer token and application name."""
    return {
        "Authorization": f"Bearer {token}",
        "x-app-name": app_name or default_settings.invest_app_name,
    }


class StreamConnector:
    """Opens authenticated WebSocket connections to streaming methods."""

    def __init__(
        self,
        token: str,
        app_name: Optional[str] = None,
        sandbox: bool = False,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize connector.

        Args:
            token: API token
            app_name: Value of the x-app-name header
            sandbox: Connect to the sandbox host instead of production
            settings: Settings override (defaults to the global settings)
        """
        self._settings = settings or default_settings
        self._headers = build_auth_headers(token, app_name or self._settings.invest_app_name)
        self._sandbox = sandbox

    @property
    def sandbox(self) -> bool:
        return self._sandbox

    def url_for(self, stream_method: str) -> str:
        """
        Get the WebSocket URL of a streaming method.

        Args:
            stream_method: "<Service>/<Method>", e.g. "MarketDataStreamService/MarketDataStream"
        """
        return f"{self._settings.ws_base_url(self._sandbox)}/{API_PACKAGE}.{stream_method}"

    async def connect(self, stream_method: str) -> ClientConnection:
        """
        Establish a WebSocket connection to a streaming method.

        Raises:
            StreamConnectionError: If the handshake fails or times out
        """
        url = self.url_for(stream_method)
        timeout = self._settings.invest_connect_timeout
        logger.info("stream_connecting", url=url, stream_method=stream_method)

        try:
            websocket = await asyncio.wait_for(
                connect(
                    url,
                    additional_headers=self._headers,
                    subprotocols=[JSON_SUBPROTOCOL],
                    ping_interval=self._settings.invest_ws_ping_interval,
                    open_timeout=None,
                ),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                "stream_connection_timeout",
                url=url,
                timeout=timeout,
            )
            raise StreamConnectionError(
                f"Stream connection timeout after {timeout} seconds"
            ) from None
        except Exception as e:
            logger.error(
                "stream_connection_failed",
                url=url,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise StreamConnectionError(f"Failed to connect to {stream_method}: {e}") from e

        logger.info("stream_connected", url=url, stream_method=stream_method)
        return websocket
