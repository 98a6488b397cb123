"""HTTP/JSON gateway client for unary calls."""

from typing import Any, Dict, Optional

import httpx
from httpx import AsyncClient, Client, Response

from ...config.logging import get_logger
from ...config.settings import API_PACKAGE, Settings, settings as default_settings
from ...exceptions import DEFAULT_ERROR_ID, ApiError, describe_error
from ..stream.connection import build_auth_headers

logger = get_logger(__name__)

TRACKING_ID_HEADER = "x-tracking-id"

RATE_LIMIT_ERROR_ID = "80002"
UNAUTHENTICATED_ERROR_ID = "40003"
NETWORK_ERROR_ID = "70002"


def error_id_from_response(response: Response) -> str:
    """
    Extract the brokerage error id from a failed gateway response.

    The gateway returns ``{"code": <grpc code>, "message": "<error id>", ...}``.
    Throttling and authentication failures are mapped by status because their
    message is not an error id.
    """
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    code = body.get("code")
    if response.status_code == 429 or code in (8, "RESOURCE_EXHAUSTED"):
        return RATE_LIMIT_ERROR_ID
    if response.status_code == 401 or code in (16, "UNAUTHENTICATED"):
        return UNAUTHENTICATED_ERROR_ID

    message = body.get("message")
    if isinstance(message, str) and message.strip():
        return message.strip()
    return DEFAULT_ERROR_ID


def api_error_from_response(response: Response) -> ApiError:
    code = error_id_from_response(response)
    return ApiError(
        code=code,
        description=describe_error(code),
        tracking_id=response.headers.get(TRACKING_ID_HEADER),
        status_code=response.status_code,
    )


class UnaryClient:
    """Blocking and async HTTP client for unary API methods. No retries."""

    def __init__(
        self,
        token: str,
        app_name: Optional[str] = None,
        sandbox: bool = False,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        async_transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            token: API token
            app_name: Value of the x-app-name header
            sandbox: Call the sandbox host instead of production
            settings: Settings override (defaults to the global settings)
            transport: Transport of the blocking client (tests)
            async_transport: Transport of the async client (tests)
        """
        self._settings = settings or default_settings
        self.sandbox = sandbox
        self.base_url = self._settings.rest_base_url(sandbox)
        self._headers = build_auth_headers(token, app_name or self._settings.invest_app_name)
        self._transport = transport
        self._async_transport = async_transport
        self._client: Optional[Client] = None
        self._async_client: Optional[AsyncClient] = None

    def _get_client(self) -> Client:
        """Get or create the blocking HTTP client."""
        if self._client is None:
            self._client = Client(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._settings.invest_request_timeout,
                transport=self._transport,
            )
        return self._client

    def _get_async_client(self) -> AsyncClient:
        """Get or create the async HTTP client."""
        if self._async_client is None:
            self._async_client = AsyncClient(
                base_url=self.base_url,
                headers=self._headers,
                timeout=self._settings.invest_request_timeout,
                transport=self._async_transport,
            )
        return self._async_client

    @staticmethod
    def path_for(service: str, method: str) -> str:
        return f"/{API_PACKAGE}.{service}/{method}"

    def call(self, service: str, method: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Invoke a unary method and wait for its response.

        Raises:
            ApiError: If the call fails
        """
        path = self.path_for(service, method)
        logger.debug("unary_request", service=service, method=method)
        try:
            response = self._get_client().post(path, json=payload or {})
        except httpx.HTTPError as e:
            raise self._network_error(service, method, e) from e
        return self._handle_response(service, method, response)

    async def acall(
        self, service: str, method: str, payload: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Invoke a unary method asynchronously.

        Raises:
            ApiError: If the call fails
        """
        path = self.path_for(service, method)
        logger.debug("unary_request", service=service, method=method)
        try:
            response = await self._get_async_client().post(path, json=payload or {})
        except httpx.HTTPError as e:
            raise self._network_error(service, method, e) from e
        return self._handle_response(service, method, response)

    def _handle_response(self, service: str, method: str, response: Response) -> Dict[str, Any]:
        if response.is_success:
            logger.debug(
                "unary_response",
                service=service,
                method=method,
                status_code=response.status_code,
            )
            return response.json()

        error = api_error_from_response(response)
        logger.error(
            "unary_request_failed",
            service=service,
            method=method,
            status_code=response.status_code,
            error_code=error.code,
            tracking_id=error.tracking_id,
        )
        raise error

    def _network_error(self, service: str, method: str, error: Exception) -> ApiError:
        logger.error(
            "unary_request_network_error",
            service=service,
            method=method,
            error=str(error),
            error_type=type(error).__name__,
        )
        return ApiError(code=NETWORK_ERROR_ID, description=describe_error(NETWORK_ERROR_ID))

    def close(self) -> None:
        """Close the blocking HTTP client."""
        if self._client is not None:
            self._client.close()
            self._client = None

    async def aclose(self) -> None:
        """Close both HTTP clients."""
        self.close()
        if self._async_client is not None:
            await self._async_client.aclose()
            self._async_client = None
