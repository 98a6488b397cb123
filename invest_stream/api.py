"""Client entry point bundling the unary and streaming services."""

from typing import Optional

from .config.logging import get_logger
from .config.settings import Settings, settings as default_settings
from .services.stream import (
    MarketDataStreamService,
    OperationsStreamService,
    OrdersStreamService,
    StreamConnector,
)
from .services.unary import (
    InstrumentsService,
    MarketDataService,
    OperationsService,
    OrdersService,
    SandboxService,
    StopOrdersService,
    UnaryClient,
    UsersService,
)

logger = get_logger(__name__)


class InvestApi:
    """Entry point of the client.

    Use :meth:`create`, :meth:`create_readonly` or :meth:`create_sandbox`
    rather than the constructor. The streaming services must be used from
    within a running event loop.
    """

    def __init__(
        self,
        token: str,
        app_name: Optional[str] = None,
        readonly: bool = False,
        sandbox: bool = False,
        settings: Optional[Settings] = None,
        unary_client: Optional[UnaryClient] = None,
        connector: Optional[StreamConnector] = None,
    ):
        self._settings = settings or default_settings
        self._readonly = readonly
        self._sandbox = sandbox
        self._client = unary_client or UnaryClient(token, app_name, sandbox=sandbox, settings=self._settings)
        self._connector = connector or StreamConnector(token, app_name, sandbox=sandbox, settings=self._settings)

        self.users_service = UsersService(self._client, readonly, sandbox)
        self.operations_service = OperationsService(self._client, readonly, sandbox)
        self.orders_service = OrdersService(self._client, readonly, sandbox)
        self.stop_orders_service = StopOrdersService(self._client, readonly, sandbox)
        self.instruments_service = InstrumentsService(self._client, readonly, sandbox)
        self.market_data_service = MarketDataService(self._client, readonly, sandbox)
        self.sandbox_service = SandboxService(self._client, readonly, sandbox) if sandbox else None

        self.market_data_stream = MarketDataStreamService(self._connector)
        self.orders_stream = OrdersStreamService(self._connector)
        self.operations_stream = OperationsStreamService(self._connector)

        logger.info("invest_api_created", readonly=readonly, sandbox=sandbox)

    @classmethod
    def create(cls, token: str, app_name: Optional[str] = None, **kwargs) -> "InvestApi":
        """Full access client."""
        return cls(token, app_name, **kwargs)

    @classmethod
    def create_readonly(cls, token: str, app_name: Optional[str] = None, **kwargs) -> "InvestApi":
        """Client that refuses modifying calls such as posting orders."""
        return cls(token, app_name, readonly=True, **kwargs)

    @classmethod
    def create_sandbox(cls, token: str, app_name: Optional[str] = None, **kwargs) -> "InvestApi":
        """Client bound to the sandbox environment."""
        return cls(token, app_name, sandbox=True, **kwargs)

    @property
    def readonly_mode(self) -> bool:
        return self._readonly

    @property
    def sandbox_mode(self) -> bool:
        return self._sandbox

    def close(self) -> None:
        """Cancel every market data stream and close the blocking HTTP client."""
        self.market_data_stream.close_all()
        self._client.close()

    async def aclose(self) -> None:
        """Cancel every market data stream, wait for it and close the HTTP clients."""
        await self.market_data_stream.aclose()
        await self._client.aclose()
        logger.info("invest_api_closed")
