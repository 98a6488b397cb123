"""Unary (request/response) services over the HTTP/JSON gateway."""

from .client import UnaryClient
from .instruments import InstrumentsService
from .market_data import MarketDataService
from .operations import OperationsService
from .orders import OrdersService
from .sandbox import SandboxService
from .stop_orders import StopOrdersService
from .users import UsersService

__all__ = [
    "UnaryClient",
    "InstrumentsService",
    "MarketDataService",
    "OperationsService",
    "OrdersService",
    "SandboxService",
    "StopOrdersService",
    "UsersService",
]
