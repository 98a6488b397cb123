"""Streaming services over persistent WebSocket connections."""

from .adapter import PushCallbackAdapter
from .channel import MarketDataSubscription, SubscriptionChannel
from .connection import StreamConnector
from .market_data import MarketDataStreamService
from .operations import OperationsStreamService
from .orders import OrdersStreamService

__all__ = [
    "PushCallbackAdapter",
    "MarketDataSubscription",
    "SubscriptionChannel",
    "StreamConnector",
    "MarketDataStreamService",
    "OperationsStreamService",
    "OrdersStreamService",
]
