"""Order trades stream."""

from typing import Iterable, Optional, Union

from ...config.logging import get_logger
from .adapter import CompletionHandler, ErrorHandler, PushCallbackAdapter, StreamProcessor
from .channel import SubscriptionChannel
from .connection import StreamConnector
from .messages import normalize_account_ids

logger = get_logger(__name__)


class OrdersStreamService:
    """Opens order trade (execution) streams, one connection per call."""

    def __init__(self, connector: StreamConnector):
        self._connector = connector

    def subscribe_trades(
        self,
        processor: StreamProcessor,
        on_error: Optional[ErrorHandler] = None,
        accounts: Optional[Union[str, Iterable[str]]] = None,
        on_completed: Optional[CompletionHandler] = None,
    ) -> SubscriptionChannel:
        """
        Open a stream of executions of the caller's orders.

        Args:
            processor: Called with every inbound message
            on_error: Called once with the transport error, if any
            accounts: Account id or ids to watch; all accounts of the token if omitted
            on_completed: Called when the server ends the stream normally

        Returns:
            The opened channel; cancel it to stop the stream
        """
        account_ids = normalize_account_ids(accounts or [])
        channel = SubscriptionChannel.for_account_feed(
            self._connector,
            "order_trades",
            account_ids,
            PushCallbackAdapter(processor, on_error, on_completed),
        ).open()
        logger.info(
            "order_trades_stream_subscribed",
            stream_key=channel.stream_key,
            accounts=account_ids,
        )
        return channel
