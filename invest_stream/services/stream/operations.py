"""Portfolio and positions streams."""

from typing import Iterable, Optional, Union

from ...config.logging import get_logger
from ...models.subscription import FeedKind
from .adapter import CompletionHandler, ErrorHandler, PushCallbackAdapter, StreamProcessor
from .channel import SubscriptionChannel
from .connection import StreamConnector
from .messages import normalize_account_ids

logger = get_logger(__name__)


class OperationsStreamService:
    """Opens portfolio and positions streams.

    The account set is fixed when the stream opens. Each call opens a new
    connection; streams opened earlier are left untouched, even when their
    account sets overlap.
    """

    def __init__(self, connector: StreamConnector):
        self._connector = connector

    def subscribe_portfolio(
        self,
        processor: StreamProcessor,
        accounts: Union[str, Iterable[str]],
        on_error: Optional[ErrorHandler] = None,
        on_completed: Optional[CompletionHandler] = None,
    ) -> SubscriptionChannel:
        """Open a stream of portfolio updates for one or many accounts."""
        return self._open("portfolio", processor, accounts, on_error, on_completed)

    def subscribe_positions(
        self,
        processor: StreamProcessor,
        accounts: Union[str, Iterable[str]],
        on_error: Optional[ErrorHandler] = None,
        on_completed: Optional[CompletionHandler] = None,
    ) -> SubscriptionChannel:
        """Open a stream of position changes for one or many accounts."""
        return self._open("positions", processor, accounts, on_error, on_completed)

    def _open(
        self,
        feed: FeedKind,
        processor: StreamProcessor,
        accounts: Union[str, Iterable[str]],
        on_error: Optional[ErrorHandler],
        on_completed: Optional[CompletionHandler],
    ) -> SubscriptionChannel:
        account_ids = normalize_account_ids(accounts)
        channel = SubscriptionChannel.for_account_feed(
            self._connector,
            feed,
            account_ids,
            PushCallbackAdapter(processor, on_error, on_completed),
        ).open()
        logger.info(
            "account_stream_subscribed",
            feed=feed,
            stream_key=channel.stream_key,
            accounts=account_ids,
        )
        return channel
