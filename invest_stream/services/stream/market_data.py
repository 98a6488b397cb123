"""Registry of named market data streams."""

import asyncio
import threading
from typing import Dict, Optional

from ...config.logging import get_logger
from .adapter import CompletionHandler, ErrorHandler, PushCallbackAdapter, StreamProcessor
from .channel import MarketDataSubscription
from .connection import StreamConnector

logger = get_logger(__name__)


class MarketDataStreamService:
    """Manages market data streams keyed by caller-chosen stream ids.

    An id names at most one live stream: opening a stream under an id that is
    already taken cancels the previous stream first. Entries are never removed
    when a stream completes or fails; the caller learns about failures through
    the error callback and opens a new stream under the same id if desired.

    Streams are bound to one event loop: ``new_stream``, ``close_stream`` and
    ``close_all`` must run on that loop's thread. The lock keeps lookups and
    snapshots from other threads consistent with the id map.
    """

    def __init__(self, connector: StreamConnector):
        """
        Initialize the registry.

        Args:
            connector: Factory of authenticated stream connections
        """
        self._connector = connector
        self._streams: Dict[str, MarketDataSubscription] = {}
        self._lock = threading.Lock()

    def new_stream(
        self,
        stream_id: str,
        processor: StreamProcessor,
        on_error: Optional[ErrorHandler] = None,
        on_completed: Optional[CompletionHandler] = None,
    ) -> MarketDataSubscription:
        """
        Open a market data stream and register it under ``stream_id``.

        Must be called from within a running event loop. Returns immediately;
        connection failures are reported later through ``on_error``. If the
        stream cannot be started the registry is left unchanged.

        Args:
            stream_id: Caller-chosen stream identifier
            processor: Called with every inbound message, in arrival order
            on_error: Called once with the transport error, if any
            on_completed: Called when the server ends the stream normally

        Returns:
            Handle used to subscribe and unsubscribe instruments
        """
        adapter = PushCallbackAdapter(processor, on_error, on_completed)
        stream = MarketDataSubscription(self._connector, adapter, stream_key=stream_id)

        stream.open()

        with self._lock:
            previous = self._streams.get(stream_id)
            self._streams[stream_id] = stream
        if previous is not None:
            previous.cancel()
            logger.info(
                "market_data_stream_replaced",
                stream_id=stream_id,
                previous_channel_id=str(previous.state.channel_id),
            )

        logger.info(
            "market_data_stream_created",
            stream_id=stream_id,
            channel_id=str(stream.state.channel_id),
        )
        return stream

    def get_stream_by_id(self, stream_id: str) -> Optional[MarketDataSubscription]:
        """Get the stream registered under ``stream_id``, if any."""
        with self._lock:
            return self._streams.get(stream_id)

    def get_all_streams(self) -> Dict[str, MarketDataSubscription]:
        """Snapshot of every registered stream, including failed ones."""
        with self._lock:
            return dict(self._streams)

    def stream_count(self) -> int:
        with self._lock:
            return len(self._streams)

    def close_stream(self, stream_id: str) -> bool:
        """
        Cancel the stream registered under ``stream_id`` and forget it.

        Returns:
            True if a stream was registered under the id
        """
        with self._lock:
            stream = self._streams.pop(stream_id, None)
        if stream is None:
            return False
        stream.cancel()
        logger.info("market_data_stream_closed", stream_id=stream_id)
        return True

    def close_all(self) -> None:
        """Cancel every registered stream and clear the registry."""
        with self._lock:
            streams = list(self._streams.values())
            self._streams.clear()
        for stream in streams:
            stream.cancel()
        logger.info("market_data_streams_all_closed", count=len(streams))

    async def aclose(self) -> None:
        """Cancel every registered stream and wait for the connections to close."""
        with self._lock:
            streams = list(self._streams.values())
        self.close_all()
        await asyncio.gather(*(s.wait_closed() for s in streams))
