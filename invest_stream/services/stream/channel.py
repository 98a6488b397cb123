"""Subscription channel: one persistent streaming connection and its callbacks."""

from __future__ import annotations

import asyncio
import contextlib
import json
from datetime import datetime, timezone
from typing import Any, Iterable, Optional
from uuid import uuid4

from websockets.exceptions import ConnectionClosed, ConnectionClosedOK

from ...config.logging import get_logger
from ...exceptions import StreamConnectionError
from ...models.stream_state import ChannelState, ChannelStatus
from ...models.subscription import FeedKind, SubscriptionAction, SubscriptionInterval
from .adapter import PushCallbackAdapter
from .connection import StreamConnector
from .feeds import MARKET_DATA_STREAM, get_stream_method_for_feed
from .messages import (
    DEFAULT_CANDLE_INTERVAL,
    build_accounts_message,
    build_market_data_message,
    build_subscription_request,
)

logger = get_logger(__name__)

# Order book depth used by the subscription handle when the caller gives none
DEFAULT_ORDERBOOK_DEPTH = 1


class SubscriptionChannel:
    """Owns one streaming connection.

    :meth:`open` schedules a single task on the running event loop that
    connects, writes queued control messages in call order and hands every
    inbound frame to the :class:`PushCallbackAdapter`. ``send``,
    ``subscribe``, ``unsubscribe`` and ``cancel`` never block and never raise
    transport errors; those are reported once through the error callback.
    """

    def __init__(
        self,
        connector: StreamConnector,
        stream_method: str,
        adapter: PushCallbackAdapter,
        initial_message: Optional[dict] = None,
        stream_key: Optional[str] = None,
    ):
        self._connector = connector
        self._stream_method = stream_method
        self._adapter = adapter
        self._outgoing: asyncio.Queue = asyncio.Queue()
        self._state = ChannelState(stream_method=stream_method)
        self._task: Optional[asyncio.Task] = None
        self._websocket: Any = None
        self._closed = False
        self.stream_key = stream_key or str(uuid4())
        if initial_message is not None:
            self._outgoing.put_nowait(initial_message)

    @classmethod
    def for_account_feed(
        cls,
        connector: StreamConnector,
        feed: FeedKind,
        accounts: Iterable[str],
        adapter: PushCallbackAdapter,
    ) -> "SubscriptionChannel":
        """Build a channel for an account scoped feed with its opening request queued."""
        return cls(
            connector,
            get_stream_method_for_feed(feed),
            adapter,
            initial_message=build_accounts_message(accounts),
        )

    @property
    def state(self) -> ChannelState:
        """Get current channel state."""
        return self._state

    @property
    def stream_method(self) -> str:
        return self._stream_method

    @property
    def is_closed(self) -> bool:
        """True once the channel was cancelled, completed or failed."""
        return self._closed

    def open(self) -> "SubscriptionChannel":
        """Start the connection task. Must be called from within a running event loop.

        Calling it again is a no-op: a channel owns at most one connection.
        """
        if self._task is not None or self._closed:
            return self
        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._run(), name=f"stream:{self.stream_key}")
        logger.info(
            "stream_channel_opened",
            stream_key=self.stream_key,
            stream_method=self._stream_method,
            channel_id=str(self._state.channel_id),
        )
        return self

    def send(self, message: dict) -> None:
        """Enqueue one control message. Messages are written in call order."""
        if self._closed:
            logger.warning(
                "stream_channel_send_after_close",
                stream_key=self.stream_key,
                status=self._state.status,
            )
            return
        self._outgoing.put_nowait(message)

    def subscribe(
        self,
        feed: FeedKind,
        instrument_ids: Iterable[str],
        depth: Optional[int] = None,
        interval: Optional[SubscriptionInterval] = None,
    ) -> None:
        """Send one subscribe message covering every instrument given.

        Transport errors are never raised here. Passing a feed that is not
        carried by the market data stream is a programming error and raises
        ValueError immediately.
        """
        self._send_request(feed, SubscriptionAction.SUBSCRIBE, instrument_ids, depth, interval)

    def unsubscribe(
        self,
        feed: FeedKind,
        instrument_ids: Iterable[str],
        depth: Optional[int] = None,
        interval: Optional[SubscriptionInterval] = None,
    ) -> None:
        """Send one unsubscribe message covering every instrument given.

        Raises ValueError for feeds not carried by the market data stream.
        """
        self._send_request(feed, SubscriptionAction.UNSUBSCRIBE, instrument_ids, depth, interval)

    def _send_request(
        self,
        feed: FeedKind,
        action: SubscriptionAction,
        instrument_ids: Iterable[str],
        depth: Optional[int],
        interval: Optional[SubscriptionInterval],
    ) -> None:
        request = build_subscription_request(feed, action, instrument_ids, depth=depth, interval=interval)
        self.send(build_market_data_message(request))
        logger.debug(
            "stream_subscription_requested",
            stream_key=self.stream_key,
            feed=feed,
            action=action.value,
            instrument_ids=request.instrument_ids,
        )

    def cancel(self) -> None:
        """Close the connection. Idempotent; no error callback is invoked."""
        if self._closed:
            return
        self._closed = True
        self._mark_closed(ChannelStatus.CANCELLED)
        if self._task is not None and not self._task.done():
            self._task.cancel()
        logger.info("stream_channel_cancelled", stream_key=self.stream_key)

    async def wait_closed(self) -> None:
        """Wait until the connection task has finished."""
        if self._task is None:
            return
        await asyncio.gather(self._task, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel the channel and wait for its connection to be released."""
        self.cancel()
        await self.wait_closed()

    def _mark_closed(self, status: ChannelStatus, error: Optional[BaseException] = None) -> None:
        self._state.status = status
        self._state.closed_at = datetime.now(timezone.utc)
        if error is not None:
            self._state.last_error = str(error)

    def _complete(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._mark_closed(ChannelStatus.COMPLETED)
        logger.info("stream_channel_completed", stream_key=self.stream_key)
        try:
            self._adapter.on_completed()
        except Exception as e:
            logger.error(
                "stream_completion_handler_failed",
                stream_key=self.stream_key,
                error=str(e),
                error_type=type(e).__name__,
            )

    def _fail(self, error: BaseException) -> None:
        if self._closed:
            return
        self._closed = True
        self._mark_closed(ChannelStatus.FAILED, error)
        logger.warning(
            "stream_channel_error",
            stream_key=self.stream_key,
            error=str(error),
            error_type=type(error).__name__,
        )
        try:
            self._adapter.on_error(error)
        except Exception as e:
            logger.error(
                "stream_error_handler_failed",
                stream_key=self.stream_key,
                error=str(e),
                error_type=type(e).__name__,
            )

    async def _run(self) -> None:
        try:
            try:
                self._websocket = await self._connector.connect(self._stream_method)
            except Exception as e:
                self._fail(e)
                return

            self._state.status = ChannelStatus.OPEN
            self._state.opened_at = datetime.now(timezone.utc)
            writer = asyncio.create_task(self._write_messages())
            try:
                await self._receive_messages()
            finally:
                writer.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await writer
        finally:
            await self._close_websocket()

    async def _write_messages(self) -> None:
        while True:
            message = await self._outgoing.get()
            try:
                await self._websocket.send(json.dumps(message))
            except ConnectionClosed:
                # The receive loop observes the closure and reports it
                return
            except Exception as e:
                logger.error(
                    "stream_send_error",
                    stream_key=self.stream_key,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self._fail(e)
                await self._websocket.close()
                return
            self._state.messages_sent += 1
            logger.debug("stream_message_sent", stream_key=self.stream_key, message=message)

    async def _receive_messages(self) -> None:
        try:
            async for raw in self._websocket:
                if self._closed:
                    return
                try:
                    message = json.loads(raw)
                except json.JSONDecodeError as e:
                    logger.warning(
                        "stream_invalid_json",
                        stream_key=self.stream_key,
                        error=str(e),
                        raw_message=str(raw)[:200],
                    )
                    continue

                self._state.messages_received += 1
                try:
                    await self._adapter.deliver(message)
                except Exception as e:
                    logger.error(
                        "stream_message_processing_error",
                        stream_key=self.stream_key,
                        error=str(e),
                        error_type=type(e).__name__,
                        exc_info=True,
                    )
        except ConnectionClosedOK:
            self._complete()
            return
        except ConnectionClosed as e:
            error = StreamConnectionError(f"Stream {self._stream_method} closed: {e}")
            error.__cause__ = e
            self._fail(error)
            return
        except Exception as e:
            self._fail(e)
            return
        self._complete()

    async def _close_websocket(self) -> None:
        if self._websocket is None:
            return
        try:
            await self._websocket.close()
        except Exception as e:
            logger.debug("stream_close_failed", stream_key=self.stream_key, error=str(e))
        self._websocket = None


class MarketDataSubscription(SubscriptionChannel):
    """Handle of one market data stream with per-feed subscribe helpers.

    Each call sends exactly one control message for all instruments given.
    """

    def __init__(
        self,
        connector: StreamConnector,
        adapter: PushCallbackAdapter,
        stream_key: Optional[str] = None,
    ):
        super().__init__(connector, MARKET_DATA_STREAM, adapter, stream_key=stream_key)

    def subscribe_trades(self, instrument_ids: Iterable[str]) -> None:
        self.subscribe("trades", instrument_ids)

    def unsubscribe_trades(self, instrument_ids: Iterable[str]) -> None:
        self.unsubscribe("trades", instrument_ids)

    def subscribe_orderbook(self, instrument_ids: Iterable[str], depth: int = DEFAULT_ORDERBOOK_DEPTH) -> None:
        self.subscribe("orderbook", instrument_ids, depth=depth)

    def unsubscribe_orderbook(self, instrument_ids: Iterable[str], depth: int = DEFAULT_ORDERBOOK_DEPTH) -> None:
        self.unsubscribe("orderbook", instrument_ids, depth=depth)

    def subscribe_candles(
        self,
        instrument_ids: Iterable[str],
        interval: SubscriptionInterval = DEFAULT_CANDLE_INTERVAL,
    ) -> None:
        self.subscribe("candles", instrument_ids, interval=interval)

    def unsubscribe_candles(
        self,
        instrument_ids: Iterable[str],
        interval: SubscriptionInterval = DEFAULT_CANDLE_INTERVAL,
    ) -> None:
        self.unsubscribe("candles", instrument_ids, interval=interval)

    def subscribe_info(self, instrument_ids: Iterable[str]) -> None:
        self.subscribe("info", instrument_ids)

    def unsubscribe_info(self, instrument_ids: Iterable[str]) -> None:
        self.unsubscribe("info", instrument_ids)

    def subscribe_last_prices(self, instrument_ids: Iterable[str]) -> None:
        self.subscribe("last_price", instrument_ids)

    def unsubscribe_last_prices(self, instrument_ids: Iterable[str]) -> None:
        self.unsubscribe("last_price", instrument_ids)
