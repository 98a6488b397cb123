"""Unit tests for SubscriptionChannel and MarketDataSubscription."""

import asyncio

import pytest
from unittest.mock import MagicMock
from structlog.testing import capture_logs
from websockets.exceptions import ConnectionClosedError, ConnectionClosedOK

from invest_stream.exceptions import StreamConnectionError
from invest_stream.models.stream_state import ChannelStatus
from invest_stream.models.subscription import SubscriptionInterval
from invest_stream.services.stream.adapter import PushCallbackAdapter
from invest_stream.services.stream.channel import MarketDataSubscription, SubscriptionChannel
from invest_stream.services.stream.feeds import MARKET_DATA_STREAM, PORTFOLIO_STREAM

from tests.fixtures.streams import FakeConnector, wait_until


def make_subscription(connector, processor=None, on_error=None, on_completed=None):
    adapter = PushCallbackAdapter(processor or MagicMock(), on_error, on_completed)
    return MarketDataSubscription(connector, adapter, stream_key="test").open()


@pytest.mark.asyncio
async def test_open_connects_to_market_data_stream(fake_connector):
    """Test that opening a subscription connects once to the market data method."""
    subscription = make_subscription(fake_connector)
    await wait_until(lambda: subscription.state.status == ChannelStatus.OPEN)

    subscription.open()
    await asyncio.sleep(0)

    assert fake_connector.methods == [MARKET_DATA_STREAM]
    assert subscription.state.opened_at is not None
    await subscription.aclose()


@pytest.mark.asyncio
async def test_subscribe_candles_sends_one_message_for_all_instruments(fake_connector):
    """Test that a candles subscription for two instruments is one control message."""
    subscription = make_subscription(fake_connector)

    subscription.subscribe_candles(["FIGI1", "FIGI2"], SubscriptionInterval.FIVE_MINUTES)

    await wait_until(lambda: fake_connector.websockets and fake_connector.websockets[0].sent)
    assert fake_connector.websockets[0].sent_messages == [
        {
            "subscribeCandlesRequest": {
                "subscriptionAction": "SUBSCRIPTION_ACTION_SUBSCRIBE",
                "instruments": [
                    {"instrumentId": "FIGI1", "interval": "SUBSCRIPTION_INTERVAL_FIVE_MINUTES"},
                    {"instrumentId": "FIGI2", "interval": "SUBSCRIPTION_INTERVAL_FIVE_MINUTES"},
                ],
            }
        }
    ]
    await subscription.aclose()


@pytest.mark.asyncio
async def test_handle_defaults(fake_connector):
    """Test the order book depth and candle interval defaults of the handle."""
    subscription = make_subscription(fake_connector)

    subscription.subscribe_orderbook(["FIGI1"])
    subscription.subscribe_candles(["FIGI1"])

    await wait_until(lambda: fake_connector.websockets and len(fake_connector.websockets[0].sent) == 2)
    orderbook, candles = fake_connector.websockets[0].sent_messages
    assert orderbook["subscribeOrderBookRequest"]["instruments"] == [{"instrumentId": "FIGI1", "depth": 1}]
    assert candles["subscribeCandlesRequest"]["instruments"] == [
        {"instrumentId": "FIGI1", "interval": "SUBSCRIPTION_INTERVAL_ONE_MINUTE"}
    ]
    await subscription.aclose()


@pytest.mark.asyncio
async def test_control_messages_written_in_call_order(fake_connector):
    """Test that messages queued before the connection is up keep their order."""
    subscription = make_subscription(fake_connector)

    subscription.subscribe_trades(["FIGI1"])
    subscription.subscribe_info(["FIGI1"])
    subscription.subscribe_last_prices(["FIGI1"])
    subscription.unsubscribe_trades(["FIGI1"])
    subscription.unsubscribe_orderbook(["FIGI1"], depth=20)

    await wait_until(lambda: fake_connector.websockets and len(fake_connector.websockets[0].sent) == 5)
    messages = fake_connector.websockets[0].sent_messages
    assert [next(iter(m)) for m in messages] == [
        "subscribeTradesRequest",
        "subscribeInfoRequest",
        "subscribeLastPriceRequest",
        "subscribeTradesRequest",
        "subscribeOrderBookRequest",
    ]
    assert messages[3]["subscribeTradesRequest"]["subscriptionAction"] == "SUBSCRIPTION_ACTION_UNSUBSCRIBE"
    assert messages[4]["subscribeOrderBookRequest"]["instruments"][0]["depth"] == 20
    assert subscription.state.messages_sent == 5
    await subscription.aclose()


@pytest.mark.asyncio
async def test_subscribe_with_account_feed_raises(fake_connector):
    """Test that market data subscribe rejects account scoped feeds."""
    subscription = make_subscription(fake_connector)

    with pytest.raises(ValueError):
        subscription.subscribe("portfolio", ["FIGI1"])

    await subscription.aclose()


@pytest.mark.asyncio
async def test_inbound_messages_delivered_in_order(fake_connector):
    """Test that every inbound message reaches the processor unmodified and in order."""
    received = []
    subscription = make_subscription(fake_connector, processor=received.append)
    await wait_until(lambda: fake_connector.websockets)
    websocket = fake_connector.websockets[0]

    websocket.push({"candle": {"figi": "FIGI1"}})
    websocket.push({"ping": {}})
    websocket.push({"candle": {"figi": "FIGI2"}})

    await wait_until(lambda: len(received) == 3)
    assert received == [{"candle": {"figi": "FIGI1"}}, {"ping": {}}, {"candle": {"figi": "FIGI2"}}]
    assert subscription.state.messages_received == 3
    await subscription.aclose()


@pytest.mark.asyncio
async def test_coroutine_processor_is_awaited(fake_connector):
    """Test that an async processor finishes before the next message is delivered."""
    events = []

    async def processor(message):
        events.append(("start", message["n"]))
        await asyncio.sleep(0.01)
        events.append(("end", message["n"]))

    subscription = make_subscription(fake_connector, processor=processor)
    await wait_until(lambda: fake_connector.websockets)
    fake_connector.websockets[0].push({"n": 1})
    fake_connector.websockets[0].push({"n": 2})

    await wait_until(lambda: len(events) == 4)
    assert events == [("start", 1), ("end", 1), ("start", 2), ("end", 2)]
    await subscription.aclose()


@pytest.mark.asyncio
async def test_processor_error_does_not_stop_stream(fake_connector):
    """Test that an exception raised by the processor is logged and the stream goes on."""
    received = []

    def processor(message):
        if message.get("bad"):
            raise RuntimeError("processing failed")
        received.append(message)

    on_error = MagicMock()
    subscription = make_subscription(fake_connector, processor=processor, on_error=on_error)
    await wait_until(lambda: fake_connector.websockets)
    fake_connector.websockets[0].push({"bad": True})
    fake_connector.websockets[0].push("not json")
    fake_connector.websockets[0].push({"good": True})

    await wait_until(lambda: received)
    assert received == [{"good": True}]
    on_error.assert_not_called()
    assert not subscription.is_closed
    await subscription.aclose()


@pytest.mark.asyncio
async def test_cancel_stops_delivery_without_error_callback(fake_connector):
    """Test that cancel closes the connection silently and is idempotent."""
    received = []
    on_error = MagicMock()
    on_completed = MagicMock()
    subscription = make_subscription(fake_connector, received.append, on_error, on_completed)
    await wait_until(lambda: subscription.state.status == ChannelStatus.OPEN)
    websocket = fake_connector.websockets[0]

    subscription.cancel()
    subscription.cancel()
    websocket.push({"late": True})
    await subscription.wait_closed()

    assert received == []
    assert websocket.closed
    assert subscription.state.status == ChannelStatus.CANCELLED
    assert subscription.state.closed_at is not None
    on_error.assert_not_called()
    on_completed.assert_not_called()


@pytest.mark.asyncio
async def test_cancel_before_connection_established():
    """Test that cancel right after open never reports an error."""
    connector = FakeConnector()
    on_error = MagicMock()
    subscription = make_subscription(connector, on_error=on_error)

    subscription.cancel()
    await subscription.wait_closed()

    on_error.assert_not_called()
    assert subscription.state.status == ChannelStatus.CANCELLED


@pytest.mark.asyncio
async def test_send_after_cancel_is_dropped(fake_connector):
    """Test that subscribing on a cancelled channel neither raises nor sends."""
    subscription = make_subscription(fake_connector)
    await wait_until(lambda: fake_connector.websockets)
    await subscription.aclose()

    subscription.subscribe_trades(["FIGI1"])

    assert fake_connector.websockets[0].sent == []


@pytest.mark.asyncio
async def test_transport_error_reported_once(fake_connector):
    """Test that an abnormal close reaches the error callback exactly once."""
    on_error = MagicMock()
    on_completed = MagicMock()
    subscription = make_subscription(fake_connector, on_error=on_error, on_completed=on_completed)
    await wait_until(lambda: fake_connector.websockets)
    websocket = fake_connector.websockets[0]
    closed = ConnectionClosedError(None, None)

    websocket.fail(closed)
    await subscription.wait_closed()
    subscription.cancel()

    on_error.assert_called_once()
    error = on_error.call_args.args[0]
    assert isinstance(error, StreamConnectionError)
    assert error.__cause__ is closed
    on_completed.assert_not_called()
    assert subscription.state.status == ChannelStatus.FAILED
    assert subscription.state.last_error is not None


@pytest.mark.asyncio
async def test_transport_error_without_handler_is_dropped(fake_connector):
    """Test that a channel without an error callback drops the error after logging it."""
    subscription = make_subscription(fake_connector)
    await wait_until(lambda: fake_connector.websockets)

    with capture_logs() as logs:
        fake_connector.websockets[0].fail(ConnectionClosedError(None, None))
        await subscription.wait_closed()

    assert subscription.state.status == ChannelStatus.FAILED
    assert subscription.is_closed
    assert any(
        log["event"] == "stream_error_dropped" and log["log_level"] == "warning" for log in logs
    )


@pytest.mark.asyncio
async def test_messages_before_error_are_delivered_first(fake_connector):
    """Test that the error callback runs after every message received before it."""
    events = []
    subscription = make_subscription(
        fake_connector,
        processor=lambda m: events.append(("message", m["n"])),
        on_error=lambda e: events.append(("error", type(e).__name__)),
    )
    await wait_until(lambda: fake_connector.websockets)
    websocket = fake_connector.websockets[0]
    websocket.push({"n": 1})
    websocket.push({"n": 2})
    websocket.fail(ConnectionClosedError(None, None))

    await subscription.wait_closed()

    assert events == [("message", 1), ("message", 2), ("error", "StreamConnectionError")]


@pytest.mark.asyncio
async def test_connection_failure_reported_through_callback():
    """Test that a failed handshake is delivered to the error callback, not raised."""
    connector = FakeConnector(error=StreamConnectionError("handshake failed"))
    on_error = MagicMock()

    subscription = make_subscription(connector, on_error=on_error)
    subscription.subscribe_trades(["FIGI1"])
    await subscription.wait_closed()

    on_error.assert_called_once()
    assert str(on_error.call_args.args[0]) == "handshake failed"
    assert subscription.state.status == ChannelStatus.FAILED


@pytest.mark.asyncio
async def test_send_failure_reported_through_callback():
    """Test that a failed write fails the channel once."""
    connector = FakeConnector(send_error=OSError("broken pipe"))
    on_error = MagicMock()
    subscription = make_subscription(connector, on_error=on_error)

    subscription.subscribe_trades(["FIGI1"])
    await subscription.wait_closed()

    on_error.assert_called_once()
    assert isinstance(on_error.call_args.args[0], OSError)
    assert connector.websockets[0].closed


@pytest.mark.asyncio
async def test_normal_server_close_invokes_completion(fake_connector):
    """Test that the end of the stream calls on_completed and not on_error."""
    on_error = MagicMock()
    on_completed = MagicMock()
    subscription = make_subscription(fake_connector, on_error=on_error, on_completed=on_completed)
    await wait_until(lambda: fake_connector.websockets)

    fake_connector.websockets[0].fail(ConnectionClosedOK(None, None))
    await subscription.wait_closed()

    on_completed.assert_called_once_with()
    on_error.assert_not_called()
    assert subscription.state.status == ChannelStatus.COMPLETED


@pytest.mark.asyncio
async def test_error_handler_failure_is_contained(fake_connector):
    """Test that an exception from the error callback does not escape the task."""
    on_error = MagicMock(side_effect=RuntimeError("handler failed"))
    subscription = make_subscription(fake_connector, on_error=on_error)
    await wait_until(lambda: fake_connector.websockets)

    fake_connector.websockets[0].fail(ConnectionClosedError(None, None))
    await subscription.wait_closed()

    on_error.assert_called_once()
    assert subscription.is_closed


@pytest.mark.asyncio
async def test_account_feed_channel_sends_accounts_on_open(fake_connector):
    """Test that an account scoped channel opens with the accounts request."""
    adapter = PushCallbackAdapter(MagicMock())
    channel = SubscriptionChannel.for_account_feed(fake_connector, "portfolio", ["acc-1", "acc-2"], adapter)
    channel.open()

    await wait_until(lambda: fake_connector.websockets and fake_connector.websockets[0].sent)
    assert fake_connector.methods == [PORTFOLIO_STREAM]
    assert fake_connector.websockets[0].sent_messages == [{"accounts": ["acc-1", "acc-2"]}]
    assert channel.stream_key
    await channel.aclose()
