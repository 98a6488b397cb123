"""Unit tests for StreamConnector."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from invest_stream.exceptions import StreamConnectionError
from invest_stream.services.stream.connection import JSON_SUBPROTOCOL, StreamConnector, build_auth_headers


def test_build_auth_headers():
    """Test the bearer token and application name headers."""
    assert build_auth_headers("t0k3n", "my-app") == {
        "Authorization": "Bearer t0k3n",
        "x-app-name": "my-app",
    }


def test_url_for_production(test_settings):
    """Test the WebSocket URL of a production streaming method."""
    connector = StreamConnector("token", settings=test_settings)

    assert connector.url_for("MarketDataStreamService/MarketDataStream") == (
        "wss://api.test/ws/tinkoff.public.invest.api.contract.v1.MarketDataStreamService/MarketDataStream"
    )


def test_url_for_sandbox(test_settings):
    """Test that sandbox connectors target the sandbox host."""
    connector = StreamConnector("token", sandbox=True, settings=test_settings)

    assert connector.sandbox
    assert connector.url_for("OrdersStreamService/TradesStream").startswith("wss://sandbox.test/ws/")


@pytest.mark.asyncio
async def test_connect_passes_headers_and_subprotocol(test_settings):
    """Test that connect authenticates and negotiates the JSON subprotocol."""
    connector = StreamConnector("token", app_name="my-app", settings=test_settings)
    websocket = MagicMock()

    with patch(
        "invest_stream.services.stream.connection.connect", new_callable=AsyncMock
    ) as mock_connect:
        mock_connect.return_value = websocket

        result = await connector.connect("OperationsStreamService/PortfolioStream")

        assert result is websocket
        kwargs = mock_connect.call_args.kwargs
        assert kwargs["additional_headers"] == {"Authorization": "Bearer token", "x-app-name": "my-app"}
        assert kwargs["subprotocols"] == [JSON_SUBPROTOCOL]
        assert mock_connect.call_args.args[0].endswith(
            "tinkoff.public.invest.api.contract.v1.OperationsStreamService/PortfolioStream"
        )


@pytest.mark.asyncio
async def test_connect_failure_raises_stream_connection_error(test_settings):
    """Test that handshake failures are wrapped in StreamConnectionError."""
    connector = StreamConnector("token", settings=test_settings)

    with patch(
        "invest_stream.services.stream.connection.connect", new_callable=AsyncMock
    ) as mock_connect:
        mock_connect.side_effect = OSError("connection refused")

        with pytest.raises(StreamConnectionError) as exc_info:
            await connector.connect("MarketDataStreamService/MarketDataStream")

    assert isinstance(exc_info.value.__cause__, OSError)


@pytest.mark.asyncio
async def test_connect_timeout(test_settings):
    """Test that a handshake exceeding the timeout raises StreamConnectionError."""
    settings = test_settings.model_copy(update={"invest_connect_timeout": 0.01})
    connector = StreamConnector("token", settings=settings)

    async def slow_connect(*args, **kwargs):
        await asyncio.sleep(1)

    with patch("invest_stream.services.stream.connection.connect", side_effect=slow_connect):
        with pytest.raises(StreamConnectionError, match="timeout"):
            await connector.connect("MarketDataStreamService/MarketDataStream")
