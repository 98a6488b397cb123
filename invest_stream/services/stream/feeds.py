"""Feed kind classification and the streaming method serving each feed."""

from ...models.subscription import FeedKind

MARKET_DATA_STREAM = "MarketDataStreamService/MarketDataStream"
TRADES_STREAM = "OrdersStreamService/TradesStream"
PORTFOLIO_STREAM = "OperationsStreamService/PortfolioStream"
POSITIONS_STREAM = "OperationsStreamService/PositionsStream"

# Feeds multiplexed on one bidirectional market data stream, keyed by request field
MARKET_DATA_FEEDS = {
    "trades": "subscribeTradesRequest",
    "candles": "subscribeCandlesRequest",
    "orderbook": "subscribeOrderBookRequest",
    "info": "subscribeInfoRequest",
    "last_price": "subscribeLastPriceRequest",
}

# Account scoped feeds, one server-push stream each
ACCOUNT_FEEDS = {
    "order_trades": TRADES_STREAM,
    "portfolio": PORTFOLIO_STREAM,
    "positions": POSITIONS_STREAM,
}

# Documented server-side limit; not enforced client-side
MAX_INSTRUMENTS_PER_STREAM = 300


def is_market_data_feed(feed: str) -> bool:
    """
    Check if a feed is carried by the market data stream.

    Args:
        feed: Feed kind string (e.g., "candles", "portfolio")

    Returns:
        True if the feed is a market data feed
    """
    return feed in MARKET_DATA_FEEDS


def is_account_feed(feed: str) -> bool:
    """
    Check if a feed is an account scoped stream.

    Args:
        feed: Feed kind string (e.g., "candles", "portfolio")

    Returns:
        True if the feed is account scoped
    """
    return feed in ACCOUNT_FEEDS


def get_stream_method_for_feed(feed: FeedKind) -> str:
    """
    Get the streaming method that serves a feed.

    Raises:
        ValueError: If the feed is not recognized
    """
    if is_market_data_feed(feed):
        return MARKET_DATA_STREAM
    if is_account_feed(feed):
        return ACCOUNT_FEEDS[feed]
    raise ValueError(f"Unknown feed kind: {feed}")


def get_request_key_for_feed(feed: FeedKind) -> str:
    """
    Get the request field of a market data control message for a feed.

    Raises:
        ValueError: If the feed is not a market data feed
    """
    if not is_market_data_feed(feed):
        raise ValueError(f"Not a market data feed: {feed}")
    return MARKET_DATA_FEEDS[feed]
