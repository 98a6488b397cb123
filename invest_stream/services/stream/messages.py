"""Control message formatting for streaming feeds."""

from __future__ import annotations

from typing import Iterable, List, Optional, Union

from ...config.logging import get_logger
from ...models.subscription import (
    FeedKind,
    InstrumentSubscription,
    SubscriptionAction,
    SubscriptionInterval,
    SubscriptionRequest,
)
from .feeds import get_request_key_for_feed

logger = get_logger(__name__)

# Depth applied when a request is built without an explicit one.
# The subscription handle applies its own default of 1 (see MarketDataSubscription).
DEFAULT_REQUEST_ORDERBOOK_DEPTH = 10
DEFAULT_CANDLE_INTERVAL = SubscriptionInterval.ONE_MINUTE


def build_subscription_request(
    feed: FeedKind,
    action: SubscriptionAction,
    instrument_ids: Iterable[str],
    depth: Optional[int] = None,
    interval: Optional[SubscriptionInterval] = None,
) -> SubscriptionRequest:
    """Build a typed subscription request for one feed.

    Order book entries carry ``depth`` (default 10 here), candle entries carry
    ``interval`` (default one minute). Other feeds carry the instrument id only.
    """
    if feed == "orderbook":
        depth = DEFAULT_REQUEST_ORDERBOOK_DEPTH if depth is None else depth
        instruments = tuple(InstrumentSubscription(i, depth=depth) for i in instrument_ids)
    elif feed == "candles":
        interval = interval or DEFAULT_CANDLE_INTERVAL
        instruments = tuple(InstrumentSubscription(i, interval=interval) for i in instrument_ids)
    else:
        get_request_key_for_feed(feed)
        instruments = tuple(InstrumentSubscription(i) for i in instrument_ids)
    return SubscriptionRequest(feed=feed, action=action, instruments=instruments)


def build_market_data_message(request: SubscriptionRequest) -> dict:
    """Encode a subscription request as one market data control message.

    The stream expects messages in the form:
    {
        "subscribeCandlesRequest": {
            "subscriptionAction": "SUBSCRIPTION_ACTION_SUBSCRIBE",
            "instruments": [{"instrumentId": "...", "interval": "..."}, ...]
        }
    }

    All instruments of the request go into a single message.
    """
    key = get_request_key_for_feed(request.feed)
    msg = {
        key: {
            "subscriptionAction": request.action.value,
            "instruments": [i.to_payload() for i in request.instruments],
        }
    }
    logger.debug(
        "build_market_data_message",
        feed=request.feed,
        action=request.action.value,
        instruments_count=len(request.instruments),
    )
    return msg


def build_accounts_message(accounts: Iterable[str]) -> dict:
    """Build the opening request of an account scoped stream."""
    account_list: List[str] = list(accounts)
    msg = {"accounts": account_list}
    logger.debug("build_accounts_message", accounts_count=len(account_list))
    return msg


def normalize_account_ids(accounts: Union[str, Iterable[str]]) -> List[str]:
    """Accept a single account id or an iterable of ids."""
    if isinstance(accounts, str):
        return [accounts]
    return list(accounts)
