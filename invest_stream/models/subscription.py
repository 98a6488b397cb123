"""Subscription request model for streaming feeds."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Optional, Tuple


FeedKind = Literal[
    "trades",
    "candles",
    "orderbook",
    "info",
    "last_price",
    "order_trades",
    "portfolio",
    "positions",
]


class SubscriptionAction(str, Enum):
    """Verb carried by a market data control message."""

    SUBSCRIBE = "SUBSCRIPTION_ACTION_SUBSCRIBE"
    UNSUBSCRIBE = "SUBSCRIPTION_ACTION_UNSUBSCRIBE"


class SubscriptionInterval(str, Enum):
    """Candle interval of a candles subscription."""

    ONE_MINUTE = "SUBSCRIPTION_INTERVAL_ONE_MINUTE"
    FIVE_MINUTES = "SUBSCRIPTION_INTERVAL_FIVE_MINUTES"
    FIFTEEN_MINUTES = "SUBSCRIPTION_INTERVAL_FIFTEEN_MINUTES"
    ONE_HOUR = "SUBSCRIPTION_INTERVAL_ONE_HOUR"
    ONE_DAY = "SUBSCRIPTION_INTERVAL_ONE_DAY"
    TWO_MINUTES = "SUBSCRIPTION_INTERVAL_2_MIN"
    THREE_MINUTES = "SUBSCRIPTION_INTERVAL_3_MIN"
    TEN_MINUTES = "SUBSCRIPTION_INTERVAL_10_MIN"
    THIRTY_MINUTES = "SUBSCRIPTION_INTERVAL_30_MIN"
    TWO_HOURS = "SUBSCRIPTION_INTERVAL_2_HOUR"
    FOUR_HOURS = "SUBSCRIPTION_INTERVAL_4_HOUR"
    ONE_WEEK = "SUBSCRIPTION_INTERVAL_WEEK"
    ONE_MONTH = "SUBSCRIPTION_INTERVAL_MONTH"


@dataclass(frozen=True)
class InstrumentSubscription:
    """One instrument entry of a subscription request.

    ``depth`` is set for order book feeds, ``interval`` for candle feeds.
    """

    instrument_id: str
    depth: Optional[int] = None
    interval: Optional[SubscriptionInterval] = None

    def to_payload(self) -> dict:
        entry: dict = {"instrumentId": self.instrument_id}
        if self.interval is not None:
            entry["interval"] = self.interval.value
        if self.depth is not None:
            entry["depth"] = self.depth
        return entry


@dataclass(frozen=True)
class SubscriptionRequest:
    """A batch of instruments for one feed under one subscription action."""

    feed: FeedKind
    action: SubscriptionAction
    instruments: Tuple[InstrumentSubscription, ...] = field(default_factory=tuple)

    @property
    def instrument_ids(self) -> list[str]:
        return [i.instrument_id for i in self.instruments]
