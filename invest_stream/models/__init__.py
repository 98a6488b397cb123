"""Data models."""

from .money import (
    Money,
    decimal_to_money_value,
    decimal_to_quotation,
    money_value_to_decimal,
    quotation_to_decimal,
)
from .portfolio import Portfolio, Position, VirtualPosition
from .positions import FuturePosition, Positions, SecurityPosition, WithdrawLimits
from .stream_state import ChannelState, ChannelStatus
from .subscription import (
    FeedKind,
    InstrumentSubscription,
    SubscriptionAction,
    SubscriptionInterval,
    SubscriptionRequest,
)

__all__ = [
    "Money",
    "decimal_to_money_value",
    "decimal_to_quotation",
    "money_value_to_decimal",
    "quotation_to_decimal",
    "Portfolio",
    "Position",
    "VirtualPosition",
    "FuturePosition",
    "Positions",
    "SecurityPosition",
    "WithdrawLimits",
    "ChannelState",
    "ChannelStatus",
    "FeedKind",
    "InstrumentSubscription",
    "SubscriptionAction",
    "SubscriptionInterval",
    "SubscriptionRequest",
]
