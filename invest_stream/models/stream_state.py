"""Streaming channel state model."""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class ChannelStatus(str, Enum):
    """Lifecycle status of a subscription channel."""

    OPENING = "opening"
    OPEN = "open"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ChannelState(BaseModel):
    """Represents the state of one streaming connection."""

    model_config = ConfigDict(use_enum_values=True)

    channel_id: UUID = Field(default_factory=uuid4, description="Unique channel identifier")
    stream_method: str = Field(..., description="Streaming method, e.g. 'MarketDataStreamService/MarketDataStream'")
    status: ChannelStatus = Field(
        default=ChannelStatus.OPENING, description="Current channel status"
    )
    opened_at: Optional[datetime] = Field(
        default=None, description="When the connection was established"
    )
    closed_at: Optional[datetime] = Field(
        default=None, description="When the connection ended for any reason"
    )
    last_error: Optional[str] = Field(default=None, description="Last error message (if any)")
    messages_received: int = Field(default=0, description="Inbound frames delivered")
    messages_sent: int = Field(default=0, description="Outbound control messages written")

    @property
    def is_closed(self) -> bool:
        return self.status in (
            ChannelStatus.COMPLETED.value,
            ChannelStatus.FAILED.value,
            ChannelStatus.CANCELLED.value,
        )
