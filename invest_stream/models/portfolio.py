"""Portfolio model built from the GetPortfolio response."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from .money import Money, quotation_to_decimal


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an RFC 3339 timestamp as produced by the JSON gateway."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


@dataclass(frozen=True)
class Position:
    """One instrument position in a portfolio."""

    figi: str
    instrument_type: str
    quantity: Optional[Decimal]
    average_position_price: Money
    expected_yield: Optional[Decimal]
    current_nkd: Money
    average_position_price_pt: Optional[Decimal]
    current_price: Money
    average_position_price_fifo: Money
    quantity_lots: Optional[Decimal]

    @classmethod
    def from_response(cls, position: Dict[str, Any]) -> "Position":
        return cls(
            figi=position.get("figi", ""),
            instrument_type=position.get("instrumentType", ""),
            quantity=quotation_to_decimal(position.get("quantity")),
            average_position_price=Money.from_response(position.get("averagePositionPrice")),
            expected_yield=quotation_to_decimal(position.get("expectedYield")),
            current_nkd=Money.from_response(position.get("currentNkd")),
            average_position_price_pt=quotation_to_decimal(position.get("averagePositionPricePt")),
            current_price=Money.from_response(position.get("currentPrice")),
            average_position_price_fifo=Money.from_response(position.get("averagePositionPriceFifo")),
            quantity_lots=quotation_to_decimal(position.get("quantityLots")),
        )


@dataclass(frozen=True)
class VirtualPosition:
    """A position in virtual (bonus) assets."""

    figi: str
    position_uid: str
    instrument_uid: str
    instrument_type: str
    quantity: Optional[Decimal]
    average_position_price: Money
    expected_yield: Optional[Decimal]
    expected_yield_fifo: Optional[Decimal]
    expire_date: Optional[datetime]
    current_price: Money
    average_position_price_fifo: Money

    @classmethod
    def from_response(cls, position: Dict[str, Any]) -> "VirtualPosition":
        return cls(
            figi=position.get("figi", ""),
            position_uid=position.get("positionUid", ""),
            instrument_uid=position.get("instrumentUid", ""),
            instrument_type=position.get("instrumentType", ""),
            quantity=quotation_to_decimal(position.get("quantity")),
            average_position_price=Money.from_response(position.get("averagePositionPrice")),
            expected_yield=quotation_to_decimal(position.get("expectedYield")),
            expected_yield_fifo=quotation_to_decimal(position.get("expectedYieldFifo")),
            expire_date=parse_timestamp(position.get("expireDate")),
            current_price=Money.from_response(position.get("currentPrice")),
            average_position_price_fifo=Money.from_response(position.get("averagePositionPriceFifo")),
        )


@dataclass(frozen=True)
class Portfolio:
    """Account portfolio with per asset class totals."""

    total_amount_shares: Money
    total_amount_bonds: Money
    total_amount_etfs: Money
    total_amount_currencies: Money
    total_amount_futures: Money
    total_amount_options: Money
    total_amount_sp: Money
    total_amount_portfolio: Money
    expected_yield: Optional[Decimal]
    positions: List[Position] = field(default_factory=list)
    virtual_positions: List[VirtualPosition] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "Portfolio":
        return cls(
            total_amount_shares=Money.from_response(response.get("totalAmountShares")),
            total_amount_bonds=Money.from_response(response.get("totalAmountBonds")),
            total_amount_etfs=Money.from_response(response.get("totalAmountEtf")),
            total_amount_currencies=Money.from_response(response.get("totalAmountCurrencies")),
            total_amount_futures=Money.from_response(response.get("totalAmountFutures")),
            total_amount_options=Money.from_response(response.get("totalAmountOptions")),
            total_amount_sp=Money.from_response(response.get("totalAmountSp")),
            total_amount_portfolio=Money.from_response(response.get("totalAmountPortfolio")),
            expected_yield=quotation_to_decimal(response.get("expectedYield")),
            positions=[Position.from_response(p) for p in response.get("positions", [])],
            virtual_positions=[
                VirtualPosition.from_response(p) for p in response.get("virtualPositions", [])
            ],
        )
