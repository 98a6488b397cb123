"""Money amounts and units/nano decimal conversion.

The API encodes decimals as a pair of whole ``units`` (int64, serialized as a
string in JSON) and ``nano`` billionths. ``MoneyValue`` adds a currency code.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional

NANO_SCALE = 9
_NANO_FACTOR = Decimal(10) ** NANO_SCALE


def units_nano_to_decimal(units: Any, nano: Any) -> Decimal:
    """Combine units and nano into one Decimal. {units: 10, nano: 900000000} -> 10.9"""
    units_int = int(units or 0)
    nano_int = int(nano or 0)
    if units_int == 0 and nano_int == 0:
        return Decimal(0)
    return Decimal(units_int) + Decimal(nano_int).scaleb(-NANO_SCALE)


def quotation_to_decimal(value: Optional[Dict[str, Any]]) -> Optional[Decimal]:
    if value is None:
        return None
    return units_nano_to_decimal(value.get("units"), value.get("nano"))


def money_value_to_decimal(value: Optional[Dict[str, Any]]) -> Optional[Decimal]:
    if value is None:
        return None
    return units_nano_to_decimal(value.get("units"), value.get("nano"))


def _split(value: Optional[Decimal]) -> tuple[int, int]:
    if value is None:
        return 0, 0
    units = int(value)
    nano = int((value - units) * _NANO_FACTOR)
    return units, nano


def decimal_to_quotation(value: Optional[Decimal]) -> Dict[str, Any]:
    units, nano = _split(value)
    return {"units": str(units), "nano": nano}


def decimal_to_money_value(value: Optional[Decimal], currency: Optional[str] = None) -> Dict[str, Any]:
    units, nano = _split(value)
    return {
        "currency": currency.lower() if currency is not None else "",
        "units": str(units),
        "nano": nano,
    }


@dataclass(frozen=True)
class Money:
    """A currency amount."""

    currency: str
    value: Decimal

    @classmethod
    def from_response(cls, money_value: Optional[Dict[str, Any]]) -> "Money":
        money_value = money_value or {}
        return cls(
            currency=money_value.get("currency", ""),
            value=units_nano_to_decimal(money_value.get("units"), money_value.get("nano")),
        )

    def to_request(self) -> Dict[str, Any]:
        return decimal_to_money_value(self.value, self.currency)
