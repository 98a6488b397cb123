"""Positions and withdraw limits built from the operations responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .money import Money


@dataclass(frozen=True)
class SecurityPosition:
    figi: str
    blocked: int
    balance: int

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "SecurityPosition":
        return cls(
            figi=data.get("figi", ""),
            blocked=int(data.get("blocked", 0)),
            balance=int(data.get("balance", 0)),
        )


@dataclass(frozen=True)
class FuturePosition:
    figi: str
    blocked: int
    balance: int

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> "FuturePosition":
        return cls(
            figi=data.get("figi", ""),
            blocked=int(data.get("blocked", 0)),
            balance=int(data.get("balance", 0)),
        )


@dataclass(frozen=True)
class Positions:
    """Money and security balances of an account."""

    money: List[Money] = field(default_factory=list)
    blocked: List[Money] = field(default_factory=list)
    securities: List[SecurityPosition] = field(default_factory=list)
    limits_loading_in_progress: bool = False
    futures: List[FuturePosition] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "Positions":
        return cls(
            money=[Money.from_response(m) for m in response.get("money", [])],
            blocked=[Money.from_response(m) for m in response.get("blocked", [])],
            securities=[SecurityPosition.from_response(s) for s in response.get("securities", [])],
            limits_loading_in_progress=bool(response.get("limitsLoadingInProgress", False)),
            futures=[FuturePosition.from_response(f) for f in response.get("futures", [])],
        )


@dataclass(frozen=True)
class WithdrawLimits:
    """Amounts available for withdrawal."""

    money: List[Money] = field(default_factory=list)
    blocked: List[Money] = field(default_factory=list)
    # Funds blocked as futures margin
    blocked_guarantee: List[Money] = field(default_factory=list)

    @classmethod
    def from_response(cls, response: Dict[str, Any]) -> "WithdrawLimits":
        return cls(
            money=[Money.from_response(m) for m in response.get("money", [])],
            blocked=[Money.from_response(m) for m in response.get("blocked", [])],
            blocked_guarantee=[Money.from_response(m) for m in response.get("blockedGuarantee", [])],
        )
