"""Sandbox account management."""

from decimal import Decimal
from typing import Any, Dict

from ...models.money import Money, decimal_to_money_value
from .base import BaseUnaryService


class SandboxService(BaseUnaryService):
    """Opening, closing and funding sandbox accounts."""

    service_name = "SandboxService"

    def open_account_sync(self) -> str:
        """Open a sandbox account and return its id."""
        return self._call("OpenSandboxAccount").get("accountId", "")

    async def open_account(self) -> str:
        response = await self._acall("OpenSandboxAccount")
        return response.get("accountId", "")

    def close_account_sync(self, account_id: str) -> None:
        self._call("CloseSandboxAccount", {"accountId": account_id})

    async def close_account(self, account_id: str) -> None:
        await self._acall("CloseSandboxAccount", {"accountId": account_id})

    def pay_in_sync(self, account_id: str, amount: Decimal, currency: str) -> Money:
        """
        Top up a sandbox account.

        Returns:
            The account balance after the top up
        """
        response = self._call("SandboxPayIn", self._pay_in_payload(account_id, amount, currency))
        return Money.from_response(response.get("balance"))

    async def pay_in(self, account_id: str, amount: Decimal, currency: str) -> Money:
        response = await self._acall("SandboxPayIn", self._pay_in_payload(account_id, amount, currency))
        return Money.from_response(response.get("balance"))

    @staticmethod
    def _pay_in_payload(account_id: str, amount: Decimal, currency: str) -> Dict[str, Any]:
        return {"accountId": account_id, "amount": decimal_to_money_value(amount, currency)}
