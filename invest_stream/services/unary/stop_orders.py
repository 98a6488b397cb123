"""Stop orders: take profit, stop loss and stop limit."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ...models.money import decimal_to_quotation
from ...utils.validation import check_readonly, check_sandbox
from .base import BaseUnaryService, format_timestamp

STOP_ORDER_DIRECTION_BUY = "STOP_ORDER_DIRECTION_BUY"
STOP_ORDER_DIRECTION_SELL = "STOP_ORDER_DIRECTION_SELL"

STOP_ORDER_TYPE_TAKE_PROFIT = "STOP_ORDER_TYPE_TAKE_PROFIT"
STOP_ORDER_TYPE_STOP_LOSS = "STOP_ORDER_TYPE_STOP_LOSS"
STOP_ORDER_TYPE_STOP_LIMIT = "STOP_ORDER_TYPE_STOP_LIMIT"

GOOD_TILL_CANCEL = "STOP_ORDER_EXPIRATION_TYPE_GOOD_TILL_CANCEL"
GOOD_TILL_DATE = "STOP_ORDER_EXPIRATION_TYPE_GOOD_TILL_DATE"


class StopOrdersService(BaseUnaryService):
    """Stop orders of an account.

    Stop orders are not available in the sandbox. Posting and cancelling
    are also refused by readonly clients.
    """

    service_name = "StopOrdersService"

    def post_stop_order_good_till_cancel_sync(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        stop_price: Decimal,
        direction: str,
        account_id: str,
        stop_order_type: str,
    ) -> str:
        """
        Place a stop order that stays active until cancelled.

        Returns:
            Id of the stop order
        """
        payload = self._post_payload(
            figi, quantity, price, stop_price, direction, account_id, stop_order_type, GOOD_TILL_CANCEL
        )
        return self._call("PostStopOrder", payload).get("stopOrderId", "")

    async def post_stop_order_good_till_cancel(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        stop_price: Decimal,
        direction: str,
        account_id: str,
        stop_order_type: str,
    ) -> str:
        payload = self._post_payload(
            figi, quantity, price, stop_price, direction, account_id, stop_order_type, GOOD_TILL_CANCEL
        )
        response = await self._acall("PostStopOrder", payload)
        return response.get("stopOrderId", "")

    def post_stop_order_good_till_date_sync(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        stop_price: Decimal,
        direction: str,
        account_id: str,
        stop_order_type: str,
        expire_date: datetime,
    ) -> str:
        """
        Place a stop order that expires at ``expire_date``.

        Returns:
            Id of the stop order
        """
        payload = self._post_payload(
            figi, quantity, price, stop_price, direction, account_id, stop_order_type, GOOD_TILL_DATE, expire_date
        )
        return self._call("PostStopOrder", payload).get("stopOrderId", "")

    async def post_stop_order_good_till_date(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        stop_price: Decimal,
        direction: str,
        account_id: str,
        stop_order_type: str,
        expire_date: datetime,
    ) -> str:
        payload = self._post_payload(
            figi, quantity, price, stop_price, direction, account_id, stop_order_type, GOOD_TILL_DATE, expire_date
        )
        response = await self._acall("PostStopOrder", payload)
        return response.get("stopOrderId", "")

    def get_stop_orders_sync(self, account_id: str) -> List[Dict[str, Any]]:
        check_sandbox(self.sandbox_mode)
        return self._call("GetStopOrders", {"accountId": account_id}).get("stopOrders", [])

    async def get_stop_orders(self, account_id: str) -> List[Dict[str, Any]]:
        check_sandbox(self.sandbox_mode)
        response = await self._acall("GetStopOrders", {"accountId": account_id})
        return response.get("stopOrders", [])

    def cancel_stop_order_sync(self, account_id: str, stop_order_id: str) -> Optional[str]:
        """Cancel a stop order. Returns the cancellation time."""
        response = self._call("CancelStopOrder", self._cancel_payload(account_id, stop_order_id))
        return response.get("time")

    async def cancel_stop_order(self, account_id: str, stop_order_id: str) -> Optional[str]:
        response = await self._acall("CancelStopOrder", self._cancel_payload(account_id, stop_order_id))
        return response.get("time")

    def _post_payload(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        stop_price: Decimal,
        direction: str,
        account_id: str,
        stop_order_type: str,
        expiration_type: str,
        expire_date: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        check_readonly(self.readonly_mode)
        check_sandbox(self.sandbox_mode)
        payload = {
            "figi": figi,
            "quantity": str(quantity),
            "stopPrice": decimal_to_quotation(stop_price),
            "direction": direction,
            "accountId": account_id,
            "expirationType": expiration_type,
            "stopOrderType": stop_order_type,
        }
        if price is not None:
            payload["price"] = decimal_to_quotation(price)
        if expire_date is not None:
            payload["expireDate"] = format_timestamp(expire_date)
        return payload

    def _cancel_payload(self, account_id: str, stop_order_id: str) -> Dict[str, Any]:
        check_readonly(self.readonly_mode)
        check_sandbox(self.sandbox_mode)
        return {"accountId": account_id, "stopOrderId": stop_order_id}
