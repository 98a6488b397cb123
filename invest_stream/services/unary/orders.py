"""Order placement and order queries."""

from decimal import Decimal
from typing import Any, Dict, List, Optional

from ...models.money import decimal_to_quotation
from ...utils.validation import check_readonly, preprocess_order_id
from .base import BaseUnaryService

ORDER_DIRECTION_BUY = "ORDER_DIRECTION_BUY"
ORDER_DIRECTION_SELL = "ORDER_DIRECTION_SELL"
ORDER_TYPE_LIMIT = "ORDER_TYPE_LIMIT"
ORDER_TYPE_MARKET = "ORDER_TYPE_MARKET"


class OrdersService(BaseUnaryService):
    """Exchange orders.

    Posting and cancelling are modifying calls: a readonly client raises
    :class:`ReadonlyModeViolationError` before any request is sent.
    """

    service_name = "OrdersService"

    def post_order_sync(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        direction: str,
        account_id: str,
        order_type: str,
        order_id: str,
    ) -> Dict[str, Any]:
        """
        Place an order.

        Args:
            figi: Instrument FIGI
            quantity: Number of lots
            price: Limit price; ignored by the exchange for market orders
            direction: ORDER_DIRECTION_BUY or ORDER_DIRECTION_SELL
            account_id: Account to trade on
            order_type: ORDER_TYPE_LIMIT or ORDER_TYPE_MARKET
            order_id: Idempotency key of the order

        Returns:
            The PostOrder response
        """
        payload = self._post_order_payload(figi, quantity, price, direction, account_id, order_type, order_id)
        return self._call("PostOrder", payload)

    async def post_order(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        direction: str,
        account_id: str,
        order_type: str,
        order_id: str,
    ) -> Dict[str, Any]:
        payload = self._post_order_payload(figi, quantity, price, direction, account_id, order_type, order_id)
        return await self._acall("PostOrder", payload)

    def cancel_order_sync(self, account_id: str, order_id: str) -> Optional[str]:
        """Cancel an order. Returns the cancellation time reported by the exchange."""
        response = self._call("CancelOrder", self._cancel_order_payload(account_id, order_id))
        return response.get("time")

    async def cancel_order(self, account_id: str, order_id: str) -> Optional[str]:
        response = await self._acall("CancelOrder", self._cancel_order_payload(account_id, order_id))
        return response.get("time")

    def get_order_state_sync(self, account_id: str, order_id: str) -> Dict[str, Any]:
        return self._call("GetOrderState", {"accountId": account_id, "orderId": order_id})

    async def get_order_state(self, account_id: str, order_id: str) -> Dict[str, Any]:
        return await self._acall("GetOrderState", {"accountId": account_id, "orderId": order_id})

    def get_orders_sync(self, account_id: str) -> List[Dict[str, Any]]:
        """Get the active orders of an account."""
        return self._call("GetOrders", {"accountId": account_id}).get("orders", [])

    async def get_orders(self, account_id: str) -> List[Dict[str, Any]]:
        response = await self._acall("GetOrders", {"accountId": account_id})
        return response.get("orders", [])

    def _post_order_payload(
        self,
        figi: str,
        quantity: int,
        price: Optional[Decimal],
        direction: str,
        account_id: str,
        order_type: str,
        order_id: str,
    ) -> Dict[str, Any]:
        check_readonly(self.readonly_mode)
        payload = {
            "figi": figi,
            "quantity": str(quantity),
            "direction": direction,
            "accountId": account_id,
            "orderType": order_type,
            "orderId": preprocess_order_id(order_id),
        }
        if price is not None:
            payload["price"] = decimal_to_quotation(price)
        return payload

    def _cancel_order_payload(self, account_id: str, order_id: str) -> Dict[str, Any]:
        check_readonly(self.readonly_mode)
        return {"accountId": account_id, "orderId": preprocess_order_id(order_id)}
