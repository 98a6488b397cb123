"""Market data snapshots: last prices, candles, order books, trading status."""

from datetime import datetime
from typing import Any, Dict, Iterable, List

from ...utils.validation import check_from_to
from .base import BaseUnaryService, format_timestamp

CANDLE_INTERVAL_1_MIN = "CANDLE_INTERVAL_1_MIN"


class MarketDataService(BaseUnaryService):
    service_name = "MarketDataService"

    def get_last_prices_sync(self, figies: Iterable[str]) -> List[Dict[str, Any]]:
        return self._call("GetLastPrices", {"figi": list(figies)}).get("lastPrices", [])

    async def get_last_prices(self, figies: Iterable[str]) -> List[Dict[str, Any]]:
        response = await self._acall("GetLastPrices", {"figi": list(figies)})
        return response.get("lastPrices", [])

    def get_candles_sync(
        self,
        figi: str,
        from_: datetime,
        to: datetime,
        interval: str = CANDLE_INTERVAL_1_MIN,
    ) -> List[Dict[str, Any]]:
        """
        Get historic candles of an instrument.

        Raises:
            ValidationError: If ``from_`` is later than ``to``
        """
        return self._call("GetCandles", self._candles_payload(figi, from_, to, interval)).get("candles", [])

    async def get_candles(
        self,
        figi: str,
        from_: datetime,
        to: datetime,
        interval: str = CANDLE_INTERVAL_1_MIN,
    ) -> List[Dict[str, Any]]:
        response = await self._acall("GetCandles", self._candles_payload(figi, from_, to, interval))
        return response.get("candles", [])

    def get_order_book_sync(self, figi: str, depth: int) -> Dict[str, Any]:
        return self._call("GetOrderBook", {"figi": figi, "depth": depth})

    async def get_order_book(self, figi: str, depth: int) -> Dict[str, Any]:
        return await self._acall("GetOrderBook", {"figi": figi, "depth": depth})

    def get_trading_status_sync(self, figi: str) -> Dict[str, Any]:
        return self._call("GetTradingStatus", {"figi": figi})

    async def get_trading_status(self, figi: str) -> Dict[str, Any]:
        return await self._acall("GetTradingStatus", {"figi": figi})

    @staticmethod
    def _candles_payload(figi: str, from_: datetime, to: datetime, interval: str) -> Dict[str, Any]:
        check_from_to(from_, to)
        return {
            "figi": figi,
            "from": format_timestamp(from_),
            "to": format_timestamp(to),
            "interval": interval,
        }
