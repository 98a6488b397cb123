"""Instrument reference data: shares, bonds, ETFs, futures and currencies."""

from typing import Any, Dict, List, Optional

from ...exceptions import ApiError
from .base import BaseUnaryService

INSTRUMENT_ID_TYPE_FIGI = "INSTRUMENT_ID_TYPE_FIGI"
INSTRUMENT_ID_TYPE_TICKER = "INSTRUMENT_ID_TYPE_TICKER"

# Tradable through the API vs every instrument known to the broker
INSTRUMENT_STATUS_BASE = "INSTRUMENT_STATUS_BASE"
INSTRUMENT_STATUS_ALL = "INSTRUMENT_STATUS_ALL"

# The gateway answers NOT_FOUND lookups with 404
NOT_FOUND_STATUS = 404


def is_not_found(error: ApiError) -> bool:
    return error.status_code == NOT_FOUND_STATUS


def figi_request(figi: str) -> Dict[str, Any]:
    return {"idType": INSTRUMENT_ID_TYPE_FIGI, "id": figi}


def ticker_request(ticker: str, class_code: str) -> Dict[str, Any]:
    return {"idType": INSTRUMENT_ID_TYPE_TICKER, "id": ticker, "classCode": class_code}


class InstrumentsService(BaseUnaryService):
    """Instrument lookups.

    Lookups by FIGI or ticker return ``None`` when the instrument does not
    exist; other failures raise :class:`ApiError`. List calls return either
    the instruments tradable through the API or all of them.
    """

    service_name = "InstrumentsService"

    def _find_sync(self, method: str, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            return self._call(method, request).get("instrument")
        except ApiError as e:
            if is_not_found(e):
                return None
            raise

    async def _find(self, method: str, request: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        try:
            response = await self._acall(method, request)
        except ApiError as e:
            if is_not_found(e):
                return None
            raise
        return response.get("instrument")

    def _list_sync(self, method: str, status: str) -> List[Dict[str, Any]]:
        return self._call(method, {"instrumentStatus": status}).get("instruments", [])

    async def _list(self, method: str, status: str) -> List[Dict[str, Any]]:
        response = await self._acall(method, {"instrumentStatus": status})
        return response.get("instruments", [])

    # Any instrument

    def get_instrument_by_figi_sync(self, figi: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("GetInstrumentBy", figi_request(figi))

    async def get_instrument_by_figi(self, figi: str) -> Optional[Dict[str, Any]]:
        return await self._find("GetInstrumentBy", figi_request(figi))

    def get_instrument_by_ticker_sync(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("GetInstrumentBy", ticker_request(ticker, class_code))

    async def get_instrument_by_ticker(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return await self._find("GetInstrumentBy", ticker_request(ticker, class_code))

    # Shares

    def get_share_by_figi_sync(self, figi: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("ShareBy", figi_request(figi))

    async def get_share_by_figi(self, figi: str) -> Optional[Dict[str, Any]]:
        return await self._find("ShareBy", figi_request(figi))

    def get_share_by_ticker_sync(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("ShareBy", ticker_request(ticker, class_code))

    async def get_share_by_ticker(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return await self._find("ShareBy", ticker_request(ticker, class_code))

    def get_tradable_shares_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Shares", INSTRUMENT_STATUS_BASE)

    async def get_tradable_shares(self) -> List[Dict[str, Any]]:
        return await self._list("Shares", INSTRUMENT_STATUS_BASE)

    def get_all_shares_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Shares", INSTRUMENT_STATUS_ALL)

    async def get_all_shares(self) -> List[Dict[str, Any]]:
        return await self._list("Shares", INSTRUMENT_STATUS_ALL)

    # Bonds

    def get_bond_by_figi_sync(self, figi: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("BondBy", figi_request(figi))

    async def get_bond_by_figi(self, figi: str) -> Optional[Dict[str, Any]]:
        return await self._find("BondBy", figi_request(figi))

    def get_bond_by_ticker_sync(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("BondBy", ticker_request(ticker, class_code))

    async def get_bond_by_ticker(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return await self._find("BondBy", ticker_request(ticker, class_code))

    def get_tradable_bonds_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Bonds", INSTRUMENT_STATUS_BASE)

    async def get_tradable_bonds(self) -> List[Dict[str, Any]]:
        return await self._list("Bonds", INSTRUMENT_STATUS_BASE)

    def get_all_bonds_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Bonds", INSTRUMENT_STATUS_ALL)

    async def get_all_bonds(self) -> List[Dict[str, Any]]:
        return await self._list("Bonds", INSTRUMENT_STATUS_ALL)

    # ETFs

    def get_etf_by_figi_sync(self, figi: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("EtfBy", figi_request(figi))

    async def get_etf_by_figi(self, figi: str) -> Optional[Dict[str, Any]]:
        return await self._find("EtfBy", figi_request(figi))

    def get_etf_by_ticker_sync(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("EtfBy", ticker_request(ticker, class_code))

    async def get_etf_by_ticker(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return await self._find("EtfBy", ticker_request(ticker, class_code))

    def get_tradable_etfs_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Etfs", INSTRUMENT_STATUS_BASE)

    async def get_tradable_etfs(self) -> List[Dict[str, Any]]:
        return await self._list("Etfs", INSTRUMENT_STATUS_BASE)

    def get_all_etfs_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Etfs", INSTRUMENT_STATUS_ALL)

    async def get_all_etfs(self) -> List[Dict[str, Any]]:
        return await self._list("Etfs", INSTRUMENT_STATUS_ALL)

    # Futures

    def get_future_by_figi_sync(self, figi: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("FutureBy", figi_request(figi))

    async def get_future_by_figi(self, figi: str) -> Optional[Dict[str, Any]]:
        return await self._find("FutureBy", figi_request(figi))

    def get_future_by_ticker_sync(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("FutureBy", ticker_request(ticker, class_code))

    async def get_future_by_ticker(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return await self._find("FutureBy", ticker_request(ticker, class_code))

    def get_tradable_futures_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Futures", INSTRUMENT_STATUS_BASE)

    async def get_tradable_futures(self) -> List[Dict[str, Any]]:
        return await self._list("Futures", INSTRUMENT_STATUS_BASE)

    def get_all_futures_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Futures", INSTRUMENT_STATUS_ALL)

    async def get_all_futures(self) -> List[Dict[str, Any]]:
        return await self._list("Futures", INSTRUMENT_STATUS_ALL)

    # Currencies

    def get_currency_by_figi_sync(self, figi: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("CurrencyBy", figi_request(figi))

    async def get_currency_by_figi(self, figi: str) -> Optional[Dict[str, Any]]:
        return await self._find("CurrencyBy", figi_request(figi))

    def get_currency_by_ticker_sync(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return self._find_sync("CurrencyBy", ticker_request(ticker, class_code))

    async def get_currency_by_ticker(self, ticker: str, class_code: str) -> Optional[Dict[str, Any]]:
        return await self._find("CurrencyBy", ticker_request(ticker, class_code))

    def get_tradable_currencies_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Currencies", INSTRUMENT_STATUS_BASE)

    async def get_tradable_currencies(self) -> List[Dict[str, Any]]:
        return await self._list("Currencies", INSTRUMENT_STATUS_BASE)

    def get_all_currencies_sync(self) -> List[Dict[str, Any]]:
        return self._list_sync("Currencies", INSTRUMENT_STATUS_ALL)

    async def get_all_currencies(self) -> List[Dict[str, Any]]:
        return await self._list("Currencies", INSTRUMENT_STATUS_ALL)
