"""Accounts and user info."""

from typing import Any, Dict, List

from .base import BaseUnaryService


class UsersService(BaseUnaryService):
    service_name = "UsersService"

    def get_accounts_sync(self) -> List[Dict[str, Any]]:
        """Get the accounts available to the token."""
        return self._call("GetAccounts").get("accounts", [])

    async def get_accounts(self) -> List[Dict[str, Any]]:
        response = await self._acall("GetAccounts")
        return response.get("accounts", [])

    def get_info_sync(self) -> Dict[str, Any]:
        """Get the tariff and qualification info of the user."""
        return self._call("GetInfo")

    async def get_info(self) -> Dict[str, Any]:
        return await self._acall("GetInfo")
