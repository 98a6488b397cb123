"""Portfolio, positions, operations and broker reports."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from ...models.portfolio import Portfolio
from ...models.positions import Positions, WithdrawLimits
from ...utils.validation import check_from_to, check_page, check_sandbox
from .base import BaseUnaryService, format_timestamp

OPERATION_STATE_UNSPECIFIED = "OPERATION_STATE_UNSPECIFIED"


class OperationsService(BaseUnaryService):
    """Account state queries.

    Broker reports are not available in the sandbox; asking for one from a
    sandbox client raises :class:`SandboxModeViolationError`.
    """

    service_name = "OperationsService"

    def get_portfolio_sync(self, account_id: str) -> Portfolio:
        return Portfolio.from_response(self._call("GetPortfolio", {"accountId": account_id}))

    async def get_portfolio(self, account_id: str) -> Portfolio:
        response = await self._acall("GetPortfolio", {"accountId": account_id})
        return Portfolio.from_response(response)

    def get_positions_sync(self, account_id: str) -> Positions:
        return Positions.from_response(self._call("GetPositions", {"accountId": account_id}))

    async def get_positions(self, account_id: str) -> Positions:
        response = await self._acall("GetPositions", {"accountId": account_id})
        return Positions.from_response(response)

    def get_withdraw_limits_sync(self, account_id: str) -> WithdrawLimits:
        return WithdrawLimits.from_response(self._call("GetWithdrawLimits", {"accountId": account_id}))

    async def get_withdraw_limits(self, account_id: str) -> WithdrawLimits:
        response = await self._acall("GetWithdrawLimits", {"accountId": account_id})
        return WithdrawLimits.from_response(response)

    def get_operations_sync(
        self,
        account_id: str,
        from_: datetime,
        to: datetime,
        state: str = OPERATION_STATE_UNSPECIFIED,
        figi: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        """
        Get account operations within a period.

        Raises:
            ValidationError: If ``from_`` is later than ``to``
        """
        payload = self._operations_payload(account_id, from_, to, state, figi)
        return self._call("GetOperations", payload).get("operations", [])

    async def get_operations(
        self,
        account_id: str,
        from_: datetime,
        to: datetime,
        state: str = OPERATION_STATE_UNSPECIFIED,
        figi: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        payload = self._operations_payload(account_id, from_, to, state, figi)
        response = await self._acall("GetOperations", payload)
        return response.get("operations", [])

    def get_broker_report_sync(self, account_id: str, from_: datetime, to: datetime) -> Dict[str, Any]:
        """Request generation of a broker report for a period."""
        payload = self._broker_report_payload(account_id, from_, to)
        return self._call("GetBrokerReport", payload)

    async def get_broker_report(self, account_id: str, from_: datetime, to: datetime) -> Dict[str, Any]:
        payload = self._broker_report_payload(account_id, from_, to)
        return await self._acall("GetBrokerReport", payload)

    def get_broker_report_page_sync(self, task_id: str, page: int) -> Dict[str, Any]:
        """
        Get one page of a generated broker report.

        Args:
            task_id: Id returned when the report was requested
            page: Page number, starting from 0

        Raises:
            ValidationError: If the page number is negative
        """
        response = self._call("GetBrokerReport", self._broker_report_page_payload(task_id, page))
        return response.get("getBrokerReportResponse", {})

    async def get_broker_report_page(self, task_id: str, page: int) -> Dict[str, Any]:
        response = await self._acall("GetBrokerReport", self._broker_report_page_payload(task_id, page))
        return response.get("getBrokerReportResponse", {})

    @staticmethod
    def _operations_payload(
        account_id: str,
        from_: datetime,
        to: datetime,
        state: str,
        figi: Optional[str],
    ) -> Dict[str, Any]:
        check_from_to(from_, to)
        payload = {
            "accountId": account_id,
            "from": format_timestamp(from_),
            "to": format_timestamp(to),
            "state": state,
        }
        if figi:
            payload["figi"] = figi
        return payload

    def _broker_report_page_payload(self, task_id: str, page: int) -> Dict[str, Any]:
        check_page(page)
        check_sandbox(self.sandbox_mode)
        return {"getBrokerReportRequest": {"taskId": task_id, "page": page}}

    def _broker_report_payload(self, account_id: str, from_: datetime, to: datetime) -> Dict[str, Any]:
        check_sandbox(self.sandbox_mode)
        check_from_to(from_, to)
        return {
            "generateBrokerReportRequest": {
                "accountId": account_id,
                "from": format_timestamp(from_),
                "to": format_timestamp(to),
            }
        }
