"""
Orders per operator, order deletion and per-company invoice generation.
"""
import asyncio
import logging
from datetime import date
from typing import Dict, List, Optional

from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from nedc_admin.infrastructure.utils.timezone_utils import format_api_date
from ..entities.invoice import InvoiceGenerationResult
from ..entities.order import Operator, Order
from ..entities.sales import SalesData

logger = logging.getLogger(__name__)

DEFAULT_INVOICE_MESSAGE = "Invoice generated successfully"


class OrderManagementService:
    """Order lists and order/invoice actions for one company"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_orders(self, company_id: str, operator: Operator) -> List[Order]:
        """
        Orders of one operator. Any failure except 401 degrades to an empty list.
        """
        try:
            if operator == Operator.COMVIQ:
                payload = await self.client.get(endpoints.comviq_orders(company_id))
            elif operator == Operator.LYCA:
                payload = await self.client.get(endpoints.lyca_orders(company_id))
            else:
                payload = await self.client.post(
                    endpoints.telia_orders(company_id),
                    json={"operator": operator.value},
                )
        except BackendError as e:
            if e.is_unauthorized:
                raise
            logger.warning(f"Could not load {operator.value} orders for {company_id}: {e}")
            return []

        return [Order.from_api(item, operator) for item in _order_list(payload)]

    async def get_all_orders(self, company_id: str) -> Dict[Operator, List[Order]]:
        """All four operators in parallel"""
        operators = list(Operator)
        results = await asyncio.gather(*(self.get_orders(company_id, operator) for operator in operators))
        return dict(zip(operators, results))

    async def get_daily_sales(self, company_id: str) -> List[SalesData]:
        """Today/week/month overview with the previous period, empty on failure"""
        try:
            payload = await self.client.get(
                endpoints.daily_sales(company_id),
                params={"includePrevious": "true"},
            )
        except BackendError as e:
            if e.is_unauthorized:
                raise
            logger.warning(f"Could not load daily sales for {company_id}: {e}")
            return []

        items = payload.get("companySelling") if isinstance(payload, dict) else None
        return [SalesData.from_api(item) for item in (items or [])]

    async def delete_order(self, order_id: str, company_id: str, operator: Optional[Operator]) -> None:
        """
        Deletes one order. The backend exposes deletion as GET,
        the URL depends on the operator.
        """
        if operator is not None and operator.uses_telia_endpoints:
            path = endpoints.telia_order_delete(order_id, company_id, operator.value)
        elif operator == Operator.LYCA:
            path = endpoints.lyca_order_delete(order_id, company_id)
        else:
            path = endpoints.comviq_order_delete(order_id, company_id)

        await self.client.get_action(path)
        await hybrid_logger.business(
            "Order deleted",
            {"order_id": order_id, "company_id": company_id, "operator": operator.value if operator else None},
        )

    async def generate_invoice(
        self,
        company_id: str,
        start: date,
        end: date,
        company_name: str = "",
        require_status: bool = False,
    ) -> InvoiceGenerationResult:
        """
        Asks the backend to generate an invoice for the date range.

        Args:
            require_status: count a reply without a truthy status as failed

        Returns:
            Outcome with the backend's status flag and message

        Raises:
            BackendError: the backend answered with a non-OK status
        """
        payload = await self.client.post(
            endpoints.invoice_by_date(company_id),
            json={"fromdate": format_api_date(start), "todate": format_api_date(end)},
        )
        payload = payload if isinstance(payload, dict) else {}
        success = bool(payload.get("status", not require_status))

        await hybrid_logger.business(
            "Invoice generated" if success else "Invoice generation refused",
            {"company_id": company_id, "from": format_api_date(start), "to": format_api_date(end)},
        )
        return InvoiceGenerationResult(
            company_id=company_id,
            company_name=company_name,
            success=success,
            message=payload.get("message") or DEFAULT_INVOICE_MESSAGE,
        )


def _order_list(payload) -> list:
    """Order endpoints answer with a bare list or with an 'orderlist' key"""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in ("orderlist", "orders", "data"):
            if isinstance(payload.get(key), list):
                return payload[key]
    return []
