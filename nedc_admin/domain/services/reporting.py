"""
Cross-company reports: sales totals per operator, orders per article and
voucher lookup by serial number.
"""
import logging
from datetime import date
from typing import List, Optional

from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError, BackendUnavailableError
from nedc_admin.infrastructure.utils.timezone_utils import format_api_date
from ..entities.order import Operator
from ..entities.sales import SalesData
from ..entities.voucher import Article, ArticleOrder, VoucherLookup

logger = logging.getLogger(__name__)

MISSING_SEARCH_INPUT_MESSAGE = "Vänligen välj operatör och ange ett serienummer."


class ReportingService:
    """Read-only reports for the services dashboard"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_operator_total(
        self,
        operator: Operator,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Optional[SalesData]:
        """
        Total sales of one operator, for all time or for a date range.

        Returns:
            SalesData or None when the backend has no total
        """
        if start is not None and end is not None:
            payload = await self.client.post(
                endpoints.operator_total_by_date(operator.value),
                json={"fromdate": format_api_date(start), "todate": format_api_date(end)},
            )
        else:
            payload = await self.client.get(endpoints.operator_total(operator.value))

        total = payload.get("TotalSale") if isinstance(payload, dict) else None
        if not isinstance(total, dict):
            return None
        return SalesData.from_api(total)

    async def get_articles(self) -> List[Article]:
        payload = await self.client.post(endpoints.ARTICLES)
        items = payload.get("articallist") if isinstance(payload, dict) else None
        return [Article.from_api(item) for item in (items or [])]

    async def get_article_orders(self, article_id: str, start: date, end: date) -> List[ArticleOrder]:
        """Orders of one article placed within the date range"""
        payload = await self.client.post(
            endpoints.article_orders(article_id),
            json={"fromdate": format_api_date(start), "todate": format_api_date(end)},
        )
        items = payload.get("orderlist") if isinstance(payload, dict) else None
        return [ArticleOrder.from_api(item) for item in (items or [])]

    async def search_voucher(self, serial_number: str, operator: Optional[Operator]) -> VoucherLookup:
        """
        Looks up a sold voucher by serial number.

        Both inputs are required, a missing one fails without calling the backend.
        A "not found" answer from the backend is a failed lookup, not an error.

        Raises:
            BackendUnavailableError: the backend could not be reached
        """
        serial_number = (serial_number or "").strip()
        if not serial_number or operator is None:
            return VoucherLookup.failed(MISSING_SEARCH_INPUT_MESSAGE)

        try:
            payload = await self.client.get(
                endpoints.VOUCHER_SEARCH,
                params={"serialNumber": serial_number, "operator": operator.value},
            )
        except BackendUnavailableError:
            raise
        except BackendError as e:
            if e.is_unauthorized:
                raise
            logger.info(f"Voucher search for {serial_number} ({operator.value}) failed: {e}")
            payload = e.payload if isinstance(e.payload, dict) else {"success": False}

        return VoucherLookup.from_api(payload if isinstance(payload, dict) else {})
