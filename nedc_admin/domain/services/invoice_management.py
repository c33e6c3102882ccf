"""
Invoice lists across all companies and bulk invoice generation.
"""
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from nedc_admin.infrastructure.utils.timezone_utils import format_api_date
from ..entities.company import Company
from ..entities.invoice import Invoice, InvoiceGenerationResult, InvoiceStatus
from .listing import append
from .order_management import OrderManagementService

logger = logging.getLogger(__name__)

NO_FAILED_INVOICES_MESSAGE = "No Failed Invoices Data Found"


@dataclass
class BulkInvoiceReport:
    """Per-company outcomes of one bulk generation run"""
    total: int
    results: List[InvoiceGenerationResult] = field(default_factory=list)

    @property
    def done(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.success)

    @property
    def failed(self) -> int:
        return self.done - self.succeeded

    @property
    def progress(self) -> int:
        """Percentage of companies processed"""
        if self.total == 0:
            return 100
        return round(self.done / self.total * 100)


class InvoiceManagementService:
    """Success/failed invoice lists and bulk generation"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_success_invoices(self) -> List[Invoice]:
        payload = await self.client.post(endpoints.SUCCESS_INVOICES)
        items = payload.get("Invoicelist") if isinstance(payload, dict) else None
        return [Invoice.from_api(item, InvoiceStatus.SUCCESS) for item in (items or [])]

    async def get_failed_invoices(self, start: Optional[date] = None, end: Optional[date] = None) -> List[Invoice]:
        """
        Failed invoices, narrowed on the backend when both dates are given.
        "No Failed Invoices Data Found" is an empty list, not an error.
        """
        body = None
        if start is not None and end is not None:
            body = {"fromDate": format_api_date(start), "toDate": format_api_date(end)}

        try:
            payload = await self.client.post(endpoints.FAILED_INVOICES, json=body)
        except BackendError as e:
            if e.message == NO_FAILED_INVOICES_MESSAGE:
                return []
            raise

        if not isinstance(payload, dict) or payload.get("message") == NO_FAILED_INVOICES_MESSAGE:
            return []
        return [Invoice.from_api(item, InvoiceStatus.FAILED) for item in (payload.get("Invoicelist") or [])]

    async def generate_for_companies(
        self,
        companies: List[Company],
        start: date,
        end: date,
    ) -> BulkInvoiceReport:
        """
        Generates invoices one company at a time, in list order.

        A failing company is recorded as failed and the loop moves on.
        Only a 401 stops the run.
        """
        orders = OrderManagementService(self.client)
        report = BulkInvoiceReport(total=len(companies))

        for company in companies:
            try:
                result = await orders.generate_invoice(
                    company.id, start, end, company_name=company.name, require_status=True
                )
            except BackendError as e:
                if e.is_unauthorized:
                    raise
                logger.error(f"Failed to generate invoice for {company.name}: {e}")
                result = InvoiceGenerationResult(
                    company_id=company.id,
                    company_name=company.name,
                    success=False,
                    message=e.message,
                )
            report.results = append(report.results, result)

        await hybrid_logger.business(
            "Bulk invoice generation finished",
            {
                "from": format_api_date(start),
                "to": format_api_date(end),
                "total": report.total,
                "succeeded": report.succeeded,
                "failed": report.failed,
            },
        )
        return report
