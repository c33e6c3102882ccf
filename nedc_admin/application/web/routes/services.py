"""
"Övriga tjänster" dashboard: invoices across companies, sales totals,
voucher search, article reports and bulk invoice generation.
"""
import asyncio
import logging
from typing import Annotated, Any, Awaitable, Dict, Optional, Tuple
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..auth import flash, get_backend_client, pop_messages
from ..forms import DateRangeForm, form_error_message, optional_date_range
from ....config.settings import settings
from ....domain.entities.order import Operator
from ....domain.services.company_management import CompanyManagementService
from ....domain.services.invoice_management import InvoiceManagementService
from ....domain.services.listing import filter_by_date_range, paginate, sum_amounts
from ....domain.services.reporting import MISSING_SEARCH_INPUT_MESSAGE, ReportingService
from ....infrastructure.api.client import BackendClient
from ....infrastructure.api.errors import BackendError
from ....infrastructure.logging.hybrid_logger import hybrid_logger
from ....presentation.template_config import templates

logger = logging.getLogger(__name__)

services_router = APIRouter(prefix="/the-rest", tags=["services"])

PAGE_URL = "/the-rest"


async def _section(name: str, call: Awaitable[Any]) -> Tuple[Any, Optional[str]]:
    """
    Runs one dashboard section. A failure becomes an inline error
    for that section only, a 401 still ends the session.
    """
    try:
        return await call, None
    except BackendError as e:
        if e.is_unauthorized:
            raise
        await hybrid_logger.error(f"Dashboard section '{name}' failed: {e}")
        return None, f"Failed to load {name}. Please try again."


async def _nothing() -> None:
    return None


@services_router.get("", response_class=HTMLResponse)
async def services_page(
    request: Request,
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    operator: str = Query(Operator.COMVIQ.value),
    success_page: str = Query("1"),
    failed_page: str = Query("1"),
    serial: str = Query(""),
    search_operator: str = Query(""),
    article_id: str = Query(""),
    client: BackendClient = Depends(get_backend_client),
):
    """Every section loads in parallel and fails on its own"""
    start, end = optional_date_range(start_date, end_date)
    total_operator = Operator.parse(operator, Operator.COMVIQ)
    lookup_operator = Operator.parse(search_operator)

    messages = pop_messages(request)
    search_requested = bool(serial or search_operator)
    if search_requested and (not serial.strip() or lookup_operator is None):
        messages.append({"type": "error", "text": MISSING_SEARCH_INPUT_MESSAGE})
        search_requested = False

    invoices = InvoiceManagementService(client)
    reports = ReportingService(client)

    article_orders_call = (
        reports.get_article_orders(article_id, start, end)
        if article_id and start is not None and end is not None
        else _nothing()
    )
    lookup_call = reports.search_voucher(serial, lookup_operator) if search_requested else _nothing()

    (
        (success_invoices, success_error),
        (failed_invoices, failed_error),
        (total, total_error),
        (articles, articles_error),
        (article_orders, article_orders_error),
        (lookup, lookup_error),
    ) = await asyncio.gather(
        _section("success invoices", invoices.get_success_invoices()),
        _section("failed invoices", invoices.get_failed_invoices(start, end)),
        _section("sales data", reports.get_operator_total(total_operator, start, end)),
        _section("articles", reports.get_articles()),
        _section("article orders", article_orders_call),
        _section("voucher search", lookup_call),
    )

    success_filtered = filter_by_date_range(success_invoices or [], start, end, key=lambda invoice: invoice.from_date)
    failed_list = failed_invoices or []

    filters: Dict[str, Any] = {
        "start_date": start.isoformat() if start else "",
        "end_date": end.isoformat() if end else "",
        "operator": total_operator.value,
        "article_id": article_id,
    }

    def page_url(**overrides: Any) -> str:
        params = {key: value for key, value in {**filters, **overrides}.items() if value not in (None, "")}
        return f"{PAGE_URL}?{urlencode(params)}" if params else PAGE_URL

    return templates.TemplateResponse(
        request,
        "the_rest.html",
        {
            "messages": messages,
            "filters": filters,
            "operators": list(Operator),
            "success": {
                "page": paginate(success_filtered, success_page, settings.success_invoices_per_page),
                "total": sum_amounts(success_filtered, key=lambda invoice: invoice.total_amount),
                "error": success_error,
            },
            "failed": {
                "page": paginate(failed_list, failed_page, settings.failed_invoices_per_page),
                "total": sum_amounts(failed_list, key=lambda invoice: invoice.total_amount),
                "error": failed_error,
            },
            "sales_total": total,
            "sales_error": total_error,
            "articles": articles or [],
            "articles_error": articles_error,
            "article_orders": article_orders,
            "article_orders_error": article_orders_error,
            "lookup": lookup,
            "lookup_error": lookup_error,
            "serial": serial,
            "search_operator": search_operator,
            "page_url": page_url,
            "page_title": "Övriga tjänster",
        },
    )


@services_router.post("/invoices/generate", response_class=HTMLResponse)
async def generate_all_invoices(
    request: Request,
    start_date: Annotated[str, Form()] = "",
    end_date: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Generates invoices for every company, one after another"""
    try:
        form = DateRangeForm(start_date=start_date, end_date=end_date)
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=PAGE_URL, status_code=status.HTTP_302_FOUND)

    try:
        companies = await CompanyManagementService(client).get_all_companies()
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error fetching companies for invoice generation: {e}")
        flash(request, "error", "Failed to fetch companies")
        return RedirectResponse(url=PAGE_URL, status_code=status.HTTP_302_FOUND)

    report = await InvoiceManagementService(client).generate_for_companies(companies, form.start_date, form.end_date)

    messages = pop_messages(request)
    messages.append({
        "type": "success" if report.failed == 0 else "error",
        "text": f"{report.done}/{report.total} företag behandlade, {report.succeeded} lyckades, {report.failed} misslyckades",
    })

    return templates.TemplateResponse(
        request,
        "invoice_report.html",
        {
            "messages": messages,
            "report": report,
            "start_date": form.start_date,
            "end_date": form.end_date,
            "page_title": "Fakturagenerering",
        },
    )
