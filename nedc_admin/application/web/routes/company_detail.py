"""
Company details page: header with credentials and status, sales overview,
orders per operator, invoice generation and payment history.
"""
import asyncio
import logging
from typing import Annotated, Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..auth import flash, get_backend_client, pop_messages
from ..forms import DateRangeForm, PaymentForm, form_error_message, optional_date_range
from ....config.settings import settings
from ....domain.entities.order import ORDER_SEARCH_FIELDS, Operator
from ....domain.services.company_management import CompanyManagementService
from ....domain.services.listing import filter_by_date_range, paginate, search_items, sum_amounts
from ....domain.services.order_management import OrderManagementService
from ....domain.services.payment_management import PaymentManagementService
from ....infrastructure.api.client import BackendClient
from ....infrastructure.api.errors import BackendError
from ....presentation.template_config import templates

logger = logging.getLogger(__name__)

company_detail_router = APIRouter(prefix="/company", tags=["company-detail"])

TABS = ("orders", "invoices", "payments")


def company_url(company_id: str, **params: Any) -> str:
    """Detail URL with only the non-default view parameters"""
    query = {key: value for key, value in params.items() if value not in (None, "", 1, "1")}
    base = f"/company/{company_id}"
    return f"{base}?{urlencode(query)}" if query else base


@company_detail_router.get("/{company_id}", response_class=HTMLResponse)
async def company_detail(
    request: Request,
    company_id: str,
    tab: str = Query("orders"),
    operator: str = Query(Operator.COMVIQ.value),
    q: str = Query(""),
    order_from: Optional[str] = Query(None),
    order_to: Optional[str] = Query(None),
    order_page: str = Query("1"),
    payment_page: str = Query("1"),
    show_credentials: str = Query("0"),
    client: BackendClient = Depends(get_backend_client),
):
    """Company details, the order/sales/payment lists degrade to empty on failure"""
    company = await CompanyManagementService(client).get_company(company_id)

    orders_service = OrderManagementService(client)
    orders_by_operator, sales, payments = await asyncio.gather(
        orders_service.get_all_orders(company.id),
        orders_service.get_daily_sales(company.id),
        PaymentManagementService(client).get_payments(company.id),
    )

    active_tab = tab if tab in TABS else "orders"
    selected_operator = Operator.parse(operator, Operator.COMVIQ)

    start, end = optional_date_range(order_from, order_to)
    orders = search_items(orders_by_operator[selected_operator], q, fields=ORDER_SEARCH_FIELDS)
    orders = filter_by_date_range(orders, start, end, key=lambda order: order.order_date)
    orders_page = paginate(orders, order_page, settings.orders_per_page)
    payments_page = paginate(payments, payment_page, settings.payments_per_page)

    view: Dict[str, Any] = {
        "tab": active_tab,
        "operator": selected_operator.value,
        "q": q,
        "order_from": order_from if start else None,
        "order_to": order_to if end else None,
    }

    return templates.TemplateResponse(
        request,
        "company_detail.html",
        {
            "messages": pop_messages(request),
            "company": company,
            "sales": sales,
            "operators": list(Operator),
            "order_counts": {op.value: len(items) for op, items in orders_by_operator.items()},
            "orders_page": orders_page,
            "orders_total": sum_amounts(orders, key=lambda order: order.voucher_amount),
            "payments_page": payments_page,
            "payments_total": sum_amounts(payments, key=lambda payment: payment.amount),
            "show_credentials": show_credentials == "1",
            "view": view,
            "current_url": company_url(company_id, **view),
            "order_page_url": lambda number: company_url(company_id, **view, order_page=number),
            "payment_page_url": lambda number: company_url(company_id, tab="payments", payment_page=number),
            "page_title": company.name,
        },
    )


@company_detail_router.post("/{company_id}/status")
async def toggle_status(request: Request, company_id: str, client: BackendClient = Depends(get_backend_client)):
    """Flips the active flag, shown only after the backend confirmed"""
    service = CompanyManagementService(client)
    try:
        company = await service.get_company(company_id)
        updated = await service.toggle_status(company)
        state = "active" if updated.is_active else "inactive"
        flash(request, "success", f"Company status updated to {state}")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error toggling status of company {company_id}: {e}")
        flash(request, "error", "Failed to update company status")

    return RedirectResponse(url=company_url(company_id), status_code=status.HTTP_302_FOUND)


@company_detail_router.get("/{company_id}/orders/{order_id}/delete", response_class=HTMLResponse)
async def delete_order_confirm(
    request: Request,
    company_id: str,
    order_id: str,
    operator: str = Query(Operator.COMVIQ.value),
    client: BackendClient = Depends(get_backend_client),
):
    """Confirmation page for an order deletion"""
    selected = Operator.parse(operator, Operator.COMVIQ)
    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "messages": pop_messages(request),
            "title": "Ta bort order",
            "message": f"Är du säker på att du vill ta bort denna {selected.label}-order? Detta kan inte ångras.",
            "action_url": f"/company/{company_id}/orders/{order_id}/delete",
            "cancel_url": company_url(company_id, operator=selected.value),
            "hidden": {"operator": selected.value},
            "confirm_label": "Ta bort",
            "page_title": "Bekräfta",
        },
    )


@company_detail_router.post("/{company_id}/orders/{order_id}/delete")
async def delete_order_submit(
    request: Request,
    company_id: str,
    order_id: str,
    confirm: Annotated[str, Form()] = "",
    operator: Annotated[str, Form()] = Operator.COMVIQ.value,
    client: BackendClient = Depends(get_backend_client),
):
    """Deletes one order through the operator's delete endpoint"""
    selected = Operator.parse(operator, Operator.COMVIQ)
    target = company_url(company_id, operator=selected.value)
    if confirm != "yes":
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    try:
        await OrderManagementService(client).delete_order(order_id, company_id, selected)
        flash(request, "success", "Order deleted successfully")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error deleting order {order_id}: {e}")
        flash(request, "error", "Failed to delete order")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


@company_detail_router.post("/{company_id}/invoices")
async def generate_invoice(
    request: Request,
    company_id: str,
    start_date: Annotated[str, Form()] = "",
    end_date: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Generates an invoice for the selected date range"""
    target = company_url(company_id, tab="invoices")
    try:
        form = DateRangeForm(start_date=start_date, end_date=end_date)
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    try:
        result = await OrderManagementService(client).generate_invoice(company_id, form.start_date, form.end_date)
        flash(request, "success" if result.success else "error", result.message)
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error generating invoice for {company_id}: {e}")
        flash(request, "error", "Failed to generate invoice")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


async def render_payment_form(request: Request, client: BackendClient, company_id: str, action_url: str):
    """Add payment form, shared with the companies list"""
    company = await CompanyManagementService(client).get_company(company_id)
    return templates.TemplateResponse(
        request,
        "payment_form.html",
        {
            "messages": pop_messages(request),
            "company": company,
            "action_url": action_url,
            "commission_percent": round(settings.payment_commission_rate * 100),
            "page_title": "Lägg till betalning",
        },
    )


async def add_payment_submit(
    request: Request,
    client: BackendClient,
    company_id: str,
    amount: str,
    success_url: str,
    form_url: str,
):
    """Validates the amount and registers the payment with commission"""
    try:
        form = PaymentForm(amount=amount)
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=form_url, status_code=status.HTTP_302_FOUND)

    try:
        paid = await PaymentManagementService(client).add_payment(company_id, form.amount)
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error adding payment for {company_id}: {e}")
        flash(request, "error", "Misslyckades med att lägga till betalning")
        return RedirectResponse(url=form_url, status_code=status.HTTP_302_FOUND)

    flash(request, "success", f"Betalning tillagd framgångsrikt ({paid} SEK)")
    return RedirectResponse(url=success_url, status_code=status.HTTP_302_FOUND)


@company_detail_router.get("/{company_id}/payments/new", response_class=HTMLResponse)
async def payment_page(request: Request, company_id: str, client: BackendClient = Depends(get_backend_client)):
    """Add payment form"""
    return await render_payment_form(request, client, company_id, action_url=f"/company/{company_id}/payments/new")


@company_detail_router.post("/{company_id}/payments/new")
async def payment_submit(
    request: Request,
    company_id: str,
    amount: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Registers a payment, back to the payments tab at page 1"""
    return await add_payment_submit(
        request,
        client,
        company_id,
        amount,
        success_url=company_url(company_id, tab="payments"),
        form_url=f"/company/{company_id}/payments/new",
    )


@company_detail_router.get("/{company_id}/payments/{payment_id}/delete", response_class=HTMLResponse)
async def delete_payment_confirm(
    request: Request,
    company_id: str,
    payment_id: str,
    client: BackendClient = Depends(get_backend_client),
):
    """Confirmation page for a payment deletion"""
    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "messages": pop_messages(request),
            "title": "Ta bort betalning",
            "message": "Är du säker på att du vill ta bort denna betalning? Detta kan inte ångras.",
            "action_url": f"/company/{company_id}/payments/{payment_id}/delete",
            "cancel_url": company_url(company_id, tab="payments"),
            "confirm_label": "Ta bort",
            "page_title": "Bekräfta",
        },
    )


@company_detail_router.post("/{company_id}/payments/{payment_id}/delete")
async def delete_payment_submit(
    request: Request,
    company_id: str,
    payment_id: str,
    confirm: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Deletes one payment after confirmation"""
    target = company_url(company_id, tab="payments")
    if confirm != "yes":
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    try:
        await PaymentManagementService(client).delete_payment(payment_id)
        flash(request, "success", "Payment deleted successfully")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error deleting payment {payment_id}: {e}")
        flash(request, "error", "Failed to delete payment")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
