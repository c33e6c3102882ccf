"""
Companies page: list with search/filter/pagination, CRUD, status toggle and
credential resets.
"""
import logging
from typing import Annotated, Any, Dict, Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..auth import flash, get_backend_client, pop_messages, safe_redirect_url
from ..forms import CompanyForm, form_error_message
from .company_detail import add_payment_submit, render_payment_form
from ....config.settings import settings
from ....domain.entities.company import Company
from ....domain.services.company_management import CompanyManagementService
from ....domain.services.listing import (
    STATUS_ACTIVE,
    STATUS_ALL,
    STATUS_INACTIVE,
    filter_companies,
    normalize_status,
    paginate,
)
from ....infrastructure.api.client import BackendClient
from ....infrastructure.api.errors import BackendError
from ....presentation.template_config import templates

logger = logging.getLogger(__name__)

companies_router = APIRouter(prefix="/companies", tags=["companies"])

LIST_URL = "/companies"


def companies_url(search: str = "", status_filter: str = STATUS_ALL, page: Optional[int] = None) -> str:
    """List URL, filter changes leave the page out so the view restarts at page 1"""
    params: Dict[str, Any] = {}
    if search:
        params["search"] = search
    if status_filter != STATUS_ALL:
        params["status"] = status_filter
    if page and page > 1:
        params["page"] = page
    return f"{LIST_URL}?{urlencode(params)}" if params else LIST_URL


def _backend_status(status_filter: str) -> Optional[str]:
    if status_filter == STATUS_ACTIVE:
        return "true"
    if status_filter == STATUS_INACTIVE:
        return "false"
    return None


def _company_form_page(
    request: Request,
    values: Dict[str, Any],
    company_id: str = "",
    error: str = "",
    status_code: int = status.HTTP_200_OK,
):
    messages = pop_messages(request)
    if error:
        messages.append({"type": "error", "text": error})
    return templates.TemplateResponse(
        request,
        "company_form.html",
        {
            "messages": messages,
            "values": values,
            "company_id": company_id,
            "page_title": "Redigera företag" if company_id else "Nytt företag",
        },
        status_code=status_code,
    )


def _company_values(company: Optional[Company] = None) -> Dict[str, Any]:
    if company is None:
        return {"is_active": True}
    return {
        "name": company.name,
        "company_number": company.company_number,
        "manager_email": company.manager_email,
        "credit_limit": company.credit_limit,
        "org_number": company.org_number,
        "city": company.address.city,
        "post_number": company.address.post_number,
        "device_serial_number": company.device_serial_number,
        "is_active": company.is_active,
    }


@companies_router.get("", response_class=HTMLResponse)
async def companies_list(
    request: Request,
    search: str = Query(""),
    status_filter: Optional[str] = Query(None, alias="status"),
    is_active: Optional[str] = Query(None, alias="isActive"),
    page: str = Query("1"),
    client: BackendClient = Depends(get_backend_client),
):
    """Company list, filtered and paginated over the full fetched set"""
    current_status = normalize_status(status_filter or is_active)

    service = CompanyManagementService(client)
    listing = await service.list_companies(
        search=search,
        is_active=_backend_status(current_status),
        page=page,
    )

    filtered = filter_companies(listing.companies, search, current_status)
    page_data = paginate(filtered, page, settings.companies_per_page)

    return templates.TemplateResponse(
        request,
        "companies.html",
        {
            "messages": pop_messages(request),
            "listing": listing,
            "page": page_data,
            "search": search,
            "status_filter": current_status,
            "status_choices": [
                (STATUS_ALL, "Alla"),
                (STATUS_ACTIVE, "Aktiva"),
                (STATUS_INACTIVE, "Inaktiva"),
            ],
            "page_url": lambda number: companies_url(search, current_status, number),
            "current_url": companies_url(search, current_status, page_data.page),
            "page_title": "Företag",
        },
    )


@companies_router.get("/new", response_class=HTMLResponse)
async def new_company_page(request: Request, client: BackendClient = Depends(get_backend_client)):
    """Create company form"""
    return _company_form_page(request, _company_values())


@companies_router.post("/new")
async def new_company_submit(
    request: Request,
    name: Annotated[str, Form()] = "",
    company_number: Annotated[str, Form()] = "",
    manager_email: Annotated[str, Form()] = "",
    credit_limit: Annotated[str, Form()] = "",
    org_number: Annotated[str, Form()] = "",
    city: Annotated[str, Form()] = "",
    post_number: Annotated[str, Form()] = "",
    device_serial_number: Annotated[str, Form()] = "",
    is_active: Annotated[str, Form()] = "true",
    client: BackendClient = Depends(get_backend_client),
):
    """Creates a company"""
    values = {
        "name": name,
        "company_number": company_number,
        "manager_email": manager_email,
        "credit_limit": credit_limit,
        "org_number": org_number,
        "city": city,
        "post_number": post_number,
        "device_serial_number": device_serial_number,
        "is_active": is_active in ("true", "on", "1"),
    }
    try:
        form = CompanyForm(**values)
    except ValidationError as e:
        return _company_form_page(request, values, error=form_error_message(e), status_code=status.HTTP_400_BAD_REQUEST)

    try:
        company = await CompanyManagementService(client).create_company(form.to_company())
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error creating company: {e}")
        return _company_form_page(
            request, values, error=f"Failed to create company: {e.message}", status_code=status.HTTP_400_BAD_REQUEST
        )

    flash(request, "success", f"Företaget '{company.name}' har skapats")
    return RedirectResponse(url=LIST_URL, status_code=status.HTTP_302_FOUND)


@companies_router.get("/{company_id}/edit", response_class=HTMLResponse)
async def edit_company_page(request: Request, company_id: str, client: BackendClient = Depends(get_backend_client)):
    """Edit company form"""
    company = await CompanyManagementService(client).get_company(company_id)
    return _company_form_page(request, _company_values(company), company_id=company_id)


@companies_router.post("/{company_id}/edit")
async def edit_company_submit(
    request: Request,
    company_id: str,
    name: Annotated[str, Form()] = "",
    company_number: Annotated[str, Form()] = "",
    manager_email: Annotated[str, Form()] = "",
    credit_limit: Annotated[str, Form()] = "",
    org_number: Annotated[str, Form()] = "",
    city: Annotated[str, Form()] = "",
    post_number: Annotated[str, Form()] = "",
    device_serial_number: Annotated[str, Form()] = "",
    is_active: Annotated[str, Form()] = "true",
    client: BackendClient = Depends(get_backend_client),
):
    """Updates a company (PUT with _id in the body)"""
    values = {
        "name": name,
        "company_number": company_number,
        "manager_email": manager_email,
        "credit_limit": credit_limit,
        "org_number": org_number,
        "city": city,
        "post_number": post_number,
        "device_serial_number": device_serial_number,
        "is_active": is_active in ("true", "on", "1"),
    }
    try:
        form = CompanyForm(**values)
    except ValidationError as e:
        return _company_form_page(
            request, values, company_id=company_id, error=form_error_message(e), status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        await CompanyManagementService(client).update_company(form.to_company(company_id))
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error updating company {company_id}: {e}")
        return _company_form_page(
            request,
            values,
            company_id=company_id,
            error=f"Failed to update company: {e.message}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    flash(request, "success", "Företaget har uppdaterats")
    return RedirectResponse(url=LIST_URL, status_code=status.HTTP_302_FOUND)


@companies_router.get("/{company_id}/delete", response_class=HTMLResponse)
async def delete_company_confirm(request: Request, company_id: str, client: BackendClient = Depends(get_backend_client)):
    """Confirmation page, nothing is deleted here"""
    company = await CompanyManagementService(client).get_company(company_id)
    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "messages": pop_messages(request),
            "title": "Ta bort företag",
            "message": f"Är du säker på att du vill ta bort {company.name}? Detta kan inte ångras.",
            "action_url": f"{LIST_URL}/{company_id}/delete",
            "cancel_url": LIST_URL,
            "confirm_label": "Ta bort",
            "page_title": "Bekräfta",
        },
    )


@companies_router.post("/{company_id}/delete")
async def delete_company_submit(
    request: Request,
    company_id: str,
    confirm: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Deletes the company after confirmation, exactly one DELETE"""
    if confirm != "yes":
        return RedirectResponse(url=LIST_URL, status_code=status.HTTP_302_FOUND)

    try:
        await CompanyManagementService(client).delete_company(company_id)
        flash(request, "success", "Företaget har tagits bort")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error deleting company {company_id}: {e}")
        flash(request, "error", "Failed to delete company")

    return RedirectResponse(url=LIST_URL, status_code=status.HTTP_302_FOUND)


@companies_router.post("/{company_id}/status")
async def toggle_company_status(
    request: Request,
    company_id: str,
    next_url: Annotated[str, Form(alias="next")] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Flips the active flag, the page shows the new state only after the backend confirmed"""
    target = safe_redirect_url(next_url, LIST_URL)
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

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


@companies_router.post("/{company_id}/reset-password")
async def reset_company_password(
    request: Request,
    company_id: str,
    next_url: Annotated[str, Form(alias="next")] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Asks the backend to reset the company password"""
    try:
        await CompanyManagementService(client).reset_password(company_id)
        flash(request, "success", "Lösenordet har återställts")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error resetting password of company {company_id}: {e}")
        flash(request, "error", "Failed to reset password")

    return RedirectResponse(url=safe_redirect_url(next_url, LIST_URL), status_code=status.HTTP_302_FOUND)


@companies_router.post("/{company_id}/reset-pin")
async def reset_company_pin(
    request: Request,
    company_id: str,
    next_url: Annotated[str, Form(alias="next")] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Asks the backend to reset the company PIN"""
    try:
        await CompanyManagementService(client).reset_pin(company_id)
        flash(request, "success", "PIN-koden har återställts")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error resetting PIN of company {company_id}: {e}")
        flash(request, "error", "Failed to reset PIN")

    return RedirectResponse(url=safe_redirect_url(next_url, LIST_URL), status_code=status.HTTP_302_FOUND)


@companies_router.get("/{company_id}/payments/new", response_class=HTMLResponse)
async def company_payment_page(request: Request, company_id: str, client: BackendClient = Depends(get_backend_client)):
    """Add payment form opened from the list"""
    return await render_payment_form(request, client, company_id, action_url=f"{LIST_URL}/{company_id}/payments/new")


@companies_router.post("/{company_id}/payments/new")
async def company_payment_submit(
    request: Request,
    company_id: str,
    amount: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Registers a payment and returns to the list"""
    return await add_payment_submit(
        request,
        client,
        company_id,
        amount,
        success_url=LIST_URL,
        form_url=f"{LIST_URL}/{company_id}/payments/new",
    )
