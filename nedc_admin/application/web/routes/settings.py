"""
Settings page: own profile, password change and admin accounts.
"""
import asyncio
import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..auth import flash, get_backend_client, pop_messages
from ..forms import AdminForm, PasswordChangeForm, ProfileForm, form_error_message
from ....domain.entities.admin_user import AdminUser
from ....domain.services.admin_management import AdminManagementService
from ....infrastructure.api.client import BackendClient
from ....infrastructure.api.errors import BackendError
from ....presentation.template_config import templates

logger = logging.getLogger(__name__)

settings_router = APIRouter(prefix="/settings", tags=["settings"])

TABS = ("profile", "password", "admins")
ROLES = ("admin", "superadmin")


def _settings_url(tab: str = "profile") -> str:
    return f"/settings?tab={tab}"


def _admin_form_page(
    request: Request,
    values: Dict[str, Any],
    admin_id: str = "",
    error: str = "",
    status_code: int = status.HTTP_200_OK,
):
    messages = pop_messages(request)
    if error:
        messages.append({"type": "error", "text": error})
    return templates.TemplateResponse(
        request,
        "admin_form.html",
        {
            "messages": messages,
            "values": values,
            "admin_id": admin_id,
            "roles": ROLES,
            "page_title": "Redigera admin" if admin_id else "Ny admin",
        },
        status_code=status_code,
    )


async def _find_admin(service: AdminManagementService, admin_id: str) -> Optional[AdminUser]:
    for admin in await service.get_all_admins():
        if admin.id == admin_id:
            return admin
    return None


@settings_router.get("", response_class=HTMLResponse)
async def settings_page(
    request: Request,
    tab: str = Query("profile"),
    client: BackendClient = Depends(get_backend_client),
):
    """Profile, password and admin list tabs"""
    service = AdminManagementService(client)
    current_admin, admins = await asyncio.gather(
        service.get_current_admin(),
        service.get_all_admins(),
    )

    return templates.TemplateResponse(
        request,
        "settings.html",
        {
            "messages": pop_messages(request),
            "tab": tab if tab in TABS else "profile",
            "current_admin": current_admin,
            "admins": admins,
            "page_title": "Inställningar",
        },
    )


@settings_router.post("/profile")
async def update_profile(
    request: Request,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    company_name: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Updates the logged-in admin"""
    target = _settings_url("profile")
    try:
        form = ProfileForm(name=name, email=email, company_name=company_name)
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    service = AdminManagementService(client)
    try:
        current_admin = await service.get_current_admin()
        await service.update_profile(current_admin, form.name, form.email, form.company_name)
        flash(request, "success", "Profile updated successfully")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error updating profile: {e}")
        flash(request, "error", f"Failed to update profile: {e.message}")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


@settings_router.post("/password")
async def change_password(
    request: Request,
    old_password: Annotated[str, Form()] = "",
    new_password: Annotated[str, Form()] = "",
    confirm_password: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Changes the password, the confirmation is checked before any call"""
    target = _settings_url("password")
    try:
        form = PasswordChangeForm(
            old_password=old_password,
            new_password=new_password,
            confirm_password=confirm_password,
        )
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    try:
        await AdminManagementService(client).change_password(form.old_password, form.new_password)
        flash(request, "success", "Password updated successfully")
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error updating password: {e}")
        flash(request, "error", f"Failed to update password: {e.message}")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


@settings_router.get("/admins/new", response_class=HTMLResponse)
async def new_admin_page(request: Request, client: BackendClient = Depends(get_backend_client)):
    """New admin form"""
    return _admin_form_page(request, {"role": ROLES[0]})


@settings_router.post("/admins/new")
async def new_admin_submit(
    request: Request,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    company_name: Annotated[str, Form()] = "",
    role: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Registers a new admin"""
    values = {"name": name, "email": email, "company_name": company_name, "role": role}
    try:
        form = AdminForm(is_new=True, password=password, **values)
    except ValidationError as e:
        return _admin_form_page(request, values, error=form_error_message(e), status_code=status.HTTP_400_BAD_REQUEST)

    try:
        await AdminManagementService(client).create_admin(
            form.name, form.email, form.company_name, form.role, form.password
        )
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error creating admin: {e}")
        return _admin_form_page(
            request, values, error=f"Failed to create admin: {e.message}", status_code=status.HTTP_400_BAD_REQUEST
        )

    flash(request, "success", "Admin created successfully")
    return RedirectResponse(url=_settings_url("admins"), status_code=status.HTTP_302_FOUND)


@settings_router.get("/admins/{admin_id}/edit", response_class=HTMLResponse)
async def edit_admin_page(request: Request, admin_id: str, client: BackendClient = Depends(get_backend_client)):
    """Edit admin form, the password field is left empty"""
    admin = await _find_admin(AdminManagementService(client), admin_id)
    if admin is None:
        flash(request, "error", "Admin not found")
        return RedirectResponse(url=_settings_url("admins"), status_code=status.HTTP_302_FOUND)

    values = {"name": admin.name, "email": admin.email, "company_name": admin.company_name, "role": admin.role}
    return _admin_form_page(request, values, admin_id=admin_id)


@settings_router.post("/admins/{admin_id}/edit")
async def edit_admin_submit(
    request: Request,
    admin_id: str,
    name: Annotated[str, Form()] = "",
    email: Annotated[str, Form()] = "",
    company_name: Annotated[str, Form()] = "",
    role: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Updates an admin, an empty password keeps the old one"""
    values = {"name": name, "email": email, "company_name": company_name, "role": role}
    try:
        form = AdminForm(is_new=False, password=password, **values)
    except ValidationError as e:
        return _admin_form_page(
            request, values, admin_id=admin_id, error=form_error_message(e), status_code=status.HTTP_400_BAD_REQUEST
        )

    try:
        await AdminManagementService(client).update_admin(
            admin_id, form.name, form.email, form.company_name, form.role, form.password
        )
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error updating admin {admin_id}: {e}")
        return _admin_form_page(
            request,
            values,
            admin_id=admin_id,
            error=f"Failed to update admin: {e.message}",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    flash(request, "success", "Admin updated successfully")
    return RedirectResponse(url=_settings_url("admins"), status_code=status.HTTP_302_FOUND)


@settings_router.get("/admins/{admin_id}/delete", response_class=HTMLResponse)
async def delete_admin_confirm(request: Request, admin_id: str, client: BackendClient = Depends(get_backend_client)):
    """Confirmation page for an admin deletion"""
    service = AdminManagementService(client)
    current_admin, admin = await asyncio.gather(service.get_current_admin(), _find_admin(service, admin_id))

    if admin is None:
        flash(request, "error", "Admin not found")
        return RedirectResponse(url=_settings_url("admins"), status_code=status.HTTP_302_FOUND)
    if admin.is_same_account(current_admin):
        flash(request, "error", "You cannot delete your own account")
        return RedirectResponse(url=_settings_url("admins"), status_code=status.HTTP_302_FOUND)

    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "messages": pop_messages(request),
            "title": "Ta bort admin",
            "message": f"Är du säker på att du vill ta bort {admin.display_name}? Detta kan inte ångras.",
            "action_url": f"/settings/admins/{admin_id}/delete",
            "cancel_url": _settings_url("admins"),
            "confirm_label": "Ta bort",
            "page_title": "Bekräfta",
        },
    )


@settings_router.post("/admins/{admin_id}/delete")
async def delete_admin_submit(
    request: Request,
    admin_id: str,
    confirm: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Deletes an admin after confirmation, never the logged-in one"""
    target = _settings_url("admins")
    if confirm != "yes":
        return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)

    service = AdminManagementService(client)
    try:
        current_admin = await service.get_current_admin()
        await service.delete_admin(admin_id, current_admin=current_admin)
        flash(request, "success", "Admin deleted successfully")
    except ValueError as e:
        flash(request, "error", str(e))
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error deleting admin {admin_id}: {e}")
        flash(request, "error", f"Failed to delete admin: {e.message}")

    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)
