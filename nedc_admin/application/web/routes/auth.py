"""
Login and logout. The backend issues the token, the session only stores it.
"""
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..auth import SESSION_TOKEN_KEY, clear_session, get_anonymous_client, get_session_token, pop_messages
from ..forms import LoginForm, form_error_message
from ....domain.services.auth_service import AuthService
from ....infrastructure.api.client import BackendClient
from ....infrastructure.api.errors import AuthenticationError, BackendUnavailableError
from ....infrastructure.logging.hybrid_logger import hybrid_logger
from ....presentation.template_config import templates

logger = logging.getLogger(__name__)

auth_router = APIRouter(tags=["auth"])

HOME_URL = "/lager"


def _login_page(request: Request, email: str = "", error: str = "", status_code: int = status.HTTP_200_OK):
    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "messages": pop_messages(request),
            "email": email,
            "error": error,
            "page_title": "Logga in",
        },
        status_code=status_code,
    )


@auth_router.get("/", include_in_schema=False)
async def root(request: Request):
    """Home page for logged-in admins, login otherwise"""
    target = HOME_URL if get_session_token(request) else "/login"
    return RedirectResponse(url=target, status_code=status.HTTP_302_FOUND)


@auth_router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    """Login form, skipped when a token is already in the session"""
    if get_session_token(request):
        return RedirectResponse(url=HOME_URL, status_code=status.HTTP_302_FOUND)
    return _login_page(request)


@auth_router.post("/login")
async def login_submit(
    request: Request,
    email: Annotated[str, Form()] = "",
    password: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_anonymous_client),
):
    """Exchanges credentials for a token and stores it in the session"""
    try:
        form = LoginForm(email=email, password=password)
    except ValidationError as e:
        return _login_page(request, email=email, error=form_error_message(e), status_code=status.HTTP_400_BAD_REQUEST)

    try:
        token = await AuthService(client).login(form.email, form.password)
    except AuthenticationError as e:
        return _login_page(request, email=email, error=str(e) or "Login failed", status_code=status.HTTP_400_BAD_REQUEST)
    except BackendUnavailableError as e:
        logger.error(f"Login failed, backend unavailable: {e}")
        return _login_page(request, email=email, error=e.message, status_code=status.HTTP_400_BAD_REQUEST)

    request.session[SESSION_TOKEN_KEY] = token
    return RedirectResponse(url=HOME_URL, status_code=status.HTTP_302_FOUND)


@auth_router.api_route("/logout", methods=["GET", "POST"])
async def logout(request: Request):
    """Clears the session"""
    if get_session_token(request):
        await hybrid_logger.info("Admin logged out")
    clear_session(request)
    return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
