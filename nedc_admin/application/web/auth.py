"""
Session token dependencies and flash messages shared by all routes.
"""
from typing import AsyncIterator, Dict, List, Optional

from fastapi import Depends, Request

from ...infrastructure.api import client as api_client
from ...infrastructure.api.client import BackendClient
from ...infrastructure.api.errors import NotAuthenticatedError

SESSION_TOKEN_KEY = "token"


def get_session_token(request: Request) -> str:
    """Bearer token stored at login, empty when logged out"""
    return request.session.get(SESSION_TOKEN_KEY) or ""


async def require_token(request: Request) -> str:
    """
    Requires a logged-in session.
    Raises NotAuthenticatedError, turned into a redirect to /login by the app.
    """
    token = get_session_token(request)
    if not token:
        raise NotAuthenticatedError()
    return token


async def get_backend_client(token: str = Depends(require_token)) -> AsyncIterator[BackendClient]:
    """One backend client per request, closed when the response is done"""
    client = api_client.create_backend_client(token)
    try:
        yield client
    finally:
        await client.aclose()


async def get_anonymous_client() -> AsyncIterator[BackendClient]:
    """Client without a token, used for login"""
    client = api_client.create_backend_client()
    try:
        yield client
    finally:
        await client.aclose()


def flash(request: Request, kind: str, text: str) -> None:
    """Queues a one-shot message shown on the next rendered page"""
    messages = request.session.get('messages', [])
    messages.append({"type": kind, "text": text})
    request.session['messages'] = messages


def pop_messages(request: Request) -> List[Dict[str, str]]:
    return request.session.pop('messages', [])


def clear_session(request: Request) -> None:
    request.session.clear()


def safe_redirect_url(target: Optional[str], default: str) -> str:
    """Local redirect target from a form field, default for anything off-site"""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return default
