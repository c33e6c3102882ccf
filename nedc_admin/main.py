"""
FastAPI application for the Nedcgroup admin back-office.
Session middleware, error boundary, routers and health check.
"""
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from nedc_admin import __version__
from nedc_admin.config.settings import settings
from nedc_admin.infrastructure.api.errors import BackendError, NotAuthenticatedError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from nedc_admin.application.web.auth import clear_session, pop_messages
from nedc_admin.application.web.routes.auth import auth_router
from nedc_admin.application.web.routes.companies import companies_router
from nedc_admin.application.web.routes.company_detail import company_detail_router
from nedc_admin.application.web.routes.inventory import inventory_router
from nedc_admin.application.web.routes.services import services_router
from nedc_admin.application.web.routes.settings import settings_router
from nedc_admin.presentation.template_config import TEMPLATES_DIR, templates

STATIC_DIR = TEMPLATES_DIR.parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle events"""
    await hybrid_logger.info(
        f"Starting Nedcgroup admin {__version__} ({settings.environment}), backend {settings.api_base_url}"
    )
    yield
    await hybrid_logger.info("Shutting down Nedcgroup admin")


# FastAPI application
app = FastAPI(
    title="Nedcgroup Admin",
    description="Back-office for companies, vouchers, orders, invoices and payments",
    version=__version__,
    debug=settings.debug,
    lifespan=lifespan,
)


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    """No token in the session, send the browser to the login page"""
    return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    """
    Error boundary for page loads.
    An expired token (401) ends the session, anything else renders the error page.
    """
    if exc.is_unauthorized:
        await hybrid_logger.warning(f"Backend rejected the session token on {request.url.path}")
        clear_session(request)
        return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)

    await hybrid_logger.error(f"Page load failed on {request.url.path}: {exc}")
    status_code = exc.status_code if 400 <= exc.status_code < 600 else status.HTTP_500_INTERNAL_SERVER_ERROR
    return templates.TemplateResponse(
        request,
        "error.html",
        {
            "messages": pop_messages(request),
            "status_code": status_code,
            "message": exc.message or "Something went wrong",
            "page_title": "Fel",
        },
        status_code=status_code,
    )


# Middleware
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.secret_key,
    session_cookie=settings.session_cookie,
    max_age=settings.session_max_age,
    same_site="lax",
    https_only=settings.session_https_only,
)

# Static files
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

# Routers
app.include_router(auth_router)
app.include_router(companies_router)
app.include_router(company_detail_router)
app.include_router(settings_router)
app.include_router(inventory_router)
app.include_router(services_router)


@app.get("/health")
async def health_check():
    """Health check for the process manager and monitoring"""
    return JSONResponse(
        content={
            "status": "ok",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": __version__,
            "environment": settings.environment,
        }
    )


def main() -> None:
    """Runs the web server"""
    uvicorn.run(
        "nedc_admin.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
