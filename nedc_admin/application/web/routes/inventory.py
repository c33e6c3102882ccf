"""
Voucher stock overview ("lager") and voucher file upload ("ladda-upp").
"""
import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from fastapi.responses import HTMLResponse, RedirectResponse
from pydantic import ValidationError

from ..auth import flash, get_backend_client, pop_messages
from ..forms import VoucherUploadForm, form_error_message
from ....config.settings import settings
from ....domain.entities.voucher import Article
from ....domain.services.inventory import InventoryService, filter_stock, group_stock, parse_voucher_lines
from ....infrastructure.api.client import BackendClient
from ....infrastructure.api.errors import BackendError
from ....presentation.template_config import templates

logger = logging.getLogger(__name__)

inventory_router = APIRouter(tags=["inventory"])

UPLOAD_URL = "/ladda-upp"


@inventory_router.get("/lager", response_class=HTMLResponse)
async def stock_page(
    request: Request,
    q: str = Query(""),
    low_stock: str = Query("0"),
    client: BackendClient = Depends(get_backend_client),
):
    """Stock grouped by product family, read-only"""
    stock = await InventoryService(client).get_stock()
    low_stock_only = low_stock == "1"
    groups = filter_stock(group_stock(stock), q, low_stock_only)

    return templates.TemplateResponse(
        request,
        "lager.html",
        {
            "messages": pop_messages(request),
            "groups": groups,
            "q": q,
            "low_stock": low_stock_only,
            "low_stock_threshold": settings.low_stock_threshold,
            "total_items": len(stock),
            "page_title": "Lager",
        },
    )


def _find_article(articles, article_id: str) -> Optional[Article]:
    for article in articles:
        if article.article_id == article_id:
            return article
    return None


@inventory_router.get(UPLOAD_URL, response_class=HTMLResponse)
async def upload_page(request: Request, client: BackendClient = Depends(get_backend_client)):
    """Article picker and file input"""
    articles = await InventoryService(client).get_upload_articles()
    return templates.TemplateResponse(
        request,
        "ladda_upp.html",
        {
            "messages": pop_messages(request),
            "articles": articles,
            "page_title": "Ladda upp",
        },
    )


@inventory_router.post(UPLOAD_URL, response_class=HTMLResponse)
async def upload_preview(
    request: Request,
    article_id: Annotated[str, Form()] = "",
    file: Optional[UploadFile] = File(None),
    client: BackendClient = Depends(get_backend_client),
):
    """Parses the file and asks for confirmation, nothing is sent yet"""
    content = ""
    if file is not None:
        raw = await file.read()
        content = raw.decode("utf-8", errors="replace")

    try:
        form = VoucherUploadForm(article_id=article_id, vouchers=parse_voucher_lines(content))
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=UPLOAD_URL, status_code=status.HTTP_302_FOUND)

    articles = await InventoryService(client).get_upload_articles()
    article = _find_article(articles, form.article_id)
    if article is None:
        flash(request, "error", "Välj en artikel")
        return RedirectResponse(url=UPLOAD_URL, status_code=status.HTTP_302_FOUND)

    return templates.TemplateResponse(
        request,
        "confirm.html",
        {
            "messages": pop_messages(request),
            "title": "Bekräfta uppladdning",
            "message": f"Ladda upp {len(form.vouchers)} koder för artikel {article.name}?",
            "action_url": f"{UPLOAD_URL}/confirm",
            "cancel_url": UPLOAD_URL,
            "hidden": {"article_id": article.article_id, "article_name": article.name},
            "hidden_text": {"vouchers": "\n".join(form.vouchers)},
            "preview": form.vouchers[:10],
            "confirm_label": "Ladda upp",
            "page_title": "Bekräfta",
        },
    )


@inventory_router.post(f"{UPLOAD_URL}/confirm")
async def upload_submit(
    request: Request,
    confirm: Annotated[str, Form()] = "",
    article_id: Annotated[str, Form()] = "",
    article_name: Annotated[str, Form()] = "",
    vouchers: Annotated[str, Form()] = "",
    client: BackendClient = Depends(get_backend_client),
):
    """Sends the confirmed codes to the backend"""
    if confirm != "yes":
        return RedirectResponse(url=UPLOAD_URL, status_code=status.HTTP_302_FOUND)

    try:
        form = VoucherUploadForm(article_id=article_id, vouchers=parse_voucher_lines(vouchers))
    except ValidationError as e:
        flash(request, "error", form_error_message(e))
        return RedirectResponse(url=UPLOAD_URL, status_code=status.HTTP_302_FOUND)

    article = Article(id="", article_id=form.article_id, name=article_name or form.article_id)
    try:
        result = await InventoryService(client).upload_vouchers(article, form.vouchers)
        flash(request, "success", f"Filen har laddats upp för artikel: {result.article_name}")
    except ValueError as e:
        flash(request, "error", str(e))
    except BackendError as e:
        if e.is_unauthorized:
            raise
        logger.error(f"Error uploading vouchers for {form.article_id}: {e}")
        flash(request, "error", e.message or "An error occurred while uploading vouchers")

    return RedirectResponse(url=UPLOAD_URL, status_code=status.HTTP_302_FOUND)
