"""
Voucher stock ("lager") and voucher file upload ("ladda-upp").
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from nedc_admin.config.settings import settings
from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from ..entities.voucher import Article, UploadResult, VoucherStock

logger = logging.getLogger(__name__)

DUPLICATE_VOUCHERS_ERROR = "Duplicate vouchers found"
DUPLICATE_VOUCHERS_MESSAGE = "Dubletter av koder hittades i filen"


def group_stock(items: List[VoucherStock]) -> Dict[str, List[VoucherStock]]:
    """Groups by the first two words of the product name, first-seen order"""
    groups: Dict[str, List[VoucherStock]] = OrderedDict()
    for item in items:
        groups.setdefault(item.group_name, []).append(item)
    return groups


def is_low_stock(item: VoucherStock, threshold: Optional[int] = None) -> bool:
    if threshold is None:
        threshold = settings.low_stock_threshold
    return item.vouchers_remaining <= threshold


def filter_stock(
    groups: Dict[str, List[VoucherStock]],
    query: str = "",
    low_stock_only: bool = False,
) -> Dict[str, List[VoucherStock]]:
    """
    Product-name search and low-stock filter over grouped stock.
    Groups left without items are dropped.
    """
    term = (query or "").lower()
    filtered: Dict[str, List[VoucherStock]] = OrderedDict()
    for group, items in groups.items():
        kept = [
            item for item in items
            if term in item.product_name.lower() and (not low_stock_only or is_low_stock(item))
        ]
        if kept:
            filtered[group] = kept
    return filtered


def parse_voucher_lines(content: str) -> List[str]:
    """Voucher codes from an uploaded text file, one per line, blanks skipped"""
    return [line for line in (raw.strip().replace("\r", "") for raw in content.split("\n")) if line]


class InventoryService:
    """Stock overview and voucher upload"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_stock(self) -> List[VoucherStock]:
        payload = await self.client.get(endpoints.VOUCHERS)
        items = payload.get("data") if isinstance(payload, dict) else None
        return [VoucherStock.from_api(item) for item in (items or [])]

    async def get_upload_articles(self) -> List[Article]:
        """Articles vouchers can be uploaded for"""
        payload = await self.client.post(endpoints.LYCA_ARTICLES)
        items = payload.get("articallist") if isinstance(payload, dict) else None
        return [Article.from_api(item) for item in (items or [])]

    async def upload_vouchers(self, article: Article, vouchers: List[str]) -> UploadResult:
        """
        Sends voucher codes for one article.

        Raises:
            ValueError: empty code list or duplicates reported by the backend
            BackendError: any other rejection
        """
        if not vouchers:
            raise ValueError("Filen innehåller inga koder")

        try:
            payload = await self.client.post(
                endpoints.VOUCHER_UPLOAD,
                json={"articleId": article.article_id, "vouchers": vouchers},
            )
        except BackendError as e:
            if _is_duplicate_error(e.payload):
                raise ValueError(DUPLICATE_VOUCHERS_MESSAGE)
            raise

        if _is_duplicate_error(payload):
            raise ValueError(DUPLICATE_VOUCHERS_MESSAGE)

        await hybrid_logger.business(
            "Vouchers uploaded",
            {"article_id": article.article_id, "article_name": article.name, "count": len(vouchers)},
        )
        return UploadResult(
            article_id=article.article_id,
            article_name=article.name,
            count=len(vouchers),
            message=payload.get("message") if isinstance(payload, dict) else None,
        )


def _is_duplicate_error(payload) -> bool:
    return isinstance(payload, dict) and payload.get("error") == DUPLICATE_VOUCHERS_ERROR
