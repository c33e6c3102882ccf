"""
Voucher stock, articles and serial-number lookups.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from nedc_admin.infrastructure.utils.text_utils import decode_text


@dataclass
class VoucherStock:
    """Remaining vouchers for one article ("lager")"""
    article_id: str
    product_name: str
    price: str = ""
    vouchers_remaining: int = 0
    product_details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "VoucherStock":
        try:
            remaining = int(data.get("vouchersRemaining") or 0)
        except (TypeError, ValueError):
            remaining = 0
        return cls(
            article_id=str(data.get("articleId") or ""),
            product_name=data.get("productName") or "",
            price=str(data.get("price") or ""),
            vouchers_remaining=remaining,
            product_details=data.get("productDetails") or {},
        )

    @property
    def group_name(self) -> str:
        """First two words of the product name, the first word for short names"""
        words = self.product_name.split(" ")
        if len(words) > 2:
            return f"{words[0]} {words[1]}"
        return words[0]

    @property
    def ean(self) -> str:
        return str(self.product_details.get("ean") or "")

    @property
    def operator(self) -> str:
        return str(self.product_details.get("operator") or "")


@dataclass
class Article:
    id: str
    article_id: str
    name: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Article":
        return cls(
            id=str(data.get("_id") or ""),
            article_id=str(data.get("articleId") or ""),
            name=data.get("name") or "",
        )


@dataclass
class ArticleOrder:
    """Order line in the per-article report"""
    voucher_number: str
    voucher_description: str
    voucher_amount: str
    voucher_currency: str
    order_date: str
    company_id: str
    company_name: str

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ArticleOrder":
        company = data.get("company") or {}
        if not isinstance(company, dict):
            company = {"_id": company}
        return cls(
            voucher_number=str(data.get("voucherNumber") or ""),
            voucher_description=data.get("voucherDescription") or "",
            voucher_amount=str(data.get("voucherAmount") or ""),
            voucher_currency=data.get("voucherCurrency") or "",
            order_date=data.get("OrderDate") or "",
            company_id=str(company.get("_id") or ""),
            company_name=decode_text(company.get("name") or ""),
        )


@dataclass
class VoucherLookup:
    """Result of a serial-number search"""
    success: bool
    message: str = ""
    operator: str = ""
    voucher_number: str = ""
    order_date: str = ""
    company_name: str = ""
    company_city: str = ""
    company_post_number: str = ""
    company_org_number: str = ""

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "VoucherLookup":
        if not payload.get("success"):
            return cls(success=False, message=payload.get("message") or "Ingen voucher hittades.")

        data = payload.get("data") or {}
        company = data.get("company") or {}
        address = company.get("address") or {}
        return cls(
            success=True,
            message=payload.get("message") or "",
            operator=data.get("operator") or "",
            voucher_number=str(data.get("voucherNumber") or ""),
            order_date=data.get("orderDate") or "",
            company_name=decode_text(company.get("name") or ""),
            company_city=decode_text(address.get("city") or ""),
            company_post_number=decode_text(str(address.get("postNumber") or "")),
            company_org_number=str(company.get("orgNumber") or ""),
        )

    @classmethod
    def failed(cls, message: str) -> "VoucherLookup":
        return cls(success=False, message=message)


@dataclass
class UploadResult:
    article_id: str
    article_name: str
    count: int
    message: Optional[str] = None
