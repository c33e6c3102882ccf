"""
Invoices generated by the backend for a company and a date range.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from nedc_admin.infrastructure.utils.text_utils import decode_text, to_float


class InvoiceStatus(Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class Invoice:
    id: str
    from_date: str
    to_date: str
    status: InvoiceStatus
    company_id: str = ""
    company_name: str = ""
    total_amount: float = 0.0
    raw_status: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any], status: InvoiceStatus) -> "Invoice":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            from_date=data.get("fromDate") or "",
            to_date=data.get("toDate") or "",
            status=status,
            company_id=str(data.get("companyId") or ""),
            company_name=decode_text(data.get("companyname") or ""),
            total_amount=to_float(data.get("totalAmount")),
            raw_status=str(data.get("invoiceStatus") or ""),
        )


@dataclass
class InvoiceGenerationResult:
    """Outcome of one getInvoicebydate call"""
    company_id: str
    company_name: str
    success: bool
    message: str
