"""
Payment history entries registered against a company.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from nedc_admin.infrastructure.utils.text_utils import to_float


@dataclass
class PaymentHistory:
    id: str
    company_id: str
    amount: float
    paid_date: str = ""
    entered_by: str = ""
    entered_by_name: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "PaymentHistory":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            company_id=str(data.get("companyId") or ""),
            amount=to_float(data.get("PaidAmount")),
            paid_date=data.get("PaidDate") or "",
            entered_by=str(data.get("EnteredBy") or ""),
        )

    @property
    def entered_by_display(self) -> str:
        return self.entered_by_name or self.entered_by or "—"
