"""
Voucher orders per telecom operator.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from nedc_admin.infrastructure.utils.text_utils import to_float

ORDER_SEARCH_FIELDS = ("voucherNumber", "voucherDescription", "serialNumber")


class Operator(Enum):
    """Telecom operators whose vouchers are tracked separately"""
    COMVIQ = "comviq"
    LYCA = "lyca"
    TELIA = "telia"
    HALEBOP = "halebop"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def uses_telia_endpoints(self) -> bool:
        """Telia and Halebop share the teliaOrder endpoints"""
        return self in (Operator.TELIA, Operator.HALEBOP)

    @classmethod
    def parse(cls, value: Optional[str], default: Optional["Operator"] = None) -> Optional["Operator"]:
        """Operator from a query/form value, default when unknown"""
        if not value:
            return default
        try:
            return cls(value.strip().lower())
        except ValueError:
            return default


@dataclass
class Order:
    id: str
    voucher_number: str = ""
    voucher_description: str = ""
    voucher_amount: float = 0.0
    voucher_currency: str = ""
    order_date: str = ""
    expire_date: str = ""
    serial_number: str = ""
    article_id: str = ""
    operator: Optional[Operator] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any], operator: Optional[Operator] = None) -> "Order":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            voucher_number=str(data.get("voucherNumber") or ""),
            voucher_description=data.get("voucherDescription") or "",
            voucher_amount=to_float(data.get("voucherAmount")),
            voucher_currency=data.get("voucherCurrency") or "",
            order_date=data.get("OrderDate") or "",
            expire_date=data.get("expireDate") or "",
            serial_number=str(data.get("serialNumber") or ""),
            article_id=str(data.get("articleId") or ""),
            operator=operator,
        )

    def searchable_values(self) -> Dict[str, Any]:
        return {
            "voucherNumber": self.voucher_number,
            "voucherDescription": self.voucher_description,
            "serialNumber": self.serial_number,
        }
