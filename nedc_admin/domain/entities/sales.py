"""
Sales figures: daily/weekly/monthly overview per company and totals per operator.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from nedc_admin.infrastructure.utils.text_utils import to_float


@dataclass
class SalesData:
    type: str
    amount: float
    previous_amount: Optional[float] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "SalesData":
        previous = data.get("previousAmount")
        return cls(
            type=data.get("type") or "",
            amount=to_float(data.get("amount")),
            previous_amount=to_float(previous) if previous is not None else None,
        )

    @property
    def percentage_change(self) -> float:
        """Change against the previous period, 100 when growing from zero"""
        previous = self.previous_amount or 0.0
        if previous == 0:
            return 100.0 if self.amount > 0 else 0.0
        return round((self.amount - previous) / previous * 100, 1)

    @property
    def is_positive(self) -> bool:
        return self.amount >= (self.previous_amount or 0.0)

    @property
    def period_label(self) -> str:
        lowered = self.type.lower()
        if "today" in lowered:
            return "day"
        if "weekly" in lowered:
            return "week"
        return "month"
