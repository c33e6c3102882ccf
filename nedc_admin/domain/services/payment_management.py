"""
Payment history of a company.
"""
import logging
from typing import Dict, Iterable, List, Optional

from nedc_admin.config.settings import settings
from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from ..entities.payment import PaymentHistory

logger = logging.getLogger(__name__)


def amount_with_commission(amount: float, rate: Optional[float] = None) -> str:
    """
    Stored PaidAmount: the entered amount plus commission, two decimals.

    Examples:
        >>> amount_with_commission(100)
        '109.00'
    """
    if rate is None:
        rate = settings.payment_commission_rate
    return f"{amount * (1 + rate):.2f}"


class PaymentManagementService:
    """Payments registered against a company"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_payments(self, company_id: str) -> List[PaymentHistory]:
        """
        Payment history with admin names resolved.
        Any failure except 401 degrades to an empty list.
        """
        try:
            payload = await self.client.get(endpoints.payment_history(company_id))
        except BackendError as e:
            if e.is_unauthorized:
                raise
            logger.warning(f"Could not load payment history for {company_id}: {e}")
            return []

        items = payload.get("orderHistoryList") if isinstance(payload, dict) else None
        payments = [PaymentHistory.from_api(item) for item in (items or [])]

        names = await self.get_admin_names(payment.entered_by for payment in payments)
        for payment in payments:
            payment.entered_by_name = names.get(payment.entered_by)
        return payments

    async def get_admin_names(self, admin_ids: Iterable[str]) -> Dict[str, str]:
        """Admin id → name. No call for an empty id list, {} on failure."""
        unique_ids = sorted({admin_id for admin_id in admin_ids if admin_id})
        if not unique_ids:
            return {}

        try:
            payload = await self.client.post(endpoints.ADMIN_NAMES, json={"adminIds": unique_ids})
        except BackendError as e:
            if e.is_unauthorized:
                raise
            logger.warning(f"Could not resolve admin names: {e}")
            return {}

        if not isinstance(payload, dict):
            return {}
        return {str(key): str(value) for key, value in payload.items() if isinstance(value, str)}

    async def add_payment(self, company_id: str, amount: float) -> str:
        """
        Registers a payment, commission included.

        Args:
            company_id: Company id
            amount: Amount as entered, without commission

        Returns:
            The PaidAmount that was sent
        """
        paid_amount = amount_with_commission(amount)
        await self.client.post(
            endpoints.payment_history(company_id),
            json={"id": "", "PaidAmount": paid_amount},
        )
        await hybrid_logger.business(
            "Payment added",
            {"company_id": company_id, "amount": amount, "paid_amount": paid_amount},
        )
        return paid_amount

    async def delete_payment(self, payment_id: str) -> None:
        await self.client.delete(endpoints.payment(payment_id))
        await hybrid_logger.business("Payment deleted", {"payment_id": payment_id})
