"""
Company management against the backend REST API.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from ..entities.company import Company, RegistrationTrend

logger = logging.getLogger(__name__)


@dataclass
class CompanyListing:
    """Everything the companies page loads up front"""
    companies: List[Company] = field(default_factory=list)
    registration_trends: List[RegistrationTrend] = field(default_factory=list)
    total_companies: int = 0

    @property
    def active_count(self) -> int:
        return sum(1 for company in self.companies if company.is_active)

    @property
    def inactive_count(self) -> int:
        return len(self.companies) - self.active_count


def calculate_registration_trends(companies: List[Company]) -> List[RegistrationTrend]:
    """
    Companies registered per month, sorted by month.

    The change is 100% when the previous month had no registrations,
    which includes the first month.
    """
    by_month: Dict[str, int] = {}
    for company in companies:
        month = company.registration_month
        if not month:
            continue
        by_month[month] = by_month.get(month, 0) + 1

    trends = []
    previous_count = 0
    for month in sorted(by_month):
        count = by_month[month]
        if previous_count == 0:
            change = 100.0
        else:
            change = (count - previous_count) / previous_count * 100
        trends.append(RegistrationTrend(month=month, count=count, percentage_change=change))
        previous_count = count

    return trends


class CompanyManagementService:
    """Company CRUD, status toggle and credential resets"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def list_companies(
        self,
        search: str = "",
        is_active: Optional[str] = None,
        page: int = 1,
    ) -> CompanyListing:
        """
        Loads the company list with the initial query pushed to the backend.
        A failed fetch renders as an empty list, except 401 which ends the session.
        """
        try:
            payload = await self.client.get(
                endpoints.COMPANIES,
                params={"search": search, "isActive": is_active, "page": page},
            )
        except BackendError as e:
            if e.is_unauthorized:
                raise
            await hybrid_logger.error(f"Error fetching companies: {e}")
            return CompanyListing()

        payload = payload if isinstance(payload, dict) else {}
        companies = [Company.from_api(item) for item in (payload.get("companylist") or [])]
        return CompanyListing(
            companies=companies,
            registration_trends=calculate_registration_trends(companies),
            total_companies=payload.get("totalCompanies") or len(companies),
        )

    async def get_all_companies(self) -> List[Company]:
        """Plain list without query parameters, raises on failure"""
        payload = await self.client.get(endpoints.COMPANIES)
        payload = payload if isinstance(payload, dict) else {}
        return [Company.from_api(item) for item in (payload.get("companylist") or [])]

    async def get_company(self, company_id: str) -> Company:
        """Company details including credentials, raises on failure"""
        payload = await self.client.get(endpoints.company(company_id))
        data = payload.get("company") if isinstance(payload, dict) else None
        if not data:
            raise BackendError(404, "Company not found")
        return Company.from_api(data)

    async def create_company(self, company: Company) -> Company:
        """Creates a company, returns it as the backend stored it"""
        payload = await self.client.post(endpoints.COMPANIES, json=company.to_api())
        await hybrid_logger.business("Company created", {"name": company.name})
        return self._company_from_response(payload, company)

    async def update_company(self, company: Company) -> Company:
        """Updates a company (PUT /company with _id in the body)"""
        await self.client.put(endpoints.COMPANIES, json=company.to_api())
        await hybrid_logger.business("Company updated", {"company_id": company.id})
        return company

    async def delete_company(self, company_id: str) -> None:
        await self.client.delete(endpoints.company(company_id))
        await hybrid_logger.business("Company deleted", {"company_id": company_id})

    async def toggle_status(self, company: Company) -> Company:
        """
        Flips the active flag on the backend.

        Returns:
            The company with the new flag, built only after the backend confirmed

        Raises:
            BackendError: the flag was not changed, the caller keeps the old value
        """
        new_status = not company.is_active
        await self.client.get_action(
            endpoints.company_status(company.id),
            params={"IsActive": new_status},
        )
        await hybrid_logger.business(
            "Company status changed",
            {"company_id": company.id, "is_active": new_status},
        )
        return company.with_status(new_status)

    async def reset_password(self, company_id: str) -> None:
        await self.client.post(endpoints.COMPANY_RESET_PASSWORD, json={"cid": company_id})
        await hybrid_logger.business("Company password reset", {"company_id": company_id})

    async def reset_pin(self, company_id: str) -> None:
        await self.client.post(endpoints.COMPANY_RESET_PIN, json={"cid": company_id})
        await hybrid_logger.business("Company PIN reset", {"company_id": company_id})

    @staticmethod
    def _company_from_response(payload: Any, submitted: Company) -> Company:
        if isinstance(payload, dict):
            data = payload.get("company") if isinstance(payload.get("company"), dict) else payload
            if data.get("_id") or data.get("id"):
                return Company.from_api(data)
        return submitted
