"""
Company (reseller) entity mirrored from the backend.
The backend owns its lifecycle, the back-office only displays and edits it.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional

from nedc_admin.infrastructure.utils.text_utils import decode_text


@dataclass
class Address:
    city: str = ""
    post_number: str = ""

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Address":
        data = data or {}
        return cls(
            city=decode_text(data.get("city") or ""),
            post_number=decode_text(str(data.get("postNumber") or "")),
        )

    def to_api(self) -> Dict[str, Any]:
        return {"city": self.city, "postNumber": self.post_number}


@dataclass
class Company:
    """
    Reseller/store selling vouchers.

    Credential fields are only present on the detail payload.
    """
    id: str
    name: str
    company_number: str = ""
    manager_email: str = ""
    credit_limit: str = ""
    org_number: str = ""
    device_serial_number: str = ""
    address: Address = field(default_factory=Address)
    is_active: bool = False
    registered_date: str = ""
    manager_password: Optional[str] = None
    password: Optional[str] = None
    pin_code: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Company":
        """Builds a company from a backend payload, decoding URL-encoded text"""
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            name=decode_text(data.get("name") or ""),
            company_number=str(data.get("companyNumber") or ""),
            manager_email=data.get("managerEmail") or "",
            credit_limit=str(data.get("creditLimit") if data.get("creditLimit") is not None else ""),
            org_number=str(data.get("orgNumber") if data.get("orgNumber") is not None else ""),
            device_serial_number=data.get("deviceSerialNumber") or "",
            address=Address.from_api(data.get("address")),
            is_active=bool(data.get("IsActive", False)),
            registered_date=data.get("registredDate") or "",
            manager_password=data.get("managerPassword"),
            password=data.get("password"),
            pin_code=data.get("pinCode"),
        )

    def to_api(self) -> Dict[str, Any]:
        """Payload for POST/PUT /company"""
        payload = {
            "name": self.name,
            "companyNumber": self.company_number,
            "managerEmail": self.manager_email,
            "creditLimit": self.credit_limit,
            "orgNumber": self.org_number,
            "deviceSerialNumber": self.device_serial_number,
            "address": self.address.to_api(),
            "IsActive": self.is_active,
        }
        if self.id:
            payload["_id"] = self.id
        return payload

    @property
    def registration_month(self) -> str:
        """YYYY-MM of the registration date"""
        return self.registered_date[:7]

    @property
    def has_credentials(self) -> bool:
        return any(value is not None for value in (self.manager_password, self.password, self.pin_code))

    def with_status(self, is_active: bool) -> "Company":
        """Copy with a new active flag"""
        return replace(self, is_active=is_active)

    def searchable_values(self) -> Dict[str, Any]:
        """Top-level fields as the list search sees them"""
        return {
            "_id": self.id,
            "name": self.name,
            "companyNumber": self.company_number,
            "managerEmail": self.manager_email,
            "creditLimit": self.credit_limit,
            "deviceSerialNumber": self.device_serial_number,
            "registredDate": self.registered_date,
            "IsActive": self.is_active,
        }


@dataclass
class RegistrationTrend:
    """Companies registered in one month and the change from the previous month"""
    month: str
    count: int
    percentage_change: float
