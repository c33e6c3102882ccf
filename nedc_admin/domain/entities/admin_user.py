"""
Back-office administrator account.
Accounts live in the backend, the back-office edits them through the REST API.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class AdminUser:
    """Administrator as returned by /admin and /admin/me"""
    id: str
    name: str
    email: str
    company_name: str = ""
    role: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "AdminUser":
        return cls(
            id=str(data.get("_id") or data.get("id") or ""),
            name=data.get("name") or "",
            email=data.get("email") or "",
            company_name=data.get("companyName") or "",
            role=data.get("role") or "",
        )

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def is_same_account(self, other: Optional["AdminUser"]) -> bool:
        return other is not None and bool(self.id) and self.id == other.id
