"""
Administrator accounts: own profile, password and the admin list.
"""
import logging
from typing import Any, Dict, List, Optional

from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger
from ..entities.admin_user import AdminUser

logger = logging.getLogger(__name__)


class AdminManagementService:
    """Admin accounts through the backend API"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def get_current_admin(self) -> AdminUser:
        """The admin owning the session token"""
        payload = await self.client.get(endpoints.ADMIN_ME)
        data = _unwrap(payload, "admin", "user")
        if not data:
            raise BackendError(404, "Current admin not found")
        return AdminUser.from_api(data)

    async def get_all_admins(self) -> List[AdminUser]:
        payload = await self.client.get(endpoints.ADMINS)
        items = payload.get("admins") if isinstance(payload, dict) else None
        return [AdminUser.from_api(item) for item in (items or [])]

    async def update_profile(self, admin: AdminUser, name: str, email: str, company_name: str) -> AdminUser:
        """Updates name, email and company name of the given admin"""
        await self.client.put(
            endpoints.admin(admin.id),
            json={"name": name, "email": email, "companyName": company_name},
        )
        await hybrid_logger.business("Profile updated", {"admin_id": admin.id})
        return AdminUser(id=admin.id, name=name, email=email, company_name=company_name, role=admin.role)

    async def change_password(self, old_password: str, new_password: str) -> None:
        await self.client.post(
            endpoints.UPDATE_PASSWORD,
            json={"oldPassword": old_password, "newPassword": new_password},
        )
        await hybrid_logger.business("Password changed")

    async def create_admin(
        self,
        name: str,
        email: str,
        company_name: str,
        role: str,
        password: str,
    ) -> None:
        """Registers a new admin account"""
        await self.client.post(
            endpoints.ADMIN_REGISTER,
            json=build_admin_payload(name, email, company_name, role, password),
        )
        await hybrid_logger.business("Admin created", {"email": email, "role": role})

    async def update_admin(
        self,
        admin_id: str,
        name: str,
        email: str,
        company_name: str,
        role: str,
        password: Optional[str] = None,
    ) -> None:
        """Updates an admin account, the password only when a new one is given"""
        await self.client.put(
            endpoints.admin(admin_id),
            json=build_admin_payload(name, email, company_name, role, password),
        )
        await hybrid_logger.business("Admin updated", {"admin_id": admin_id})

    async def delete_admin(self, admin_id: str, current_admin: Optional[AdminUser] = None) -> None:
        """
        Deletes an admin account.

        Raises:
            ValueError: attempt to delete the account owning the session
        """
        if current_admin is not None and current_admin.id == admin_id:
            raise ValueError("You cannot delete your own account")

        await self.client.delete(endpoints.admin(admin_id))
        await hybrid_logger.business("Admin deleted", {"admin_id": admin_id})


def build_admin_payload(
    name: str,
    email: str,
    company_name: str,
    role: str,
    password: Optional[str] = None,
) -> Dict[str, Any]:
    """Body for register/update, an empty password is left out"""
    payload: Dict[str, Any] = {
        "name": name,
        "email": email,
        "companyName": company_name,
        "role": role,
        "isAdmin": True,
    }
    if password:
        payload["password"] = password
    return payload


def _unwrap(payload: Any, *keys: str) -> Optional[Dict[str, Any]]:
    if not isinstance(payload, dict):
        return None
    for key in keys:
        if isinstance(payload.get(key), dict):
            return payload[key]
    return payload or None
