"""
Login against the backend. The back-office only keeps the returned token.
"""
import logging

from nedc_admin.infrastructure.api import endpoints
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import AuthenticationError, BackendError, BackendUnavailableError
from nedc_admin.infrastructure.logging.hybrid_logger import hybrid_logger

logger = logging.getLogger(__name__)


class AuthService:
    """Exchanges admin credentials for a bearer token"""

    def __init__(self, client: BackendClient):
        self.client = client

    async def login(self, email: str, password: str) -> str:
        """
        Args:
            email: Admin email
            password: Admin password

        Returns:
            Bearer token for the session

        Raises:
            AuthenticationError: credentials rejected or no token in the answer
            BackendUnavailableError: the backend could not be reached
        """
        try:
            payload = await self.client.post(endpoints.LOGIN, json={"email": email, "password": password})
        except BackendUnavailableError:
            raise
        except BackendError as e:
            await hybrid_logger.warning(f"Login rejected for {email}: {e.message}")
            raise AuthenticationError(e.message)

        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            raise AuthenticationError("Something went wrong")

        await hybrid_logger.info(f"Admin logged in: {email}")
        return token
