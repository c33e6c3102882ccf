"""
Async HTTP client for the backend REST API.
Every call carries `Authorization: Bearer <token>` when a token is given.
Non-OK answers raise BackendError, network failures raise BackendUnavailableError.
Nothing is retried.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from nedc_admin.config.settings import settings
from .errors import BackendError, BackendUnavailableError

logger = logging.getLogger(__name__)


class BackendClient:
    """
    Thin wrapper over httpx.AsyncClient bound to one bearer token.

    Use as an async context manager, or close with aclose().
    """

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            token: Bearer token from the session, None for anonymous calls (login)
            base_url: Overrides settings.api_base_url
            timeout: Overrides settings.api_timeout
            transport: Custom httpx transport (tests pass httpx.MockTransport)
        """
        self.token = token
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        headers = {"Accept-Charset": "UTF-8"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout if timeout is not None else settings.api_timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "BackendClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
    ) -> Any:
        """
        Performs one request and returns the decoded JSON body.

        Returns:
            Parsed JSON, or an empty dict when the body is empty or not JSON

        Raises:
            BackendError: the backend answered with a non-2xx status
            BackendUnavailableError: timeout or transport failure
        """
        if params:
            params = {key: value for key, value in params.items() if value is not None}

        logger.debug(f"{method} {path} params={params}")
        try:
            response = await self._client.request(method, path, params=params or None, json=json)
        except httpx.TimeoutException as e:
            logger.error(f"Backend timeout: {method} {path}")
            raise BackendUnavailableError("The backend did not respond in time", e)
        except httpx.RequestError as e:
            logger.error(f"Backend unreachable: {method} {path}: {e}")
            raise BackendUnavailableError("The backend could not be reached", e)

        payload = self._decode(response)

        if not response.is_success:
            message = self._error_message(payload, response.status_code)
            logger.warning(f"Backend error {response.status_code} on {method} {path}: {message}")
            raise BackendError(response.status_code, message, payload)

        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    @staticmethod
    def _error_message(payload: Any, status_code: int) -> str:
        if isinstance(payload, dict):
            for key in ("message", "error"):
                if payload.get(key):
                    return str(payload[key])
        return f"Request failed with status {status_code}"

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Optional[Any] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("POST", path, json=json, params=params)

    async def put(self, path: str, json: Optional[Any] = None) -> Any:
        return await self.request("PUT", path, json=json)

    async def delete(self, path: str) -> Any:
        return await self.request("DELETE", path)

    async def get_action(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        State-changing call that the backend exposes as GET
        (company status toggle, order deletion).

        Hints travel as query parameters, a GET never carries a body.
        """
        return await self.request("GET", path, params=params)


def create_backend_client(token: Optional[str] = None) -> BackendClient:
    """Client factory, overridden in tests"""
    return BackendClient(token=token)
