"""
Tests for the backend HTTP client
"""
import httpx
import pytest

from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendError, BackendUnavailableError
from tests.fixtures.mock_backend import BACKEND_URL, TEST_TOKEN, request_json


class TestBackendClient:

    @pytest.mark.asyncio
    async def test_bearer_token_sent(self, backend, api_client):
        backend.add("GET", "/vouchers", {"data": []})

        await api_client.get("/vouchers")

        request = backend.calls("GET", "/vouchers")[0]
        assert request.headers["Authorization"] == f"Bearer {TEST_TOKEN}"

    @pytest.mark.asyncio
    async def test_anonymous_client_sends_no_token(self, backend):
        backend.add("POST", "/admin/login", {"token": "t"})

        async with backend.client(None) as client:
            await client.post("/admin/login", json={"email": "a@b.se", "password": "x"})

        assert "Authorization" not in backend.requests[0].headers

    @pytest.mark.asyncio
    async def test_non_ok_raises_with_backend_message(self, backend, api_client):
        backend.add("DELETE", "/company/c-1", {"message": "Company has orders"}, status_code=409)

        with pytest.raises(BackendError) as exc_info:
            await api_client.delete("/company/c-1")

        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Company has orders"
        assert exc_info.value.payload == {"message": "Company has orders"}
        assert not exc_info.value.is_unauthorized

    @pytest.mark.asyncio
    async def test_401_is_unauthorized(self, backend, api_client):
        backend.add("GET", "/company", {"error": "jwt expired"}, status_code=401)

        with pytest.raises(BackendError) as exc_info:
            await api_client.get("/company")

        assert exc_info.value.is_unauthorized
        assert exc_info.value.message == "jwt expired"

    @pytest.mark.asyncio
    async def test_network_error_is_unavailable(self):
        def fail(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = BackendClient("t", base_url=BACKEND_URL, transport=httpx.MockTransport(fail))
        with pytest.raises(BackendUnavailableError) as exc_info:
            await client.get("/vouchers")
        await client.aclose()

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_get_action_sends_params_without_body(self, backend, api_client):
        backend.add("GET", "/company/status/c-1")

        await api_client.get_action("/company/status/c-1", params={"IsActive": False, "skip": None})

        request = backend.requests[0]
        assert request.url.params["IsActive"] == "false"
        assert "skip" not in request.url.params
        assert request_json(request) is None

    @pytest.mark.asyncio
    async def test_empty_body_is_empty_dict(self, backend, api_client):
        backend.add_handler("POST", "/paidhistory/c-1", lambda request: httpx.Response(201))

        assert await api_client.post("/paidhistory/c-1", json={"PaidAmount": "1.09"}) == {}
