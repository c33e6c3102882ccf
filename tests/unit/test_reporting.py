"""
Tests for sales totals, article reports and voucher search
"""
from datetime import date

import httpx
import pytest

from nedc_admin.domain.entities.order import Operator
from nedc_admin.domain.services.reporting import MISSING_SEARCH_INPUT_MESSAGE, ReportingService
from nedc_admin.infrastructure.api.client import BackendClient
from nedc_admin.infrastructure.api.errors import BackendUnavailableError
from tests.fixtures.mock_backend import BACKEND_URL, request_json


class TestReportingService:

    @pytest.fixture
    def service(self, api_client):
        return ReportingService(api_client)

    @pytest.mark.asyncio
    async def test_all_time_total(self, backend, service):
        backend.add("GET", "/accounts/totalamount/lyca", {"TotalSale": {"type": "Total", "amount": 5000}})

        total = await service.get_operator_total(Operator.LYCA)

        assert total.amount == 5000

    @pytest.mark.asyncio
    async def test_total_by_date(self, backend, service):
        backend.add("POST", "/accounts/getAllOrdersbydateCompaniess/comviq", {"TotalSale": {"amount": 10}})

        await service.get_operator_total(Operator.COMVIQ, date(2024, 1, 1), date(2024, 1, 31))

        assert request_json(backend.requests[0]) == {"fromdate": "2024-01-01", "todate": "2024-01-31"}

    @pytest.mark.asyncio
    async def test_missing_total_is_none(self, backend, service):
        backend.add("GET", "/accounts/totalamount/telia", {})

        assert await service.get_operator_total(Operator.TELIA) is None

    @pytest.mark.asyncio
    async def test_article_orders(self, backend, service):
        backend.add("POST", "/order/article/A-1", {"orderlist": [
            {"voucherNumber": 1, "voucherAmount": 100, "company": {"_id": "c-1", "name": "Butik+Norr"}},
        ]})

        orders = await service.get_article_orders("A-1", date(2024, 1, 1), date(2024, 1, 31))

        assert orders[0].company_name == "Butik Norr"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("serial, operator", [("", Operator.COMVIQ), ("123", None), ("   ", Operator.LYCA)])
    async def test_search_requires_both_inputs(self, backend, service, serial, operator):
        lookup = await service.search_voucher(serial, operator)

        assert not lookup.success
        assert lookup.message == MISSING_SEARCH_INPUT_MESSAGE
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_search_found(self, backend, service):
        backend.add("GET", "/search", {"success": True, "data": {"operator": "comviq", "voucherNumber": "V1"}})

        lookup = await service.search_voucher(" 123 ", Operator.COMVIQ)

        assert lookup.success
        params = backend.requests[0].url.params
        assert params["serialNumber"] == "123"
        assert params["operator"] == "comviq"

    @pytest.mark.asyncio
    async def test_search_not_found_is_failed_lookup(self, backend, service):
        backend.add("GET", "/search", {"success": False, "message": "Voucher not found"}, status_code=404)

        lookup = await service.search_voucher("123", Operator.COMVIQ)

        assert not lookup.success
        assert lookup.message == "Voucher not found"

    @pytest.mark.asyncio
    async def test_search_backend_unreachable_raises(self):
        def fail(request):
            raise httpx.ConnectTimeout("timeout", request=request)

        client = BackendClient("t", base_url=BACKEND_URL, transport=httpx.MockTransport(fail))
        with pytest.raises(BackendUnavailableError):
            await ReportingService(client).search_voucher("123", Operator.COMVIQ)
        await client.aclose()
