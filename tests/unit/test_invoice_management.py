"""
Tests for invoice lists and bulk generation
"""
from datetime import date

import httpx
import pytest

from nedc_admin.domain.entities.company import Company
from nedc_admin.domain.entities.invoice import InvoiceStatus
from nedc_admin.domain.services.invoice_management import (
    NO_FAILED_INVOICES_MESSAGE,
    BulkInvoiceReport,
    InvoiceManagementService,
)
from nedc_admin.infrastructure.api.errors import BackendError
from tests.fixtures.factories import InvoicePayloadFactory
from tests.fixtures.mock_backend import request_json

START = date(2024, 3, 1)
END = date(2024, 3, 31)


class TestInvoiceLists:

    @pytest.fixture
    def service(self, api_client):
        return InvoiceManagementService(api_client)

    @pytest.mark.asyncio
    async def test_success_invoices(self, backend, service):
        backend.add("POST", "/order/getCompInvoiceS", {"Invoicelist": [InvoicePayloadFactory()]})

        invoices = await service.get_success_invoices()

        assert invoices[0].status == InvoiceStatus.SUCCESS
        assert invoices[0].company_name == "Butik Centrum"

    @pytest.mark.asyncio
    async def test_failed_invoices_with_range(self, backend, service):
        backend.add("POST", "/order/getCompInvoiceF", {"Invoicelist": [InvoicePayloadFactory()]})

        invoices = await service.get_failed_invoices(START, END)

        assert invoices[0].status == InvoiceStatus.FAILED
        assert request_json(backend.requests[0]) == {"fromDate": "2024-03-01", "toDate": "2024-03-31"}

    @pytest.mark.asyncio
    async def test_failed_invoices_without_range_has_no_body(self, backend, service):
        backend.add("POST", "/order/getCompInvoiceF", {"Invoicelist": []})

        await service.get_failed_invoices()

        assert request_json(backend.requests[0]) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status_code", [200, 404])
    async def test_no_data_message_is_empty_list(self, backend, service, status_code):
        backend.add("POST", "/order/getCompInvoiceF", {"message": NO_FAILED_INVOICES_MESSAGE}, status_code=status_code)

        assert await service.get_failed_invoices() == []

    @pytest.mark.asyncio
    async def test_other_failure_raises(self, backend, service):
        backend.add("POST", "/order/getCompInvoiceF", {"message": "boom"}, status_code=500)

        with pytest.raises(BackendError):
            await service.get_failed_invoices()


class TestBulkGeneration:

    @pytest.fixture
    def companies(self):
        return [Company(id=f"c-{n}", name=f"Butik {n}") for n in range(1, 4)]

    @pytest.mark.asyncio
    async def test_failures_do_not_stop_the_run(self, backend, api_client, companies):
        backend.add("POST", "/order/getInvoicebydate/c-1", {"status": True, "message": "Invoice created"})
        backend.add("POST", "/order/getInvoicebydate/c-2", {"message": "No orders"}, status_code=400)
        backend.add("POST", "/order/getInvoicebydate/c-3", {"status": False, "message": "Already invoiced"})

        report = await InvoiceManagementService(api_client).generate_for_companies(companies, START, END)

        assert report.done == 3
        assert report.succeeded == 1
        assert report.failed == 2
        assert report.progress == 100
        assert [r.company_id for r in report.results] == ["c-1", "c-2", "c-3"]
        assert report.results[1].message == "No orders"

    @pytest.mark.asyncio
    async def test_reply_without_status_counts_as_failed(self, backend, api_client, companies):
        backend.add("POST", "/order/getInvoicebydate/c-1", {"message": "Inga ordrar"})

        report = await InvoiceManagementService(api_client).generate_for_companies(companies[:1], START, END)

        assert report.failed == 1
        assert report.results[0].success is False
        assert report.results[0].message == "Inga ordrar"

    @pytest.mark.asyncio
    async def test_sequential_order(self, backend, api_client, companies):
        backend.add_handler("POST", "/order/getInvoicebydate/c-1", lambda r: httpx.Response(200, json={}))
        backend.add_handler("POST", "/order/getInvoicebydate/c-2", lambda r: httpx.Response(200, json={}))
        backend.add_handler("POST", "/order/getInvoicebydate/c-3", lambda r: httpx.Response(200, json={}))

        await InvoiceManagementService(api_client).generate_for_companies(companies, START, END)

        assert [r.url.path.rsplit("/", 1)[-1] for r in backend.requests] == ["c-1", "c-2", "c-3"]

    @pytest.mark.asyncio
    async def test_401_stops_the_run(self, backend, api_client, companies):
        backend.add("POST", "/order/getInvoicebydate/c-1", {}, status_code=401)

        with pytest.raises(BackendError):
            await InvoiceManagementService(api_client).generate_for_companies(companies, START, END)

        assert len(backend.requests) == 1

    def test_empty_report_progress(self):
        assert BulkInvoiceReport(total=0).progress == 100
