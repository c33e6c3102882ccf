"""
Companies page: list filters, status toggle, confirmed deletion and forms
"""
from nedc_admin.domain.entities.company import Company
from nedc_admin.domain.services.listing import filter_companies
from tests.fixtures.factories import CompanyPayloadFactory
from tests.fixtures.mock_backend import request_json


def company_list():
    return [
        CompanyPayloadFactory(id_="c-1", name="Alpha Butik", IsActive=True),
        CompanyPayloadFactory(id_="c-2", name="Beta Kiosk", IsActive=False),
        CompanyPayloadFactory(id_="c-3", name="Gamma Butik", IsActive=False),
    ]


def company_form(**overrides):
    data = {
        "name": "Ny Butik",
        "company_number": "2001",
        "manager_email": "chef@nybutik.se",
        "credit_limit": "3000",
        "org_number": "5569998887",
        "city": "Uppsala",
        "post_number": "75320",
        "device_serial_number": "",
        "is_active": "true",
    }
    data.update(overrides)
    return data


class TestCompanyList:

    def test_list_matches_pure_filter(self, logged_in_client, backend):
        payloads = company_list()
        backend.add("GET", "/company", {"companylist": payloads, "totalCompanies": 3})

        response = logged_in_client.get("/companies", params={"search": "butik", "status": "inactive"})

        expected = filter_companies([Company.from_api(p) for p in payloads], "butik", "inactive")
        assert response.status_code == 200
        assert [company.name for company in expected] == ["Gamma Butik"]
        assert "Gamma Butik" in response.text
        assert "Alpha Butik" not in response.text
        assert "Beta Kiosk" not in response.text
        params = backend.requests[0].url.params
        assert params["search"] == "butik"
        assert params["isActive"] == "false"

    def test_list_failure_renders_empty(self, logged_in_client, backend):
        backend.add("GET", "/company", {"message": "boom"}, status_code=500)

        response = logged_in_client.get("/companies")

        assert response.status_code == 200
        assert "Inga företag hittades." in response.text

    def test_pagination(self, logged_in_client, backend):
        payloads = [CompanyPayloadFactory(id_=f"c-{n}", name=f"Butik {n:02d}") for n in range(1, 13)]
        backend.add("GET", "/company", {"companylist": payloads, "totalCompanies": 12})

        response = logged_in_client.get("/companies", params={"page": "2"})

        assert "Butik 11" in response.text
        assert "Butik 01" not in response.text


class TestStatusToggle:

    def test_toggle_sends_new_status(self, logged_in_client, backend):
        backend.add("GET", "/company/c-1", {"company": CompanyPayloadFactory(id_="c-1", IsActive=True)})
        backend.add("GET", "/company/status/c-1", {"message": "ok"})
        backend.add("GET", "/company", {"companylist": []})

        response = logged_in_client.post("/companies/c-1/status", data={"next": "/companies?status=active"})

        assert response.status_code == 302
        assert response.headers["location"] == "/companies?status=active"
        status_call = backend.calls("GET", "/company/status/c-1")
        assert len(status_call) == 1
        assert status_call[0].url.params["IsActive"] == "false"
        assert "Company status updated to inactive" in logged_in_client.get("/companies").text

    def test_failed_toggle_reports_error(self, logged_in_client, backend):
        backend.add("GET", "/company/c-1", {"company": CompanyPayloadFactory(id_="c-1", IsActive=True)})
        backend.add("GET", "/company/status/c-1", {"message": "nope"}, status_code=500)
        backend.add("GET", "/company", {"companylist": []})

        logged_in_client.post("/companies/c-1/status", data={"next": "/companies"})

        assert "Failed to update company status" in logged_in_client.get("/companies").text

    def test_offsite_next_is_ignored(self, logged_in_client, backend):
        backend.add("GET", "/company/c-1", {"company": CompanyPayloadFactory(id_="c-1")})
        backend.add("GET", "/company/status/c-1")

        response = logged_in_client.post("/companies/c-1/status", data={"next": "https://evil.example"})

        assert response.headers["location"] == "/companies"


class TestDeleteCompany:

    def test_confirmation_page_deletes_nothing(self, logged_in_client, backend):
        backend.add("GET", "/company/c-1", {"company": CompanyPayloadFactory(id_="c-1", name="Alpha Butik")})

        response = logged_in_client.get("/companies/c-1/delete")

        assert response.status_code == 200
        assert "Alpha Butik" in response.text
        assert backend.calls("DELETE", "/company/c-1") == []

    def test_unconfirmed_post_deletes_nothing(self, logged_in_client, backend):
        response = logged_in_client.post("/companies/c-1/delete", data={})

        assert response.status_code == 302
        assert backend.requests == []

    def test_confirmed_delete_calls_once(self, logged_in_client, backend):
        backend.add("DELETE", "/company/c-1")

        response = logged_in_client.post("/companies/c-1/delete", data={"confirm": "yes"})

        assert response.headers["location"] == "/companies"
        assert len(backend.calls("DELETE", "/company/c-1")) == 1
        assert len(backend.requests) == 1


class TestCompanyForms:

    def test_create_company(self, logged_in_client, backend):
        backend.add("POST", "/company", {"company": CompanyPayloadFactory(id_="c-9", name="Ny Butik")})

        response = logged_in_client.post("/companies/new", data=company_form())

        assert response.headers["location"] == "/companies"
        body = request_json(backend.requests[0])
        assert body["name"] == "Ny Butik"
        assert body["address"] == {"city": "Uppsala", "postNumber": "75320"}
        assert body["IsActive"] is True
        assert "_id" not in body

    def test_invalid_company_is_not_sent(self, logged_in_client, backend):
        response = logged_in_client.post("/companies/new", data=company_form(manager_email="chef"))

        assert response.status_code == 400
        assert "Manager email: Invalid email address" in response.text
        assert backend.requests == []

    def test_edit_company(self, logged_in_client, backend):
        backend.add("PUT", "/company")

        response = logged_in_client.post("/companies/c-1/edit", data=company_form(is_active="false"))

        assert response.headers["location"] == "/companies"
        body = request_json(backend.requests[0])
        assert body["_id"] == "c-1"
        assert body["IsActive"] is False

    def test_reset_pin(self, logged_in_client, backend):
        backend.add("POST", "/company/resetPin")

        response = logged_in_client.post("/companies/c-1/reset-pin", data={"next": "/company/c-1"})

        assert response.headers["location"] == "/company/c-1"
        assert request_json(backend.requests[0]) == {"cid": "c-1"}
