"""
Tests for entities built from backend payloads
"""
import pytest

from nedc_admin.domain.entities import (
    AdminUser,
    Company,
    Operator,
    Order,
    PaymentHistory,
    SalesData,
    VoucherLookup,
    VoucherStock,
)
from tests.fixtures.factories import CompanyPayloadFactory, OrderPayloadFactory, PaymentPayloadFactory


class TestCompany:

    def test_from_api_decodes_text(self):
        payload = CompanyPayloadFactory(
            name="Butik+%C3%96st",
            address={"city": "G%C3%B6teborg", "postNumber": 41101},
        )
        company = Company.from_api(payload)
        assert company.name == "Butik Öst"
        assert company.address.city == "Göteborg"
        assert company.address.post_number == "41101"

    def test_credentials_only_on_detail_payload(self):
        assert Company.from_api(CompanyPayloadFactory()).has_credentials is False
        detail = Company.from_api(CompanyPayloadFactory.with_credentials())
        assert detail.has_credentials is True
        assert detail.pin_code == "1234"

    def test_to_api_carries_id_only_for_updates(self):
        company = Company.from_api(CompanyPayloadFactory(id_="c-1"))
        assert company.to_api()["_id"] == "c-1"
        assert "_id" not in Company(id="", name="Ny").to_api()

    def test_with_status_returns_copy(self):
        company = Company(id="c-1", name="Butik", is_active=True)
        updated = company.with_status(False)
        assert updated.is_active is False
        assert company.is_active is True

    def test_registration_month(self):
        company = Company.from_api(CompanyPayloadFactory(registredDate="2024-02-03T00:00:00.000Z"))
        assert company.registration_month == "2024-02"


class TestOrders:

    @pytest.mark.parametrize("raw, expected", [
        ("comviq", Operator.COMVIQ),
        ("Telia", Operator.TELIA),
        (" halebop ", Operator.HALEBOP),
        ("unknown", None),
        ("", None),
    ])
    def test_operator_parse(self, raw, expected):
        assert Operator.parse(raw) == expected

    def test_telia_endpoints_shared_with_halebop(self):
        assert Operator.TELIA.uses_telia_endpoints
        assert Operator.HALEBOP.uses_telia_endpoints
        assert not Operator.LYCA.uses_telia_endpoints

    def test_order_from_api(self):
        order = Order.from_api(OrderPayloadFactory(voucherAmount="49.5"), Operator.LYCA)
        assert order.voucher_amount == 49.5
        assert order.operator == Operator.LYCA


class TestSalesData:

    def test_percentage_change(self):
        sales = SalesData.from_api({"type": "Weekly", "amount": 150, "previousAmount": 100})
        assert sales.percentage_change == 50.0
        assert sales.is_positive
        assert sales.period_label == "week"

    def test_growth_from_zero_is_100(self):
        assert SalesData(type="Today", amount=10, previous_amount=0).percentage_change == 100.0
        assert SalesData(type="Today", amount=0, previous_amount=None).percentage_change == 0.0


class TestMisc:

    def test_payment_entered_by_display(self):
        payment = PaymentHistory.from_api(PaymentPayloadFactory(EnteredBy="admin-7"))
        assert payment.entered_by_display == "admin-7"
        payment.entered_by_name = "Anna"
        assert payment.entered_by_display == "Anna"

    def test_admin_same_account(self):
        admin = AdminUser(id="a-1", name="Anna", email="anna@nedcgroup.se")
        assert admin.is_same_account(AdminUser(id="a-1", name="", email=""))
        assert not admin.is_same_account(None)

    @pytest.mark.parametrize("name, group", [
        ("Comviq Kontant 100 kr", "Comviq Kontant"),
        ("Lyca 50", "Lyca"),
        ("Telia", "Telia"),
    ])
    def test_stock_group_name(self, name, group):
        assert VoucherStock(article_id="1", product_name=name).group_name == group

    def test_voucher_lookup_not_found(self):
        lookup = VoucherLookup.from_api({"success": False})
        assert lookup.success is False
        assert lookup.message == "Ingen voucher hittades."

    def test_voucher_lookup_found(self):
        lookup = VoucherLookup.from_api({
            "success": True,
            "data": {
                "operator": "comviq",
                "voucherNumber": 123,
                "orderDate": "2024-03-01T10:00:00Z",
                "company": {"name": "Butik+Syd", "orgNumber": 556, "address": {"city": "Lund", "postNumber": 22100}},
            },
        })
        assert lookup.success
        assert lookup.company_name == "Butik Syd"
        assert lookup.company_post_number == "22100"
        assert lookup.voucher_number == "123"
