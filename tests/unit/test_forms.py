"""
Tests for form validation
"""
from datetime import date

import pytest
from pydantic import ValidationError

from nedc_admin.application.web.forms import (
    AdminForm,
    CompanyForm,
    DateRangeForm,
    LoginForm,
    PasswordChangeForm,
    PaymentForm,
    VoucherUploadForm,
    form_error_message,
    optional_date_range,
)


def company_values(**overrides):
    values = {
        "name": "Butik Centrum",
        "company_number": "1001",
        "manager_email": "chef@butik.se",
        "credit_limit": "5000",
        "org_number": "5561234567",
        "city": "Stockholm",
        "post_number": "11122",
        "device_serial_number": "",
        "is_active": True,
    }
    values.update(overrides)
    return values


def error_of(model, **values) -> str:
    with pytest.raises(ValidationError) as exc_info:
        model(**values)
    return form_error_message(exc_info.value)


class TestCompanyForm:

    def test_valid(self):
        form = CompanyForm(**company_values())
        company = form.to_company("c-1")
        assert company.id == "c-1"
        assert company.address.city == "Stockholm"
        assert company.device_serial_number == ""

    @pytest.mark.parametrize("field", ["name", "company_number", "credit_limit", "org_number", "city", "post_number"])
    def test_required_fields(self, field):
        assert error_of(CompanyForm, **company_values(**{field: "  "})).endswith("This field is required")

    def test_invalid_email_is_labelled(self):
        assert error_of(CompanyForm, **company_values(manager_email="chef")) == "Manager email: Invalid email address"

    def test_serial_number_optional(self):
        assert CompanyForm(**company_values(device_serial_number=" SN-1 ")).device_serial_number == "SN-1"


class TestAccountForms:

    def test_login_requires_email(self):
        assert error_of(LoginForm, email="", password="x") == "Email: This field is required"

    def test_new_admin_requires_password(self):
        message = error_of(AdminForm, is_new=True, name="Anna", email="a@b.se", company_name="N", role="admin")
        assert message == "Password: Password is required for new admins"

    def test_edit_admin_blank_password_is_none(self):
        form = AdminForm(is_new=False, name="Anna", email="a@b.se", company_name="N", role="admin", password="")
        assert form.password is None

    def test_passwords_must_match(self):
        message = error_of(PasswordChangeForm, old_password="a", new_password="b", confirm_password="c")
        assert message == "Confirm password: New passwords do not match"


class TestPaymentForm:

    @pytest.mark.parametrize("raw, expected", [("100", 100.0), ("99,50", 99.5), (" 1 000 ", 1000.0)])
    def test_amount_parsing(self, raw, expected):
        assert PaymentForm(amount=raw).amount == expected

    @pytest.mark.parametrize("raw", ["", "abc", "nan", "inf"])
    def test_invalid_amount(self, raw):
        assert error_of(PaymentForm, amount=raw) == "Amount: Vänligen ange ett giltigt betalningsbelopp"

    @pytest.mark.parametrize("raw", ["0", "-5"])
    def test_amount_must_be_positive(self, raw):
        assert error_of(PaymentForm, amount=raw) == "Amount: Amount must be greater than 0"


class TestDateRangeForm:

    def test_valid_range(self):
        form = DateRangeForm(start_date="2024-03-01", end_date="2024-03-01")
        assert form.start_date == form.end_date == date(2024, 3, 1)

    def test_missing_date(self):
        assert error_of(DateRangeForm, start_date="", end_date="2024-03-01").endswith(
            "Please select both start and end dates"
        )

    def test_end_before_start(self):
        assert error_of(DateRangeForm, start_date="2024-03-02", end_date="2024-03-01").endswith(
            "Start date must be on or before end date"
        )

    @pytest.mark.parametrize("start, end", [
        (None, "2024-03-01"),
        ("2024-03-01", ""),
        ("2024-03-05", "2024-03-01"),
        ("garbage", "2024-03-01"),
    ])
    def test_optional_range_is_noop_unless_valid(self, start, end):
        assert optional_date_range(start, end) == (None, None)

    def test_optional_range(self):
        assert optional_date_range("2024-03-01", "2024-03-31") == (date(2024, 3, 1), date(2024, 3, 31))


class TestVoucherUploadForm:

    def test_article_required(self):
        assert error_of(VoucherUploadForm, article_id="", vouchers=["A"]) == "Article: Välj en artikel"

    def test_vouchers_required(self):
        assert error_of(VoucherUploadForm, article_id="A-1", vouchers=[]) == "File: Filen innehåller inga koder"
