"""
Form models with validation for the back-office pages.
Routes build these from Form() fields and turn ValidationError into an error message.
"""
import math
from datetime import date
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, validator

from ...domain.entities.company import Address, Company

FIELD_LABELS: Dict[str, str] = {
    "name": "Name",
    "company_number": "Company number",
    "manager_email": "Manager email",
    "credit_limit": "Credit limit",
    "org_number": "Organisation number",
    "city": "City",
    "post_number": "Post number",
    "email": "Email",
    "password": "Password",
    "company_name": "Company name",
    "role": "Role",
    "old_password": "Current password",
    "new_password": "New password",
    "confirm_password": "Confirm password",
    "amount": "Amount",
    "start_date": "Start date",
    "end_date": "End date",
    "article_id": "Article",
    "vouchers": "File",
}


def form_error_message(error: ValidationError) -> str:
    """First validation error as a single readable line"""
    errors = error.errors()
    if not errors:
        return "Invalid input"

    first = errors[0]
    message = str(first.get("msg", "Invalid input"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    loc = first.get("loc") or ()
    field_name = str(loc[-1]) if loc else ""
    label = FIELD_LABELS.get(field_name)
    return f"{label}: {message}" if label else message


def _not_blank(value):
    if value is None or not str(value).strip():
        raise ValueError("This field is required")
    return str(value).strip()


def _email(value):
    value = _not_blank(value)
    if "@" not in value:
        raise ValueError("Invalid email address")
    return value


class LoginForm(BaseModel):
    email: str
    password: str

    @validator('email', pre=True)
    def validate_email(cls, v):
        return _email(v)

    @validator('password', pre=True)
    def validate_password(cls, v):
        if not v:
            raise ValueError("Password is required")
        return v


class CompanyForm(BaseModel):
    """Create/edit company, deviceSerialNumber is the only optional field"""
    name: str
    company_number: str
    manager_email: str
    credit_limit: str
    org_number: str
    city: str
    post_number: str
    device_serial_number: Optional[str] = Field(None)
    is_active: bool = True

    @validator('name', 'company_number', 'credit_limit', 'org_number', 'city', 'post_number', pre=True)
    def required(cls, v):
        return _not_blank(v)

    @validator('manager_email', pre=True)
    def validate_manager_email(cls, v):
        return _email(v)

    @validator('device_serial_number', pre=True)
    def optional_serial(cls, v):
        if v is None:
            return None
        return str(v).strip() or None

    def to_company(self, company_id: str = "") -> Company:
        """Entity for the API payload, an id makes it an update"""
        return Company(
            id=company_id,
            name=self.name,
            company_number=self.company_number,
            manager_email=self.manager_email,
            credit_limit=self.credit_limit,
            org_number=self.org_number,
            device_serial_number=self.device_serial_number or "",
            address=Address(city=self.city, post_number=self.post_number),
            is_active=self.is_active,
        )


class AdminForm(BaseModel):
    """Create/edit admin, password required only when creating"""
    is_new: bool = True
    name: str
    email: str
    company_name: str
    role: str
    password: Optional[str] = None

    @validator('name', 'company_name', 'role', pre=True)
    def required(cls, v):
        return _not_blank(v)

    @validator('email', pre=True)
    def validate_email(cls, v):
        return _email(v)

    @validator('password', pre=True, always=True)
    def password_on_create(cls, v, values):
        if not v:
            if values.get('is_new', True):
                raise ValueError("Password is required for new admins")
            return None
        return v


class ProfileForm(BaseModel):
    name: str
    email: str
    company_name: str

    @validator('name', 'company_name', pre=True)
    def required(cls, v):
        return _not_blank(v)

    @validator('email', pre=True)
    def validate_email(cls, v):
        return _email(v)


class PasswordChangeForm(BaseModel):
    old_password: str
    new_password: str
    confirm_password: str

    @validator('old_password', 'new_password', pre=True)
    def required(cls, v):
        if not v:
            raise ValueError("This field is required")
        return v

    @validator('confirm_password')
    def passwords_match(cls, v, values):
        if 'new_password' in values and v != values['new_password']:
            raise ValueError("New passwords do not match")
        return v


class PaymentForm(BaseModel):
    """Amount as entered, commission is added by the service"""
    amount: float

    @validator('amount', pre=True)
    def parse_amount(cls, v):
        if isinstance(v, str):
            v = v.strip().replace(" ", "").replace(",", ".")
            if not v:
                raise ValueError("Vänligen ange ett giltigt betalningsbelopp")
            try:
                return float(v)
            except ValueError:
                raise ValueError("Vänligen ange ett giltigt betalningsbelopp")
        return v

    @validator('amount')
    def positive(cls, v):
        if not math.isfinite(v):
            raise ValueError("Vänligen ange ett giltigt betalningsbelopp")
        if v <= 0:
            raise ValueError("Amount must be greater than 0")
        return v


class DateRangeForm(BaseModel):
    """Both dates required, start on or before end"""
    start_date: date
    end_date: date

    @validator('start_date', 'end_date', pre=True)
    def required(cls, v):
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Please select both start and end dates")
        return v

    @validator('end_date')
    def end_not_before_start(cls, v, values):
        start = values.get('start_date')
        if start is not None and v < start:
            raise ValueError("Start date must be on or before end date")
        return v


class VoucherUploadForm(BaseModel):
    article_id: str
    vouchers: List[str]

    @validator('article_id', pre=True)
    def article_selected(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("Välj en artikel")
        return str(v).strip()

    @validator('vouchers')
    def not_empty(cls, v):
        if not v:
            raise ValueError("Filen innehåller inga koder")
        return v


def optional_date_range(start: Optional[str], end: Optional[str]) -> Tuple[Optional[date], Optional[date]]:
    """
    Date filter from query parameters.
    (None, None) unless both dates are present, valid and ordered.
    """
    if not start or not end:
        return None, None
    try:
        form = DateRangeForm(start_date=start, end_date=end)
    except ValidationError:
        return None, None
    return form.start_date, form.end_date
