"""
Jinja2 filters for the back-office templates.
Dates are shown in Stockholm time, amounts in Swedish format.
"""

from ..infrastructure.utils.text_utils import decode_text, to_float
from ..infrastructure.utils.timezone_utils import format_local_date, format_local_datetime


def local_datetime(dt):
    """
    Date and time in Stockholm time.
    Usage: {{ order.order_date | local_datetime }}
    """
    return format_local_datetime(dt)


def local_date(dt):
    """
    Date only.
    Usage: {{ company.registered_date | local_date }}
    """
    return format_local_date(dt)


def sek(amount):
    """
    Amount in SEK, Swedish separators.
    Usage: {{ payment.amount | sek }} -> "1 234,50 kr"
    """
    value = to_float(amount)
    formatted = f"{value:,.2f}".replace(",", " ").replace(".", ",")
    return f"{formatted} kr"


def number_format(number):
    """
    Integer with thousands separators.
    Usage: {{ listing.total_companies | number_format }}
    """
    if number is None:
        return "0"

    try:
        return f"{int(number):,}".replace(',', ' ')
    except (ValueError, TypeError):
        return str(number)


def percent(value):
    """Signed percentage with one decimal"""
    value = to_float(value)
    sign = "+" if value > 0 else ""
    return f"{sign}{value:.1f}%"


def decoded(text):
    """URL-decoded text, for values not decoded by the entities"""
    return decode_text(text)


def mask(value):
    """Hidden credential"""
    if value is None or value == "":
        return "—"
    return "•" * 8


# All filters registered in the application
TEMPLATE_FILTERS = {
    'local_datetime': local_datetime,
    'local_date': local_date,
    'sek': sek,
    'number_format': number_format,
    'percent': percent,
    'decoded': decoded,
    'mask': mask,
}
