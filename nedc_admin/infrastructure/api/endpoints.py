"""
Backend REST endpoints, relative to settings.api_base_url.
"""

# Auth and admins
LOGIN = "/admin/login"
ADMIN_ME = "/admin/me"
ADMINS = "/admin"
ADMIN_REGISTER = "/admin/register"
ADMIN_NAMES = "/admin/names"
UPDATE_PASSWORD = "/update-password"


def admin(admin_id: str) -> str:
    return f"/admin/{admin_id}"


# Companies
COMPANIES = "/company"
COMPANY_RESET_PASSWORD = "/company/resetPassword"
COMPANY_RESET_PIN = "/company/resetPin"


def company(company_id: str) -> str:
    return f"/company/{company_id}"


def company_status(company_id: str) -> str:
    return f"/company/status/{company_id}"


# Orders per operator
def comviq_orders(company_id: str) -> str:
    return f"/order/detail/{company_id}"


def lyca_orders(company_id: str) -> str:
    return f"/lyca-order/detail/{company_id}"


def telia_orders(company_id: str) -> str:
    """Shared by Telia and Halebop, the operator goes in the body"""
    return f"/teliaOrder/detail/{company_id}"


def comviq_order_delete(order_id: str, company_id: str) -> str:
    return f"/order/delete/{order_id}/{company_id}"


def lyca_order_delete(order_id: str, company_id: str) -> str:
    return f"/lyca-order/delete/{order_id}/{company_id}"


def telia_order_delete(order_id: str, company_id: str, operator: str) -> str:
    return f"/teliaOrder/delete/{order_id}/{company_id}/{operator}"


def daily_sales(company_id: str) -> str:
    return f"/order/dailysale/{company_id}"


def invoice_by_date(company_id: str) -> str:
    return f"/order/getInvoicebydate/{company_id}"


def article_orders(article_id: str) -> str:
    return f"/order/article/{article_id}"


# Invoices
SUCCESS_INVOICES = "/order/getCompInvoiceS"
FAILED_INVOICES = "/order/getCompInvoiceF"

# Payments
def payment_history(company_id: str) -> str:
    return f"/paidhistory/{company_id}"


def payment(payment_id: str) -> str:
    return f"/paidhistory/{payment_id}"


# Sales totals
def operator_total(operator: str) -> str:
    return f"/accounts/totalamount/{operator}"


def operator_total_by_date(operator: str) -> str:
    return f"/accounts/getAllOrdersbydateCompaniess/{operator}"


# Stock, articles, upload, search
VOUCHERS = "/vouchers"
ARTICLES = "/subcategory/articles"
LYCA_ARTICLES = "/api/subcategory/lyca/articles"
VOUCHER_UPLOAD = "/api/vouchers"
VOUCHER_SEARCH = "/search"
