"""
Domain services - page logic over the backend REST API.
Pure list helpers live in listing, everything else takes a BackendClient.
"""
from .admin_management import AdminManagementService
from .auth_service import AuthService
from .company_management import CompanyListing, CompanyManagementService, calculate_registration_trends
from .inventory import InventoryService, filter_stock, group_stock, parse_voucher_lines
from .invoice_management import BulkInvoiceReport, InvoiceManagementService
from .listing import Page, filter_by_date_range, filter_companies, paginate, search_items, sum_amounts
from .order_management import OrderManagementService
from .payment_management import PaymentManagementService, amount_with_commission
from .reporting import ReportingService

__all__ = [
    # Companies
    "CompanyListing",
    "CompanyManagementService",
    "calculate_registration_trends",

    # Orders, payments, invoices
    "OrderManagementService",
    "PaymentManagementService",
    "amount_with_commission",
    "InvoiceManagementService",
    "BulkInvoiceReport",
    "ReportingService",

    # Stock and upload
    "InventoryService",
    "group_stock",
    "filter_stock",
    "parse_voucher_lines",

    # Admins and login
    "AdminManagementService",
    "AuthService",

    # List views
    "Page",
    "paginate",
    "search_items",
    "filter_companies",
    "filter_by_date_range",
    "sum_amounts",
]
