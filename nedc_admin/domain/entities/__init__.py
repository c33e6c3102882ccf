# Domain entities - dataclasses mirroring backend payloads
from .admin_user import AdminUser
from .company import Address, Company, RegistrationTrend
from .invoice import Invoice, InvoiceGenerationResult, InvoiceStatus
from .order import Operator, Order
from .payment import PaymentHistory
from .sales import SalesData
from .voucher import Article, ArticleOrder, UploadResult, VoucherLookup, VoucherStock

__all__ = [
    "AdminUser",
    "Address",
    "Company",
    "RegistrationTrend",
    "Invoice",
    "InvoiceGenerationResult",
    "InvoiceStatus",
    "Operator",
    "Order",
    "PaymentHistory",
    "SalesData",
    "Article",
    "ArticleOrder",
    "UploadResult",
    "VoucherLookup",
    "VoucherStock",
]
