"""
Factories for backend payloads with factory_boy
"""
import factory
from factory import Faker
from faker import Faker as FakerInstance

# Faker instance for LazyFunction
fake = FakerInstance('sv_SE')


class AddressPayloadFactory(factory.DictFactory):
    city = Faker('city', locale='sv_SE')
    postNumber = factory.LazyFunction(lambda: str(fake.random_int(min=10000, max=99999)))


class CompanyPayloadFactory(factory.DictFactory):
    """Company as returned in companylist and /company/{id}"""
    id_ = factory.Sequence(lambda n: f"company-{n}")
    name = factory.Sequence(lambda n: f"Butik {n}")
    companyNumber = factory.Sequence(lambda n: str(1000 + n))
    managerEmail = factory.Sequence(lambda n: f"manager{n}@example.se")
    creditLimit = "5000"
    orgNumber = factory.LazyFunction(lambda: str(fake.random_int(min=5560000000, max=5569999999)))
    deviceSerialNumber = ""
    address = factory.SubFactory(AddressPayloadFactory)
    IsActive = True
    registredDate = "2024-01-15T10:00:00.000Z"

    class Meta:
        rename = {"id_": "_id"}

    @classmethod
    def with_credentials(cls, **kwargs):
        """Detail payload including credentials"""
        return cls(managerPassword="mgr-secret", password="secret", pinCode="1234", **kwargs)


class OrderPayloadFactory(factory.DictFactory):
    id_ = factory.Sequence(lambda n: f"order-{n}")
    voucherNumber = factory.Sequence(lambda n: f"V{100000 + n}")
    voucherDescription = "Comviq Kontant 100 kr"
    voucherAmount = 100
    voucherCurrency = "SEK"
    OrderDate = "2024-03-10T09:30:00.000Z"
    expireDate = "2025-03-10T00:00:00.000Z"
    serialNumber = factory.Sequence(lambda n: f"SN{500000 + n}")
    articleId = "A-100"

    class Meta:
        rename = {"id_": "_id"}


class PaymentPayloadFactory(factory.DictFactory):
    id_ = factory.Sequence(lambda n: f"payment-{n}")
    companyId = "company-1"
    PaidAmount = "109.00"
    PaidDate = "2024-04-01T12:00:00.000Z"
    EnteredBy = "admin-1"

    class Meta:
        rename = {"id_": "_id"}


class AdminPayloadFactory(factory.DictFactory):
    id_ = factory.Sequence(lambda n: f"admin-{n}")
    name = Faker('name', locale='sv_SE')
    email = factory.Sequence(lambda n: f"admin{n}@nedcgroup.se")
    companyName = "Nedcgroup"
    role = "admin"

    class Meta:
        rename = {"id_": "_id"}


class StockPayloadFactory(factory.DictFactory):
    articleId = factory.Sequence(lambda n: f"A-{200 + n}")
    productName = "Comviq Kontant 100 kr"
    price = "100"
    vouchersRemaining = 120
    productDetails = factory.LazyFunction(lambda: {"ean": fake.ean13(), "operator": "comviq"})


class InvoicePayloadFactory(factory.DictFactory):
    id_ = factory.Sequence(lambda n: f"invoice-{n}")
    fromDate = "2024-03-01"
    toDate = "2024-03-31"
    companyId = "company-1"
    companyname = "Butik+Centrum"
    totalAmount = 1500
    invoiceStatus = "Success"

    class Meta:
        rename = {"id_": "_id"}
