from store.memory import (
    CredentialStore,
    PaymentLedger,
    ProductCatalog,
    StorefrontState,
)
from store.models import CredentialSet, OrderStatus, PaymentRecord, Product

__all__ = [
    "CredentialSet",
    "CredentialStore",
    "OrderStatus",
    "PaymentLedger",
    "PaymentRecord",
    "Product",
    "ProductCatalog",
    "StorefrontState",
]
