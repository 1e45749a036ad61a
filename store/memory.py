"""
In-memory containers backing the storefront.

Nothing here survives a restart. All mutation happens on the event loop
thread, between awaits, so the containers carry no locks.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterator, List, Optional

from core.errors import ConfigurationError
from store.models import CredentialSet, PaymentRecord, Product


class CredentialStore:
    """Single-slot holder for the merchant credentials."""

    def __init__(self):
        self._current: Optional[CredentialSet] = None

    @property
    def current(self) -> Optional[CredentialSet]:
        return self._current

    @property
    def is_validated(self) -> bool:
        return self._current is not None and self._current.validated

    def replace(self, credentials: CredentialSet) -> None:
        self._current = credentials

    def require_validated(self) -> CredentialSet:
        """Return validated credentials or raise ConfigurationError."""
        if not self.is_validated:
            raise ConfigurationError()
        return self._current


class ProductCatalog:
    """Products keyed by their id."""

    def __init__(self):
        self._products: Dict[str, Product] = {}

    def __len__(self) -> int:
        return len(self._products)

    def __contains__(self, product_id: str) -> bool:
        return product_id in self._products

    def add(self, product: Product) -> Product:
        if product.id in self._products:
            raise ValueError(f"Product id {product.id} already assigned")
        self._products[product.id] = product
        return product

    def get(self, product_id: Optional[str]) -> Optional[Product]:
        if not product_id:
            return None
        return self._products.get(product_id)

    def recent(self) -> List[Product]:
        """Products newest first."""
        return sorted(
            self._products.values(), key=lambda p: p.created_at, reverse=True
        )


class PaymentLedger:
    """Append-only list of completed payments."""

    def __init__(self):
        self._records: List[PaymentRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[PaymentRecord]:
        return iter(tuple(self._records))

    def append(self, record: PaymentRecord) -> None:
        self._records.append(record)

    def find_by_order(self, order_id: str) -> Optional[PaymentRecord]:
        return next((r for r in self._records if r.order_id == order_id), None)

    def completed(self) -> List[PaymentRecord]:
        return [r for r in self._records if r.is_completed]

    def sales_count(self, product_id: str) -> int:
        return sum(1 for r in self.completed() if r.product_id == product_id)

    def total_revenue(self) -> Decimal:
        # Amounts are summed regardless of currency, as the dashboard shows one figure
        return sum((Decimal(r.amount) for r in self.completed()), Decimal("0.00"))

    def recent(self) -> List[PaymentRecord]:
        """Payments newest first."""
        return sorted(self._records, key=lambda r: r.completed_at, reverse=True)


@dataclass
class StorefrontState:
    """Everything the storefront knows, created empty at startup."""

    credentials: CredentialStore = field(default_factory=CredentialStore)
    catalog: ProductCatalog = field(default_factory=ProductCatalog)
    ledger: PaymentLedger = field(default_factory=PaymentLedger)
