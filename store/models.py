"""
Storefront Data Models

This module defines the records held in process memory:
- Merchant credentials
- Catalog products
- Completed payment records
"""

import uuid
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum as PyEnum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.errors import ValidationError

SUPPORTED_CURRENCIES = ("USD", "EUR", "GBP", "CAD", "AUD", "JPY")

CURRENCY_LABELS = {
    "USD": "US Dollar",
    "EUR": "Euro",
    "GBP": "British Pound",
    "CAD": "Canadian Dollar",
    "AUD": "Australian Dollar",
    "JPY": "Japanese Yen",
}


class OrderStatus(str, PyEnum):
    """PayPal order statuses the storefront cares about."""

    created = "CREATED"
    approved = "APPROVED"
    pending = "PENDING"
    completed = "COMPLETED"


def format_price(raw) -> str:
    """Normalise a price to a two-decimal string, rounding half up.

    >>> format_price("5")
    '5.00'
    """
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError("Enter a valid price (e.g. 29.99)")
    if not value.is_finite() or value < 0:
        raise ValidationError("Enter a valid price (e.g. 29.99)")
    return str(value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def new_product_id() -> str:
    return uuid.uuid4().hex[:8]


def utcnow() -> datetime:
    return datetime.now(UTC)


class CredentialSet(BaseModel):
    """Merchant API credentials entered on the setup page."""

    client_id: str
    client_secret: str = Field(repr=False)
    environment: str = "sandbox"
    validated: bool = False

    model_config = ConfigDict(frozen=True)


class Product(BaseModel):
    """A sellable catalog item; immutable once created."""

    id: str = Field(default_factory=new_product_id)
    name: str
    description: str = ""
    price: str
    currency: str = "USD"
    images: List[str] = Field(default_factory=list, max_length=5)
    created_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True)

    @field_validator("price", mode="before")
    @classmethod
    def _two_decimals(cls, value):
        return format_price(value)

    @field_validator("currency")
    @classmethod
    def _supported_currency(cls, value: str) -> str:
        value = (value or "USD").upper()
        if value not in SUPPORTED_CURRENCIES:
            raise ValueError(f"Unsupported currency {value}")
        return value


class PaymentRecord(BaseModel):
    """Snapshot of a completed capture; never mutated after append."""

    order_id: str
    product_id: str
    product_name: str
    payer_email: str = ""
    payer_name: str = ""
    amount: str
    currency: str
    status: str
    capture_id: str = ""
    completed_at: datetime = Field(default_factory=utcnow)

    model_config = ConfigDict(frozen=True)

    @field_validator("amount", mode="before")
    @classmethod
    def _numeric_amount(cls, value):
        # Revenue totals sum these as Decimals
        try:
            return format_price(value)
        except ValidationError as e:
            raise ValueError(e.message) from e

    @property
    def is_completed(self) -> bool:
        return self.status == OrderStatus.completed.value
