"""
Typed views of PayPal Orders v2 payloads.

Every field is optional: PayPal omits whole branches depending on the
``Prefer`` header, the payment source and the order status. Extraction rules
live in the functions at the bottom so callers never walk raw dicts.
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# PayPal rejects item names/descriptions longer than this
FIELD_LIMIT = 127


class _PayPalModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Money(_PayPalModel):
    currency_code: Optional[str] = None
    value: Optional[str] = None


class Capture(_PayPalModel):
    id: Optional[str] = None
    status: Optional[str] = None
    amount: Optional[Money] = None


class PaymentCollection(_PayPalModel):
    captures: List[Capture] = Field(default_factory=list)


class PurchaseUnit(_PayPalModel):
    reference_id: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Money] = None
    payments: Optional[PaymentCollection] = None


class PayerName(_PayPalModel):
    given_name: Optional[str] = None
    surname: Optional[str] = None


class PayPalWallet(_PayPalModel):
    email_address: Optional[str] = None
    name: Optional[PayerName] = None


class PaymentSource(_PayPalModel):
    paypal: Optional[PayPalWallet] = None


class Order(_PayPalModel):
    id: Optional[str] = None
    status: Optional[str] = None
    payment_source: Optional[PaymentSource] = None
    purchase_units: List[PurchaseUnit] = Field(default_factory=list)


class LineItem(_PayPalModel):
    """Outbound item entry for a create-order request."""

    name: str
    unit_amount: Money
    quantity: str = "1"
    description: Optional[str] = None
    category: str = "DIGITAL_GOODS"


def truncate(text: Optional[str], limit: int = FIELD_LIMIT) -> str:
    return (text or "")[:limit]


def _wallet(order: Order) -> Optional[PayPalWallet]:
    if order.payment_source is None:
        return None
    return order.payment_source.paypal


def payer_email(order: Order) -> str:
    wallet = _wallet(order)
    return (wallet.email_address or "") if wallet else ""


def payer_name(order: Order) -> str:
    """Given name and surname joined by one space, skipping missing parts."""
    wallet = _wallet(order)
    if wallet is None or wallet.name is None:
        return ""
    parts = [wallet.name.given_name, wallet.name.surname]
    return " ".join(p for p in parts if p)


def last_capture(order: Order) -> Tuple[str, str, str]:
    """Return (capture_id, amount, currency) from the captures on an order.

    All purchase units and all their captures are walked in order; the last
    capture id seen and the last amount seen win independently. Orders from
    this storefront carry a single capture, so this only matters for
    responses we never produce ourselves.
    """
    capture_id = amount = currency = ""
    for unit in order.purchase_units:
        if unit.payments is None:
            continue
        for capture in unit.payments.captures:
            if capture.id:
                capture_id = capture.id
            if capture.amount is not None:
                amount = capture.amount.value or ""
                currency = capture.amount.currency_code or ""
    return capture_id, amount, currency


def unit_amount(order: Order) -> Tuple[str, str]:
    """(value, currency) of the last purchase unit that carries an amount."""
    value = currency = ""
    for unit in order.purchase_units:
        if unit.amount is not None and unit.amount.value:
            value = unit.amount.value
            currency = unit.amount.currency_code or ""
    return value, currency
