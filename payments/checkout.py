"""
Checkout Orchestrator

Coordinates catalog lookups, PayPal calls and ledger writes for the
create -> approve -> capture lifecycle of a single order. PayPal owns the
order state; the storefront only records the captures it sees completing.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

import structlog
from starlette.concurrency import run_in_threadpool

from core.errors import GatewayError, NotFoundError, ValidationError
from core.logging import BusinessEvents
from core.metrics import orders_created, payments_captured
from payments.paypal_gateway import PayPalGateway
from payments.paypal_models import (
    LineItem,
    Order,
    Money,
    last_capture,
    payer_email,
    payer_name,
    truncate,
    unit_amount,
)
from store.memory import StorefrontState
from store.models import (
    CredentialSet,
    OrderStatus,
    PaymentRecord,
    Product,
    format_price,
)

log = structlog.get_logger(__name__)

GatewayFactory = Callable[[CredentialSet], PayPalGateway]

UNKNOWN_PRODUCT = "Unknown"


@dataclass(frozen=True)
class CreatedOrder:
    id: str
    status: str


@dataclass(frozen=True)
class CapturedOrder:
    id: str
    status: str
    payer_email: str
    payer_name: str
    capture_id: str


def _recorded_amount(order: Order, product: Optional[Product]) -> Tuple[str, str, str]:
    """(capture_id, amount, currency) for a ledger record.

    The capture amount is preferred, then the purchase unit amount, then the
    catalog price. Candidates that are not a valid price are skipped and the
    amount ends up "0.00" when none is usable.
    """
    capture_id, value, currency = last_capture(order)
    candidates = [(value, currency), unit_amount(order)]
    if product is not None:
        candidates.append((product.price, product.currency))
    for candidate, code in candidates:
        if not candidate:
            continue
        try:
            return capture_id, format_price(candidate), code
        except ValidationError:
            log.warning("payment.amount_unusable", order_id=order.id, amount=candidate)
    return capture_id, "0.00", currency


def build_line_item(product: Product) -> LineItem:
    return LineItem(
        name=truncate(product.name),
        unit_amount=Money(currency_code=product.currency, value=product.price),
        quantity="1",
        description=truncate(product.description),
    )


class CheckoutOrchestrator:
    def __init__(self, state: StorefrontState, gateway_factory: GatewayFactory):
        self.state = state
        self.gateway_factory = gateway_factory

    def _gateway(self) -> PayPalGateway:
        return self.gateway_factory(self.state.credentials.require_validated())

    async def create_order(self, product_id: Optional[str]) -> CreatedOrder:
        """Create a PayPal order for one unit of a catalog product.

        Nothing is written to the ledger here; the order only counts once it
        is captured.
        """
        gateway = self._gateway()
        product = self.state.catalog.get(product_id)
        if product is None:
            raise NotFoundError()

        order = await run_in_threadpool(
            gateway.create_order,
            product.price,
            product.currency,
            [build_line_item(product)],
            product.name,
        )
        if not order.id:
            raise GatewayError(500, "Failed to create order")

        orders_created.inc()
        log.info(
            BusinessEvents.ORDER_CREATED,
            order_id=order.id,
            product_id=product.id,
            amount=product.price,
            currency=product.currency,
            status=order.status,
        )
        return CreatedOrder(id=order.id, status=order.status or "")

    async def capture_order(self, order_id: str, product_id: str) -> CapturedOrder:
        """Capture an approved order and record it when PayPal reports COMPLETED.

        A product that has gone missing does not block the capture; the
        record then carries a placeholder name and PayPal's amounts.
        """
        gateway = self._gateway()
        log.info(BusinessEvents.PAYMENT_ATTEMPT, order_id=order_id, product_id=product_id)

        try:
            order = await run_in_threadpool(gateway.capture_order, order_id)
        except GatewayError as e:
            payments_captured.labels(status="error").inc()
            log.warning(
                BusinessEvents.PAYMENT_FAILURE,
                order_id=order_id,
                status_code=e.status_code,
            )
            raise

        product = self.state.catalog.get(product_id)
        email = payer_email(order)
        name = payer_name(order)
        capture_id, amount, currency = _recorded_amount(order, product)
        status = order.status or ""

        if status == OrderStatus.completed.value:
            record = PaymentRecord(
                order_id=order.id or order_id,
                product_id=product_id or "",
                product_name=product.name if product else UNKNOWN_PRODUCT,
                payer_email=email,
                payer_name=name,
                amount=amount,
                currency=currency,
                status=status,
                capture_id=capture_id,
            )
            self.state.ledger.append(record)
            log.info(
                BusinessEvents.PAYMENT_SUCCESS,
                order_id=record.order_id,
                capture_id=capture_id,
                amount=record.amount,
                currency=record.currency,
            )
        else:
            log.info(BusinessEvents.PAYMENT_PENDING, order_id=order_id, status=status)
        payments_captured.labels(status=status or "unknown").inc()

        return CapturedOrder(
            id=order.id or order_id,
            status=status,
            payer_email=email,
            payer_name=name,
            capture_id=capture_id,
        )

    async def validate_credentials(
        self, client_id: str, client_secret: str
    ) -> CredentialSet:
        """Probe PayPal with the submitted credentials and store the result.

        On failure the submitted values are kept (unvalidated) so the setup
        form can be re-rendered pre-filled.
        """
        client_id = (client_id or "").strip()
        client_secret = (client_secret or "").strip()
        if not client_id or not client_secret:
            raise ValidationError("Client ID and Secret are required")

        candidate = CredentialSet(client_id=client_id, client_secret=client_secret)
        gateway = self.gateway_factory(candidate)
        try:
            order = await run_in_threadpool(gateway.probe)
        except GatewayError as e:
            self.state.credentials.replace(candidate)
            log.warning(
                BusinessEvents.CREDENTIALS_REJECTED,
                client_id=client_id,
                status_code=e.status_code,
            )
            if e.status_code == 401:
                raise ValidationError(
                    "Invalid credentials: Client ID or Secret is wrong. "
                    "Make sure you are using Sandbox credentials (not Live)."
                ) from e
            if e.status_code == 502:
                raise ValidationError(
                    "Failed to validate credentials with PayPal Sandbox."
                ) from e
            raise ValidationError(
                f"PayPal returned error {e.status_code}. "
                "Double-check your Sandbox credentials."
            ) from e

        if not order.id:
            self.state.credentials.replace(candidate)
            log.warning(BusinessEvents.CREDENTIALS_REJECTED, client_id=client_id)
            raise ValidationError(
                "Credentials did not return a valid response. Please check them."
            )

        validated = candidate.model_copy(update={"validated": True})
        self.state.credentials.replace(validated)
        log.info(BusinessEvents.CREDENTIALS_VALIDATED, client_id=client_id)
        return validated
