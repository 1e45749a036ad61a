"""
Checkout API routes called by the PayPal button script on the checkout page.
"""

from fastapi import APIRouter, Depends

from api.schemas import CaptureOut, ErrorOut, OrderCapture, OrderCreate, OrderOut
from core.dependencies import get_gateway_factory, get_state
from payments.checkout import CheckoutOrchestrator
from store.memory import StorefrontState

router = APIRouter()

ERROR_RESPONSES = {
    404: {"model": ErrorOut},
    500: {"model": ErrorOut},
    502: {"model": ErrorOut},
}


def get_orchestrator(
    state: StorefrontState = Depends(get_state),
    gateway_factory=Depends(get_gateway_factory),
) -> CheckoutOrchestrator:
    return CheckoutOrchestrator(state, gateway_factory)


@router.post("", response_model=OrderOut, responses=ERROR_RESPONSES)
async def create_order(
    body: OrderCreate,
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
):
    """
    Create a PayPal order for a catalog product.

    **Request Example:**
    ```json
    {"productId": "3f9a1c2b"}
    ```

    **Response Example:**
    ```json
    {"id": "5O190127TN364715T", "status": "CREATED"}
    ```
    """
    order = await orchestrator.create_order(body.product_id)
    return OrderOut(id=order.id, status=order.status)


@router.post("/{order_id}/capture", response_model=CaptureOut, responses=ERROR_RESPONSES)
async def capture_order(
    order_id: str,
    body: OrderCapture,
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
):
    """Capture a buyer-approved order; non-COMPLETED statuses are returned as-is."""
    captured = await orchestrator.capture_order(order_id, body.product_id or "")
    return CaptureOut(
        id=captured.id,
        status=captured.status,
        payer_email=captured.payer_email,
        payer_name=captured.payer_name,
        capture_id=captured.capture_id,
    )
