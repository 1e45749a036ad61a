"""
Server-rendered operator and buyer pages.

Operator pages require validated credentials; a ConfigurationError raised by
``require_validated`` is turned into a redirect to /setup by the app's
exception handlers. Buyer pages (checkout, confirmation) are public.
"""

from typing import List, Optional
from urllib.parse import quote_plus

import structlog
from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.status import HTTP_303_SEE_OTHER

from api.routes.orders import get_orchestrator
from api.templating import render
from core.dependencies import get_settings, get_state
from core.errors import NotFoundError, ValidationError
from core.logging import BusinessEvents
from core.metrics import products_created
from core.settings import Settings
from payments.checkout import CheckoutOrchestrator
from store.memory import StorefrontState
from store.models import CURRENCY_LABELS, SUPPORTED_CURRENCIES, Product, format_price
from store.uploads import save_product_images

log = structlog.get_logger(__name__)

router = APIRouter(tags=["Pages"])

DESCRIPTION_PREVIEW = 100


def require_validated(state: StorefrontState = Depends(get_state)) -> StorefrontState:
    state.credentials.require_validated()
    return state


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url=url, status_code=HTTP_303_SEE_OTHER)


def _redirect_with_error(path: str, message: str) -> RedirectResponse:
    return _redirect(f"{path}?error={quote_plus(message)}")


@router.get("/", include_in_schema=False)
def root_redirect(state: StorefrontState = Depends(get_state)):
    if not state.credentials.is_validated:
        return _redirect("/setup")
    return _redirect("/dashboard")


@router.get("/setup", response_class=HTMLResponse)
def setup_page(
    request: Request,
    message: Optional[str] = None,
    error: Optional[str] = None,
    state: StorefrontState = Depends(get_state),
):
    # Last submitted values, validated or not, pre-fill the form
    return render(
        request,
        "setup.html",
        state,
        credentials=state.credentials.current,
        message=message,
        error=error,
    )


@router.post("/setup")
async def submit_setup(
    client_id: str = Form("", alias="clientId"),
    client_secret: str = Form("", alias="clientSecret"),
    orchestrator: CheckoutOrchestrator = Depends(get_orchestrator),
):
    try:
        await orchestrator.validate_credentials(client_id, client_secret)
    except ValidationError as e:
        return _redirect_with_error("/setup", e.message)
    return _redirect("/dashboard")


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard(request: Request, state: StorefrontState = Depends(require_validated)):
    cards = []
    for product in state.catalog.recent():
        description = product.description
        if len(description) > DESCRIPTION_PREVIEW:
            description = description[:DESCRIPTION_PREVIEW] + "..."
        cards.append(
            {
                "product": product,
                "description": description,
                "sales": state.ledger.sales_count(product.id),
                "checkout_url": str(
                    request.url_for("checkout_page", product_id=product.id)
                ),
            }
        )

    return render(
        request,
        "dashboard.html",
        state,
        cards=cards,
        product_count=len(state.catalog),
        completed_sales=len(state.ledger.completed()),
        total_revenue=f"{state.ledger.total_revenue():.2f}",
    )


@router.get("/products/new", response_class=HTMLResponse)
def new_product_page(
    request: Request,
    error: Optional[str] = None,
    state: StorefrontState = Depends(require_validated),
):
    return render(
        request,
        "product_new.html",
        state,
        currencies=[(code, CURRENCY_LABELS[code]) for code in SUPPORTED_CURRENCIES],
        error=error,
    )


@router.post("/products")
async def create_product(
    name: str = Form(""),
    description: str = Form(""),
    price: str = Form(""),
    currency: str = Form("USD"),
    images: Optional[List[UploadFile]] = File(None),
    state: StorefrontState = Depends(require_validated),
    settings: Settings = Depends(get_settings),
):
    if not name.strip() or not price.strip():
        return _redirect("/products/new")

    currency = (currency or "USD").upper()
    try:
        normalised_price = format_price(price)
        if currency not in SUPPORTED_CURRENCIES:
            raise ValidationError(f"Unsupported currency {currency}")
        filenames = await save_product_images(
            images,
            settings.UPLOAD_DIR,
            settings.MAX_UPLOAD_BYTES,
            settings.MAX_PRODUCT_IMAGES,
        )
    except ValidationError as e:
        return _redirect_with_error("/products/new", e.message)

    product = state.catalog.add(
        Product(
            name=name.strip(),
            description=description.strip(),
            price=normalised_price,
            currency=currency,
            images=filenames,
        )
    )
    products_created.inc()
    log.info(
        BusinessEvents.PRODUCT_CREATED,
        product_id=product.id,
        price=product.price,
        currency=product.currency,
        images=len(product.images),
    )
    return _redirect("/dashboard")


@router.get("/checkout/{product_id}", response_class=HTMLResponse, name="checkout_page")
def checkout_page(
    request: Request,
    product_id: str,
    state: StorefrontState = Depends(get_state),
    settings: Settings = Depends(get_settings),
):
    product = state.catalog.get(product_id)
    if product is None or not state.credentials.is_validated:
        raise NotFoundError()

    return render(
        request,
        "checkout.html",
        state,
        product=product,
        sdk_url=settings.PAYPAL_SDK_URL,
        client_id=state.credentials.current.client_id,
    )


@router.get("/confirmation/{order_id}", response_class=HTMLResponse)
def confirmation_page(
    request: Request,
    order_id: str,
    product_id: Optional[str] = Query(None, alias="productId"),
    state: StorefrontState = Depends(get_state),
):
    return render(
        request,
        "confirmation.html",
        state,
        order_id=order_id,
        product=state.catalog.get(product_id),
        payment=state.ledger.find_by_order(order_id),
    )


@router.get("/payments", response_class=HTMLResponse)
def payments_page(request: Request, state: StorefrontState = Depends(require_validated)):
    return render(request, "payments.html", state, payments=state.ledger.recent())
