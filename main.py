"""
PayPal Instant Storefront - Main Application Entry Point

This module initializes the FastAPI application: operators configure PayPal
Sandbox credentials and create products, buyers pay through shareable
checkout links. All state lives in memory for the lifetime of the process.
"""

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from starlette.status import HTTP_303_SEE_OTHER

from api.middleware import log_api_entry
from api.routes import router as api_router
from api.routes.pages import router as pages_router
from api.templating import render
from core.dependencies import clear_settings, get_settings, init_settings
from core.errors import (
    ConfigurationError,
    GatewayError,
    NotFoundError,
    StorefrontError,
)
from core.logging import BusinessEvents, configure_logging
from core.metrics import init_metrics
from core.settings import Settings
from core.tracing import init_tracer
from store.memory import StorefrontState

log = structlog.get_logger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create settings and a fresh, empty storefront state for this process."""
    init_settings()
    settings = get_settings()
    init_tracer(settings.APP_NAME)
    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.state.storefront = StorefrontState()
    log.info("storefront.started", environment=settings.ENVIRONMENT)

    yield

    # Volatile by design: dropping the state object discards everything
    app.state.storefront = None
    clear_settings()


def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _empty_state() -> StorefrontState:
    return StorefrontState()


def register_exception_handlers(app: FastAPI) -> None:
    """
    JSON ``{"error": ...}`` for /api routes; redirects or rendered pages for
    the HTML surface.
    """

    @app.exception_handler(StorefrontError)
    async def storefront_error_handler(request: Request, exc: StorefrontError):
        if isinstance(exc, GatewayError):
            log.warning(
                BusinessEvents.GATEWAY_ERROR,
                path=request.url.path,
                status_code=exc.status_code,
            )

        if _is_api(request):
            return JSONResponse(
                status_code=exc.status_code, content={"error": exc.message}
            )

        state = getattr(request.app.state, "storefront", None) or _empty_state()
        if isinstance(exc, ConfigurationError):
            return RedirectResponse(url="/setup", status_code=HTTP_303_SEE_OTHER)
        if isinstance(exc, NotFoundError):
            return render(request, "not_found.html", state, status_code=404)
        return render(
            request,
            "error.html",
            state,
            status_code=exc.status_code,
            message=exc.message,
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log.exception("unhandled_error", path=request.url.path, error=str(exc))
        if _is_api(request):
            return JSONResponse(
                status_code=500, content={"error": "Internal server error"}
            )
        state = getattr(request.app.state, "storefront", None) or _empty_state()
        return render(
            request,
            "error.html",
            state,
            status_code=500,
            message="Internal server error",
        )


def create_app() -> FastAPI:
    settings = Settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="""
    ## PayPal Sandbox Storefront

    Configure sandbox credentials, create products and share checkout links.

    ### Checkout API:
    - `POST /api/orders` - create a PayPal order for a product
    - `POST /api/orders/{orderId}/capture` - capture a buyer-approved order
    """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    FastAPIInstrumentor.instrument_app(app)
    if settings.METRICS_ENABLED:
        init_metrics(app)

    app.middleware("http")(log_api_entry)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    Path(settings.UPLOAD_DIR).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    @app.get("/healthz")
    async def health_check(settings: Settings = Depends(get_settings)):
        """Health check endpoint to verify API status."""
        return {
            "status": "ok",
            "app_name": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health")
    async def health(settings: Settings = Depends(get_settings)):
        """Health check endpoint alias."""
        return await health_check(settings)

    app.include_router(api_router, prefix="/api")
    app.include_router(pages_router)
    return app


app = create_app()


def main():
    configure_logging()
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
