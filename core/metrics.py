"""
Prometheus metrics instrumentation for the storefront.

Exposes HTTP metrics at /metrics plus a few checkout counters.
"""

from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

orders_created = Counter(
    "storefront_orders_created_total", "Total number of PayPal orders created"
)

payments_captured = Counter(
    "storefront_payments_captured_total",
    "Capture attempts by resulting PayPal order status",
    ["status"],  # COMPLETED, PENDING, error, ...
)

products_created = Counter(
    "storefront_products_created_total", "Total number of catalog products created"
)


def init_metrics(app):
    """
    Initialize Prometheus metrics instrumentation for the FastAPI app.

    Args:
        app: FastAPI application instance

    Returns:
        Instrumentator instance
    """
    inst = Instrumentator(
        should_group_status_codes=False,
        should_ignore_untemplated=True,
        excluded_handlers=["/metrics", "/uploads.*"],
    )
    inst.instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)
    return inst
