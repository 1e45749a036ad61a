"""Test the metrics module."""

from unittest.mock import MagicMock, patch

from prometheus_client import REGISTRY

from core.metrics import init_metrics, orders_created, payments_captured, products_created


def _sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels) or 0.0


def test_init_metrics_with_app():
    """Test metrics initialization with FastAPI app."""
    mock_app = MagicMock()

    with patch("core.metrics.Instrumentator") as mock_instrumentator:
        mock_inst = MagicMock()
        mock_instrumentator.return_value = mock_inst
        mock_inst.instrument.return_value = mock_inst

        result = init_metrics(mock_app)

        mock_instrumentator.assert_called_once()
        assert "/metrics" in mock_instrumentator.call_args.kwargs["excluded_handlers"]
        mock_inst.instrument.assert_called_with(mock_app)
        mock_inst.expose.assert_called_with(
            mock_app, endpoint="/metrics", include_in_schema=False
        )
        assert result == mock_inst


def test_metrics_naming_convention():
    assert orders_created._name == "storefront_orders_created"
    assert payments_captured._name == "storefront_payments_captured"
    assert products_created._name == "storefront_products_created"


def test_order_and_capture_counters(client, gateway, widget, make_capture):
    orders_before = _sample("storefront_orders_created_total")
    completed_before = _sample("storefront_payments_captured_total", status="COMPLETED")
    pending_before = _sample("storefront_payments_captured_total", status="PENDING")

    client.post("/api/orders", json={"productId": widget.id})
    client.post("/api/orders/ORDER1/capture", json={"productId": widget.id})
    gateway.capture_response = make_capture(status="PENDING")
    client.post("/api/orders/ORDER1/capture", json={"productId": widget.id})

    assert _sample("storefront_orders_created_total") == orders_before + 1
    assert (
        _sample("storefront_payments_captured_total", status="COMPLETED")
        == completed_before + 1
    )
    assert _sample("storefront_payments_captured_total", status="PENDING") == pending_before + 1


def test_capture_errors_counted(client, gateway, widget):
    before = _sample("storefront_payments_captured_total", status="error")
    gateway.fail_with(500)

    client.post("/api/orders/ORDER1/capture", json={"productId": widget.id})

    assert _sample("storefront_payments_captured_total", status="error") == before + 1


def test_products_created_counter(client, validated_state):
    before = _sample("storefront_products_created_total")

    client.post("/products", data={"name": "Widget", "price": "1"}, follow_redirects=False)

    assert _sample("storefront_products_created_total") == before + 1


def test_metrics_endpoint_integration(client):
    """Test that metrics endpoint is available and returns Prometheus format."""
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "text/plain" in response.headers.get("content-type", "")

    content = response.text
    assert "storefront_orders_created_total" in content
    assert "storefront_products_created_total" in content
