"""
Tests for the JSON checkout API: POST /api/orders and
POST /api/orders/{orderId}/capture.
"""

from store.models import CredentialSet


def test_create_order_success(client, gateway, widget):
    response = client.post("/api/orders", json={"productId": widget.id})

    assert response.status_code == 200
    assert response.json() == {"id": "ORDER1", "status": "CREATED"}
    assert gateway.calls[0][0] == "create_order"


def test_create_order_unknown_product(client, gateway, validated_state):
    response = client.post("/api/orders", json={"productId": "missing"})

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}
    assert gateway.calls == []


def test_create_order_not_configured(client, gateway):
    response = client.post("/api/orders", json={"productId": "anything"})

    assert response.status_code == 500
    assert response.json() == {"error": "PayPal not configured"}
    assert gateway.calls == []


def test_create_order_unvalidated_credentials(client, state, gateway):
    state.credentials.replace(CredentialSet(client_id="id", client_secret="secret"))

    response = client.post("/api/orders", json={"productId": "anything"})

    assert response.status_code == 500
    assert response.json() == {"error": "PayPal not configured"}


def test_create_order_gateway_status_propagates(client, gateway, widget):
    gateway.fail_with(422, body={"name": "UNPROCESSABLE_ENTITY", "debug_id": "dbg-42"})

    response = client.post("/api/orders", json={"productId": widget.id})

    assert response.status_code == 422
    assert response.json() == {"error": "PayPal API error"}
    assert "dbg-42" not in response.text


def test_create_order_unreachable_gateway(client, gateway, widget):
    gateway.fail_with(502)

    response = client.post("/api/orders", json={"productId": widget.id})

    assert response.status_code == 502
    assert response.json() == {"error": "PayPal API error"}


def test_create_order_without_product_id(client, gateway, validated_state):
    response = client.post("/api/orders", json={})

    assert response.status_code == 404
    assert response.json() == {"error": "Product not found"}
    assert gateway.calls == []


def test_capture_completed(client, validated_state, widget):
    response = client.post("/api/orders/ORDER1/capture", json={"productId": widget.id})

    assert response.status_code == 200
    assert response.json() == {
        "id": "ORDER1",
        "status": "COMPLETED",
        "payerEmail": "buyer@example.com",
        "payerName": "Jane Buyer",
        "captureId": "CAP1",
    }
    record = validated_state.ledger.find_by_order("ORDER1")
    assert record.product_name == "Widget"
    assert len(validated_state.ledger) == 1


def test_capture_pending_is_reported_not_recorded(
    client, gateway, validated_state, widget, make_capture
):
    gateway.capture_response = make_capture(status="PENDING")

    response = client.post("/api/orders/ORDER1/capture", json={"productId": widget.id})

    assert response.status_code == 200
    assert response.json()["status"] == "PENDING"
    assert len(validated_state.ledger) == 0


def test_capture_without_product_id(client, validated_state):
    response = client.post("/api/orders/ORDER1/capture", json={})

    assert response.status_code == 200
    record = validated_state.ledger.find_by_order("ORDER1")
    assert record.product_name == "Unknown"


def test_capture_gateway_error(client, gateway, validated_state, widget):
    gateway.fail_with(404, body={"name": "RESOURCE_NOT_FOUND"})

    response = client.post("/api/orders/BAD/capture", json={"productId": widget.id})

    assert response.status_code == 404
    assert response.json() == {"error": "PayPal API error"}
    assert len(validated_state.ledger) == 0


def test_capture_not_configured(client, gateway):
    response = client.post("/api/orders/ORDER1/capture", json={"productId": "p1"})

    assert response.status_code == 500
    assert response.json() == {"error": "PayPal not configured"}
    assert gateway.calls == []


def test_gateway_receives_stored_credentials(client, gateway, widget):
    client.post("/api/orders", json={"productId": widget.id})

    assert gateway.credentials[0].client_id == "sb-client"
    assert gateway.credentials[0].client_secret == "sb-secret"
