"""Test configuration and fixtures."""

import os
import tempfile

# Settings are read when main is imported, so the test environment goes first
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DISABLE_TRACING", "true")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="storefront-uploads-"))

import pytest
from fastapi.testclient import TestClient

import payments.paypal_gateway
from core.dependencies import get_gateway_factory, get_settings
from core.errors import GatewayError
from core.settings import Settings
from main import app
from payments.checkout import CheckoutOrchestrator
from payments.paypal_models import Order
from store.memory import StorefrontState
from store.models import CredentialSet, Product


def completed_capture(
    order_id="ORDER1",
    status="COMPLETED",
    email="buyer@example.com",
    given_name="Jane",
    surname="Buyer",
    amount="9.99",
    currency="USD",
    capture_id="CAP1",
) -> Order:
    """Build a capture response shaped like PayPal's return=representation body."""
    payload = {
        "id": order_id,
        "status": status,
        "payment_source": {
            "paypal": {
                "email_address": email,
                "name": {"given_name": given_name, "surname": surname},
            }
        },
        "purchase_units": [
            {
                "reference_id": "default",
                "payments": {
                    "captures": [
                        {
                            "id": capture_id,
                            "status": status,
                            "amount": {"currency_code": currency, "value": amount},
                        }
                    ]
                },
            }
        ],
    }
    return Order.model_validate(payload)


class FakeGateway:
    """Stands in for PayPalGateway; records every call it receives."""

    def __init__(self):
        self.calls = []
        self.credentials = []
        self.create_response = Order(id="ORDER1", status="CREATED")
        self.capture_response = completed_capture()
        self.probe_response = Order(id="PROBE1", status="CREATED")
        self.error = None

    def factory(self, credentials: CredentialSet):
        self.credentials.append(credentials)
        return self

    def _answer(self, response):
        if self.error is not None:
            raise self.error
        return response

    def create_order(self, amount, currency, items, description):
        self.calls.append(("create_order", amount, currency, items, description))
        return self._answer(self.create_response)

    def capture_order(self, order_id):
        self.calls.append(("capture_order", order_id))
        return self._answer(self.capture_response)

    def probe(self):
        self.calls.append(("probe",))
        return self._answer(self.probe_response)

    def fail_with(self, status_code, body=None):
        self.error = GatewayError(status_code, body=body)


@pytest.fixture(autouse=True)
def clear_token_cache():
    payments.paypal_gateway._TOKEN_CACHE.clear()
    yield
    payments.paypal_gateway._TOKEN_CACHE.clear()


@pytest.fixture
def test_settings(tmp_path):
    return Settings(
        UPLOAD_DIR=str(tmp_path / "uploads"),
        APP_NAME="Test Storefront",
        ENVIRONMENT="test",
        DEBUG=True,
    )


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def state():
    return StorefrontState()


@pytest.fixture
def validated_state(state):
    state.credentials.replace(
        CredentialSet(client_id="sb-client", client_secret="sb-secret", validated=True)
    )
    return state


@pytest.fixture
def widget(validated_state):
    return validated_state.catalog.add(
        Product(name="Widget", description="A fine widget", price="9.99", currency="USD")
    )


@pytest.fixture
def orchestrator(validated_state, gateway):
    return CheckoutOrchestrator(validated_state, gateway.factory)


@pytest.fixture
def client(state, gateway, test_settings):
    """Test client wired to a fresh state and the fake gateway."""
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_gateway_factory] = lambda: gateway.factory

    with TestClient(app) as test_client:
        # Replace the state the lifespan created so tests can seed it
        app.state.storefront = state
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_capture():
    return completed_capture
