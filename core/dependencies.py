from functools import partial

from fastapi import Depends, Request

from core.settings import Settings
from payments.paypal_gateway import PayPalGateway
from store.memory import StorefrontState

# Settings singleton
_settings = None


def get_settings() -> Settings:
    """Dependency that provides application settings."""
    assert (
        _settings is not None
    ), "Settings not initialized. Make sure startup() was called."
    return _settings


def init_settings():
    """Initialize settings singleton."""
    global _settings
    _settings = Settings()


def clear_settings():
    """Clear settings singleton."""
    global _settings
    _settings = None


def get_state(request: Request) -> StorefrontState:
    """Dependency that provides the storefront state owned by the app."""
    return request.app.state.storefront


def get_gateway_factory(settings: Settings = Depends(get_settings)):
    """Dependency returning a callable that builds a gateway for a credential set."""
    return partial(
        PayPalGateway.from_credentials,
        base_url=settings.PAYPAL_BASE,
        timeout=settings.PAYPAL_TIMEOUT_SECONDS,
    )
