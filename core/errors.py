"""
Storefront error taxonomy.

Every failure path raises one of these; the handlers registered in
``main.py`` turn them into JSON for ``/api`` routes and into redirects or
error pages for the HTML surface.
"""

from typing import Any, Optional


class StorefrontError(Exception):
    """Base class carrying an HTTP status and a message safe to show users."""

    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.public_message
        super().__init__(self.message)


class ConfigurationError(StorefrontError):
    """PayPal credentials are missing or have not been validated."""

    status_code = 500
    public_message = "PayPal not configured"


class NotFoundError(StorefrontError):
    status_code = 404
    public_message = "Product not found"


class GatewayError(StorefrontError):
    """PayPal rejected or failed a call.

    ``body`` keeps the raw gateway payload for server-side logging only; it is
    never rendered into a response.
    """

    public_message = "PayPal API error"

    def __init__(
        self,
        status_code: int,
        message: Optional[str] = None,
        body: Any = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ValidationError(StorefrontError):
    """A setup or product form submission was rejected."""

    status_code = 400
    public_message = "Invalid submission"
