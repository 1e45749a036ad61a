"""
PayPal Gateway Adapter

This module wraps the PayPal REST API calls the storefront needs:
- OAuth2 client-credentials token (cached until shortly before expiry)
- Orders v2 create
- Orders v2 capture
- A minimal create used to probe whether credentials work

Order calls are never retried; only the token fetch retries transport errors.
"""

from datetime import UTC, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

import requests
import structlog
import tenacity

from core.errors import GatewayError
from core.logging import BusinessEvents
from payments.paypal_models import LineItem, Money, Order, truncate
from store.models import CredentialSet

SANDBOX_BASE = "https://api-m.sandbox.paypal.com"

# (base, client_id, client_secret) -> (token, expires_at); holds one entry at most
_TOKEN_CACHE: Dict[Tuple[str, str, str], Tuple[str, datetime]] = {}

log = structlog.get_logger(__name__)


def _error_body(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class PayPalGateway:
    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = SANDBOX_BASE,
        timeout: Optional[float] = None,
    ):
        self.base = base_url.rstrip("/")
        self.client = client_id
        self.secret = client_secret
        self.timeout = timeout

    @classmethod
    def from_credentials(
        cls,
        credentials: CredentialSet,
        base_url: str = SANDBOX_BASE,
        timeout: Optional[float] = None,
    ) -> "PayPalGateway":
        return cls(
            credentials.client_id,
            credentials.client_secret,
            base_url=base_url,
            timeout=timeout,
        )

    @tenacity.retry(
        stop=tenacity.stop_after_attempt(3),
        wait=tenacity.wait_exponential(max=4),
        retry=tenacity.retry_if_exception_type(
            (requests.ConnectionError, requests.Timeout)
        ),
        reraise=True,
    )
    def _fetch_token(self) -> requests.Response:
        return requests.post(
            f"{self.base}/v1/oauth2/token",
            auth=(self.client, self.secret),
            data={"grant_type": "client_credentials"},
            timeout=self.timeout,
        )

    def _token(self) -> str:
        key = (self.base, self.client, self.secret)
        cached = _TOKEN_CACHE.get(key)
        if cached and cached[1] > datetime.now(UTC):
            return cached[0]

        try:
            r = self._fetch_token()
        except requests.RequestException as e:
            log.error(BusinessEvents.GATEWAY_ERROR, step="token", error=str(e))
            raise GatewayError(502, "PayPal unreachable") from e

        if r.status_code != 200:
            log.error(
                BusinessEvents.GATEWAY_ERROR,
                step="token",
                status_code=r.status_code,
                body=_error_body(r),
            )
            raise GatewayError(r.status_code, body=_error_body(r))

        payload = r.json()
        tok = payload["access_token"]
        ttl = int(payload.get("expires_in", 300))
        # Superseded credentials are dropped along with their tokens
        _TOKEN_CACHE.clear()
        _TOKEN_CACHE[key] = (tok, datetime.now(UTC) + timedelta(seconds=ttl - 30))
        return tok

    def _post(
        self, path: str, body: Optional[Dict[str, Any]], prefer: str
    ) -> Order:
        headers = {
            "Authorization": f"Bearer {self._token()}",
            "Content-Type": "application/json",
            "Prefer": prefer,
        }
        try:
            r = requests.post(
                f"{self.base}{path}", json=body, headers=headers, timeout=self.timeout
            )
        except requests.RequestException as e:
            log.error(BusinessEvents.GATEWAY_ERROR, path=path, error=str(e))
            raise GatewayError(502, "PayPal unreachable") from e

        if r.status_code not in (200, 201):
            # Full body stays in the server log; callers only see the status
            log.error(
                BusinessEvents.GATEWAY_ERROR,
                path=path,
                status_code=r.status_code,
                body=_error_body(r),
            )
            raise GatewayError(r.status_code, body=_error_body(r))

        return Order.model_validate(r.json())

    def create_order(
        self,
        amount: str,
        currency: str,
        items: List[LineItem],
        description: str,
    ) -> Order:
        """Create a CAPTURE-intent order with one purchase unit."""
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {
                        "currency_code": currency,
                        "value": amount,
                        "breakdown": {
                            "item_total": {"currency_code": currency, "value": amount}
                        },
                    },
                    "description": truncate(description),
                    "items": [item.model_dump(exclude_none=True) for item in items],
                }
            ],
        }
        return self._post("/v2/checkout/orders", body, "return=representation")

    def capture_order(self, order_id: str) -> Order:
        return self._post(
            f"/v2/checkout/orders/{order_id}/capture", None, "return=representation"
        )

    def probe(self) -> Order:
        """Create a throwaway USD 0.01 order to prove the credentials work."""
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {"amount": Money(currency_code="USD", value="0.01").model_dump()}
            ],
        }
        return self._post("/v2/checkout/orders", body, "return=minimal")
