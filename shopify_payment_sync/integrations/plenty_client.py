"""
plentymarkets REST client.

Implements the order lookup, the existing-payments reader and the payment and
relation writers used by the reconciliation core. Responses are normalized
into the core models here so nothing downstream branches on payload shape.
"""
from typing import Any, Mapping, Optional, Type

import httpx
import structlog
from pydantic import ValidationError

from shopify_payment_sync.config import Settings
from shopify_payment_sync.core.models import (
    CommittedPayment,
    ExistingPayment,
    PaymentDraft,
    PlentyOrder,
)
from shopify_payment_sync.core.ports import WriteAccess
from shopify_payment_sync.exceptions import (
    ConfigurationError,
    FetchError,
    PaymentSyncError,
    WriteError,
)

logger = structlog.get_logger(__name__)


class PlentyClient:
    """Thin synchronous wrapper around the plentymarkets REST API."""

    def __init__(
        self,
        base_url: str,
        api_token: str,
        timeout: float = 20.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the plentymarkets client.

        Args:
            base_url: System URL, e.g. https://example.plentymarkets-cloud01.com
            api_token: REST bearer token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        if not base_url.strip():
            raise ConfigurationError("Missing required option: plenty_base_url", key="plenty_base_url")
        if not api_token.strip():
            raise ConfigurationError("Missing required option: plenty_api_token", key="plenty_api_token")

        self.base_url = base_url.strip().rstrip("/")
        self.api_token = api_token.strip()
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(
        cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None
    ) -> "PlentyClient":
        return cls(
            base_url=settings.plenty_base_url,
            api_token=settings.plenty_api_token,
            timeout=settings.http_timeout,
            transport=transport,
        )

    def _request(
        self,
        method: str,
        path: str,
        error_cls: Type[PaymentSyncError],
        **kwargs: Any,
    ) -> Any:
        url = f"{self.base_url}{path}"
        headers = {
            "Authorization": f"Bearer {self.api_token}",
            "Accept": "application/json",
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.request(method, url, headers=headers, **kwargs)
                response.raise_for_status()
                if not response.content:
                    return None
                return response.json()

        except httpx.TimeoutException as e:
            raise error_cls(
                f"plentymarkets {method} {path} timed out after {self.timeout}s",
                original_error=e,
            ) from e

        except httpx.HTTPStatusError as e:
            raise error_cls(
                f"plentymarkets {method} {path} responded with status "
                f"{e.response.status_code}: {e.response.text}",
                status_code=e.response.status_code,
                original_error=e,
            ) from e

        except httpx.HTTPError as e:
            raise error_cls(f"plentymarkets {method} {path} failed: {e}", original_error=e) from e

        except ValueError as e:
            raise error_cls(
                f"Invalid JSON from plentymarkets {method} {path}: {e}", original_error=e
            ) from e

    def get_order(self, order_id: int) -> PlentyOrder:
        """
        Load an order with its properties and currency amounts.

        Raises:
            FetchError: If the order cannot be read
        """
        body = self._request(
            "GET", f"/rest/orders/{order_id}", FetchError, params={"with[]": "amounts"}
        )
        if not isinstance(body, dict):
            raise FetchError(f"Unexpected order payload for order {order_id}")

        try:
            return PlentyOrder.model_validate(
                {
                    "id": body.get("id", order_id),
                    "properties": body.get("properties"),
                    "amounts": body.get("amounts"),
                }
            )
        except ValidationError as e:
            raise FetchError(f"Malformed order payload for order {order_id}: {e}") from e

    def list_for_order(self, order_id: int) -> list[ExistingPayment]:
        """
        List payments attached to an order.

        Raises:
            FetchError: If the payment list cannot be read or is malformed
        """
        body = self._request("GET", f"/rest/payments/orders/{order_id}", FetchError)
        if body is None:
            return []
        if isinstance(body, dict):
            body = body.get("entries")
        # Unreadable bodies raise, they never read as an empty list
        if not isinstance(body, list):
            raise FetchError(f"Unexpected payment list payload for order {order_id}")
        if not all(isinstance(raw, Mapping) for raw in body):
            raise FetchError(f"Unexpected payment entry in payload for order {order_id}")

        try:
            return [ExistingPayment.from_raw(raw) for raw in body]
        except ValidationError as e:
            raise FetchError(f"Malformed payment payload for order {order_id}: {e}") from e

    def create(self, draft: PaymentDraft) -> CommittedPayment:
        """
        Create a payment.

        Raises:
            WriteError: If the payment is rejected or the response has no id
        """
        body = self._request("POST", "/rest/payments", WriteError, json=draft.to_payload())
        if not isinstance(body, dict) or body.get("id") is None:
            raise WriteError("plentymarkets did not return a payment id")

        logger.debug("plenty_payment_created", payment_id=body["id"], mop_id=draft.mop_id)
        return CommittedPayment(id=int(body["id"]))

    def link(self, payment_id: int, order_id: int, primary: bool) -> None:
        """
        Relate a payment to an order.

        Raises:
            WriteError: If the relation cannot be created
        """
        self._request(
            "POST",
            f"/rest/payment/{payment_id}/order/{order_id}",
            WriteError,
            json={"isPrimary": primary},
        )
        logger.debug(
            "plenty_payment_linked", payment_id=payment_id, order_id=order_id, primary=primary
        )

    def write_access(self) -> WriteAccess:
        """Grant elevated write access to payments and relations through this client."""
        return WriteAccess(payments=self, relations=self)
