"""
Shopify Admin GraphQL client for order lookups.

Resolves the external order id stored on a plentymarkets order into a
normalized ShopifyOrder. Read-only; never retries.
"""
import json
import re
import time
from typing import Any, Optional

import httpx
import structlog
from pydantic import ValidationError

from shopify_payment_sync.config import SyncConfig
from shopify_payment_sync.core.models import SHOPIFY_ORDER_GID_PREFIX, ShopifyOrder
from shopify_payment_sync.exceptions import ConfigurationError, FetchError
from shopify_payment_sync.monitoring.metrics import metrics

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 20.0

ORDER_QUERY = """
query getOrder($id: ID!) {
  order(id: $id) {
    id
    name
    paymentGatewayNames
    transactions(first: 10) {
      amountSet {
        presentmentMoney {
          amount
          currencyCode
        }
        shopMoney {
          amount
          currencyCode
        }
      }
      createdAt
      formattedGateway
      gateway
      id
      kind
      processedAt
      status
    }
  }
}
"""


def format_graphql_id(external_order_id: str) -> Optional[str]:
    """
    Turn a stored external order id into a Shopify order GID.

    Accepts either a full ``gid://shopify/Order/...`` id or anything containing
    the numeric order id; non-digits are dropped and leading zeros stripped.

    Args:
        external_order_id: Value of the external order id property

    Returns:
        Optional[str]: Order GID, or None if no usable id can be derived
    """
    trimmed = external_order_id.strip()
    if not trimmed:
        return None

    if trimmed.lower().startswith(SHOPIFY_ORDER_GID_PREFIX.lower()):
        return trimmed

    digits = re.sub(r"[^0-9]", "", trimmed)
    if not digits:
        logger.warning("unusable_external_order_id", external_order_id=external_order_id)
        return None

    normalized = digits.lstrip("0") or digits
    return f"{SHOPIFY_ORDER_GID_PREFIX}{normalized}"


class ShopifyOrderClient:
    """Fetches single orders from the Shopify Admin GraphQL API."""

    def __init__(
        self,
        shop_name: str,
        api_version: str,
        access_token: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the Shopify client.

        Args:
            shop_name: Shop subdomain on myshopify.com
            api_version: Admin API version, e.g. 2025-01
            access_token: Admin API access token
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.shop_name = shop_name.strip()
        self.api_version = api_version.strip()
        self.access_token = access_token.strip()
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: SyncConfig,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ShopifyOrderClient":
        return cls(
            shop_name=config.shop_name,
            api_version=config.api_version,
            access_token=config.access_token,
            timeout=timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return (
            f"https://{self.shop_name}.myshopify.com"
            f"/admin/api/{self.api_version}/graphql.json"
        )

    def _check_config(self) -> None:
        for key in ("shop_name", "api_version", "access_token"):
            if not getattr(self, key):
                raise ConfigurationError(f"Missing required option: {key}", key=key)

    def _post(self, payload: dict[str, Any]) -> Any:
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.access_token,
        }
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.endpoint, json=payload, headers=headers)
                response.raise_for_status()
                return response.json()

        except httpx.TimeoutException as e:
            raise FetchError(
                f"Shopify request timed out after {self.timeout}s", original_error=e
            ) from e

        except httpx.HTTPStatusError as e:
            raise FetchError(
                f"Shopify responded with status {e.response.status_code} "
                f"body: {e.response.text}",
                status_code=e.response.status_code,
                original_error=e,
            ) from e

        except httpx.HTTPError as e:
            raise FetchError(f"Shopify request failed: {e}", original_error=e) from e

        except ValueError as e:
            raise FetchError(f"Invalid JSON from Shopify: {e}", original_error=e) from e

    def fetch_by_external_id(self, external_order_id: str) -> Optional[ShopifyOrder]:
        """
        Fetch and normalize a Shopify order.

        Args:
            external_order_id: Numeric or GID form of the Shopify order id

        Returns:
            Optional[ShopifyOrder]: The order, or None if Shopify returned none

        Raises:
            ConfigurationError: If shop credentials are missing
            FetchError: On transport errors, error status or malformed payload
        """
        self._check_config()

        order_gid = format_graphql_id(external_order_id)
        if order_gid is None:
            return None

        start_time = time.time()
        try:
            body = self._post({"query": ORDER_QUERY, "variables": {"id": order_gid}})
        except FetchError:
            metrics.record_shopify_fetch("error", time.time() - start_time)
            raise

        duration = time.time() - start_time
        if not isinstance(body, dict) or ("data" not in body and "errors" not in body):
            metrics.record_shopify_fetch("error", duration)
            raise FetchError("Malformed Shopify response: expected an object with data or errors")

        data = body.get("data")
        order = data.get("order") if isinstance(data, dict) else None

        if not order:
            errors = body.get("errors")
            message = json.dumps(errors) if errors else "Order not returned by Shopify."
            # Not-found is only a failure at the diagnostic endpoint
            logger.info(
                "shopify_order_not_returned",
                external_order_id=external_order_id,
                message=message,
            )
            metrics.record_shopify_fetch("not_found", duration)
            return None

        try:
            shopify_order = ShopifyOrder.from_graphql(order)
        except (ValidationError, AttributeError, TypeError) as e:
            metrics.record_shopify_fetch("error", duration)
            raise FetchError(f"Malformed Shopify order payload: {e}", original_error=e) from e

        metrics.record_shopify_fetch("found", duration)
        logger.debug(
            "shopify_order_fetched",
            external_order_id=external_order_id,
            shopify_order_id=shopify_order.id,
            transactions=len(shopify_order.transactions),
            duration_seconds=duration,
        )
        return shopify_order
