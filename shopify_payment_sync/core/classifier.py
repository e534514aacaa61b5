"""Split-payment classification for Shopify orders."""
from typing import Iterable

PLATFORM_GATEWAY = "shopify_payments"
PAYPAL_GATEWAY = "paypal"


def is_split_payment(gateway_names: Iterable[str]) -> bool:
    """
    Check whether an order was paid through Shopify Payments and PayPal together.

    Both tags must be present as exact (case-insensitive) gateway names.

    Args:
        gateway_names: Gateway names reported on the Shopify order

    Returns:
        bool: True only if both the platform and the PayPal gateway were used
    """
    names = {name.lower() for name in gateway_names}
    if not names:
        return False
    return PLATFORM_GATEWAY in names and PAYPAL_GATEWAY in names
