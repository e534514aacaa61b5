"""External integrations for the payment sync."""
from .plenty_client import PlentyClient
from .shopify_client import ShopifyOrderClient, format_graphql_id

__all__ = ["PlentyClient", "ShopifyOrderClient", "format_graphql_id"]
