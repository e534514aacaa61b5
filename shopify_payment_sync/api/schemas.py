"""
Pydantic schemas for API request/response models.
"""
from typing import Any, Optional

from pydantic import BaseModel, Field

from shopify_payment_sync.core.models import PlentyOrder, ShopifyOrder


class OrderEventRequest(BaseModel):
    """Order event delivered by the plentymarkets event procedure."""

    order: PlentyOrder = Field(..., description="Order the procedure was triggered for")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "order": {
                        "id": 4711,
                        "properties": [{"typeId": 7, "value": "5012345678901"}],
                        "amounts": [{"currency": "EUR", "exchangeRate": 1}],
                    }
                }
            ]
        }
    }


class DiagnosticOrderResponse(BaseModel):
    """Response schema for the Shopify order diagnostic endpoint."""

    ok: bool = Field(..., description="Whether the order was fetched")
    order: Optional[ShopifyOrder] = Field(default=None, description="Normalized Shopify order")
    message: Optional[str] = Field(default=None, description="Failure description")


class HealthCheckResponse(BaseModel):
    """Response schema for health check."""

    status: str = Field(..., description="Overall health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    checks: dict[str, Any] = Field(default_factory=dict, description="Configuration checks")
