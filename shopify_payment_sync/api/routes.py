"""
API routes for the payment sync.
"""
from typing import Any

import structlog
from fastapi import APIRouter, Depends, Query, Response, status
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from shopify_payment_sync import __version__
from shopify_payment_sync.config import Settings, SyncConfig, get_settings
from shopify_payment_sync.core.models import ReconciliationOutcome
from shopify_payment_sync.core.ports import OrderFetcher, WriteAccess
from shopify_payment_sync.core.reconciliation import PaymentReconciler
from shopify_payment_sync.exceptions import PaymentSyncError
from shopify_payment_sync.integrations.plenty_client import PlentyClient
from shopify_payment_sync.integrations.shopify_client import ShopifyOrderClient

from .schemas import DiagnosticOrderResponse, HealthCheckResponse, OrderEventRequest

logger = structlog.get_logger(__name__)

procedure_router = APIRouter(prefix="/procedures", tags=["procedures"])
diagnostic_router = APIRouter(prefix="/shopify-payment-fix", tags=["diagnostics"])
monitoring_router = APIRouter(tags=["monitoring"])


def get_sync_config(settings: Settings = Depends(get_settings)) -> SyncConfig:
    return settings.sync_config()


def get_order_fetcher(settings: Settings = Depends(get_settings)) -> OrderFetcher:
    return ShopifyOrderClient.from_config(settings.sync_config(), timeout=settings.http_timeout)


def get_plenty_client(settings: Settings = Depends(get_settings)) -> PlentyClient:
    return PlentyClient.from_settings(settings)


def get_reconciler(
    order_fetcher: OrderFetcher = Depends(get_order_fetcher),
    plenty: PlentyClient = Depends(get_plenty_client),
) -> PaymentReconciler:
    return PaymentReconciler(order_fetcher=order_fetcher, payments_reader=plenty)


def get_write_access(plenty: PlentyClient = Depends(get_plenty_client)) -> WriteAccess:
    return plenty.write_access()


@procedure_router.post(
    "/shopify-split-paypal",
    response_model=ReconciliationOutcome,
    summary="Add Shopify PayPal payment",
    description="Create the missing PayPal payment for a Shopify split-payment order",
)
def run_split_paypal_procedure(
    event: OrderEventRequest,
    reconciler: PaymentReconciler = Depends(get_reconciler),
    config: SyncConfig = Depends(get_sync_config),
    access: WriteAccess = Depends(get_write_access),
) -> ReconciliationOutcome:
    """
    Reconcile one order.

    Always answers with a structured outcome; failures are reported in the body.
    """
    outcome = reconciler.handle(event.order, config, access)
    logger.info(
        "procedure_completed",
        order_id=outcome.order_id,
        status=outcome.status.value,
        reason=outcome.reason.value,
    )
    return outcome


@diagnostic_router.get(
    "/test-order",
    response_model=DiagnosticOrderResponse,
    summary="Fetch a Shopify order",
    description="Fetch-only lookup of a Shopify order by external order id",
)
def fetch_test_order(
    external_order_id: str = Query("", alias="externalOrderId"),
    order_fetcher: OrderFetcher = Depends(get_order_fetcher),
) -> Any:
    """Return the normalized Shopify order for operational inspection."""
    if not external_order_id.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"ok": False, "message": "Provide the externalOrderId query parameter."},
        )

    try:
        order = order_fetcher.fetch_by_external_id(external_order_id)
    except PaymentSyncError as e:
        logger.error("diagnostic_fetch_failed", external_order_id=external_order_id, error=str(e))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"ok": False, "message": str(e)},
        )

    if order is None:
        logger.error("diagnostic_order_not_found", external_order_id=external_order_id)
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content={
                "ok": False,
                "message": "Order not found or fetch failed. Inspect logs for details.",
            },
        )

    return {"ok": True, "order": order}


@monitoring_router.get("/health", response_model=HealthCheckResponse, summary="Health check")
def health(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Report whether the sync is fully configured."""
    config = settings.sync_config()
    checks = {
        "shopify_configured": config.missing_shop_option() is None,
        "plenty_configured": bool(settings.plenty_base_url and settings.plenty_api_token),
        "paypal_mop_configured": config.paypal_mop_id > 0,
    }
    return {
        "status": "healthy" if all(checks.values()) else "degraded",
        "service": settings.app_name,
        "version": __version__,
        "checks": checks,
    }


@monitoring_router.get("/metrics", summary="Prometheus metrics")
def prometheus_metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
