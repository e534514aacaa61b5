"""
Main FastAPI application.

Hosts the event procedure trigger and the Shopify order diagnostic endpoint.
"""
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import structlog
from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse

from shopify_payment_sync import __version__
from shopify_payment_sync.config import get_settings
from shopify_payment_sync.exceptions import ConfigurationError
from shopify_payment_sync.monitoring.logging import setup_logging

from .routes import diagnostic_router, monitoring_router, procedure_router

# Setup logging first
setup_logging()
logger = structlog.get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    """
    Application lifespan manager.

    Logs the configuration snapshot on startup and the shutdown event.
    """
    # Startup
    config = settings.sync_config()
    logger.info(
        "application_startup",
        app_name=settings.app_name,
        env=settings.app_env,
        shop_name=config.shop_name or None,
        paypal_mop_id=config.paypal_mop_id,
    )

    yield

    # Shutdown
    logger.info("application_shutdown")


# Create FastAPI application
app = FastAPI(
    title="Shopify Payment Sync",
    description=(
        "Adds the PayPal part of Shopify split payments to plentymarkets orders. "
        "Exposes the event procedure trigger and a fetch-only order diagnostic."
    ),
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


@app.middleware("http")
async def add_request_id_middleware(request: Request, call_next: Any) -> Response:
    """Bind a request id to the log context and echo it in the response."""
    request_id = str(uuid.uuid4())
    start_time = time.time()

    # Add to structlog context
    structlog.contextvars.bind_contextvars(
        request_id=request_id,
        method=request.method,
        path=request.url.path,
    )

    try:
        response = await call_next(request)

        # Add request ID to response headers
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "request_completed",
            status_code=response.status_code,
            duration_seconds=time.time() - start_time,
        )
        return response

    except Exception as e:
        logger.error(
            "request_failed",
            error=str(e),
            duration_seconds=time.time() - start_time,
        )
        raise

    finally:
        structlog.contextvars.clear_contextvars()


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    """Missing configuration is terminal for the request, never retried."""
    logger.error("config_missing", key=exc.key, error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"status": "failed", "reason": "configuration", "message": str(exc)},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler for unhandled exceptions."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        error_type=type(exc).__name__,
        path=request.url.path,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# Include routers
app.include_router(procedure_router)
app.include_router(diagnostic_router)
app.include_router(monitoring_router)


@app.get("/", tags=["root"])
def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "service": settings.app_name,
        "version": __version__,
        "environment": settings.app_env,
        "procedure": "/procedures/shopify-split-paypal",
        "diagnostics": "/shopify-payment-fix/test-order",
        "health": "/health",
        "metrics": "/metrics",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shopify_payment_sync.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
    )
