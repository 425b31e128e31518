"""
FastAPI Application Factory

Creates and configures the dashboard API application.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
import structlog

from merchant_dashboard.analytics import DataIntegrityError
from merchant_dashboard.config import get_settings
from merchant_dashboard.config.logging import configure_logging
from merchant_dashboard.config.settings import Settings
from merchant_dashboard.ingestion import (
    TransactionSource,
    TransactionSourceError,
    create_transaction_source,
)
from merchant_dashboard.serving.api.middleware import (
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from merchant_dashboard.serving.api.routes import dashboard_router, health_router
from merchant_dashboard.services import DashboardService, ProfileDirectory

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()
    logger.info(
        "Starting merchant dashboard API",
        transactions_source=app.state.dashboard_service.source.name,
    )
    yield
    logger.info("Shutting down...")


async def data_integrity_handler(request: Request, exc: DataIntegrityError) -> JSONResponse:
    """Malformed upstream records: report, never render zeros"""
    logger.error(
        "Data integrity error",
        error=exc.error_code,
        message=exc.message,
        transaction_id=exc.transaction_id,
        path=request.url.path,
    )
    return JSONResponse(status_code=502, content=exc.to_dict())


async def source_unavailable_handler(request: Request, exc: TransactionSourceError) -> JSONResponse:
    logger.error("Transaction source unavailable", error=str(exc), path=request.url.path)
    return JSONResponse(
        status_code=503,
        content={"error": "transactions_unavailable", "message": str(exc)},
    )


def create_api_app(
    settings: Optional[Settings] = None,
    source: Optional[TransactionSource] = None,
    profiles: Optional[ProfileDirectory] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Settings override, defaults to the cached settings
        source: Transaction source override, defaults to the configured backend
        profiles: Profile directory for greeting names

    Returns:
        Configured FastAPI app instance
    """
    settings = settings or get_settings()
    source = source or create_transaction_source(settings)

    app = FastAPI(
        title="Merchant Dashboard API",
        description="Transaction analytics for the merchant payment dashboard",
        version=settings.version,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.dashboard_service = DashboardService(
        source,
        profiles=profiles,
        config=settings.analytics,
    )

    app.add_exception_handler(DataIntegrityError, data_integrity_handler)
    app.add_exception_handler(TransactionSourceError, source_unavailable_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        max_requests=settings.security.rate_limit_requests,
        window_seconds=settings.security.rate_limit_window_seconds,
    )

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(dashboard_router, prefix="/api/v1/dashboard", tags=["Dashboard"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Merchant Dashboard API",
            "version": settings.version,
            "environment": settings.app_env,
            "transactions_source": source.name,
        }

    return app
