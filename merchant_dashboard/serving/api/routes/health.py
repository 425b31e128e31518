"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from merchant_dashboard.config.settings import Settings
from merchant_dashboard.serving.api.deps import get_app_settings, get_dashboard_service
from merchant_dashboard.services import DashboardService

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: DashboardService = Depends(get_dashboard_service),
    settings: Settings = Depends(get_app_settings),
) -> HealthResponse:
    """
    Health check covering the transaction store.
    """
    checks = {}
    overall_status = "healthy"

    try:
        source_health = await service.source.health_check()
        checks["transactions"] = source_health
        if source_health.get("status") != "healthy":
            overall_status = "degraded"
    except Exception as e:
        checks["transactions"] = {"status": "unhealthy", "error": str(e)}
        overall_status = "unhealthy"

    return HealthResponse(
        status=overall_status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks=checks,
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe. Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(
    response: Response,
    service: DashboardService = Depends(get_dashboard_service),
) -> Dict[str, str]:
    """
    Readiness probe. Returns 503 until the transaction store is reachable.
    """
    try:
        source_health = await service.source.health_check()
    except Exception as e:
        response.status_code = 503
        return {"status": "not_ready", "reason": str(e)}

    if source_health.get("status") != "healthy":
        response.status_code = 503
        return {"status": "not_ready", "reason": "transactions_unavailable"}

    return {"status": "ready"}
