"""
Dashboard API Endpoints

Merchant home dashboard and its revenue trend.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
import structlog

from merchant_dashboard.analytics import build_daily_revenue_series
from merchant_dashboard.config.settings import Settings
from merchant_dashboard.ingestion import TransactionFilter
from merchant_dashboard.serving.api.deps import (
    get_app_settings,
    get_current_user,
    get_dashboard_service,
    reference_time,
)
from merchant_dashboard.serving.api.schemas import (
    DailyRevenueSchema,
    DashboardResponse,
    RevenueSeriesResponse,
)
from merchant_dashboard.services import CurrentUser, DashboardService

router = APIRouter()
logger = structlog.get_logger(__name__)


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    as_of: Optional[datetime] = Query(None, description="Reference time, defaults to now"),
    user: CurrentUser = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
    settings: Settings = Depends(get_app_settings),
) -> DashboardResponse:
    """
    Get the merchant home dashboard.

    Stats, active customers and conversion rate cover the fetched snapshot;
    period changes compare the trailing week with the week before.
    """
    now = reference_time(settings, as_of)
    logger.info("get_dashboard called", user_id=user.id, as_of=now.isoformat())

    snapshot = await service.build(user, now)
    return DashboardResponse.from_snapshot(snapshot)


@router.get("/revenue", response_model=RevenueSeriesResponse)
async def get_revenue_trend(
    days: Optional[int] = Query(None, ge=1, le=90, description="Days in the series"),
    as_of: Optional[datetime] = Query(None, description="Reference time, defaults to now"),
    user: CurrentUser = Depends(get_current_user),
    service: DashboardService = Depends(get_dashboard_service),
    settings: Settings = Depends(get_app_settings),
) -> RevenueSeriesResponse:
    """
    Get completed revenue per day ending today.
    """
    now = reference_time(settings, as_of)
    days = days or settings.analytics.window_days
    logger.info("get_revenue_trend called", user_id=user.id, days=days)

    transactions = await service.source.list_transactions(
        TransactionFilter(limit=settings.analytics.snapshot_limit)
    )
    series = build_daily_revenue_series(transactions, now, window_days=days)

    return RevenueSeriesResponse(
        period_start=series[0].date,
        period_end=series[-1].date,
        total_revenue=sum((point.revenue for point in series), Decimal("0.00")),
        data=[DailyRevenueSchema.from_point(point) for point in series],
    )
