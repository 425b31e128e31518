"""
Request dependencies shared by the API routes.
"""

from datetime import datetime
from typing import Optional

from fastapi import HTTPException, Request, status

from merchant_dashboard.config.settings import Settings
from merchant_dashboard.services import CurrentUser, DashboardService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_dashboard_service(request: Request) -> DashboardService:
    return request.app.state.dashboard_service


def get_current_user(request: Request) -> CurrentUser:
    """Identity forwarded by the auth proxy; the API never authenticates itself"""
    security = request.app.state.settings.security
    user_id = request.headers.get(security.user_id_header)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return CurrentUser(id=user_id, email=request.headers.get(security.user_email_header))


def reference_time(settings: Settings, as_of: Optional[datetime] = None) -> datetime:
    """Reference time for aggregation in the configured time zone"""
    tz = settings.analytics.tzinfo
    if as_of is None:
        return datetime.now(tz)
    if as_of.tzinfo is None:
        return as_of.replace(tzinfo=tz)
    return as_of.astimezone(tz)
