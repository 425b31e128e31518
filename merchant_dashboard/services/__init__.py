"""
Dashboard Services Module
"""
from .dashboard import (
    CurrentUser,
    DashboardService,
    DashboardSnapshot,
    InMemoryProfileDirectory,
    ProfileDirectory,
    resolve_display_name,
)

__all__ = [
    "CurrentUser",
    "DashboardService",
    "DashboardSnapshot",
    "InMemoryProfileDirectory",
    "ProfileDirectory",
    "resolve_display_name",
]
