"""
Transaction Analytics Module
"""
from .aggregator import (
    aggregate,
    build_daily_revenue_series,
    compute_active_customers,
    compute_conversion_rate,
    compute_period_change,
    compute_stats,
    percent_change,
)
from .exceptions import DataIntegrityError, InvalidAmount, InvalidStatus, MalformedTimestamp
from .models import (
    DailyRevenuePoint,
    DashboardMetrics,
    PeriodChange,
    PeriodComparison,
    Transaction,
    TransactionStats,
    TransactionStatus,
)

__all__ = [
    "aggregate",
    "build_daily_revenue_series",
    "compute_active_customers",
    "compute_conversion_rate",
    "compute_period_change",
    "compute_stats",
    "percent_change",
    "DataIntegrityError",
    "InvalidAmount",
    "InvalidStatus",
    "MalformedTimestamp",
    "DailyRevenuePoint",
    "DashboardMetrics",
    "PeriodChange",
    "PeriodComparison",
    "Transaction",
    "TransactionStats",
    "TransactionStatus",
]
