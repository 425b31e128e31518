"""
API Response Schemas

Money is serialized as decimal strings with two places; rates and percent
changes as floats. No currency symbols or percent formatting is applied.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from merchant_dashboard.analytics import (
    DailyRevenuePoint,
    PeriodChange,
    Transaction,
    TransactionStats,
    TransactionStatus,
)
from merchant_dashboard.services import DashboardSnapshot


class TransactionStatsSchema(BaseModel):
    """Status counts and settled revenue"""
    total: int
    completed: int
    pending: int
    failed: int
    cancelled: int
    total_amount: Decimal

    @classmethod
    def from_stats(cls, stats: TransactionStats) -> "TransactionStatsSchema":
        return cls(
            total=stats.total,
            completed=stats.completed,
            pending=stats.pending,
            failed=stats.failed,
            cancelled=stats.cancelled,
            total_amount=stats.total_amount,
        )


class DailyRevenueSchema(BaseModel):
    """Daily revenue data point"""
    date: date
    revenue: Decimal

    @classmethod
    def from_point(cls, point: DailyRevenuePoint) -> "DailyRevenueSchema":
        return cls(date=point.date, revenue=point.revenue)


class MoneyComparison(BaseModel):
    current: Decimal
    previous: Decimal
    percent_change: float


class CountComparison(BaseModel):
    current: int
    previous: int
    percent_change: float


class RateComparison(BaseModel):
    current: float
    previous: float
    percent_change: float


class PeriodChangeSchema(BaseModel):
    """Current trailing week against the week before"""
    revenue: MoneyComparison
    transaction_count: CountComparison
    active_customers: CountComparison
    conversion_rate: RateComparison

    @classmethod
    def from_change(cls, change: PeriodChange) -> "PeriodChangeSchema":
        def fields(comparison):
            return {
                "current": comparison.current,
                "previous": comparison.previous,
                "percent_change": comparison.percent_change,
            }

        return cls(
            revenue=MoneyComparison(**fields(change.revenue)),
            transaction_count=CountComparison(**fields(change.transaction_count)),
            active_customers=CountComparison(**fields(change.active_customers)),
            conversion_rate=RateComparison(**fields(change.conversion_rate)),
        )


class TransactionSchema(BaseModel):
    """Recent transaction row"""
    id: str
    customer_id: Optional[str]
    amount: Decimal
    status: TransactionStatus
    created_at: datetime

    @classmethod
    def from_transaction(cls, tx: Transaction) -> "TransactionSchema":
        return cls(
            id=tx.id,
            customer_id=tx.customer_id,
            amount=tx.amount,
            status=tx.status,
            created_at=tx.created_at,
        )


class DashboardResponse(BaseModel):
    """Merchant home dashboard"""
    generated_at: datetime
    display_name: str
    stats: TransactionStatsSchema
    active_customers: int
    conversion_rate: float
    daily_revenue: List[DailyRevenueSchema]
    period_change: PeriodChangeSchema
    recent_transactions: List[TransactionSchema]

    @classmethod
    def from_snapshot(cls, snapshot: DashboardSnapshot) -> "DashboardResponse":
        metrics = snapshot.metrics
        return cls(
            generated_at=snapshot.generated_at,
            display_name=snapshot.display_name,
            stats=TransactionStatsSchema.from_stats(metrics.stats),
            active_customers=metrics.active_customers,
            conversion_rate=metrics.conversion_rate,
            daily_revenue=[DailyRevenueSchema.from_point(p) for p in metrics.daily_revenue],
            period_change=PeriodChangeSchema.from_change(metrics.period_change),
            recent_transactions=[
                TransactionSchema.from_transaction(tx) for tx in snapshot.recent_transactions
            ],
        )


class RevenueSeriesResponse(BaseModel):
    """Daily revenue trend"""
    period_start: date
    period_end: date
    total_revenue: Decimal
    data: List[DailyRevenueSchema]


class ErrorResponse(BaseModel):
    """Structured error body"""
    error: str
    message: str
    transaction_id: Optional[str] = None
