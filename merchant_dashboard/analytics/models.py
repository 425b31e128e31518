"""
Analytics Data Models

Transaction records as supplied by the storage collaborator and the derived,
immutable aggregates computed from them.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .exceptions import InvalidStatus


Number = Union[Decimal, int, float]


class TransactionStatus(str, Enum):
    """Closed set of payment statuses"""
    COMPLETED = "completed"
    PENDING = "pending"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Any, transaction_id: Optional[str] = None) -> "TransactionStatus":
        """Resolve a status value, raising InvalidStatus for anything unknown"""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidStatus(
            f"Unknown transaction status: {value!r}",
            transaction_id=transaction_id,
            value=value,
        )


@dataclass(frozen=True)
class Transaction:
    """A single payment as returned by the transaction store"""
    id: str
    amount: Decimal
    status: TransactionStatus
    created_at: datetime
    customer_id: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return not self.customer_id


@dataclass(frozen=True)
class TransactionStats:
    """Status counts and settled revenue over a transaction set"""
    total: int = 0
    completed: int = 0
    pending: int = 0
    failed: int = 0
    cancelled: int = 0
    total_amount: Decimal = Decimal("0.00")


@dataclass(frozen=True)
class DailyRevenuePoint:
    """Completed revenue for one calendar day"""
    date: date
    revenue: Decimal


@dataclass(frozen=True)
class PeriodComparison:
    """A metric in the current and previous trailing windows"""
    current: Number
    previous: Number
    percent_change: float


@dataclass(frozen=True)
class PeriodChange:
    """Week-over-week comparisons shown on the dashboard cards"""
    revenue: PeriodComparison
    transaction_count: PeriodComparison
    active_customers: PeriodComparison
    conversion_rate: PeriodComparison


@dataclass(frozen=True)
class DashboardMetrics:
    """Everything the dashboard derives from one transaction snapshot"""
    stats: TransactionStats
    active_customers: int
    conversion_rate: float
    daily_revenue: Tuple[DailyRevenuePoint, ...]
    period_change: PeriodChange
