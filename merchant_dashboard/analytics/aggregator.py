"""
Transaction Analytics Aggregator

Pure functions turning a transaction snapshot and a reference time into the
dashboard's summary statistics, daily revenue series and week-over-week
deltas.

Money is accumulated as Decimal and rounded to cents once, when a value
leaves the aggregator. Nothing here reads the clock, logs, or keeps state
between calls.

Example:
    metrics = aggregate(transactions, now=datetime.now(timezone.utc))
    metrics.period_change.revenue.percent_change
"""

from collections import Counter
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Sequence

from .models import (
    DailyRevenuePoint,
    DashboardMetrics,
    Number,
    PeriodChange,
    PeriodComparison,
    Transaction,
    TransactionStats,
    TransactionStatus,
)
from .windows import calendar_day, comparison_windows, localize, trailing_days

CENTS = Decimal("0.01")
ZERO = Decimal("0")

DEFAULT_WINDOW_DAYS = 7
DEFAULT_PERIOD_DAYS = 7


def to_cents(value: Decimal) -> Decimal:
    """Round a money amount to cents, half up"""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


def _amount(tx: Transaction) -> Decimal:
    if isinstance(tx.amount, Decimal):
        return tx.amount
    # str() keeps floats at their shortest repr instead of the binary expansion
    return Decimal(str(tx.amount))


def compute_stats(transactions: Iterable[Transaction]) -> TransactionStats:
    """
    Count transactions per status and sum completed amounts.

    Raises:
        InvalidStatus: a record's status is outside the known enumeration
    """
    counts: Counter = Counter()
    settled = ZERO

    for tx in transactions:
        status = TransactionStatus.parse(tx.status, transaction_id=tx.id)
        counts[status] += 1
        if status is TransactionStatus.COMPLETED:
            settled += _amount(tx)

    return TransactionStats(
        total=sum(counts.values()),
        completed=counts[TransactionStatus.COMPLETED],
        pending=counts[TransactionStatus.PENDING],
        failed=counts[TransactionStatus.FAILED],
        cancelled=counts[TransactionStatus.CANCELLED],
        total_amount=to_cents(settled),
    )


def compute_active_customers(transactions: Iterable[Transaction]) -> int:
    """Distinct customer ids; anonymous transactions are not counted at all"""
    return len({tx.customer_id for tx in transactions if tx.customer_id})


def compute_conversion_rate(stats: TransactionStats) -> float:
    """
    Completed share of all transactions, as a percentage.

    The denominator is floored at 1, so an empty set reports 0 rather
    than an undefined ratio.
    """
    return stats.completed / max(stats.total, 1) * 100


def build_daily_revenue_series(
    transactions: Iterable[Transaction],
    now: datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> List[DailyRevenuePoint]:
    """
    Completed revenue per calendar day for the trailing window ending on
    now's day, oldest first, with zero-filled days.

    Raises:
        InvalidStatus: unknown status on any record
        MalformedTimestamp: created_at cannot be truncated to a day
        ValueError: window_days is less than 1
    """
    days = trailing_days(now, window_days)
    buckets = dict.fromkeys(days, ZERO)

    for tx in transactions:
        status = TransactionStatus.parse(tx.status, transaction_id=tx.id)
        day = calendar_day(tx.created_at, now, transaction_id=tx.id)
        if status is TransactionStatus.COMPLETED and day in buckets:
            buckets[day] += _amount(tx)

    return [DailyRevenuePoint(date=day, revenue=to_cents(buckets[day])) for day in days]


def percent_change(current: Number, previous: Number) -> float:
    """
    Relative change from previous to current, in percent.

    A previous value of zero reports 0 whatever current is; growth from
    nothing is not shown as infinite.
    """
    if previous <= 0:
        return 0.0
    return float((current - previous) / previous * 100)


def compare(current: Number, previous: Number) -> PeriodComparison:
    return PeriodComparison(
        current=current,
        previous=previous,
        percent_change=percent_change(current, previous),
    )


def compute_period_change(
    transactions: Iterable[Transaction],
    now: datetime,
    period_days: int = DEFAULT_PERIOD_DAYS,
) -> PeriodChange:
    """
    Compare the trailing period ending at now with the one before it.

    Transactions after now, or older than two periods, are ignored.

    Raises:
        InvalidStatus: unknown status on any record
        MalformedTimestamp: created_at cannot be parsed
    """
    current_window, previous_window = comparison_windows(now, period_days)
    current: List[Transaction] = []
    previous: List[Transaction] = []

    for tx in transactions:
        TransactionStatus.parse(tx.status, transaction_id=tx.id)
        ts = localize(tx.created_at, now, transaction_id=tx.id)
        if current_window.contains(ts):
            current.append(tx)
        elif previous_window.contains(ts):
            previous.append(tx)

    current_stats = compute_stats(current)
    previous_stats = compute_stats(previous)

    return PeriodChange(
        revenue=compare(current_stats.total_amount, previous_stats.total_amount),
        transaction_count=compare(current_stats.total, previous_stats.total),
        active_customers=compare(
            compute_active_customers(current),
            compute_active_customers(previous),
        ),
        conversion_rate=compare(
            compute_conversion_rate(current_stats),
            compute_conversion_rate(previous_stats),
        ),
    )


def aggregate(
    transactions: Sequence[Transaction],
    now: datetime,
    window_days: int = DEFAULT_WINDOW_DAYS,
    period_days: int = DEFAULT_PERIOD_DAYS,
) -> DashboardMetrics:
    """Compute every dashboard metric from one snapshot"""
    snapshot = tuple(transactions)
    stats = compute_stats(snapshot)

    return DashboardMetrics(
        stats=stats,
        active_customers=compute_active_customers(snapshot),
        conversion_rate=compute_conversion_rate(stats),
        daily_revenue=tuple(build_daily_revenue_series(snapshot, now, window_days)),
        period_change=compute_period_change(snapshot, now, period_days),
    )
