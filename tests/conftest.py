"""
Test Suite Configuration
"""
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Union

import pytest

from merchant_dashboard.analytics import Transaction, TransactionStatus
from merchant_dashboard.config import Settings
from merchant_dashboard.data import TransactionGenerator

NOW = datetime(2026, 10, 17, 15, 30, tzinfo=timezone.utc)

_VALID_STATUSES = {s.value for s in TransactionStatus}


def build_transaction(
    id: str = "txn_1",
    amount: Union[str, float, Decimal] = "10.00",
    status: str = "completed",
    created_at=None,
    customer_id: Optional[str] = "cus_1",
) -> Transaction:
    """Transaction with valid statuses as enums and anything else passed through raw"""
    return Transaction(
        id=id,
        amount=Decimal(amount) if isinstance(amount, str) else amount,
        status=TransactionStatus(status) if status in _VALID_STATUSES else status,
        created_at=NOW if created_at is None else created_at,
        customer_id=customer_id,
    )


@pytest.fixture
def now() -> datetime:
    """Fixed reference time"""
    return NOW


@pytest.fixture
def make_tx() -> Callable[..., Transaction]:
    """Factory for single transactions"""
    counter = {"n": 0}

    def factory(**kwargs) -> Transaction:
        counter["n"] += 1
        kwargs.setdefault("id", f"txn_{counter['n']}")
        return build_transaction(**kwargs)

    return factory


@pytest.fixture
def days_ago() -> Callable[[float], datetime]:
    """Timestamp a number of days before NOW"""
    def at(days: float) -> datetime:
        return NOW - timedelta(days=days)
    return at


@pytest.fixture
def generated_transactions() -> List[Transaction]:
    """Reproducible synthetic snapshot covering three weeks"""
    return TransactionGenerator(seed=7).generate(150, now=NOW, days=21)


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )
